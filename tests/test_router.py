"""Serving an invoker through FastAPI."""

import logging

import pytest
from fastapi import Depends, FastAPI, Header, HTTPException
from fastapi.testclient import TestClient

from jsonapi_invoker import JSONAPIRouter

from tests.helpers import JSONAPI
from tests.sample_resources.repositories import PersonRepository


def require_token(x_token: str = Header(default="")):
    if x_token != "secret":
        raise HTTPException(status_code=401, detail="invalid token")


@pytest.fixture
def client(invoker):
    router = JSONAPIRouter()
    router.register_invoker(invoker, prefix="/api")
    app = FastAPI()
    app.include_router(router)
    return TestClient(app)


def test_get_through_router(client):
    response = client.get("/api/articles/1", params={"include": "author"})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith(JSONAPI)
    document = response.json()
    assert document["data"]["id"] == "1"
    assert document["included"][0]["type"] == "people"


def test_query_parameters_reach_invoker(client):
    response = client.get("/api/articles", params={"page[limit]": "2"})
    assert len(response.json()["data"]) == 2


def test_post_through_router(client):
    response = client.post(
        "/api/comments",
        content=b'{"data": {"type": "comments", "attributes": {"body": "Hi"}}}',
        headers={"content-type": JSONAPI},
    )

    assert response.status_code == 201
    assert response.json()["data"]["attributes"] == {"body": "Hi"}


def test_patch_through_router(client):
    response = client.patch(
        "/api/people/2",
        json={"data": {"type": "people", "id": "2", "attributes": {"name": "Grace H."}}},
        headers={"content-type": JSONAPI},
    )
    assert response.status_code == 200
    assert response.json()["data"]["attributes"]["name"] == "Grace H."


def test_delete_through_router(client):
    response = client.delete("/api/comments/11")

    assert response.status_code == 204
    assert response.content == b""


def test_error_through_router(client):
    response = client.get("/api/articles/404")

    assert response.status_code == 404
    assert response.json()["errors"][0]["status"] == "404"


def test_unsupported_media_type_through_router(client):
    response = client.post("/api/comments", json={"data": {"type": "comments"}})
    assert response.status_code == 415


def test_paths_outside_prefix_are_not_served(client):
    assert client.get("/articles").status_code == 404


def test_router_dependencies(invoker):
    router = JSONAPIRouter()
    router.register_invoker(invoker, dependencies=[Depends(require_token)])
    app = FastAPI()
    app.include_router(router)
    client = TestClient(app)

    assert client.get("/articles").status_code == 401
    assert client.get("/articles", headers={"x-token": "secret"}).status_code == 200


def test_unhandled_error_renders_error_document(client, service_locator, monkeypatch, caplog):
    async def broken(params):
        raise RuntimeError("database down")

    monkeypatch.setattr(service_locator.get_instance(PersonRepository), "find_all", broken)

    with caplog.at_level(logging.ERROR, logger="jsonapi_invoker.routers.base"):
        response = client.get("/api/people")

    assert response.status_code == 500
    assert response.headers["content-type"].startswith(JSONAPI)
    assert response.json() == {
        "errors": [
            {
                "status": "500",
                "title": "Internal Server Error",
                "detail": "An unexpected error occurred.",
            }
        ]
    }
    assert "Unhandled error for GET people" in caplog.text


def test_bad_page_through_router(client):
    response = client.get("/api/articles", params={"page[limit]": "x"})

    assert response.status_code == 400
    assert response.headers["content-type"].startswith(JSONAPI)
    assert response.json()["errors"][0]["code"] == "invalid_page"
