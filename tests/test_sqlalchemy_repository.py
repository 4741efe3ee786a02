"""SQLAlchemy-backed repositories against an in-memory SQLite database."""

import json
from typing import Optional

import pytest
import pytest_asyncio
from pydantic import BaseModel
from sqlalchemy import ForeignKey, String, create_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship, sessionmaker
from sqlalchemy.pool import StaticPool

from jsonapi_invoker import (
    InvokerConfig,
    JSONAPIInvokerBuilder,
    jsonapi_repository,
    jsonapi_resource,
)
from jsonapi_invoker.core.errors import ResourceNotFoundError
from jsonapi_invoker.resource import RegistryEntry, ResourceInformationBuilder, ResourceRegistry
from jsonapi_invoker.sqlalchemy import SQLAlchemyQueryHelper, SQLAlchemyRepository
from jsonapi_invoker.utils import parse_query_params

from tests.helpers import DEFAULT_DOMAIN, SEARCH_PACKAGE, make_context


class Base(DeclarativeBase):
    pass


class AuthorRow(Base):
    __tablename__ = "authors"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100))


class PostRow(Base):
    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(200))
    views: Mapped[int] = mapped_column(default=0)
    author_id: Mapped[Optional[int]] = mapped_column(ForeignKey("authors.id"), nullable=True)
    author: Mapped[Optional[AuthorRow]] = relationship(lazy="selectin")


@jsonapi_resource("authors")
class Author(BaseModel):
    id: Optional[int] = None
    name: str


@jsonapi_resource("posts", relationships=["author"])
class Post(BaseModel):
    id: Optional[int] = None
    title: str
    views: int = 0
    author: Optional[Author] = None


@jsonapi_repository(Author)
class AuthorRepository(SQLAlchemyRepository):
    model = AuthorRow


@jsonapi_repository(Post)
class PostRepository(SQLAlchemyRepository):
    model = PostRow


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    Base.metadata.create_all(engine)
    yield sessionmaker(engine, expire_on_commit=False)
    engine.dispose()


@pytest.fixture
def authors(session_factory):
    return AuthorRepository(session_factory)


@pytest.fixture
def posts(session_factory):
    return PostRepository(session_factory)


@pytest_asyncio.fixture
async def seeded(authors, posts):
    ada = await authors.save(Author(name="Ada"))
    grace = await authors.save(Author(name="Grace"))
    await posts.save(Post(title="Engines", views=10, author=ada))
    await posts.save(Post(title="Compilers", views=30, author=grace))
    await posts.save(Post(title="Drafts", views=5))
    return ada, grace


def titles(items):
    return [item.title for item in items]


def test_repository_needs_a_model(session_factory):
    with pytest.raises(TypeError):
        SQLAlchemyRepository(session_factory, resource_class=Author)


def test_resource_class_comes_from_decorator(authors):
    assert authors.resource_class is Author
    assert authors.model is AuthorRow


@pytest.mark.asyncio
async def test_save_assigns_id(authors):
    saved = await authors.save(Author(name="Ada"))
    assert saved == Author(id=1, name="Ada")


@pytest.mark.asyncio
async def test_find_one(authors, seeded):
    ada, _ = seeded
    assert await authors.find_one(ada.id, {}) == ada
    assert await authors.find_one(999, {}) is None


@pytest.mark.asyncio
async def test_relationship_round_trip(posts, seeded):
    ada, _ = seeded
    post = await posts.find_one(1, {})
    assert post.author == ada


@pytest.mark.asyncio
async def test_find_all_sorted(posts, seeded):
    params = parse_query_params({"sort": "-views"})
    assert titles(await posts.find_all(params)) == ["Compilers", "Engines", "Drafts"]


@pytest.mark.asyncio
async def test_find_all_filtered(posts, seeded):
    params = parse_query_params({"filter[views][gte]": "10", "sort": "title"})
    assert titles(await posts.find_all(params)) == ["Compilers", "Engines"]


@pytest.mark.asyncio
async def test_find_all_with_or_filter(posts, seeded):
    params = parse_query_params(
        {
            "filter": json.dumps(
                {
                    "or": [
                        {"field": "title", "op": "eq", "val": "Drafts"},
                        {"field": "views", "op": "gt", "val": 20},
                    ]
                }
            ),
            "sort": "title",
        }
    )
    assert titles(await posts.find_all(params)) == ["Compilers", "Drafts"]


@pytest.mark.asyncio
async def test_unknown_filter_field_is_ignored(posts, seeded):
    params = parse_query_params({"filter[rating]": "5"})
    assert len(await posts.find_all(params)) == 3


@pytest.mark.asyncio
async def test_find_all_with_ids(posts, seeded):
    params = parse_query_params({"sort": "title"})
    assert titles(await posts.find_all_with_ids([1, 3], params)) == ["Drafts", "Engines"]


@pytest.mark.asyncio
async def test_update(posts, seeded):
    _, grace = seeded
    post = await posts.find_one(3, {})
    updated = await posts.save(post.model_copy(update={"title": "Published", "author": grace}))

    assert updated.id == 3
    assert updated.title == "Published"
    assert updated.author == grace


@pytest.mark.asyncio
async def test_delete(posts, seeded):
    await posts.delete(3)
    assert await posts.find_one(3, {}) is None
    with pytest.raises(ResourceNotFoundError):
        await posts.delete(3)


def test_query_helper_ignores_unknown_sort_fields():
    helper = SQLAlchemyQueryHelper(model=PostRow)
    statement = helper.apply_sorting(PostRow.__table__.select(), {"sort": [{"field": "nope"}]})
    assert "ORDER BY" not in str(statement)


@pytest.mark.asyncio
async def test_invoker_over_sqlalchemy(authors, posts, seeded):
    info_builder = ResourceInformationBuilder()
    registry = ResourceRegistry(DEFAULT_DOMAIN)
    registry.add_entry(RegistryEntry(info_builder.build(Author), authors))
    registry.add_entry(RegistryEntry(info_builder.build(Post), posts))
    invoker = JSONAPIInvokerBuilder(
        InvokerConfig(
            resource_registry=registry,
            resource_search_package=SEARCH_PACKAGE,
            resource_default_domain=DEFAULT_DOMAIN,
        )
    ).build()

    response = await invoker.invoke(
        make_context(
            "GET", "/posts", query={"filter[views][gt]": "5", "sort": "title", "include": "author"}
        )
    )
    document = json.loads(response.body)

    assert response.status == 200
    assert [item["attributes"]["title"] for item in document["data"]] == ["Compilers", "Engines"]
    assert {item["attributes"]["name"] for item in document["included"]} == {"Ada", "Grace"}

    created = await invoker.invoke(
        make_context(
            "POST",
            "/posts",
            document={
                "data": {
                    "type": "posts",
                    "attributes": {"title": "New"},
                    "relationships": {"author": {"data": {"type": "authors", "id": "1"}}},
                }
            },
        )
    )
    assert created.status == 201
    assert (await posts.find_one(4, {})).author.name == "Ada"
