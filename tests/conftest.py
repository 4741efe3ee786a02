"""Shared fixtures: an invoker assembled by scanning ``tests.sample_resources``."""

import pytest

from jsonapi_invoker import DefaultServiceLocator, JSONAPIInvokerBuilder

from tests.helpers import DEFAULT_DOMAIN, SEARCH_PACKAGE
from tests.sample_resources.models import Article, Comment, Person
from tests.sample_resources.repositories import (
    ArticleRepository,
    CommentRepository,
    PersonRepository,
)


@pytest.fixture
def people():
    return [
        Person(id=1, name="Ada", email="ada@example.com"),
        Person(id=2, name="Grace", email="grace@example.com"),
    ]


@pytest.fixture
def comments():
    return [Comment(id=10, body="First!"), Comment(id=11, body="Nice")]


@pytest.fixture
def articles(people, comments):
    return [
        Article(id=1, title="Hello", body="World", author=people[0], comments=comments),
        Article(id=2, title="Second", body="Post", author=people[1]),
        Article(id=3, title="Third", body="Draft"),
    ]


@pytest.fixture
def service_locator(people, comments, articles):
    return DefaultServiceLocator(
        {
            PersonRepository: PersonRepository(people),
            CommentRepository: CommentRepository(comments),
            ArticleRepository: ArticleRepository(articles),
        }
    )


@pytest.fixture
def invoker(service_locator):
    return (
        JSONAPIInvokerBuilder()
        .service_locator(service_locator)
        .resource_search_package(SEARCH_PACKAGE)
        .resource_default_domain(DEFAULT_DOMAIN)
        .build()
    )
