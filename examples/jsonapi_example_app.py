"""Example FastAPI app serving SQLAlchemy-backed resources through a JSON:API invoker.

Run with:
    uvicorn examples.jsonapi_example_app:app --reload

Try:
    curl "http://localhost:8000/api/v1/articles?include=author,comments.author&sort=-title"
    curl "http://localhost:8000/api/v1/articles/1/relationships/comments"
"""
from __future__ import annotations

from typing import List, Optional

from fastapi import FastAPI
from pydantic import BaseModel
from sqlalchemy import Column, ForeignKey, Integer, String, select
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, relationship, sessionmaker

from jsonapi_invoker import (
    DefaultServiceLocator,
    JSONAPIInvoker,
    JSONAPIInvokerBuilder,
    JSONAPIRouter,
    jsonapi_repository,
    jsonapi_resource,
)
from jsonapi_invoker.config import get_settings
from jsonapi_invoker.observability import setup_logging
from jsonapi_invoker.sqlalchemy import SQLAlchemyRepository

DATABASE_URL = "sqlite+aiosqlite:///./jsonapi_example.db"
API_PREFIX = "/api/v1"

engine = create_async_engine(DATABASE_URL)
async_session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

Base = declarative_base()


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    bio = Column(String, nullable=False)


class Article(Base):
    __tablename__ = "articles"

    id = Column(Integer, primary_key=True)
    title = Column(String, nullable=False)
    body = Column(String, nullable=False)
    author_id = Column(Integer, ForeignKey("users.id"))
    author = relationship("User", lazy="selectin")
    comments = relationship("Comment", back_populates="article", lazy="selectin")


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True)
    body = Column(String, nullable=False)
    article_id = Column(Integer, ForeignKey("articles.id"))
    author_id = Column(Integer, ForeignKey("users.id"))
    article = relationship("Article", back_populates="comments")
    author = relationship("User", lazy="selectin")


# Resources: the JSON:API view of each table

@jsonapi_resource("users")
class UserResource(BaseModel):
    id: Optional[int] = None
    name: str
    email: str
    bio: str = ""


@jsonapi_resource("comments", relationships=["author"])
class CommentResource(BaseModel):
    id: Optional[int] = None
    body: str
    author: Optional[UserResource] = None


@jsonapi_resource("articles", relationships=["author", "comments"])
class ArticleResource(BaseModel):
    id: Optional[int] = None
    title: str
    body: str = ""
    author: Optional[UserResource] = None
    comments: List[CommentResource] = []


@jsonapi_repository(UserResource)
class UserRepository(SQLAlchemyRepository):
    model = User


@jsonapi_repository(CommentResource)
class CommentRepository(SQLAlchemyRepository):
    model = Comment


@jsonapi_repository(ArticleResource)
class ArticleRepository(SQLAlchemyRepository):
    model = Article


async def seed_example_data(session: AsyncSession) -> None:
    """Insert example users, articles and comments if empty."""
    result = await session.execute(select(User.id).limit(1))
    if result.first() is not None:
        return

    jane = User(name="Jane Doe", email="jane.doe@example.com", bio="Tech writer and API enthusiast.")
    john = User(name="John Smith", email="john.smith@example.com", bio="Backend developer.")
    session.add_all([jane, john])
    await session.flush()

    first = Article(
        title="JSON:API with FastAPI",
        body="An example article using JSON:API patterns.",
        author_id=jane.id,
    )
    second = Article(
        title="Nested includes explained",
        body="How include=comments.author expands related resources.",
        author_id=john.id,
    )
    session.add_all([first, second])
    await session.flush()

    session.add_all(
        [
            Comment(body="Great article!", article_id=first.id, author_id=john.id),
            Comment(body="Helpful examples.", article_id=first.id, author_id=jane.id),
            Comment(body="Thanks for sharing.", article_id=second.id, author_id=jane.id),
        ]
    )
    await session.commit()


def build_invoker() -> JSONAPIInvoker:
    settings = get_settings()
    locator = DefaultServiceLocator(
        {
            repository_class: repository_class(async_session)
            for repository_class in (UserRepository, CommentRepository, ArticleRepository)
        }
    )
    return (
        JSONAPIInvokerBuilder.from_settings(settings, service_locator=locator)
        .resource_search_package(settings.resource_search_package or __name__)
        .resource_default_domain(
            settings.resource_default_domain or f"http://localhost:8000{API_PREFIX}"
        )
        .build()
    )


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)

    app = FastAPI(
        title="JSON:API Invoker Example",
        description="Example API served by a JSON:API invoker.",
        version="0.1.0",
    )

    @app.on_event("startup")
    async def on_startup() -> None:
        async with engine.begin() as connection:
            await connection.run_sync(Base.metadata.create_all)
        async with async_session() as session:
            await seed_example_data(session)

    router = JSONAPIRouter()
    router.register_invoker(build_invoker(), prefix=API_PREFIX)
    app.include_router(router)
    return app


app = create_app()
