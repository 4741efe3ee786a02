"""Resource repository backed by a SQLAlchemy model."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.inspection import inspect
from sqlalchemy.orm import Session

from jsonapi_invoker.core.errors import ResourceNotFoundError
from jsonapi_invoker.resource.annotations import repository_target, resource_meta
from jsonapi_invoker.sqlalchemy.helpers import SQLAlchemyQueryHelper


class SQLAlchemyRepository:
    """Bridge a pydantic resource with a SQLAlchemy model.

    ``session_factory`` may return a ``Session`` or an ``AsyncSession``; a new
    session is opened per operation. Rows are converted to resources while the
    session is open, so relationships must be loadable there (use
    ``lazy="selectin"`` with async sessions).
    """

    model: Any = None
    resource_class: type | None = None

    def __init__(
        self,
        session_factory: Callable[[], Session | AsyncSession],
        *,
        model: Any = None,
        resource_class: type | None = None,
        query_helper: SQLAlchemyQueryHelper | None = None,
    ) -> None:
        self.session_factory = session_factory
        self.model = model or self.model
        self.resource_class = resource_class or self.resource_class or repository_target(type(self))
        if self.model is None or self.resource_class is None:
            raise TypeError(f"{type(self).__name__} needs both a model and a resource class")
        self.query_helper = query_helper or SQLAlchemyQueryHelper(model=self.model)

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[Session | AsyncSession]:
        session = self.session_factory()
        try:
            yield session
        finally:
            if isinstance(session, AsyncSession):
                await session.close()
            else:
                session.close()

    async def _execute(self, session: Session | AsyncSession, statement: Any) -> Any:
        if isinstance(session, AsyncSession):
            return await session.execute(statement)
        return session.execute(statement)

    async def _get(self, session: Session | AsyncSession, resource_id: Any) -> Any:
        if isinstance(session, AsyncSession):
            return await session.get(self.model, resource_id)
        return session.get(self.model, resource_id)

    async def _commit(self, session: Session | AsyncSession, instance: Any = None) -> None:
        if isinstance(session, AsyncSession):
            await session.commit()
            if instance is not None:
                await session.refresh(instance)
        else:
            session.commit()
            if instance is not None:
                session.refresh(instance)

    def to_resource(self, instance: Any) -> Any:
        return self.resource_class.model_validate(instance, from_attributes=True)

    def _column_values(self, resource: Any) -> dict[str, Any]:
        columns = {column.key for column in inspect(self.model).column_attrs}
        values = {
            name: getattr(resource, name)
            for name in type(resource).model_fields
            if name in columns
        }
        if resource.id is None:
            values.pop("id", None)
        # To-one relationships are stored through their "<name>_id" foreign key column
        meta = resource_meta(self.resource_class)
        for name in meta.relationships if meta else ():
            related = getattr(resource, name, None)
            if isinstance(related, (list, tuple, set)):
                continue
            if f"{name}_id" in columns:
                values[f"{name}_id"] = getattr(related, "id", None)
        return values

    async def find_one(self, resource_id: Any, params: dict[str, Any]) -> Any | None:
        async with self._session() as session:
            instance = await self._get(session, resource_id)
            return None if instance is None else self.to_resource(instance)

    async def find_all(self, params: dict[str, Any]) -> list[Any]:
        statement = select(self.model)
        statement = self.query_helper.apply_filters(statement, params)
        statement = self.query_helper.apply_sorting(statement, params)
        async with self._session() as session:
            result = await self._execute(session, statement)
            return [self.to_resource(instance) for instance in result.scalars().all()]

    async def find_all_with_ids(self, ids: Iterable[Any], params: dict[str, Any]) -> list[Any]:
        statement = select(self.model).where(self.model.id.in_(list(ids)))
        statement = self.query_helper.apply_sorting(statement, params)
        async with self._session() as session:
            result = await self._execute(session, statement)
            return [self.to_resource(instance) for instance in result.scalars().all()]

    async def save(self, resource: Any) -> Any:
        values = self._column_values(resource)
        async with self._session() as session:
            instance = None
            if resource.id is not None:
                instance = await self._get(session, resource.id)
            if instance is None:
                instance = self.model(**values)
                session.add(instance)
            else:
                for key, value in values.items():
                    setattr(instance, key, value)
            await self._commit(session, instance)
            return self.to_resource(instance)

    async def delete(self, resource_id: Any) -> None:
        async with self._session() as session:
            instance = await self._get(session, resource_id)
            if instance is None:
                raise ResourceNotFoundError(f"resource with id '{resource_id}' not found")
            if isinstance(session, AsyncSession):
                await session.delete(instance)
            else:
                session.delete(instance)
            await self._commit(session)
