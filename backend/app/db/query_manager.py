"""Chainable async query helpers exposed on models as `Model.objects`."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from sqlalchemy import func
from sqlmodel import SQLModel, col, select

if TYPE_CHECKING:
    from sqlmodel.ext.asyncio.session import AsyncSession
    from sqlmodel.sql.expression import SelectOfScalar

ModelT = TypeVar("ModelT", bound=SQLModel)


@dataclass(frozen=True)
class QuerySet(Generic[ModelT]):
    """Immutable wrapper around a select statement for one model."""

    model: type[ModelT]
    statement: SelectOfScalar[ModelT]

    def filter(self, *criteria: Any) -> QuerySet[ModelT]:
        return replace(self, statement=self.statement.where(*criteria))

    def filter_by(self, **kwargs: object) -> QuerySet[ModelT]:
        return replace(self, statement=self.statement.filter_by(**kwargs))

    def order_by(self, *columns: Any) -> QuerySet[ModelT]:
        return replace(self, statement=self.statement.order_by(*columns))

    def limit(self, value: int) -> QuerySet[ModelT]:
        return replace(self, statement=self.statement.limit(value))

    def offset(self, value: int) -> QuerySet[ModelT]:
        return replace(self, statement=self.statement.offset(value))

    async def all(self, session: AsyncSession) -> list[ModelT]:
        return list(await session.exec(self.statement))

    async def first(self, session: AsyncSession) -> ModelT | None:
        return (await session.exec(self.statement.limit(1))).first()

    async def count(self, session: AsyncSession) -> int:
        statement = select(func.count()).select_from(self.statement.subquery())
        return int((await session.exec(statement)).one())


class ModelManager(Generic[ModelT]):
    """Entry point for building model queries."""

    def __init__(self, model: type[ModelT]) -> None:
        self.model = model

    def all_rows(self) -> QuerySet[ModelT]:
        return QuerySet(self.model, select(self.model))

    def filter(self, *criteria: Any) -> QuerySet[ModelT]:
        return self.all_rows().filter(*criteria)

    def filter_by(self, **kwargs: object) -> QuerySet[ModelT]:
        return self.all_rows().filter_by(**kwargs)

    def by_id(self, obj_id: object) -> QuerySet[ModelT]:
        return self.filter(col(getattr(self.model, "id")) == obj_id)


class ManagerDescriptor:
    """Class-level descriptor returning a manager bound to the owning model."""

    def __get__(self, instance: object, owner: type[Any]) -> ModelManager[Any]:
        return ModelManager(owner)
