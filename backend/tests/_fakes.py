# ruff: noqa
"""In-memory stand-ins for `Model.objects` querysets and async sessions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


class FakeQuery:
    """Equality-only `filter_by`; SQL expression filters and ordering are ignored."""

    def __init__(self, rows: list[Any]) -> None:
        self.rows = rows

    def filter_by(self, **kwargs: object) -> FakeQuery:
        return FakeQuery(
            [row for row in self.rows if all(getattr(row, k) == v for k, v in kwargs.items())],
        )

    def filter(self, *_criteria: Any) -> FakeQuery:
        return self

    def order_by(self, *_columns: Any) -> FakeQuery:
        return self

    def limit(self, _value: int) -> FakeQuery:
        return self

    def offset(self, _value: int) -> FakeQuery:
        return self

    def by_id(self, obj_id: object) -> FakeQuery:
        return self.filter_by(id=obj_id)

    async def all(self, _session: object) -> list[Any]:
        return list(self.rows)

    async def first(self, _session: object) -> Any | None:
        return self.rows[0] if self.rows else None

    async def count(self, _session: object) -> int:
        return len(self.rows)


@dataclass
class FakeSession:
    added: list[Any] = field(default_factory=list)
    deleted: list[Any] = field(default_factory=list)
    committed: int = 0

    def add(self, value: Any) -> None:
        self.added.append(value)

    async def delete(self, value: Any) -> None:
        self.deleted.append(value)

    async def commit(self) -> None:
        self.committed += 1

    async def refresh(self, _value: Any) -> None:
        return None

    async def rollback(self) -> None:
        return None

    def audit_entries(self) -> list[Any]:
        from app.models.audit_entries import AuditEntry

        return [value for value in self.added if isinstance(value, AuditEntry)]
