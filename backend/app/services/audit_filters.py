"""In-memory filtering of organisation-scoped audit entries."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, time, tzinfo
from typing import TYPE_CHECKING, Protocol, TypeVar

if TYPE_CHECKING:
    from uuid import UUID

END_OF_DAY = time(23, 59, 59, 999000)


class AuditRecord(Protocol):
    """Attributes of an audit entry read by the filter and renderer."""

    id: UUID
    actor_id: UUID
    actor_name: str
    action: str
    target_id: UUID | None
    target_label: str | None
    changes: dict[str, dict[str, object]] | None
    metadata_: dict[str, object] | None
    created_at: datetime


RecordT = TypeVar("RecordT", bound=AuditRecord)


def _as_aware(value: datetime) -> datetime:
    # Stored timestamps are naive UTC.
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


@dataclass(frozen=True)
class AuditFilter:
    """Filter criteria; every active criterion must match.

    Empty action/actor sets and a blank subject disable those criteria. Date
    bounds are whole calendar days in the viewer's timezone.
    """

    actions: frozenset[str] = field(default_factory=frozenset)
    actor_ids: frozenset[UUID] = field(default_factory=frozenset)
    subject: str = ""
    date_from: date | None = None
    date_to: date | None = None
    tz: tzinfo = UTC

    @property
    def lower_bound(self) -> datetime | None:
        if self.date_from is None:
            return None
        return datetime.combine(self.date_from, time.min, tzinfo=self.tz)

    @property
    def upper_bound(self) -> datetime | None:
        if self.date_to is None:
            return None
        return datetime.combine(self.date_to, END_OF_DAY, tzinfo=self.tz)

    def matches(self, entry: AuditRecord) -> bool:
        if self.actions and entry.action not in self.actions:
            return False
        if self.actor_ids and entry.actor_id not in self.actor_ids:
            return False
        subject = self.subject.strip().lower()
        if subject and subject not in (entry.target_label or "").lower():
            return False
        created_at = _as_aware(entry.created_at)
        lower = self.lower_bound
        if lower is not None and created_at < lower:
            return False
        upper = self.upper_bound
        return upper is None or created_at <= upper


def filter_entries(entries: Iterable[RecordT], criteria: AuditFilter) -> list[RecordT]:
    """Return the entries matching `criteria`, preserving input order."""
    return [entry for entry in entries if criteria.matches(entry)]
