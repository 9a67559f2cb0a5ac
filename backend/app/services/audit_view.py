"""Condensed/verbose audit trail rendering and per-viewer display state."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, tzinfo
from typing import TYPE_CHECKING, Protocol

from app.services.audit_filters import AuditFilter, AuditRecord, filter_entries
from app.services.audit_format import (
    ChangeDetail,
    change_details,
    format_timestamp,
    metadata_lines,
    summarize_changes,
)
from app.services.audit_labels import AuditAction, action_label

if TYPE_CHECKING:
    from uuid import UUID

VERBOSE_PREFERENCE_KEY = "audit-trail-verbose"
LINKED_MEMBER_ACTIONS = frozenset(
    {AuditAction.MEMBER_CREATED.value, AuditAction.MEMBER_UPDATED.value},
)
HEADCOUNT_ACTIONS = frozenset(
    {AuditAction.MEMBER_CREATED.value, AuditAction.MEMBER_DELETED.value},
)


class PreferenceStore(Protocol):
    """Key/value storage for per-viewer display preferences."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class InMemoryPreferenceStore:
    def __init__(self, values: dict[str, str] | None = None) -> None:
        self.values: dict[str, str] = dict(values or {})

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value


@dataclass
class AuditViewState:
    """Global condensed/verbose mode plus manual per-entry expand overrides.

    An override inverts the global default for one entry. Changing the global
    mode drops every override.
    """

    verbose: bool = False
    overrides: set[str] = field(default_factory=set)
    store: PreferenceStore | None = None

    @classmethod
    def load(cls, store: PreferenceStore) -> AuditViewState:
        return cls(verbose=store.get(VERBOSE_PREFERENCE_KEY) == "true", store=store)

    def set_verbose(self, verbose: bool) -> None:
        self.verbose = verbose
        if self.store is not None:
            self.store.set(VERBOSE_PREFERENCE_KEY, "true" if verbose else "false")
        self.overrides.clear()

    def toggle_entry(self, entry_id: UUID | str) -> None:
        key = str(entry_id)
        if key in self.overrides:
            self.overrides.remove(key)
        else:
            self.overrides.add(key)

    def is_expanded(self, entry_id: UUID | str) -> bool:
        return (str(entry_id) in self.overrides) != self.verbose


@dataclass(frozen=True)
class AuditEntryView:
    """Display-ready projection of one audit entry."""

    id: UUID
    actor_id: UUID
    actor_name: str
    action: str
    action_label: str
    target_label: str | None
    member_link_id: UUID | None
    headcount: str | None
    headline: str
    timestamp: str
    has_detail: bool
    expanded: bool
    summary: str | None
    changes: tuple[ChangeDetail, ...]
    metadata_lines: tuple[str, ...]


def _headcount(entry: AuditRecord) -> str | None:
    if entry.action not in HEADCOUNT_ACTIONS or not entry.metadata_:
        return None
    used = entry.metadata_.get("member_count")
    limit = entry.metadata_.get("max_employees")
    if used is None or limit is None:
        return None
    return f"(now {used}/{limit})"


def render_entry(
    entry: AuditRecord,
    state: AuditViewState,
    *,
    tz: tzinfo = UTC,
) -> AuditEntryView:
    """Render an entry for the current display state."""
    changes = entry.changes or {}
    metadata = entry.metadata_ or {}
    has_detail = bool(changes) or bool(metadata)
    expanded = has_detail and state.is_expanded(entry.id)
    label = action_label(entry.action)
    headcount = _headcount(entry)
    headline = " ".join(
        part for part in (entry.actor_name, label, entry.target_label, headcount) if part
    )
    link_id = entry.target_id if entry.action in LINKED_MEMBER_ACTIONS else None
    return AuditEntryView(
        id=entry.id,
        actor_id=entry.actor_id,
        actor_name=entry.actor_name,
        action=entry.action,
        action_label=label,
        target_label=entry.target_label,
        member_link_id=link_id if entry.target_label else None,
        headcount=headcount,
        headline=headline,
        timestamp=format_timestamp(entry.created_at, tz),
        has_detail=has_detail,
        expanded=expanded,
        summary=summarize_changes(changes) if changes and not expanded else None,
        changes=tuple(change_details(changes)) if expanded else (),
        metadata_lines=tuple(metadata_lines(metadata)) if expanded else (),
    )


def render_entries(
    entries: Iterable[AuditRecord],
    criteria: AuditFilter,
    state: AuditViewState,
) -> list[AuditEntryView]:
    """Filter entries and render the survivors in input order."""
    return [
        render_entry(entry, state, tz=criteria.tz) for entry in filter_entries(entries, criteria)
    ]
