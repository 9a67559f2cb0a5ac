"""Display formatting for audit entry changes and metadata."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, tzinfo

from app.services.audit import values_equal
from app.services.audit_labels import RIGHTS_FIELD, field_label
from app.services.rights import right_label

EMPTY_PLACEHOLDER = "—"
NONE_PLACEHOLDER = "None"
ARROW = "→"
NO_RIGHTS_CHANGED = "No rights changed"


def _stringify(value: object) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, Mapping):
        return json.dumps(dict(value), default=str)
    return str(value)


def _join_item(value: object) -> str:
    # Array elements render the way a JSON client joins them.
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return _stringify(value)


def is_rights_object(value: object) -> bool:
    """Return whether a value is a non-empty key -> value mapping."""
    return isinstance(value, Mapping) and len(value) > 0


def format_right_value(value: object) -> str:
    if value is True:
        return "Yes"
    if value is False:
        return "No"
    if value is None:
        return EMPTY_PLACEHOLDER
    return _stringify(value)


def format_rights_object(rights: Mapping[str, object]) -> str:
    """List the labels of every enabled right, or `None` when none are on."""
    enabled = [right_label(key) for key, value in rights.items() if value is True]
    return ", ".join(enabled) if enabled else NONE_PLACEHOLDER


def format_value(value: object) -> str:
    """Render one old/new value of a change for display."""
    if value is None:
        return EMPTY_PLACEHOLDER
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, (list, tuple)):
        if not value:
            return NONE_PLACEHOLDER
        return ", ".join(_join_item(item) for item in value)
    if is_rights_object(value):
        return format_rights_object(value)  # type: ignore[arg-type]
    return _stringify(value)


def format_timestamp(value: datetime, tz: tzinfo = UTC) -> str:
    """Format an entry timestamp as e.g. `10 Mar 2024, 14:05` in the viewer zone."""
    aware = value if value.tzinfo is not None else value.replace(tzinfo=UTC)
    local = aware.astimezone(tz)
    return f"{local:%d %b %Y}, {local:%H:%M}"


@dataclass(frozen=True)
class RightChange:
    """A single right whose value differs between two rights maps."""

    key: str
    label: str
    old: object
    new: object

    @property
    def line(self) -> str:
        return f"{self.label}: {format_right_value(self.old)} {ARROW} {format_right_value(self.new)}"


def rights_sub_diff(
    old_rights: Mapping[str, object],
    new_rights: Mapping[str, object],
) -> list[RightChange]:
    """Return only the rights whose value changed, old-map keys first."""
    keys = list(old_rights)
    keys.extend(key for key in new_rights if key not in old_rights)
    return [
        RightChange(
            key=key,
            label=right_label(key),
            old=old_rights.get(key),
            new=new_rights.get(key),
        )
        for key in keys
        if not values_equal(old_rights.get(key), new_rights.get(key))
    ]


def rights_changed_summary(count: int) -> str:
    return f"{count} right{'' if count == 1 else 's'} changed"


def _is_rights_change(field: str, old: object, new: object) -> bool:
    return field == RIGHTS_FIELD and is_rights_object(old) and is_rights_object(new)


def summarize_changes(changes: Mapping[str, Mapping[str, object]]) -> str:
    """Condensed one-line summary: `Label: old → new` per field, comma-separated."""
    parts: list[str] = []
    for field, change in changes.items():
        old, new = change.get("old"), change.get("new")
        label = field_label(field)
        if _is_rights_change(field, old, new):
            count = len(rights_sub_diff(old, new))  # type: ignore[arg-type]
            parts.append(f"{label}: {rights_changed_summary(count)}")
        else:
            parts.append(f"{label}: {format_value(old)} {ARROW} {format_value(new)}")
    return ", ".join(parts)


@dataclass(frozen=True)
class ChangeDetail:
    """Expanded rendering of one changed field."""

    field: str
    label: str
    old: str
    new: str
    rights: tuple[RightChange, ...] | None = None

    @property
    def lines(self) -> list[str]:
        if self.rights is None:
            return [f"{self.label}: {self.old} {ARROW} {self.new}"]
        if not self.rights:
            return [f"{self.label}:", f"  {NO_RIGHTS_CHANGED}"]
        return [f"{self.label}:", *(f"  {right.line}" for right in self.rights)]


def change_details(changes: Mapping[str, Mapping[str, object]]) -> list[ChangeDetail]:
    """Expanded per-field rendering; rights maps expand into a sub-diff."""
    details: list[ChangeDetail] = []
    for field, change in changes.items():
        old, new = change.get("old"), change.get("new")
        rights: tuple[RightChange, ...] | None = None
        if _is_rights_change(field, old, new):
            rights = tuple(rights_sub_diff(old, new))  # type: ignore[arg-type]
        details.append(
            ChangeDetail(
                field=field,
                label=field_label(field),
                old=format_value(old),
                new=format_value(new),
                rights=rights,
            ),
        )
    return details


def metadata_lines(metadata: Mapping[str, object]) -> list[str]:
    return [f"{field_label(key)}: {format_value(value)}" for key, value in metadata.items()]
