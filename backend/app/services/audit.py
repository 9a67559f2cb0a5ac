"""Audit trail writer and field-level change differ."""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import TYPE_CHECKING, TypedDict

from fastapi.encoders import jsonable_encoder

from app.core.logging import get_logger
from app.core.time import utcnow
from app.models.audit_entries import AuditEntry
from app.services.audit_labels import AuditAction, TargetType

if TYPE_CHECKING:
    from uuid import UUID

    from sqlmodel.ext.asyncio.session import AsyncSession

    from app.models.members import Member

logger = get_logger(__name__)


class FieldChange(TypedDict):
    """Before/after pair for one changed field."""

    old: object
    new: object


Changes = dict[str, FieldChange]


def values_equal(left: object, right: object) -> bool:
    """Structural equality for JSON-like values.

    Mapping key order is ignored, sequence order is not, and booleans never
    compare equal to numbers. NaN equals NaN.
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    if isinstance(left, Mapping) and isinstance(right, Mapping):
        if left.keys() != right.keys():
            return False
        return all(values_equal(left[key], right[key]) for key in left)
    if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)):
        if len(left) != len(right):
            return False
        return all(values_equal(a, b) for a, b in zip(left, right, strict=True))
    if isinstance(left, (Mapping, list, tuple)) or isinstance(right, (Mapping, list, tuple)):
        return False
    if isinstance(left, float) and isinstance(right, float):
        return left == right or (math.isnan(left) and math.isnan(right))
    return left == right


def diff_changes(
    before: Mapping[str, object],
    after: Mapping[str, object],
) -> Changes | None:
    """Return the fields of `after` whose value differs from `before`.

    Only keys present in `after` are compared; a key missing on either side
    counts as `None`. Returns `None` when nothing changed so callers can skip
    writing an update entry.
    """
    changes: Changes = {}
    for key, new_value in after.items():
        old_value = before.get(key)
        if not values_equal(old_value, new_value):
            changes[key] = {"old": old_value, "new": new_value}
    return changes or None


def actor_display_name(member: Member) -> str:
    """Return the name stored alongside entries written by a member."""
    return f"{member.first_name} {member.last_name}".strip()


async def record_audit(
    session: AsyncSession,
    *,
    organisation_id: UUID,
    actor_id: UUID,
    actor_name: str,
    action: AuditAction | str,
    target_type: TargetType | str,
    target_id: UUID | None = None,
    target_label: str | None = None,
    changes: Changes | None = None,
    metadata: dict[str, object] | None = None,
) -> AuditEntry | None:
    """Append an audit entry; failures are logged and reported as `None`.

    Call only after the primary mutation has been committed. The audit trail
    is best effort: nothing raised here reaches the caller.
    """
    try:
        action_value = AuditAction(action).value
        target_value = TargetType(target_type).value
    except ValueError:
        logger.warning(
            "audit.write.rejected",
            extra={
                "organisation_id": str(organisation_id),
                "audit_action": str(action),
                "target_type": str(target_type),
            },
        )
        return None

    try:
        entry = AuditEntry(
            organisation_id=organisation_id,
            actor_id=actor_id,
            actor_name=actor_name,
            action=action_value,
            target_type=target_value,
            target_id=target_id,
            target_label=target_label,
            changes=jsonable_encoder(changes) if changes else None,
            metadata_=jsonable_encoder(metadata) if metadata else None,
            created_at=utcnow(),
        )
        session.add(entry)
        await session.commit()
        await session.refresh(entry)
    except Exception:
        logger.exception(
            "audit.write.failed",
            extra={
                "organisation_id": str(organisation_id),
                "audit_action": action_value,
                "target_id": str(target_id) if target_id else None,
            },
        )
        await _rollback_quietly(session)
        return None

    logger.info(
        "audit.write.recorded",
        extra={
            "organisation_id": str(organisation_id),
            "audit_action": action_value,
            "changed_fields": sorted(changes) if changes else [],
        },
    )
    return entry


async def _rollback_quietly(session: AsyncSession) -> None:
    try:
        await session.rollback()
    except Exception:
        logger.exception("audit.write.rollback_failed")
