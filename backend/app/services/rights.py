"""Right definitions for admin and employee profiles plus label lookup."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Literal

from fastapi import HTTPException, status

RightType = Literal["boolean", "access"]
ACCESS_LEVELS = ("none", "read", "write")


@dataclass(frozen=True)
class RightDef:
    """One permission flag a rights profile can carry."""

    key: str
    label: str
    type: RightType
    description: str = ""


ADMIN_RIGHTS: tuple[RightDef, ...] = (
    RightDef("can_add_members", "Add Members", "boolean", "Add & delete members"),
    RightDef(
        "can_edit_organisation",
        "Edit Organisation",
        "boolean",
        "Change org name, label, MFA settings",
    ),
    RightDef(
        "can_view_all_teams",
        "View All Teams",
        "boolean",
        "See members across all teams",
    ),
    RightDef(
        "can_approve_holidays",
        "Approve Holidays",
        "boolean",
        "Approve/reject holiday requests",
    ),
    RightDef(
        "can_manage_members",
        "Manage Members",
        "access",
        "None, read-only, or full read/write access to member records",
    ),
)

EMPLOYEE_RIGHTS: tuple[RightDef, ...] = (
    RightDef("can_request_holidays", "Request Holidays", "boolean", "Submit holiday requests"),
    RightDef(
        "can_view_team_members",
        "View Team Members",
        "boolean",
        "See other members in own team",
    ),
)

RIGHT_LABELS: dict[str, str] = {
    right.key: right.label for right in (*ADMIN_RIGHTS, *EMPLOYEE_RIGHTS)
}


def rights_for_profile_type(profile_type: str) -> tuple[RightDef, ...]:
    """Return the right definitions that apply to an admin or employee profile."""
    return ADMIN_RIGHTS if profile_type == "admin" else EMPLOYEE_RIGHTS


def right_label(key: str) -> str:
    """Return the human label for a right key, or the key itself when unknown."""
    return RIGHT_LABELS.get(key, key)


def build_default_rights(defs: Sequence[RightDef]) -> dict[str, object]:
    """Build a rights map with every boolean off and every access level at `none`."""
    return {right.key: False if right.type == "boolean" else "none" for right in defs}


def validate_rights(
    rights: Mapping[str, object],
    defs: Sequence[RightDef],
    *,
    fill_defaults: bool = False,
) -> dict[str, object]:
    """Check a rights map against its definitions and return a copy.

    With `fill_defaults`, rights missing from the input are added at their
    default value.
    """
    by_key = {right.key: right for right in defs}
    unknown = sorted(set(rights) - set(by_key))
    if unknown:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown rights: {', '.join(unknown)}",
        )
    normalized = build_default_rights(defs) if fill_defaults else {}
    for key, value in rights.items():
        right = by_key[key]
        if right.type == "boolean" and not isinstance(value, bool):
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"Right '{key}' must be true or false",
            )
        if right.type == "access" and value not in ACCESS_LEVELS:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"Right '{key}' must be one of: {', '.join(ACCESS_LEVELS)}",
            )
        normalized[key] = value
    return normalized
