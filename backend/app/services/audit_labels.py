"""Closed vocabularies for audit actions, targets and field labels."""

from __future__ import annotations

from enum import Enum


class AuditAction(str, Enum):
    """Dot-namespaced `<entity>.<verb>` actions recorded in the audit trail."""

    MEMBER_CREATED = "member.created"
    MEMBER_UPDATED = "member.updated"
    MEMBER_DELETED = "member.deleted"
    MEMBER_INVITED = "member.invited"
    ORG_UPDATED = "org.updated"
    TEAM_CREATED = "team.created"
    TEAM_UPDATED = "team.updated"
    TEAM_DELETED = "team.deleted"
    ADMIN_PROFILE_CREATED = "admin_profile.created"
    ADMIN_PROFILE_UPDATED = "admin_profile.updated"
    ADMIN_PROFILE_DELETED = "admin_profile.deleted"
    EMPLOYEE_PROFILE_CREATED = "employee_profile.created"
    EMPLOYEE_PROFILE_UPDATED = "employee_profile.updated"
    EMPLOYEE_PROFILE_DELETED = "employee_profile.deleted"


class TargetType(str, Enum):
    """Entity kinds an audit entry can point at."""

    MEMBER = "member"
    TEAM = "team"
    ORGANISATION = "organisation"
    ADMIN_PROFILE = "admin_profile"
    EMPLOYEE_PROFILE = "employee_profile"


ACTION_LABELS: dict[str, str] = {
    AuditAction.MEMBER_CREATED.value: "Added Member",
    AuditAction.MEMBER_UPDATED.value: "Edited Member",
    AuditAction.MEMBER_DELETED.value: "Deleted Member",
    AuditAction.MEMBER_INVITED.value: "Invited Member",
    AuditAction.ORG_UPDATED.value: "Edited Organisation",
    AuditAction.TEAM_CREATED.value: "Created Team",
    AuditAction.TEAM_UPDATED.value: "Edited Team",
    AuditAction.TEAM_DELETED.value: "Deleted Team",
    AuditAction.ADMIN_PROFILE_CREATED.value: "Created Admin Profile",
    AuditAction.ADMIN_PROFILE_UPDATED.value: "Updated Admin Profile",
    AuditAction.ADMIN_PROFILE_DELETED.value: "Deleted Admin Profile",
    AuditAction.EMPLOYEE_PROFILE_CREATED.value: "Created Employee Profile",
    AuditAction.EMPLOYEE_PROFILE_UPDATED.value: "Updated Employee Profile",
    AuditAction.EMPLOYEE_PROFILE_DELETED.value: "Deleted Employee Profile",
}

FIELD_LABELS: dict[str, str] = {
    "first_name": "First Name",
    "last_name": "Last Name",
    "email": "Email",
    "role": "Role",
    "team": "Team",
    "team_id": "Team",
    "teams": "Teams",
    "payroll_number": "Payroll Number",
    "invited_at": "Invited At",
    "name": "Name",
    "member_label": "Member Type",
    "require_mfa": "Require MFA",
    "member_count": "Members Used",
    "max_employees": "Members Subscribed",
    "admin_profile": "Admin Profile",
    "employee_profile": "Employee Profile",
    "rights": "Rights",
}

# Field holding a nested key -> value rights map rendered as a sub-diff.
RIGHTS_FIELD = "rights"


def action_label(action: str) -> str:
    """Return the display label for an action, falling back to the raw value."""
    return ACTION_LABELS.get(action, action)


def field_label(field: str) -> str:
    """Return the display label for a changed field, falling back to the raw name."""
    return FIELD_LABELS.get(field, field)
