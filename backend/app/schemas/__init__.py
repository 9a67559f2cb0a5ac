"""Public schema exports shared across API route modules."""

from app.schemas.audit import (
    AuditEditorRead,
    AuditEntryRead,
    AuditEntryViewRead,
    AuditFeedRequest,
)
from app.schemas.common import OkResponse
from app.schemas.members import MemberCreate, MemberRead, MemberUpdate
from app.schemas.organisations import OrganisationRead, OrganisationUpdate
from app.schemas.rights_profiles import ProfileAssignment, RightsProfileRead, RightsProfileWrite
from app.schemas.teams import TeamCreate, TeamRead, TeamUpdate

__all__ = [
    "AuditEditorRead",
    "AuditEntryRead",
    "AuditEntryViewRead",
    "AuditFeedRequest",
    "MemberCreate",
    "MemberRead",
    "MemberUpdate",
    "OkResponse",
    "OrganisationRead",
    "OrganisationUpdate",
    "ProfileAssignment",
    "RightsProfileRead",
    "RightsProfileWrite",
    "TeamCreate",
    "TeamRead",
    "TeamUpdate",
]
