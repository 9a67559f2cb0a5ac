"""Model exports for SQLAlchemy/SQLModel metadata discovery."""

from app.models.audit_entries import AuditEntry
from app.models.members import Member
from app.models.organisations import Organisation
from app.models.rights_profiles import RightsProfile
from app.models.teams import Team

__all__ = [
    "AuditEntry",
    "Member",
    "Organisation",
    "RightsProfile",
    "Team",
]
