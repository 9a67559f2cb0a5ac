"""Team endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlmodel import col

from app.api.deps import require_org_admin, require_org_member
from app.db.session import get_session
from app.models.teams import Team
from app.schemas.common import OkResponse
from app.schemas.teams import TeamCreate, TeamRead, TeamUpdate
from app.services.organisations import OrganisationContext
from app.services.teams import create_team, delete_team, rename_team

if TYPE_CHECKING:
    from sqlmodel.ext.asyncio.session import AsyncSession

router = APIRouter(prefix="/organisations/me/teams", tags=["teams"])
SESSION_DEP = Depends(get_session)
ORG_MEMBER_DEP = Depends(require_org_member)
ORG_ADMIN_DEP = Depends(require_org_admin)


@router.get("", response_model=list[TeamRead])
async def list_teams(
    session: AsyncSession = SESSION_DEP,
    ctx: OrganisationContext = ORG_MEMBER_DEP,
) -> list[TeamRead]:
    teams = await (
        Team.objects.filter_by(organisation_id=ctx.organisation.id)
        .order_by(col(Team.name).asc())
        .all(session)
    )
    return [TeamRead.model_validate(t, from_attributes=True) for t in teams]


@router.post("", response_model=TeamRead, status_code=status.HTTP_201_CREATED)
async def add_team(
    payload: TeamCreate,
    session: AsyncSession = SESSION_DEP,
    ctx: OrganisationContext = ORG_ADMIN_DEP,
) -> TeamRead:
    team = await create_team(session, ctx=ctx, name=payload.name)
    return TeamRead.model_validate(team, from_attributes=True)


@router.patch("/{team_id}", response_model=TeamRead)
async def update_team(
    team_id: UUID,
    payload: TeamUpdate,
    session: AsyncSession = SESSION_DEP,
    ctx: OrganisationContext = ORG_ADMIN_DEP,
) -> TeamRead:
    team = await rename_team(session, ctx=ctx, team_id=team_id, name=payload.name)
    return TeamRead.model_validate(team, from_attributes=True)


@router.delete("/{team_id}", response_model=OkResponse)
async def remove_team(
    team_id: UUID,
    session: AsyncSession = SESSION_DEP,
    ctx: OrganisationContext = ORG_ADMIN_DEP,
) -> OkResponse:
    """Delete a team; its members become unassigned."""
    await delete_team(session, ctx=ctx, team_id=team_id)
    return OkResponse()
