# ruff: noqa

from __future__ import annotations

from uuid import uuid4

import pytest
from fastapi import HTTPException

from _fakes import FakeQuery, FakeSession
from app.models.members import Member
from app.models.organisations import Organisation
from app.models.teams import Team
from app.services.organisations import OrganisationContext
from app.services.teams import create_team, delete_team, rename_team


@pytest.fixture
def org() -> Organisation:
    return Organisation(id=uuid4(), name="Acme")


@pytest.fixture
def ctx(org: Organisation) -> OrganisationContext:
    owner = Member(
        id=uuid4(),
        organisation_id=org.id,
        first_name="Alice",
        last_name="Owner",
        email="alice@example.com",
        role="owner",
    )
    return OrganisationContext(organisation=org, member=owner)


@pytest.mark.asyncio
async def test_create_team_records_entry(
    monkeypatch: pytest.MonkeyPatch,
    ctx: OrganisationContext,
) -> None:
    monkeypatch.setattr(Team, "objects", FakeQuery([]))
    session = FakeSession()

    team = await create_team(session, ctx=ctx, name="  Support ")  # type: ignore[arg-type]

    assert team.name == "Support"
    [entry] = session.audit_entries()
    assert entry.action == "team.created"
    assert entry.target_type == "team"
    assert entry.target_label == "Support"
    assert entry.changes is None


@pytest.mark.asyncio
async def test_create_team_rejects_duplicate_name(
    monkeypatch: pytest.MonkeyPatch,
    org: Organisation,
    ctx: OrganisationContext,
) -> None:
    existing = Team(id=uuid4(), organisation_id=org.id, name="Support")
    monkeypatch.setattr(Team, "objects", FakeQuery([existing]))

    with pytest.raises(HTTPException) as exc:
        await create_team(FakeSession(), ctx=ctx, name="Support")  # type: ignore[arg-type]
    assert exc.value.status_code == 409


@pytest.mark.asyncio
async def test_rename_team_records_name_change(
    monkeypatch: pytest.MonkeyPatch,
    org: Organisation,
    ctx: OrganisationContext,
) -> None:
    team = Team(id=uuid4(), organisation_id=org.id, name="Support")
    monkeypatch.setattr(Team, "objects", FakeQuery([team]))
    session = FakeSession()

    await rename_team(session, ctx=ctx, team_id=team.id, name="Customer Care")  # type: ignore[arg-type]

    [entry] = session.audit_entries()
    assert entry.action == "team.updated"
    assert entry.target_label == "Customer Care"
    assert entry.changes == {"name": {"old": "Support", "new": "Customer Care"}}


@pytest.mark.asyncio
async def test_rename_to_same_name_is_a_no_op(
    monkeypatch: pytest.MonkeyPatch,
    org: Organisation,
    ctx: OrganisationContext,
) -> None:
    team = Team(id=uuid4(), organisation_id=org.id, name="Support")
    monkeypatch.setattr(Team, "objects", FakeQuery([team]))
    session = FakeSession()

    await rename_team(session, ctx=ctx, team_id=team.id, name="Support ")  # type: ignore[arg-type]

    assert session.committed == 0
    assert session.audit_entries() == []


@pytest.mark.asyncio
async def test_delete_team_unassigns_members(
    monkeypatch: pytest.MonkeyPatch,
    org: Organisation,
    ctx: OrganisationContext,
) -> None:
    team = Team(id=uuid4(), organisation_id=org.id, name="Support")
    bob = Member(
        id=uuid4(),
        organisation_id=org.id,
        first_name="Bob",
        last_name="Builder",
        email="bob@example.com",
        team_id=team.id,
    )
    monkeypatch.setattr(Team, "objects", FakeQuery([team]))
    monkeypatch.setattr(Member, "objects", FakeQuery([ctx.member, bob]))
    session = FakeSession()

    await delete_team(session, ctx=ctx, team_id=team.id)  # type: ignore[arg-type]

    assert bob.team_id is None
    assert session.deleted == [team]
    [entry] = session.audit_entries()
    assert entry.action == "team.deleted"
    assert entry.target_id == team.id
    assert entry.metadata_ == {"unassigned_members": 1}


@pytest.mark.asyncio
async def test_delete_unknown_team_is_404(
    monkeypatch: pytest.MonkeyPatch,
    ctx: OrganisationContext,
) -> None:
    monkeypatch.setattr(Team, "objects", FakeQuery([]))

    with pytest.raises(HTTPException) as exc:
        await delete_team(FakeSession(), ctx=ctx, team_id=uuid4())  # type: ignore[arg-type]
    assert exc.value.status_code == 404
