# ruff: noqa

"""Member lifecycle tests, including the rendered audit trail for an edit."""

from __future__ import annotations

from uuid import uuid4

import pytest
from fastapi import HTTPException

from _fakes import FakeQuery, FakeSession
from app.models.members import Member
from app.models.organisations import Organisation
from app.models.teams import Team
from app.schemas.members import MemberCreate, MemberUpdate
from app.services.audit_filters import AuditFilter
from app.services.audit_view import AuditViewState, render_entries
from app.services.members import (
    create_member,
    delete_member,
    mark_member_invited,
    update_member,
)
from app.services.organisations import OrganisationContext


def _org(max_employees: int = 5) -> Organisation:
    return Organisation(id=uuid4(), name="Acme", max_employees=max_employees)


def _member(org: Organisation, first: str, last: str, role: str, **kwargs: object) -> Member:
    return Member(
        id=uuid4(),
        organisation_id=org.id,
        first_name=first,
        last_name=last,
        email=f"{first.lower()}@example.com",
        role=role,
        **kwargs,
    )


@pytest.fixture
def org() -> Organisation:
    return _org()


@pytest.fixture
def alice(org: Organisation) -> Member:
    return _member(org, "Alice", "Owner", "owner")


@pytest.fixture
def bob(org: Organisation) -> Member:
    return _member(org, "Bob", "Builder", "employee", permissions={"can_approve_holidays": False})


@pytest.fixture
def ctx(org: Organisation, alice: Member) -> OrganisationContext:
    return OrganisationContext(organisation=org, member=alice)


@pytest.mark.asyncio
async def test_role_and_rights_edit_renders_condensed_and_expanded(
    monkeypatch: pytest.MonkeyPatch,
    ctx: OrganisationContext,
    alice: Member,
    bob: Member,
) -> None:
    monkeypatch.setattr(Member, "objects", FakeQuery([alice, bob]))
    session = FakeSession()

    updated = await update_member(
        session,  # type: ignore[arg-type]
        ctx=ctx,
        member_id=bob.id,
        payload=MemberUpdate(role="admin", permissions={"can_approve_holidays": True}),
    )

    assert updated.role == "admin"
    assert updated.permissions == {"can_approve_holidays": True}
    [entry] = session.audit_entries()
    assert entry.action == "member.updated"
    assert entry.actor_name == "Alice Owner"
    assert entry.target_label == "Bob Builder"
    assert entry.changes == {
        "role": {"old": "employee", "new": "admin"},
        "rights": {
            "old": {"can_approve_holidays": False},
            "new": {"can_approve_holidays": True},
        },
    }

    [condensed] = render_entries([entry], AuditFilter(), AuditViewState())
    assert condensed.headline == "Alice Owner Edited Member Bob Builder"
    assert condensed.summary == "Role: employee → admin, Rights: 1 right changed"
    assert condensed.member_link_id == bob.id

    [expanded] = render_entries([entry], AuditFilter(), AuditViewState(verbose=True))
    assert [line for change in expanded.changes for line in change.lines] == [
        "Role: employee → admin",
        "Rights:",
        "  Approve Holidays: No → Yes",
    ]


@pytest.mark.asyncio
async def test_update_without_changes_writes_no_entry(
    monkeypatch: pytest.MonkeyPatch,
    ctx: OrganisationContext,
    alice: Member,
    bob: Member,
) -> None:
    monkeypatch.setattr(Member, "objects", FakeQuery([alice, bob]))
    session = FakeSession()

    await update_member(
        session,  # type: ignore[arg-type]
        ctx=ctx,
        member_id=bob.id,
        payload=MemberUpdate(first_name=" Bob ", role="employee"),
    )

    assert session.audit_entries() == []


@pytest.mark.asyncio
async def test_team_change_is_recorded_by_team_name(
    monkeypatch: pytest.MonkeyPatch,
    org: Organisation,
    ctx: OrganisationContext,
    alice: Member,
    bob: Member,
) -> None:
    support = Team(id=uuid4(), organisation_id=org.id, name="Support")
    monkeypatch.setattr(Member, "objects", FakeQuery([alice, bob]))
    monkeypatch.setattr(Team, "objects", FakeQuery([support]))
    session = FakeSession()

    await update_member(
        session,  # type: ignore[arg-type]
        ctx=ctx,
        member_id=bob.id,
        payload=MemberUpdate(team_id=support.id),
    )

    assert bob.team_id == support.id
    [entry] = session.audit_entries()
    assert entry.changes == {"team": {"old": None, "new": "Support"}}


@pytest.mark.asyncio
async def test_cannot_change_owner_role(
    monkeypatch: pytest.MonkeyPatch,
    ctx: OrganisationContext,
    alice: Member,
) -> None:
    monkeypatch.setattr(Member, "objects", FakeQuery([alice]))

    with pytest.raises(HTTPException) as exc:
        await update_member(
            FakeSession(),  # type: ignore[arg-type]
            ctx=ctx,
            member_id=alice.id,
            payload=MemberUpdate(role="employee"),
        )
    assert exc.value.status_code == 403


@pytest.mark.asyncio
async def test_update_unknown_member_is_404(
    monkeypatch: pytest.MonkeyPatch,
    ctx: OrganisationContext,
    alice: Member,
) -> None:
    monkeypatch.setattr(Member, "objects", FakeQuery([alice]))

    with pytest.raises(HTTPException) as exc:
        await update_member(
            FakeSession(),  # type: ignore[arg-type]
            ctx=ctx,
            member_id=uuid4(),
            payload=MemberUpdate(first_name="Nobody"),
        )
    assert exc.value.status_code == 404


@pytest.mark.asyncio
async def test_create_member_records_headcount(
    monkeypatch: pytest.MonkeyPatch,
    ctx: OrganisationContext,
    alice: Member,
    bob: Member,
) -> None:
    monkeypatch.setattr(Member, "objects", FakeQuery([alice, bob]))
    session = FakeSession()

    member = await create_member(
        session,  # type: ignore[arg-type]
        ctx=ctx,
        payload=MemberCreate(email=" Carol@Example.com ", first_name="Carol", last_name="Jones"),
    )

    assert member.email == "carol@example.com"
    assert member.role == "employee"
    [entry] = session.audit_entries()
    assert entry.action == "member.created"
    assert entry.target_id == member.id
    assert entry.metadata_ == {
        "email": "carol@example.com",
        "member_count": 3,
        "max_employees": 5,
    }
    [view] = render_entries([entry], AuditFilter(), AuditViewState())
    assert view.headline == "Alice Owner Added Member Carol Jones (now 3/5)"


@pytest.mark.asyncio
async def test_create_member_rejects_when_limit_reached(
    monkeypatch: pytest.MonkeyPatch,
    alice: Member,
    bob: Member,
    org: Organisation,
) -> None:
    org.max_employees = 2
    monkeypatch.setattr(Member, "objects", FakeQuery([alice, bob]))
    session = FakeSession()

    with pytest.raises(HTTPException) as exc:
        await create_member(
            session,  # type: ignore[arg-type]
            ctx=OrganisationContext(organisation=org, member=alice),
            payload=MemberCreate(email="carol@example.com", first_name="Carol", last_name="J"),
        )

    assert exc.value.status_code == 409
    assert session.added == []


@pytest.mark.asyncio
async def test_create_member_rejects_duplicate_email(
    monkeypatch: pytest.MonkeyPatch,
    ctx: OrganisationContext,
    alice: Member,
    bob: Member,
) -> None:
    monkeypatch.setattr(Member, "objects", FakeQuery([alice, bob]))

    with pytest.raises(HTTPException) as exc:
        await create_member(
            FakeSession(),  # type: ignore[arg-type]
            ctx=ctx,
            payload=MemberCreate(email="BOB@example.com", first_name="Bob", last_name="Again"),
        )
    assert exc.value.status_code == 409


@pytest.mark.asyncio
async def test_delete_member_records_snapshot(
    monkeypatch: pytest.MonkeyPatch,
    ctx: OrganisationContext,
    alice: Member,
    bob: Member,
) -> None:
    monkeypatch.setattr(Member, "objects", FakeQuery([alice, bob]))
    session = FakeSession()

    await delete_member(session, ctx=ctx, member_id=bob.id)  # type: ignore[arg-type]

    assert session.deleted == [bob]
    [entry] = session.audit_entries()
    assert entry.action == "member.deleted"
    assert entry.target_label == "Bob Builder"
    assert entry.metadata_ == {
        "email": "bob@example.com",
        "role": "employee",
        "payroll_number": None,
        "member_count": 1,
        "max_employees": 5,
    }


@pytest.mark.asyncio
async def test_owner_cannot_be_deleted(
    monkeypatch: pytest.MonkeyPatch,
    ctx: OrganisationContext,
    alice: Member,
) -> None:
    monkeypatch.setattr(Member, "objects", FakeQuery([alice]))

    with pytest.raises(HTTPException) as exc:
        await delete_member(FakeSession(), ctx=ctx, member_id=alice.id)  # type: ignore[arg-type]
    assert exc.value.status_code == 403


@pytest.mark.asyncio
async def test_mark_invited_records_timestamp_change(
    monkeypatch: pytest.MonkeyPatch,
    ctx: OrganisationContext,
    alice: Member,
    bob: Member,
) -> None:
    monkeypatch.setattr(Member, "objects", FakeQuery([alice, bob]))
    session = FakeSession()

    member = await mark_member_invited(session, ctx=ctx, member_id=bob.id)  # type: ignore[arg-type]

    assert member.invited_at is not None
    [entry] = session.audit_entries()
    assert entry.action == "member.invited"
    assert entry.changes is not None
    assert entry.changes["invited_at"]["old"] is None
    assert entry.metadata_ == {"email": "bob@example.com"}
