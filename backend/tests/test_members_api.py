# ruff: noqa

"""Permission checks on the member endpoints."""

from __future__ import annotations

from collections.abc import Iterator
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from _fakes import FakeQuery, FakeSession
from app.api.deps import require_org_member
from app.db.session import get_session
from app.main import app
from app.models.members import Member
from app.models.organisations import Organisation
from app.services.organisations import OrganisationContext

ORG = Organisation(id=uuid4(), name="Acme")


def _member(first: str, role: str, permissions: dict[str, object] | None = None) -> Member:
    return Member(
        id=uuid4(),
        organisation_id=ORG.id,
        first_name=first,
        last_name="Smith",
        email=f"{first.lower()}@example.com",
        role=role,
        permissions=permissions or {},
    )


@pytest.fixture
def client() -> Iterator[TestClient]:
    async def _fake_session() -> object:
        return FakeSession()

    app.dependency_overrides[get_session] = _fake_session
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _as(member: Member) -> None:
    ctx = OrganisationContext(organisation=ORG, member=member)
    app.dependency_overrides[require_org_member] = lambda: ctx


def _profile_url(member: Member) -> str:
    return f"/api/v1/organisations/me/members/{member.id}/profiles/employee"


@pytest.mark.parametrize(
    ("role", "permissions"),
    [
        ("owner", None),
        ("admin", {"can_add_members": True}),
    ],
)
def test_profile_assignment_allowed_for_member_adders(
    client: TestClient,
    monkeypatch: pytest.MonkeyPatch,
    role: str,
    permissions: dict[str, object] | None,
) -> None:
    actor = _member("Alice", role, permissions)
    bob = _member("Bob", "employee")
    monkeypatch.setattr(Member, "objects", FakeQuery([actor, bob]))
    _as(actor)

    response = client.put(_profile_url(bob), json={"profile_id": None})

    assert response.status_code == 200
    assert response.json()["id"] == str(bob.id)


@pytest.mark.parametrize(
    ("role", "permissions"),
    [
        ("admin", {"can_add_members": False}),
        ("admin", None),
        ("employee", {"can_add_members": True}),
    ],
)
def test_profile_assignment_forbidden_without_add_right(
    client: TestClient,
    monkeypatch: pytest.MonkeyPatch,
    role: str,
    permissions: dict[str, object] | None,
) -> None:
    actor = _member("Alice", role, permissions)
    bob = _member("Bob", "employee")
    monkeypatch.setattr(Member, "objects", FakeQuery([actor, bob]))
    _as(actor)

    response = client.put(_profile_url(bob), json={"profile_id": None})

    assert response.status_code == 403
    assert response.json()["detail"] == "Insufficient permissions"


def test_add_member_forbidden_for_admin_without_add_right(client: TestClient) -> None:
    _as(_member("Alice", "admin", {"can_add_members": False}))

    response = client.post(
        "/api/v1/organisations/me/members",
        json={"email": "carol@example.com", "first_name": "Carol", "last_name": "Jones"},
    )

    assert response.status_code == 403
