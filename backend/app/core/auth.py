"""Shared-token request authentication and acting-member resolution."""

from __future__ import annotations

from dataclasses import dataclass
from hmac import compare_digest
from uuid import UUID

from fastapi import HTTPException, Request, status

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)
MEMBER_ID_HEADER = "X-Member-Id"


@dataclass(frozen=True)
class AuthContext:
    """Authenticated caller identity resolved from inbound auth headers."""

    member_id: UUID


def _extract_bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    value = authorization.strip()
    if not value:
        return None
    if not value.lower().startswith("bearer "):
        return None
    token = value.split(" ", 1)[1].strip()
    return token or None


def _parse_member_id(raw: str | None) -> UUID | None:
    if raw is None:
        return None
    try:
        return UUID(raw.strip())
    except ValueError:
        return None


async def get_auth_context(request: Request) -> AuthContext:
    """Require the shared bearer token and an acting member id."""
    token = _extract_bearer_token(request.headers.get("Authorization"))
    expected = settings.local_auth_token.strip()
    if token is None or not expected or not compare_digest(token, expected):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    member_id = _parse_member_id(request.headers.get(MEMBER_ID_HEADER))
    if member_id is None:
        logger.info("auth.member_id.missing", extra={"path": request.url.path})
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return AuthContext(member_id=member_id)
