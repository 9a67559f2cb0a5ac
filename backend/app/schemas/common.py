"""Shared response schemas."""

from __future__ import annotations

from sqlmodel import SQLModel


class OkResponse(SQLModel):
    """Acknowledgement payload for mutations without a resource body."""

    ok: bool = True
