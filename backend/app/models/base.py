"""Shared SQLModel base class with query manager support."""

from __future__ import annotations

from typing import ClassVar

from sqlmodel import SQLModel

from app.db.query_manager import ManagerDescriptor


class QueryModel(SQLModel):
    """Base model exposing `Model.objects` query helpers."""

    objects: ClassVar[ManagerDescriptor] = ManagerDescriptor()
