"""Async engine, request sessions and startup schema setup."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING

from alembic import command
from alembic.config import Config
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from app import models as _models
from app.core.config import settings
from app.core.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

# Registers every table on SQLModel.metadata before create_all/autogenerate.
_MODEL_REGISTRY = _models

BACKEND_ROOT = Path(__file__).resolve().parents[2]
ALEMBIC_INI = BACKEND_ROOT / "alembic.ini"
MIGRATION_VERSIONS = BACKEND_ROOT / "migrations" / "versions"

logger = get_logger(__name__)


def async_database_url(database_url: str) -> str:
    """Point bare `postgresql://` URLs at the psycopg async driver."""
    for prefix in ("postgresql://", "postgres://"):
        if database_url.startswith(prefix):
            return "postgresql+psycopg://" + database_url[len(prefix) :]
    return database_url


async_engine: AsyncEngine = create_async_engine(
    async_database_url(settings.database_url),
    pool_pre_ping=True,
)
async_session_maker = async_sessionmaker(
    async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


def run_migrations() -> None:
    """Upgrade the database to the newest Alembic revision."""
    alembic_cfg = Config(str(ALEMBIC_INI))
    # Keep the application's logging handlers instead of alembic.ini's.
    alembic_cfg.attributes["configure_logger"] = False
    logger.info("db.migrations.started")
    command.upgrade(alembic_cfg, "head")
    logger.info("db.migrations.completed")


async def init_db() -> None:
    """Prepare the schema: migrate when enabled, otherwise create missing tables."""
    if settings.db_auto_migrate and any(MIGRATION_VERSIONS.glob("*.py")):
        await asyncio.to_thread(run_migrations)
        return
    if settings.db_auto_migrate:
        logger.warning("db.migrations.missing", extra={"versions_dir": str(MIGRATION_VERSIONS)})

    async with async_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def dispose_db() -> None:
    await async_engine.dispose()


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a request-scoped session, rolling back anything left uncommitted."""
    async with async_session_maker() as session:
        try:
            yield session
        finally:
            try:
                if session.in_transaction():
                    await session.rollback()
            except SQLAlchemyError:
                logger.exception("db.session.rollback_failed")
