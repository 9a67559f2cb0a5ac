"""FastAPI application entrypoint and router wiring for the backend."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.audit import router as audit_router
from app.api.health import router as health_router
from app.api.members import router as members_router
from app.api.organisations import router as organisations_router
from app.api.rights_profiles import router as rights_profiles_router
from app.api.teams import router as teams_router
from app.core.config import settings
from app.core.error_handling import install_error_handling
from app.core.logging import configure_logging, get_logger
from app.db.session import dispose_db, init_db

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

configure_logging()
logger = get_logger(__name__)

OPENAPI_TAGS = [
    {"name": "health", "description": "Liveness/readiness probes for infrastructure checks."},
    {"name": "organisations", "description": "Settings of the caller's organisation."},
    {
        "name": "members",
        "description": "Member directory, lifecycle and rights profile assignment.",
    },
    {"name": "teams", "description": "Team create, rename and delete operations."},
    {"name": "rights-profiles", "description": "Owner-managed admin and employee profiles."},
    {
        "name": "audit",
        "description": (
            "Organisation audit trail: raw entries, actor filter options and the "
            "rendered condensed/verbose feed."
        ),
    },
]


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    logger.info(
        "app.lifecycle.starting",
        extra={"environment": settings.environment, "db_auto_migrate": settings.db_auto_migrate},
    )
    await init_db()
    logger.info("app.lifecycle.started")
    try:
        yield
    finally:
        await dispose_db()
        logger.info("app.lifecycle.stopped")


def create_app() -> FastAPI:
    """Build the application with middleware, error handlers and routers."""
    application = FastAPI(
        title="People Admin API",
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=OPENAPI_TAGS,
    )

    origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    if origins:
        application.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    logger.info("app.cors.configured", extra={"origins_count": len(origins)})

    install_error_handling(application)

    api_v1 = APIRouter(prefix="/api/v1")
    for router in (
        organisations_router,
        members_router,
        teams_router,
        rights_profiles_router,
        audit_router,
    ):
        api_v1.include_router(router)
    application.include_router(health_router)
    application.include_router(api_v1)
    return application


app = create_app()
