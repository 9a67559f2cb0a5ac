"""Liveness and readiness probes served outside the versioned API."""

from __future__ import annotations

from fastapi import APIRouter, status

from app.schemas.health import HealthStatusResponse

router = APIRouter(tags=["health"])
_OK_EXAMPLE = {
    status.HTTP_200_OK: {
        "description": "Service is up.",
        "content": {"application/json": {"example": {"ok": True}}},
    },
}


@router.get("/health", response_model=HealthStatusResponse, responses=_OK_EXAMPLE)
def health() -> HealthStatusResponse:
    """Liveness probe."""
    return HealthStatusResponse(ok=True)


@router.get("/healthz", response_model=HealthStatusResponse, responses=_OK_EXAMPLE)
def healthz() -> HealthStatusResponse:
    """Liveness probe alias for platforms expecting `/healthz`."""
    return HealthStatusResponse(ok=True)


@router.get("/readyz", response_model=HealthStatusResponse, responses=_OK_EXAMPLE)
def readyz() -> HealthStatusResponse:
    return HealthStatusResponse(ok=True)
