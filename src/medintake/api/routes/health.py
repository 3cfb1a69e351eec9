"""Health check endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe; 200 while the process is up."""
    return {"status": "ok"}


@router.get("/ready")
async def ready(request: Request) -> dict[str, str]:
    """Readiness probe; confirms the service container is wired."""
    services = getattr(request.app.state, "services", None)
    return {"status": "ready" if services is not None else "starting"}
