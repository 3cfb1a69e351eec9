"""FastAPI application with lifespan management."""

from __future__ import annotations

import importlib.metadata
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI

from medintake.api.middleware.error_handler import register_error_handlers
from medintake.api.routes import documents, forms, health, uploads
from medintake.core.config import AppSettings
from medintake.core.startup_checks import validate_settings
from medintake.logging_config import setup_logging
from medintake.services import Services, build_services


def _get_version() -> str:
    """Read package version from installed metadata, with dev fallback."""
    try:
        return importlib.metadata.version("medintake")
    except importlib.metadata.PackageNotFoundError:
        return "0.0.0-dev"


def create_app(
    settings: Optional[AppSettings] = None,
    services: Optional[Services] = None,
) -> FastAPI:
    """Build the application.

    Passing ``services`` skips building them from settings (and the
    startup checks), which is how tests inject fakes.
    """
    settings = settings or (services.settings if services else AppSettings())

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        setup_logging(settings.observability)
        if services is None:
            validate_settings(settings)
            app.state.services = build_services(settings)
        else:
            app.state.services = services
        app.state.settings = settings
        yield

    app = FastAPI(
        title=settings.api.title,
        description=settings.api.description,
        version=_get_version(),
        lifespan=lifespan,
    )
    register_error_handlers(app)

    app.include_router(health.router)
    app.include_router(uploads.router, prefix="/api")
    app.include_router(documents.router, prefix="/api")
    app.include_router(forms.router, prefix="/api")
    return app
