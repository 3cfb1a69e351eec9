"""Global exception handlers mapping domain exceptions to HTTP responses."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from medintake.exceptions import (
    ConflictError,
    IntakeError,
    NotFoundError,
    ParseError,
    ProcessingTimeout,
    ProviderError,
    TransientProviderError,
    ValidationError,
)

log = logging.getLogger(__name__)


def _error(status_code: int, error: str, details: Any = None, **extra: Any) -> JSONResponse:
    content: dict[str, Any] = {"error": error}
    if details is not None:
        content["details"] = details
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


def register_error_handlers(app: FastAPI) -> None:
    """Register exception-to-HTTP-status mappings."""

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        details = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', '')}" for err in exc.errors()
        )
        return _error(400, "Invalid request body", details)

    @app.exception_handler(ValidationError)
    async def handle_validation(request: Request, exc: ValidationError) -> JSONResponse:
        return _error(400, exc.message, exc.details, fieldErrors=exc.field_errors)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return _error(404, exc.message, exc.details)

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError) -> JSONResponse:
        return _error(
            409,
            exc.message,
            expectedVersion=exc.expected_version,
            actualVersion=exc.actual_version,
        )

    @app.exception_handler(ProcessingTimeout)
    async def handle_timeout(request: Request, exc: ProcessingTimeout) -> JSONResponse:
        return _error(504, exc.message, unprocessedIds=exc.unprocessed_ids)

    @app.exception_handler(ProviderError)
    async def handle_provider(request: Request, exc: ProviderError) -> JSONResponse:
        log.error("Extraction provider failure on %s: %s", request.url.path, exc.message)
        return _error(
            500,
            "Failed to analyze documents",
            exc.message,
            retryable=isinstance(exc, TransientProviderError),
        )

    @app.exception_handler(ParseError)
    async def handle_parse(request: Request, exc: ParseError) -> JSONResponse:
        log.error("Unparseable extraction output on %s", request.url.path)
        return _error(500, "Failed to parse extraction output", exc.message)

    @app.exception_handler(IntakeError)
    async def handle_generic(request: Request, exc: IntakeError) -> JSONResponse:
        log.error("Request to %s failed: %s", request.url.path, exc.message)
        return _error(500, exc.message, exc.details)
