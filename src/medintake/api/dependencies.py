"""Request-scoped access to the service container."""

from __future__ import annotations

from fastapi import Request

from medintake.services import Services


def get_services(request: Request) -> Services:
    return request.app.state.services
