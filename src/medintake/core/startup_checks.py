"""Startup validation: fail-fast on critical misconfigurations."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from medintake.core.config import AppSettings

log = logging.getLogger(__name__)

# Providers that use IAM/local auth and do not require an API key
_NO_KEY_PROVIDERS = frozenset({"bedrock", "ollama"})


def validate_settings(settings: AppSettings) -> None:
    """Validate application settings at startup. Raises ValueError on fatal misconfig."""
    _check_api_key(settings)
    _check_persistence(settings)
    _check_tenancy(settings)


def _check_api_key(settings: AppSettings) -> None:
    """Reject placeholder API keys for providers that need real ones."""
    if settings.llm.provider in _NO_KEY_PROVIDERS:
        return
    if settings.llm.api_key in ("no-key", ""):
        raise ValueError(
            f"MEDINTAKE_LLM_API_KEY is required for provider '{settings.llm.provider}'. "
            f"Set it via environment variable or secrets manager."
        )


def _check_persistence(settings: AppSettings) -> None:
    """Require a bucket for S3 and warn about ephemeral stores in containers."""
    if settings.persistence.backend == "s3" and not settings.persistence.s3_bucket:
        raise ValueError(
            "MEDINTAKE_PERSISTENCE_BACKEND=s3 requires MEDINTAKE_PERSISTENCE_S3_BUCKET."
        )

    is_container = bool(
        os.environ.get("ECS_CONTAINER_METADATA_URI")
        or os.environ.get("KUBERNETES_SERVICE_HOST")
    )
    if is_container and settings.persistence.backend in ("file", "memory"):
        log.warning(
            "MEDINTAKE_PERSISTENCE_BACKEND=%s in a container environment. "
            "Forms and documents will be lost on container restart. "
            "Consider setting MEDINTAKE_PERSISTENCE_BACKEND=s3.",
            settings.persistence.backend,
        )


def _check_tenancy(settings: AppSettings) -> None:
    if settings.tenancy.default_patient_id:
        log.info(
            "Single-tenant mode: uploads without a patient id are assigned to %s",
            settings.tenancy.default_patient_id,
        )
