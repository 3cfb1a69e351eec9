"""Nested pydantic-settings configuration for the application.

Each group reads its own ``MEDINTAKE_<GROUP>_*`` env vars::

    export MEDINTAKE_LLM_MODEL=gpt-4o
    export MEDINTAKE_PERSISTENCE_BACKEND=file
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class LLMConfig(BaseSettings):
    """Answer-extraction model configuration.

    Env vars use ``MEDINTAKE_LLM_`` prefix::

        export MEDINTAKE_LLM_PROVIDER=openai
        export MEDINTAKE_LLM_API_KEY=sk-...
    """

    model_config = {"env_prefix": "MEDINTAKE_LLM_"}

    provider: Literal["openai", "anthropic", "bedrock", "ollama", "litellm"] = "openai"
    model: str = "gpt-4o"
    api_key: str = "no-key"
    base_url: str = ""
    temperature: float = 0.1
    max_tokens: int = 4000
    timeout: float = Field(default=60.0, gt=0.0)
    inference_backend: str = "realtime"


class PersistenceConfig(BaseSettings):
    """Persistence configuration.

    Env vars use ``MEDINTAKE_PERSISTENCE_`` prefix.
    """

    model_config = {"env_prefix": "MEDINTAKE_PERSISTENCE_"}

    backend: Literal["memory", "file", "s3"] = "file"
    store_path: Path = Path("./data")
    s3_bucket: str = ""
    s3_prefix: str = "intake/"
    aws_region: str = "eu-central-1"
    kms_key_id: str = ""


class StoreConfig(BaseSettings):
    """Record store behaviour.

    Env vars use ``MEDINTAKE_STORE_`` prefix.
    """

    model_config = {"env_prefix": "MEDINTAKE_STORE_"}

    max_insert_attempts: int = Field(default=3, ge=1)


class PollingConfig(BaseSettings):
    """Client-side backoff while documents are still being processed.

    Env vars use ``MEDINTAKE_POLLING_`` prefix.
    """

    model_config = {"env_prefix": "MEDINTAKE_POLLING_"}

    initial_delay: float = Field(default=5.0, ge=0.0)
    multiplier: float = Field(default=2.0, ge=1.0)
    max_delay: float = Field(default=60.0, ge=0.0)
    max_attempts: int = Field(default=10, ge=1)


class TenancyConfig(BaseSettings):
    """Patient ownership policy.

    Leaving ``default_patient_id`` unset means every request must name its
    patient.  Setting it turns on single-tenant defaulting for uploads.

    Env vars use ``MEDINTAKE_TENANCY_`` prefix.
    """

    model_config = {"env_prefix": "MEDINTAKE_TENANCY_"}

    default_patient_id: Optional[str] = None
    scope_latest_form_to_patient: bool = True


class ObservabilityConfig(BaseSettings):
    """Observability configuration.

    Env vars use ``MEDINTAKE_OBSERVABILITY_`` prefix.
    """

    model_config = {"env_prefix": "MEDINTAKE_OBSERVABILITY_"}

    service_name: str = "medintake"
    log_level: str = "INFO"
    json_logs: Optional[bool] = None


class APIConfig(BaseSettings):
    """HTTP API metadata.

    Env vars use ``MEDINTAKE_API_`` prefix.
    """

    model_config = {"env_prefix": "MEDINTAKE_API_"}

    title: str = "medintake"
    description: str = "Document-to-questionnaire extraction and review for patient intake"
    host: str = "0.0.0.0"
    port: int = 8080


class AppSettings(BaseSettings):
    """Top-level application settings aggregating all sub-configs.

    Each sub-config reads its own ``MEDINTAKE_<GROUP>_*`` env vars.
    """

    model_config = {"env_prefix": "MEDINTAKE_"}

    tenant_id: str = "default"

    llm: LLMConfig = Field(default_factory=LLMConfig)
    persistence: PersistenceConfig = Field(default_factory=PersistenceConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    polling: PollingConfig = Field(default_factory=PollingConfig)
    tenancy: TenancyConfig = Field(default_factory=TenancyConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)
    api: APIConfig = Field(default_factory=APIConfig)
