"""Service container wiring stores, provider, orchestrator and gate together."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from medintake.core.config import AppSettings
from medintake.extraction.orchestrator import ExtractionOrchestrator
from medintake.extraction.provider import IExtractionProvider, LLMExtractionProvider
from medintake.gate.completion import UploadCompletionGate
from medintake.gate.polling import BackoffPolicy
from medintake.inference.factory import create_inference_backend
from medintake.persistence.factory import create_persistence_backend
from medintake.persistence.protocols import IPersistenceBackend
from medintake.stores.document_store import DocumentStore
from medintake.stores.form_store import FormStore

log = logging.getLogger(__name__)


@dataclass
class Services:
    settings: AppSettings
    backend: IPersistenceBackend
    forms: FormStore
    documents: DocumentStore
    provider: IExtractionProvider
    orchestrator: ExtractionOrchestrator
    gate: UploadCompletionGate

    @property
    def backoff(self) -> BackoffPolicy:
        return BackoffPolicy.from_config(self.settings.polling)


def build_services(
    settings: AppSettings,
    *,
    backend: Optional[IPersistenceBackend] = None,
    provider: Optional[IExtractionProvider] = None,
) -> Services:
    """Build every service from settings; ``backend``/``provider`` override the configured ones."""
    if backend is None:
        backend = create_persistence_backend(settings.persistence, tenant_id=settings.tenant_id)
    if provider is None:
        provider = LLMExtractionProvider(create_inference_backend(settings), settings.llm)

    attempts = settings.store.max_insert_attempts
    forms = FormStore(backend, max_insert_attempts=attempts)
    documents = DocumentStore(backend, max_insert_attempts=attempts)
    orchestrator = ExtractionOrchestrator(
        forms,
        documents,
        provider,
        scope_latest_to_patient=settings.tenancy.scope_latest_form_to_patient,
    )
    gate = UploadCompletionGate(documents, forms, orchestrator)
    log.debug("Services built (persistence=%s, model=%s)", settings.persistence.backend, settings.llm.model)
    return Services(
        settings=settings,
        backend=backend,
        forms=forms,
        documents=documents,
        provider=provider,
        orchestrator=orchestrator,
        gate=gate,
    )
