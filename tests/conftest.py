"""Shared fixtures for medintake tests."""

from __future__ import annotations

import pytest

from medintake.core.config import AppSettings, LLMConfig, PersistenceConfig, TenancyConfig
from medintake.extraction.orchestrator import ExtractionOrchestrator
from medintake.gate.completion import UploadCompletionGate
from medintake.stores.document_store import DocumentStore
from medintake.stores.form_store import FormStore
from tests.fakes.fake_extraction import FakeExtractionProvider
from tests.fakes.fake_persistence import FakePersistenceBackend


@pytest.fixture
def backend() -> FakePersistenceBackend:
    return FakePersistenceBackend()


@pytest.fixture
def form_store(backend: FakePersistenceBackend) -> FormStore:
    return FormStore(backend)


@pytest.fixture
def document_store(backend: FakePersistenceBackend) -> DocumentStore:
    return DocumentStore(backend)


@pytest.fixture
def provider() -> FakeExtractionProvider:
    return FakeExtractionProvider()


@pytest.fixture
def orchestrator(
    form_store: FormStore,
    document_store: DocumentStore,
    provider: FakeExtractionProvider,
) -> ExtractionOrchestrator:
    return ExtractionOrchestrator(form_store, document_store, provider)


@pytest.fixture
def gate(
    document_store: DocumentStore,
    form_store: FormStore,
    orchestrator: ExtractionOrchestrator,
) -> UploadCompletionGate:
    return UploadCompletionGate(document_store, form_store, orchestrator)


@pytest.fixture
def settings() -> AppSettings:
    """Memory-backed settings with a dummy key, no env required."""
    return AppSettings(
        llm=LLMConfig(provider="openai", api_key="sk-test"),
        persistence=PersistenceConfig(backend="memory"),
        tenancy=TenancyConfig(),
    )

