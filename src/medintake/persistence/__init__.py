"""Pluggable key/value persistence backends for forms and documents."""

from __future__ import annotations

from medintake.persistence.factory import create_persistence_backend
from medintake.persistence.file_backend import FilePersistenceBackend
from medintake.persistence.memory_backend import MemoryPersistenceBackend
from medintake.persistence.protocols import IPersistenceBackend

__all__ = [
    "IPersistenceBackend",
    "FilePersistenceBackend",
    "MemoryPersistenceBackend",
    "create_persistence_backend",
]
