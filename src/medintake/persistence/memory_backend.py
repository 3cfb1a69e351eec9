"""In-memory persistence backend for tests and single-process demos."""

from __future__ import annotations

import logging
import threading

log = logging.getLogger(__name__)


class MemoryPersistenceBackend:
    """Keeps every record in a dict; nothing survives a restart.

    Record stores call the backend from worker threads, so every access
    goes through one lock.
    """

    def __init__(self) -> None:
        self._records: dict[str, str] = {}
        self._lock = threading.Lock()

    def save(self, key: str, data: str) -> None:
        with self._lock:
            self._records[key] = data
        log.debug("Stored %s in memory (%d bytes)", key, len(data))

    def load(self, key: str) -> str:
        with self._lock:
            try:
                return self._records[key]
            except KeyError:
                raise KeyError(f"No in-memory record for {key}") from None

    def exists(self, key: str) -> bool:
        with self._lock:
            return key in self._records

    def delete(self, key: str) -> None:
        with self._lock:
            self._records.pop(key, None)

    def list_keys(self, prefix: str = "") -> list[str]:
        with self._lock:
            return sorted(k for k in self._records if k.startswith(prefix))
