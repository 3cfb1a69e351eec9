"""Shared plumbing for JSON record stores on top of a persistence backend."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Callable, TypeVar

from medintake.exceptions import NotFoundError, StorageError
from medintake.persistence.protocols import IPersistenceBackend

log = logging.getLogger(__name__)

T = TypeVar("T")

_COUNTER_PREFIX = "_counters/"


class RecordStore:
    """Stores one JSON object per record under ``<collection>/<zero-padded id>``.

    Ids come from a counter key and are strictly increasing, so the lexical
    key order is also the creation order.  Backend calls run in a worker
    thread; every backend failure surfaces as :class:`StorageError`.
    """

    collection: str = ""
    _ID_WIDTH = 10

    def __init__(self, backend: IPersistenceBackend, *, max_insert_attempts: int = 3) -> None:
        self._backend = backend
        self._max_insert_attempts = max_insert_attempts
        self._insert_lock = asyncio.Lock()
        self._update_lock = asyncio.Lock()

    # ── keys ─────────────────────────────────────────────────────────

    def _key(self, record_id: int) -> str:
        return f"{self.collection}/{record_id:0{self._ID_WIDTH}d}"

    def _id_from_key(self, key: str) -> int | None:
        tail = key.rsplit("/", 1)[-1]
        return int(tail) if tail.isdigit() else None

    # ── backend access ───────────────────────────────────────────────

    async def _call(self, operation: str, fn: Callable[..., T], *args: Any) -> T:
        try:
            return await asyncio.to_thread(fn, *args)
        except KeyError:
            raise
        except Exception as exc:
            raise StorageError(
                f"Failed to {operation} in {self.collection} store: {exc}",
                details=type(exc).__name__,
            ) from exc

    async def _read(self, record_id: int) -> dict[str, Any]:
        key = self._key(record_id)
        try:
            raw = await self._call("read record", self._backend.load, key)
        except KeyError:
            raise NotFoundError(f"{self.collection[:-1].capitalize()} {record_id} not found") from None
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise StorageError(f"Corrupt record {key}: {exc}") from exc
        if not isinstance(payload, dict):
            raise StorageError(f"Corrupt record {key}: expected a JSON object")
        return payload

    async def _write(self, record_id: int, payload: dict[str, Any]) -> None:
        await self._call("write record", self._backend.save, self._key(record_id), json.dumps(payload))

    async def _record_ids(self) -> list[int]:
        keys = await self._call("list records", self._backend.list_keys, f"{self.collection}/")
        ids = (self._id_from_key(k) for k in keys)
        return sorted(i for i in ids if i is not None)

    # ── inserts ──────────────────────────────────────────────────────

    def _next_id(self) -> int:
        counter_key = f"{_COUNTER_PREFIX}{self.collection}"
        try:
            current = int(self._backend.load(counter_key))
        except KeyError:
            existing = [self._id_from_key(k) for k in self._backend.list_keys(f"{self.collection}/")]
            current = max((i for i in existing if i is not None), default=0)
        next_id = current + 1
        self._backend.save(counter_key, str(next_id))
        return next_id

    async def _insert(self, build: Callable[[int], dict[str, Any]]) -> dict[str, Any]:
        """Allocate an id and write ``build(id)``; a taken id is retried with a fresh one."""
        async with self._insert_lock:
            for attempt in range(1, self._max_insert_attempts + 1):
                record_id = await self._call("allocate id", self._next_id)
                if await self._call("check id", self._backend.exists, self._key(record_id)):
                    log.warning(
                        "Duplicate %s id %d on insert (attempt %d/%d), retrying with a new id",
                        self.collection,
                        record_id,
                        attempt,
                        self._max_insert_attempts,
                    )
                    continue
                payload = build(record_id)
                await self._write(record_id, payload)
                return payload
        raise StorageError(
            f"Could not allocate a unique {self.collection} id after "
            f"{self._max_insert_attempts} attempts"
        )
