"""Persistence backend factory: picks the key/value store named in config."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from medintake.persistence.file_backend import FilePersistenceBackend
from medintake.persistence.memory_backend import MemoryPersistenceBackend
from medintake.persistence.protocols import IPersistenceBackend

if TYPE_CHECKING:
    from medintake.core.config import PersistenceConfig

log = logging.getLogger(__name__)


def create_persistence_backend(config: PersistenceConfig, *, tenant_id: str = "") -> IPersistenceBackend:
    """Create the backend named by ``config.backend``."""
    if config.backend == "memory":
        log.info("Using in-memory persistence")
        return MemoryPersistenceBackend()

    if config.backend == "s3":
        from medintake.persistence.s3_backend import S3PersistenceBackend

        log.info("Using S3 persistence: s3://%s/%s", config.s3_bucket, config.s3_prefix)
        return S3PersistenceBackend(
            bucket=config.s3_bucket,
            prefix=config.s3_prefix,
            region=config.aws_region,
            tenant_id=tenant_id,
            kms_key_id=config.kms_key_id,
        )

    log.info("Using file persistence at %s", config.store_path)
    return FilePersistenceBackend(base_path=config.store_path)
