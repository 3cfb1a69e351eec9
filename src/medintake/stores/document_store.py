"""Document store: uploaded document metadata and upstream OCR output."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from medintake.exceptions import NotFoundError
from medintake.models import Document
from medintake.stores.base import RecordStore

log = logging.getLogger(__name__)


class DocumentStore(RecordStore):
    """CRUD over ``documents/<id>`` records."""

    collection = "documents"

    def _decode(self, payload: dict[str, Any]) -> Document:
        return Document.model_validate(payload)

    def _encode(self, document: Document) -> dict[str, Any]:
        return document.model_dump(mode="json", by_alias=True)

    async def register_document(
        self,
        display_name: str,
        raw_location: str,
        *,
        patient_id: str | None = None,
    ) -> Document:
        """Insert a new document record; duplicate ids are retried with a fresh id."""
        created_at = datetime.now(timezone.utc)

        def build(document_id: int) -> dict[str, Any]:
            return self._encode(
                Document(
                    id=document_id,
                    patient_id=patient_id,
                    display_name=display_name,
                    raw_location=raw_location,
                    created_at=created_at,
                )
            )

        document = self._decode(await self._insert(build))
        log.info(
            "Registered document %d (%s) for patient %s",
            document.id,
            display_name,
            patient_id,
            extra={"document_id": document.id, "patient_id": patient_id},
        )

        # The owner must never end up empty when one was requested.
        if patient_id and not document.patient_id:
            log.warning("Document %d stored without owner, rewriting patient id", document.id)
            await self.assign_owner([document.id], patient_id)
            document = await self.get_document(document.id)
        return document

    async def record_processing_output(
        self,
        document_id: int,
        doc_type: str,
        llm_output: dict[str, Any] | str,
    ) -> Document:
        """Store the classification and description written by the OCR/vision step."""
        document = await self.get_document(document_id)
        updated = document.model_copy(update={"doc_type": doc_type, "llm_output": llm_output})
        await self._write(document_id, self._encode(updated))
        log.info("Recorded processing output for document %d (type=%s)", document_id, doc_type)
        return updated

    async def get_document(self, document_id: int) -> Document:
        return self._decode(await self._read(document_id))

    async def get_documents(
        self,
        patient_id: str | None = None,
        document_ids: list[int] | None = None,
    ) -> list[Document]:
        """Fetch documents by owner and/or explicit ids, ordered by id.

        An empty or missing id list means every document of the owner.
        """
        if document_ids:
            candidates = sorted(set(document_ids))
        else:
            candidates = await self._record_ids()

        documents = []
        for document_id in candidates:
            try:
                document = await self.get_document(document_id)
            except NotFoundError:
                log.debug("Document %d requested but not found", document_id)
                continue
            if patient_id is not None and document.patient_id != patient_id:
                continue
            documents.append(document)
        return documents

    async def assign_owner(self, document_ids: list[int], patient_id: str) -> int:
        """Force ``patient_id`` onto every listed document.

        Idempotent: documents that already carry the owner are not rewritten
        and unknown ids are skipped.  Returns the number of records changed.
        """
        changed = 0
        for document_id in sorted(set(document_ids)):
            try:
                document = await self.get_document(document_id)
            except NotFoundError:
                log.warning("Cannot assign owner to missing document %d", document_id)
                continue
            if document.patient_id == patient_id:
                continue
            if document.patient_id:
                log.warning(
                    "Reassigning document %d from patient %s to %s",
                    document_id,
                    document.patient_id,
                    patient_id,
                )
            await self._write(document_id, self._encode(document.model_copy(update={"patient_id": patient_id})))
            changed += 1
        return changed
