"""Upload completion gate: wait for a batch to be processed, then extract."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from medintake.exceptions import IntakeError, StorageError, TransientProviderError, ValidationError
from medintake.extraction.orchestrator import ExtractionOrchestrator
from medintake.models import CompletionResult
from medintake.questionnaire import DEFAULT_FORM_NAME, get_default_questions
from medintake.stores.document_store import DocumentStore
from medintake.stores.form_store import FormStore

log = logging.getLogger(__name__)

STILL_PROCESSING_MESSAGE = "Some documents still processing"
COMPLETED_MESSAGE = "All uploads processed and analysis completed"
EXTRACTION_FAILED_MESSAGE = "Uploads processed but answer extraction failed"


def batch_form_name(now: datetime | None = None) -> str:
    stamp = (now or datetime.now(timezone.utc)).strftime("%Y-%m-%d %H:%M:%S UTC")
    return f"{DEFAULT_FORM_NAME} {stamp}"


class UploadCompletionGate:
    """Readiness check in front of the :class:`ExtractionOrchestrator`.

    Each completed batch gets a brand new form.  Any failure after the form exists still
    returns ``success=True`` with the form id so the empty form can be
    filled in by hand.
    """

    def __init__(
        self,
        document_store: DocumentStore,
        form_store: FormStore,
        orchestrator: ExtractionOrchestrator,
    ) -> None:
        self._documents = document_store
        self._forms = form_store
        self._orchestrator = orchestrator

    async def check_and_trigger(self, patient_id: str, document_ids: list[int]) -> CompletionResult:
        if not patient_id:
            raise ValidationError("patientId is required", field_errors={"patientId": "required"})
        if not document_ids:
            raise ValidationError(
                "documentIds must be a non-empty list",
                field_errors={"documentIds": "must not be empty"},
            )

        requested = sorted(set(document_ids))
        reassigned = await self._documents.assign_owner(requested, patient_id)
        if reassigned:
            log.info("Reassigned %d documents to patient %s", reassigned, patient_id)

        documents = await self._documents.get_documents(patient_id, requested)
        ready_ids = {d.id for d in documents if d.is_ready}
        unprocessed_ids = [i for i in requested if i not in ready_ids]

        if unprocessed_ids:
            log.info(
                "%d of %d documents still processing for patient %s",
                len(unprocessed_ids),
                len(requested),
                patient_id,
                extra={"unprocessed_ids": unprocessed_ids},
            )
            return CompletionResult(
                success=False,
                message=STILL_PROCESSING_MESSAGE,
                processed_count=len(ready_ids),
                unprocessed_count=len(unprocessed_ids),
                unprocessed_ids=unprocessed_ids,
            )

        form = await self._forms.create_form(
            batch_form_name(), get_default_questions(), patient_id=patient_id
        )
        log.info(
            "All %d documents processed for patient %s, analyzing into form %d",
            len(requested),
            patient_id,
            form.id,
        )

        try:
            outcome = await self._orchestrator.run(patient_id, requested, form_id=form.id)
        except IntakeError as exc:
            retryable = isinstance(exc, (TransientProviderError, StorageError))
            log.error(
                "Analysis failed for patient %s, form %d (retryable=%s): %s",
                patient_id,
                form.id,
                retryable,
                exc.message,
            )
            return CompletionResult(
                success=True,
                message=EXTRACTION_FAILED_MESSAGE,
                processed_count=len(requested),
                unprocessed_count=0,
                form_id=form.id,
                error=exc.message,
                retryable=retryable,
            )

        return CompletionResult(
            success=True,
            message=COMPLETED_MESSAGE,
            processed_count=len(requested),
            unprocessed_count=0,
            form_id=form.id,
            analysis_result=outcome,
        )
