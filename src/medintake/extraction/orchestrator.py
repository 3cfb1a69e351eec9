"""Extraction orchestrator: documents -> provider -> parsed answers -> form."""

from __future__ import annotations

import logging
from typing import Optional

from medintake.exceptions import IntakeError, NotFoundError
from medintake.extraction.descriptions import build_document_descriptions
from medintake.extraction.json_parser import parse_answers
from medintake.extraction.provider import IExtractionProvider
from medintake.extraction.reconcile import reconcile_answers
from medintake.models import ExtractionOutcome, MedicalHistoryForm
from medintake.questionnaire import DEFAULT_FORM_NAME, get_default_questions, questions_or_defaults
from medintake.stores.document_store import DocumentStore
from medintake.stores.form_store import FormStore

log = logging.getLogger(__name__)

NO_DOCUMENTS_MESSAGE = "No processed documents found for this patient"


class ExtractionOrchestrator:
    """Run one extraction pass for a patient and persist the merged answers.

    No retries happen here.  Provider and parse failures are logged with
    the patient, form and document ids and then propagate.
    """

    def __init__(
        self,
        form_store: FormStore,
        document_store: DocumentStore,
        provider: IExtractionProvider,
        *,
        scope_latest_to_patient: bool = True,
    ) -> None:
        self._forms = form_store
        self._documents = document_store
        self._provider = provider
        self._scope_latest_to_patient = scope_latest_to_patient

    async def _resolve_form(self, patient_id: str, form_id: Optional[int]) -> MedicalHistoryForm:
        if form_id is not None:
            return await self._forms.get_form_by_id(form_id)
        scope = patient_id if self._scope_latest_to_patient else None
        try:
            return await self._forms.get_latest_form(scope)
        except NotFoundError:
            log.info("No medical history form for patient %s, creating one", patient_id)
            return await self._forms.create_form(
                DEFAULT_FORM_NAME, get_default_questions(), patient_id=patient_id
            )

    async def run(
        self,
        patient_id: str,
        document_ids: Optional[list[int]] = None,
        form_id: Optional[int] = None,
    ) -> ExtractionOutcome:
        documents = await self._documents.get_documents(patient_id, document_ids)
        ready = [d for d in documents if d.is_ready]
        if len(ready) < len(documents):
            log.warning(
                "Skipping %d documents without processing output for patient %s",
                len(documents) - len(ready),
                patient_id,
                extra={"document_ids": [d.id for d in documents if not d.is_ready]},
            )
        if not ready:
            log.info("No processed documents for patient %s", patient_id)
            return ExtractionOutcome(
                success=False,
                patient_id=patient_id,
                form_id=form_id,
                message=NO_DOCUMENTS_MESSAGE,
            )

        form = await self._resolve_form(patient_id, form_id)

        questions, coerced = questions_or_defaults(form.questions)
        if coerced:
            log.warning(
                "Form %d had no usable questions, seeding template defaults",
                form.id,
                extra={"form_id": form.id, "patient_id": patient_id},
            )

        descriptions = build_document_descriptions(ready)
        doc_ids = [d.document_id for d in descriptions]
        log.info(
            "Analyzing %d documents for patient %s into form %d",
            len(descriptions),
            patient_id,
            form.id,
        )

        try:
            raw = await self._provider.extract(questions, descriptions)
            answers = parse_answers(raw)
        except IntakeError as exc:
            log.error(
                "Extraction failed for patient %s, form %d, documents %s: %s",
                patient_id,
                form.id,
                doc_ids,
                exc.message,
                extra={"error_type": type(exc).__name__},
            )
            raise

        if answers or coerced:
            merged = reconcile_answers(questions, answers)
            await self._forms.update_questions(form.id, merged)
            log.info("Stored %d extracted answers in form %d", len(answers), form.id)
        else:
            log.info("No answers extracted for form %d, leaving it unchanged", form.id)

        return ExtractionOutcome(
            success=True,
            patient_id=patient_id,
            form_id=form.id,
            document_count=len(descriptions),
            answers=answers,
        )
