"""Form store: persists medical-history forms and their question lists."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from medintake.exceptions import ConflictError, DataShapeError, NotFoundError
from medintake.models import MedicalHistoryForm, Question, dump_questions, question_list_adapter
from medintake.stores.base import RecordStore

log = logging.getLogger(__name__)

_FALLBACK_NAME = "Medical History"


def parse_questions(raw: Any) -> list[Question]:
    """Validate a stored ``questions`` payload against the question union.

    Raises:
        DataShapeError: The payload is absent, not a list, a JSON-encoded
            string, or holds an entry with a missing/unknown ``answerType``.
    """
    if raw is None:
        raise DataShapeError("questions field is absent")
    if isinstance(raw, str):
        raise DataShapeError("questions field is a JSON-encoded string, not a list")
    if not isinstance(raw, list):
        raise DataShapeError(f"questions field is a {type(raw).__name__}, not a list")
    try:
        return question_list_adapter.validate_python(raw)
    except PydanticValidationError as exc:
        raise DataShapeError(
            f"questions field failed validation ({exc.error_count()} errors)",
            details=str(exc),
        ) from exc


class FormStore(RecordStore):
    """CRUD over ``forms/<id>`` records.

    ``update_questions`` replaces the whole list.  Passing ``expected_version``
    turns the write into a compare-and-swap; without it the last writer wins.
    """

    collection = "forms"

    def _decode(self, payload: dict[str, Any]) -> MedicalHistoryForm:
        form_id = payload.get("id")
        questions: list[Question] | None
        try:
            questions = parse_questions(payload.get("questions"))
        except DataShapeError as exc:
            log.warning(
                "Form %s has malformed questions: %s",
                form_id,
                exc.message,
                extra={"form_id": form_id, "details": exc.details},
            )
            questions = None
        return MedicalHistoryForm(
            id=form_id,
            name=payload.get("name") or _FALLBACK_NAME,
            patient_id=payload.get("patient_id"),
            version=payload.get("version") or 1,
            questions=questions,
            created_at=payload.get("created_at") or datetime.now(timezone.utc),
        )

    async def create_form(
        self,
        name: str,
        questions: list[Question],
        *,
        patient_id: str | None = None,
    ) -> MedicalHistoryForm:
        created_at = datetime.now(timezone.utc).isoformat()
        serialized = dump_questions(questions)

        def build(form_id: int) -> dict[str, Any]:
            return {
                "id": form_id,
                "name": name,
                "patient_id": patient_id,
                "version": 1,
                "created_at": created_at,
                "questions": serialized,
            }

        payload = await self._insert(build)
        log.info(
            "Created form %d (%s) with %d questions",
            payload["id"],
            name,
            len(questions),
            extra={"form_id": payload["id"], "patient_id": patient_id},
        )
        return self._decode(payload)

    async def get_form_by_id(self, form_id: int) -> MedicalHistoryForm:
        return self._decode(await self._read(form_id))

    async def get_latest_form(self, patient_id: str | None = None) -> MedicalHistoryForm:
        """Return the most recently created form, optionally scoped to a patient."""
        for form_id in reversed(await self._record_ids()):
            payload = await self._read(form_id)
            if patient_id is None or payload.get("patient_id") == patient_id:
                return self._decode(payload)
        scope = f" for patient {patient_id}" if patient_id else ""
        raise NotFoundError(f"No medical history form found{scope}")

    async def list_forms(self, patient_id: str | None = None) -> list[MedicalHistoryForm]:
        forms = []
        for form_id in await self._record_ids():
            payload = await self._read(form_id)
            if patient_id is None or payload.get("patient_id") == patient_id:
                forms.append(self._decode(payload))
        return forms

    async def update_questions(
        self,
        form_id: int,
        questions: list[Question],
        *,
        expected_version: int | None = None,
    ) -> MedicalHistoryForm:
        async with self._update_lock:
            payload = await self._read(form_id)
            current_version = payload.get("version") or 1
            if expected_version is not None and expected_version != current_version:
                raise ConflictError(
                    f"Form {form_id} was modified concurrently "
                    f"(expected version {expected_version}, found {current_version})",
                    expected_version=expected_version,
                    actual_version=current_version,
                )

            payload["questions"] = dump_questions(questions)
            payload["version"] = current_version + 1
            await self._write(form_id, payload)
        log.info(
            "Updated questions of form %d (version %d)",
            form_id,
            payload["version"],
            extra={"form_id": form_id, "question_count": len(questions)},
        )
        return self._decode(payload)
