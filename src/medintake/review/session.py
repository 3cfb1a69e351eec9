"""Review session: the load/validate/save state machine for one form."""

from __future__ import annotations

import enum
import logging
from typing import Any, Optional

from medintake.exceptions import ConflictError, IntakeError, NotFoundError, StorageError, ValidationError
from medintake.models import MedicalHistoryForm, Question
from medintake.questionnaire import questions_or_defaults
from medintake.review.policy import answer_error, apply_user_answers, partition_questions
from medintake.stores.form_store import FormStore

log = logging.getLogger(__name__)


class ReviewState(str, enum.Enum):
    LOADING = "loading"
    ERROR = "error"
    NO_FORM = "no_form"
    COMPLETE = "complete"
    NEEDS_REVIEW = "needs_review"
    SAVING = "saving"
    SAVED = "saved"


class ReviewSession:
    """Holds one form under review and the answers typed in so far.

    ``load`` may be called again from ``ERROR`` to retry.  A failed
    ``save`` returns the session to ``NEEDS_REVIEW`` and re-raises.
    """

    def __init__(self, form_store: FormStore) -> None:
        self._forms = form_store
        self.state = ReviewState.LOADING
        self.form: Optional[MedicalHistoryForm] = None
        self.questions: list[Question] = []
        self.error: Optional[str] = None
        self._pending: dict[str, Any] = {}

    # ── loading ──────────────────────────────────────────────────────

    async def load(self, form_id: Optional[int] = None, patient_id: Optional[str] = None) -> ReviewState:
        self.state = ReviewState.LOADING
        self.error = None
        self.form = None
        self.questions = []
        self._pending = {}

        try:
            if form_id is not None:
                form = await self._forms.get_form_by_id(form_id)
            elif patient_id:
                try:
                    form = await self._forms.get_latest_form(patient_id)
                except NotFoundError:
                    log.info("No form to review for patient %s", patient_id)
                    self.state = ReviewState.NO_FORM
                    return self.state
            else:
                self.state = ReviewState.NO_FORM
                return self.state
        except (NotFoundError, StorageError) as exc:
            log.warning("Could not load form %s for review: %s", form_id, exc.message)
            self.error = exc.message
            self.state = ReviewState.ERROR
            return self.state

        return self.open(form)

    def open(self, form: MedicalHistoryForm) -> ReviewState:
        """Start reviewing an already fetched form."""
        questions, coerced = questions_or_defaults(form.questions)
        if coerced:
            log.warning(
                "Form %d has no usable questions, reviewing template defaults",
                form.id,
                extra={"form_id": form.id},
            )
        self.form = form
        self.questions = questions
        self._pending = {q.id: q.answer for q in self.under_review}
        self.state = ReviewState.NEEDS_REVIEW if self._pending else ReviewState.COMPLETE
        return self.state

    # ── views ────────────────────────────────────────────────────────

    @property
    def under_review(self) -> list[Question]:
        return partition_questions(self.questions).needs_review

    @property
    def resolved(self) -> list[Question]:
        return partition_questions(self.questions).resolved

    @property
    def pending_answers(self) -> dict[str, Any]:
        return dict(self._pending)

    # ── editing ──────────────────────────────────────────────────────

    def set_answer(self, question_id: str, value: Any) -> None:
        if question_id not in self._pending:
            raise ValidationError(
                f"Question {question_id} is not awaiting review",
                field_errors={question_id: "Question is not awaiting review"},
            )
        self._pending[question_id] = value

    def validate(self) -> dict[str, str]:
        errors = {}
        for question in self.under_review:
            problem = answer_error(question, self._pending.get(question.id))
            if problem:
                errors[question.id] = problem
        return errors

    # ── saving ───────────────────────────────────────────────────────

    async def save(self, *, expected_version: Optional[int] = None) -> MedicalHistoryForm:
        """Persist the reviewed answers as user-confirmed.

        ``expected_version`` defaults to the version that was loaded, so a
        write that happened in between raises :class:`ConflictError`.
        """
        if self.state is not ReviewState.NEEDS_REVIEW or self.form is None:
            raise IntakeError(f"Cannot save a review in state {self.state.value}")

        errors = self.validate()
        if errors:
            raise ValidationError(
                f"{len(errors)} questions still need an answer", field_errors=errors
            )

        self.state = ReviewState.SAVING
        try:
            updated = apply_user_answers(self.questions, self._pending)
            saved = await self._forms.update_questions(
                self.form.id,
                updated,
                expected_version=expected_version if expected_version is not None else self.form.version,
            )
        except (ValidationError, ConflictError, StorageError, NotFoundError):
            self.state = ReviewState.NEEDS_REVIEW
            raise

        log.info("Saved %d reviewed answers to form %d", len(self._pending), saved.id)
        self.form = saved
        self.questions = list(saved.questions or updated)
        self.state = ReviewState.SAVED
        return saved
