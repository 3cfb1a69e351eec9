"""Confidence policy and user-answer merging for the review step."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from medintake.exceptions import ValidationError
from medintake.extraction.reconcile import coerce_boolean
from medintake.models import BooleanQuestion, MedicalHistoryForm, Question

CONFIDENCE_THRESHOLD = 0.7
USER_INPUT_SOURCE = "user-input"
USER_CONFIDENCE = 1.0


def needs_review(question: Question) -> bool:
    return question.answer is None or question.confidence < CONFIDENCE_THRESHOLD


@dataclass
class ReviewPartition:
    resolved: list[Question] = field(default_factory=list)
    needs_review: list[Question] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.needs_review


def partition_questions(questions: list[Question]) -> ReviewPartition:
    """Split questions into resolved and needs-review, keeping form order."""
    partition = ReviewPartition()
    for q in questions:
        (partition.needs_review if needs_review(q) else partition.resolved).append(q)
    return partition


def is_complete(form: MedicalHistoryForm) -> bool:
    """True when every question has an answer at or above the threshold.

    A form without usable questions is never complete: it gets seeded
    with the unanswered template on review.
    """
    if not form.questions:
        return False
    return partition_questions(form.questions).complete


def confirmed_answers(form: MedicalHistoryForm, limit: Optional[int] = None) -> list[Question]:
    """Resolved questions in form order, optionally only the first ``limit``."""
    resolved = partition_questions(form.questions or []).resolved
    return resolved if limit is None else resolved[:limit]


def answer_error(question: Question, value: Any) -> Optional[str]:
    """Return why ``value`` is not an acceptable user answer, or ``None``."""
    if isinstance(question, BooleanQuestion):
        if value is None:
            return "Please answer yes or no"
        if isinstance(value, (bool, str)) and coerce_boolean(value) is not None:
            return None
        return "Please answer yes or no"
    if value is None or isinstance(value, bool):
        return "Please enter an answer"
    if isinstance(value, (int, float)):
        return None
    if not isinstance(value, str) or not value.strip():
        return "Please enter an answer"
    return None


def _user_value(question: Question, value: Any) -> Any:
    if isinstance(question, BooleanQuestion):
        return coerce_boolean(value)
    return str(value).strip()


def apply_user_answers(questions: list[Question], answers: dict[str, Any]) -> list[Question]:
    """Merge user answers into ``questions`` stamped as user-confirmed.

    Answered questions get ``confidence=1.0`` and ``source="user-input"``.
    Ids that are not in ``questions`` are ignored; the rest of the list is
    returned unchanged.

    Raises:
        ValidationError: One or more answers are empty or of the wrong kind.
    """
    by_id = {q.id: q for q in questions}
    errors = {}
    for question_id, value in answers.items():
        question = by_id.get(question_id)
        if question is None:
            continue
        problem = answer_error(question, value)
        if problem:
            errors[question_id] = problem
    if errors:
        raise ValidationError("Some answers are missing or invalid", field_errors=errors)

    merged = []
    for question in questions:
        if question.id not in answers:
            merged.append(question)
            continue
        merged.append(
            question.model_copy(
                update={
                    "answer": _user_value(question, answers[question.id]),
                    "confidence": USER_CONFIDENCE,
                    "source": USER_INPUT_SOURCE,
                }
            )
        )
    return merged
