"""Merge extracted answers into a form's question list."""

from __future__ import annotations

import logging
import re
from typing import Optional

from medintake.models import (
    AnswerValue,
    BooleanQuestion,
    ExtractedAnswer,
    Question,
    StringQuestion,
)

log = logging.getLogger(__name__)

NEW_QUESTION_DESCRIPTION = "Information extracted from document"

_SEPARATORS_RE = re.compile(r"[_\-/.\s]+")

_TRUE_WORDS = frozenset({"true", "yes", "y", "ja", "j", "1", "positive", "positiv"})
_FALSE_WORDS = frozenset({"false", "no", "n", "nein", "0", "negative", "negativ", "none", "keine"})


def humanize_question_id(question_id: str) -> str:
    """``family_heart-attack`` -> ``Family Heart Attack``."""
    words = [w for w in _SEPARATORS_RE.split(question_id) if w]
    if not words:
        return question_id
    return " ".join(w[:1].upper() + w[1:] for w in words)


def coerce_boolean(value: AnswerValue) -> Optional[bool]:
    """Map ``True``/``"yes"``/``"ja"`` style values to a bool; ``None`` when unclear."""
    if value is None or isinstance(value, bool):
        return value
    word = value.strip().lower().rstrip(".!")
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    return None


def coerce_text(value: AnswerValue) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        return "Yes" if value else "No"
    text = value.strip()
    return text or None


def _apply(question: Question, extracted: ExtractedAnswer) -> Question:
    if isinstance(question, BooleanQuestion):
        answer = coerce_boolean(extracted.answer)
        if answer is None and extracted.answer is not None:
            log.warning(
                "Extracted answer %r for boolean question %s is not a yes/no value; leaving it for review",
                extracted.answer,
                question.id,
            )
    else:
        answer = coerce_text(extracted.answer)

    confidence = extracted.confidence if answer is not None else 0.0
    return question.model_copy(
        update={"answer": answer, "confidence": confidence, "source": extracted.source}
    )


def reconcile_answers(
    questions: list[Question],
    answers: dict[str, ExtractedAnswer],
) -> list[Question]:
    """Return a new question list with ``answers`` merged in.

    Questions without an extracted entry are carried over as the same
    objects.  Ids not present in the form are appended as new string
    questions, in the order the provider returned them.
    """
    merged: list[Question] = []
    known: set[str] = set()
    for question in questions:
        known.add(question.id)
        extracted = answers.get(question.id)
        merged.append(question if extracted is None else _apply(question, extracted))

    for question_id, extracted in answers.items():
        if question_id in known:
            continue
        known.add(question_id)
        new_question = StringQuestion(
            id=question_id,
            text=humanize_question_id(question_id),
            description=NEW_QUESTION_DESCRIPTION,
        )
        merged.append(_apply(new_question, extracted))
        log.info("Added question %s from extraction output", question_id)
    return merged
