"""Pydantic data models for medintake.

Questions are a closed tagged union over ``answerType``.  Every model
accepts both the snake_case attribute names and the camelCase wire names,
and serializes to the wire names with ``by_alias=True``.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

AnswerType = Literal["string", "text", "boolean"]
AnswerValue = Union[bool, str, None]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── Questions ────────────────────────────────────────────────────────


class _QuestionBase(_WireModel):
    id: str = Field(min_length=1)
    text: str
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    description: Optional[str] = None
    source: Optional[str] = None

    @property
    def is_answered(self) -> bool:
        return self.answer is not None  # type: ignore[attr-defined]


class StringQuestion(_QuestionBase):
    """Short free-form answer."""

    answer_type: Literal["string"] = "string"
    answer: Optional[str] = None


class TextQuestion(_QuestionBase):
    """Long free-form answer (rendered as a text area)."""

    answer_type: Literal["text"] = "text"
    answer: Optional[str] = None


class BooleanQuestion(_QuestionBase):
    """Yes/no answer."""

    answer_type: Literal["boolean"] = "boolean"
    answer: Optional[bool] = None


Question = Annotated[
    Union[StringQuestion, TextQuestion, BooleanQuestion],
    Field(discriminator="answer_type"),
]

QUESTION_TYPES: dict[str, type[_QuestionBase]] = {
    "string": StringQuestion,
    "text": TextQuestion,
    "boolean": BooleanQuestion,
}

question_list_adapter: TypeAdapter[list[Question]] = TypeAdapter(list[Question])


def dump_questions(questions: list[Question]) -> list[dict[str, Any]]:
    """Serialize questions to the persisted/wire layout."""
    return question_list_adapter.dump_python(questions, mode="json", by_alias=True)


# ── Forms and documents ──────────────────────────────────────────────


class MedicalHistoryForm(_WireModel):
    """A persisted snapshot of the questionnaire.

    ``questions`` is ``None`` when the stored field was absent or malformed;
    callers coerce it to the template defaults.
    """

    id: int
    name: str
    patient_id: Optional[str] = None
    version: int = Field(default=1, ge=1)
    questions: Optional[list[Question]] = None
    created_at: datetime = Field(default_factory=_utcnow)


class Document(_WireModel):
    """An uploaded artifact and the description produced by upstream OCR."""

    id: int
    patient_id: Optional[str] = None
    display_name: str = ""
    raw_location: str = ""
    doc_type: Optional[str] = Field(default=None, alias="type")
    llm_output: Union[dict[str, Any], str, None] = None
    created_at: datetime = Field(default_factory=_utcnow)

    @property
    def is_ready(self) -> bool:
        """Both the content type and the OCR/vision output are present."""
        if not self.doc_type or not self.doc_type.strip():
            return False
        if isinstance(self.llm_output, str):
            return bool(self.llm_output.strip())
        return bool(self.llm_output)


# ── Extraction ───────────────────────────────────────────────────────


class ExtractedAnswer(_WireModel):
    """Provider output for a single question id."""

    answer: AnswerValue = None
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)
    source: Optional[str] = None


class DocumentDescription(_WireModel):
    """Textual rendering of one document, as sent to the provider."""

    document_id: int
    text: str


class ExtractionOutcome(_WireModel):
    """Result of one orchestrator run."""

    success: bool
    patient_id: Optional[str] = None
    form_id: Optional[int] = None
    document_count: int = 0
    answers: dict[str, ExtractedAnswer] = Field(default_factory=dict)
    message: Optional[str] = None


class CompletionResult(_WireModel):
    """Result of one upload-completion check."""

    success: bool
    message: Optional[str] = None
    processed_count: Optional[int] = None
    unprocessed_count: Optional[int] = None
    unprocessed_ids: Optional[list[int]] = None
    form_id: Optional[int] = None
    analysis_result: Optional[ExtractionOutcome] = None
    error: Optional[str] = None
    retryable: Optional[bool] = None

    @property
    def still_processing(self) -> bool:
        return not self.success and bool(self.unprocessed_count)
