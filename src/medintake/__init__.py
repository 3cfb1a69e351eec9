"""medintake: patient-intake document extraction and review."""

from __future__ import annotations

from medintake.models import (
    BooleanQuestion,
    CompletionResult,
    Document,
    ExtractedAnswer,
    ExtractionOutcome,
    MedicalHistoryForm,
    Question,
    StringQuestion,
    TextQuestion,
)
from medintake.questionnaire import get_default_questions

__version__ = "0.1.0"

__all__ = [
    "BooleanQuestion",
    "CompletionResult",
    "Document",
    "ExtractedAnswer",
    "ExtractionOutcome",
    "MedicalHistoryForm",
    "Question",
    "StringQuestion",
    "TextQuestion",
    "get_default_questions",
]
