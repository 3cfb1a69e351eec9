"""Tests for the medintake data models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError as PydanticValidationError

from medintake.models import (
    BooleanQuestion,
    CompletionResult,
    Document,
    ExtractedAnswer,
    StringQuestion,
    dump_questions,
    question_list_adapter,
)


class TestQuestionUnion:
    def test_discriminates_on_wire_name(self) -> None:
        questions = question_list_adapter.validate_python(
            [
                {"id": "fever", "text": "Fieber?", "answerType": "boolean", "answer": True, "confidence": 0.9},
                {"id": "job", "text": "Beruf?", "answer_type": "string"},
            ]
        )
        assert isinstance(questions[0], BooleanQuestion)
        assert questions[0].answer is True
        assert isinstance(questions[1], StringQuestion)

    def test_unknown_answer_type_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            question_list_adapter.validate_python([{"id": "x", "text": "X", "answerType": "date"}])

    def test_missing_answer_type_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            question_list_adapter.validate_python([{"id": "x", "text": "X"}])

    def test_confidence_bounds(self) -> None:
        with pytest.raises(PydanticValidationError):
            StringQuestion(id="x", text="X", confidence=1.5)

    def test_dump_uses_wire_names(self) -> None:
        dumped = dump_questions([BooleanQuestion(id="fever", text="Fieber?", answer=False, confidence=0.8)])
        assert dumped == [
            {
                "id": "fever",
                "text": "Fieber?",
                "confidence": 0.8,
                "description": None,
                "source": None,
                "answerType": "boolean",
                "answer": False,
            }
        ]

    def test_is_answered(self) -> None:
        assert not StringQuestion(id="x", text="X").is_answered
        assert BooleanQuestion(id="y", text="Y", answer=False).is_answered


class TestDocument:
    def test_ready_requires_type_and_output(self) -> None:
        assert Document(id=1, doc_type="lab", llm_output={"description": "CBC"}).is_ready
        assert not Document(id=1, doc_type="lab").is_ready
        assert not Document(id=1, llm_output="text").is_ready
        assert not Document(id=1, doc_type="  ", llm_output="text").is_ready
        assert not Document(id=1, doc_type="lab", llm_output={}).is_ready
        assert not Document(id=1, doc_type="lab", llm_output="   ").is_ready

    def test_type_alias_on_the_wire(self) -> None:
        doc = Document.model_validate({"id": 3, "type": "xray", "llmOutput": "chest"})
        assert doc.doc_type == "xray"
        assert doc.model_dump(by_alias=True)["type"] == "xray"


class TestResults:
    def test_extracted_answer_defaults(self) -> None:
        answer = ExtractedAnswer(answer="x")
        assert answer.confidence == 1.0
        assert answer.source is None

    def test_still_processing(self) -> None:
        assert CompletionResult(success=False, unprocessed_count=1).still_processing
        assert not CompletionResult(success=True).still_processing
        assert not CompletionResult(success=False, unprocessed_count=0).still_processing
