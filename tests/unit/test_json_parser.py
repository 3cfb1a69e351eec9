"""Tests for extraction output parsing and answer normalization."""

from __future__ import annotations

import pytest

from medintake.exceptions import ParseError
from medintake.extraction.json_parser import (
    extract_json_object,
    normalize_answer,
    parse_answers,
    strip_code_fences,
)

# ── strip_code_fences ────────────────────────────────────────────────


class TestStripCodeFences:
    def test_json_fence(self) -> None:
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_plain_fence(self) -> None:
        assert strip_code_fences('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_fence_inside_prose(self) -> None:
        raw = 'Here are the answers:\n```json\n{"a": 1}\n```\nLet me know!'
        assert strip_code_fences(raw) == '{"a": 1}'

    def test_unclosed_fence(self) -> None:
        assert strip_code_fences('```json\n{"a": 1}') == '{"a": 1}'

    def test_unfenced_text_is_trimmed(self) -> None:
        assert strip_code_fences('  {"a": 1}\n') == '{"a": 1}'


# ── extract_json_object ──────────────────────────────────────────────


class TestExtractJsonObject:
    @pytest.mark.parametrize("raw", [None, "", "   \n", "{}", "```json\n{}\n```", "null"])
    def test_empty_outputs_mean_no_answers(self, raw: str | None) -> None:
        assert extract_json_object(raw) == {}

    def test_bare_json(self) -> None:
        assert extract_json_object('{"fever": {"answer": true}}') == {"fever": {"answer": True}}

    def test_prose_wrapped_object(self) -> None:
        raw = 'Sure! {"allergies": {"answer": "Penicillin {severe}"}} Hope this helps.'
        assert extract_json_object(raw) == {"allergies": {"answer": "Penicillin {severe}"}}

    def test_trailing_commas_and_python_none(self) -> None:
        raw = '{"fever": {"answer": None, "confidence": 0,},}'
        assert extract_json_object(raw) == {"fever": {"answer": None, "confidence": 0}}

    def test_none_inside_strings_survives_when_json_is_valid(self) -> None:
        raw = '{"medications": {"answer": "None known"}}'
        assert extract_json_object(raw)["medications"]["answer"] == "None known"

    def test_fixups_leave_string_literals_alone(self) -> None:
        raw = '{"allergies": {"answer": "None known", "confidence": 0.9,},}'
        assert parse_answers(raw)["allergies"].answer == "None known"

    def test_commas_inside_strings_survive_fixups(self) -> None:
        raw = '{"drugs": {"answer": "No, none", "source": "list: a,]",}, "fever": None,}'
        parsed = extract_json_object(raw)
        assert parsed["drugs"] == {"answer": "No, none", "source": "list: a,]"}
        assert parsed["fever"] is None

    def test_not_json_raises_parse_error(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            extract_json_object("not json at all")
        assert exc_info.value.raw_response == "not json at all"

    def test_top_level_array_rejected(self) -> None:
        with pytest.raises(ParseError, match="must be a JSON object"):
            extract_json_object('[{"fever": true}]')

    def test_top_level_scalar_rejected(self) -> None:
        with pytest.raises(ParseError):
            extract_json_object("42")

    def test_truncated_object_raises(self) -> None:
        with pytest.raises(ParseError):
            extract_json_object('{"fever": {"answer": true, "confidence": 0.9')


# ── normalize_answer ─────────────────────────────────────────────────


class TestNormalizeAnswer:
    def test_bare_value_is_the_answer(self) -> None:
        answer = normalize_answer("Penicillin")
        assert answer.answer == "Penicillin"
        assert answer.confidence == 1.0
        assert answer.source is None

    def test_missing_confidence_defaults_to_one(self) -> None:
        answer = normalize_answer({"answer": True, "source": "doc-3"})
        assert answer.confidence == 1.0
        assert answer.source == "doc-3"

    def test_confidence_clamped(self) -> None:
        assert normalize_answer({"answer": "x", "confidence": 1.7}).confidence == 1.0
        assert normalize_answer({"answer": "x", "confidence": -0.2}).confidence == 0.0

    def test_numeric_string_confidence(self) -> None:
        assert normalize_answer({"answer": "x", "confidence": "0.45"}).confidence == 0.45

    def test_non_numeric_confidence_treated_as_missing(self) -> None:
        assert normalize_answer({"answer": "x", "confidence": "high"}).confidence == 1.0

    def test_numeric_source_stringified(self) -> None:
        assert normalize_answer({"answer": "x", "source": 12}).source == "12"

    def test_null_answer_has_zero_confidence(self) -> None:
        answer = normalize_answer({"answer": None, "confidence": 0.8, "source": None})
        assert answer.answer is None
        assert answer.confidence == 0.0

    def test_list_answer_joined(self) -> None:
        answer = normalize_answer({"answer": ["Ibuprofen", "Metformin"], "confidence": 0.9})
        assert answer.answer == "Ibuprofen, Metformin"

    def test_number_answer_becomes_text(self) -> None:
        assert normalize_answer({"answer": 3}).answer == "3"


# ── parse_answers ────────────────────────────────────────────────────


class TestParseAnswers:
    def test_fenced_response(self) -> None:
        raw = '```json\n{"fever": {"answer": true, "confidence": 0.92, "source": "doc-12"}}\n```'
        answers = parse_answers(raw)
        assert set(answers) == {"fever"}
        assert answers["fever"].answer is True
        assert answers["fever"].confidence == 0.92
        assert answers["fever"].source == "doc-12"

    def test_empty_object(self) -> None:
        assert parse_answers("{}") == {}

    def test_blank_keys_dropped(self) -> None:
        assert parse_answers('{"  ": "x", "fever": true}').keys() == {"fever"}

    def test_parse_error_propagates(self) -> None:
        with pytest.raises(ParseError):
            parse_answers("not json at all")
