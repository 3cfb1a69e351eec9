"""Parse extraction-model output into per-question answers.

Two stages, both pure:

1. :func:`strip_code_fences` removes markdown fence wrapping.
2. :func:`parse_answers` decodes the JSON object (via
   :func:`extract_json_object`) and normalizes every value into an
   :class:`~medintake.models.ExtractedAnswer`.

Empty output (``""``, ``"{}"``, ``null``) means "no answers" and yields an
empty dict.  Output that is still not a JSON object after the fixups raises
:class:`~medintake.exceptions.ParseError`.
"""

from __future__ import annotations

import json
import logging
import math
import re
from typing import Any, Optional

from medintake.exceptions import ParseError
from medintake.models import AnswerValue, ExtractedAnswer

log = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```[ \t]*(?:json|JSON)?[ \t]*\r?\n?(.*?)\r?\n?[ \t]*```", re.DOTALL)

_MISSING = object()


def strip_code_fences(raw: str) -> str:
    """Return the body of the first fenced block, or the trimmed text when unfenced."""
    text = raw.strip()
    match = _FENCE_RE.search(text)
    if match:
        return match.group(1).strip()
    # An opening fence the model never closed
    if text.startswith("```"):
        text = text[3:]
        if text[:4].lower() == "json":
            text = text[4:]
    return text.strip()


def _is_word_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


def _apply_fixups(s: str) -> str:
    """Drop trailing commas and map bare ``None`` to ``null`` outside string literals."""
    out: list[str] = []
    in_string = False
    escape = False
    i = 0
    n = len(s)
    while i < n:
        ch = s[i]
        if in_string:
            out.append(ch)
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == '"':
                in_string = False
            i += 1
            continue
        if ch == '"':
            in_string = True
        elif ch == ",":
            j = i + 1
            while j < n and s[j].isspace():
                j += 1
            if j < n and s[j] in "}]":
                i += 1
                continue
        elif (
            s.startswith("None", i)
            and (i == 0 or not _is_word_char(s[i - 1]))
            and (i + 4 >= n or not _is_word_char(s[i + 4]))
        ):
            out.append("null")
            i += 4
            continue
        out.append(ch)
        i += 1
    return "".join(out)


def _try_parse(s: str) -> Any:
    """Attempt a JSON parse with common fixups; ``_MISSING`` when all fail."""
    s = s.strip()
    if not s:
        return _MISSING
    try:
        return json.loads(s)
    except json.JSONDecodeError:
        pass
    fixed = _apply_fixups(s)
    try:
        return json.loads(fixed)
    except json.JSONDecodeError:
        return _MISSING


def _find_balanced_object(content: str) -> Optional[str]:
    """Return the first balanced ``{...}`` span, skipping braces inside strings."""
    idx = content.find("{")
    if idx == -1:
        return None
    depth = 0
    in_string = False
    escape = False
    for i in range(idx, len(content)):
        ch = content[i]
        if escape:
            escape = False
            continue
        if ch == "\\":
            escape = True
            continue
        if ch == '"':
            in_string = not in_string
            continue
        if in_string:
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return content[idx : i + 1]
    return None


def extract_json_object(raw: Optional[str]) -> dict[str, Any]:
    """Decode the JSON object in ``raw``.

    Raises:
        ParseError: The text holds no parseable JSON, or the top-level
            value is not an object.
    """
    if raw is None:
        return {}
    text = strip_code_fences(raw)
    if not text or text == "{}":
        return {}

    result = _try_parse(text)
    if result is _MISSING:
        span = _find_balanced_object(text)
        if span is not None:
            result = _try_parse(span)
    if result is _MISSING:
        log.error(
            "Failed to parse JSON from extraction response",
            extra={"response_length": len(raw), "response_preview": raw[:200]},
        )
        raise ParseError("Extraction response is not valid JSON", raw_response=raw)

    if result is None:
        return {}
    if not isinstance(result, dict):
        raise ParseError(
            f"Extraction response must be a JSON object, got {type(result).__name__}",
            raw_response=raw,
        )
    return result


# ── value normalization ──────────────────────────────────────────────


def _normalize_answer(value: Any) -> AnswerValue:
    if value is None or isinstance(value, (bool, str)):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, list):
        parts = [str(v) for v in value if v is not None and v != ""]
        return ", ".join(parts) if parts else None
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def _normalize_confidence(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if not isinstance(value, (int, float)) or math.isnan(value):
        return None
    return min(1.0, max(0.0, float(value)))


def _normalize_source(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def normalize_answer(value: Any) -> ExtractedAnswer:
    """Turn one provider value into an :class:`ExtractedAnswer`.

    A bare value is the answer itself (confidence 1, no source).  Missing
    or non-numeric confidences default to 1 and are clamped to ``[0, 1]``.
    An unanswered value always carries confidence 0.
    """
    if isinstance(value, dict):
        answer = _normalize_answer(value.get("answer"))
        confidence = _normalize_confidence(value.get("confidence"))
        source = _normalize_source(value.get("source"))
    else:
        answer = _normalize_answer(value)
        confidence = None
        source = None

    if answer is None:
        confidence = 0.0
    elif confidence is None:
        confidence = 1.0
    return ExtractedAnswer(answer=answer, confidence=confidence, source=source)


def parse_answers(raw: Optional[str]) -> dict[str, ExtractedAnswer]:
    """Parse provider output into normalized answers keyed by question id."""
    payload = extract_json_object(raw)
    answers = {}
    for question_id, value in payload.items():
        key = str(question_id).strip()
        if not key:
            log.warning("Dropping extracted answer with an empty question id")
            continue
        answers[key] = normalize_answer(value)
    return answers
