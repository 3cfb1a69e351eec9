"""Answer extraction: provider call, output parsing and reconciliation."""

from __future__ import annotations

from medintake.extraction.json_parser import extract_json_object, parse_answers, strip_code_fences
from medintake.extraction.orchestrator import ExtractionOrchestrator
from medintake.extraction.provider import IExtractionProvider, LLMExtractionProvider
from medintake.extraction.reconcile import reconcile_answers

__all__ = [
    "ExtractionOrchestrator",
    "IExtractionProvider",
    "LLMExtractionProvider",
    "extract_json_object",
    "parse_answers",
    "reconcile_answers",
    "strip_code_fences",
]
