"""Tests for the typer CLI."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from medintake.cli.main import app

runner = CliRunner()


@pytest.fixture
def file_store(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("MEDINTAKE_PERSISTENCE_BACKEND", "file")
    monkeypatch.setenv("MEDINTAKE_PERSISTENCE_STORE_PATH", str(tmp_path))
    return tmp_path


def test_questions_lists_template() -> None:
    result = runner.invoke(app, ["questions"])
    assert result.exit_code == 0
    assert "Total questions: 65" in result.output


def test_review_unknown_form(file_store: Path) -> None:
    result = runner.invoke(app, ["review", "3"])
    assert result.exit_code == 1
    assert "Form 3 not found" in result.output


def test_analyze_requires_api_key(file_store: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MEDINTAKE_LLM_PROVIDER", "openai")
    monkeypatch.setenv("MEDINTAKE_LLM_API_KEY", "no-key")
    result = runner.invoke(app, ["analyze", "patient-1"])
    assert result.exit_code == 2
    assert "MEDINTAKE_LLM_API_KEY" in result.output


def test_analyze_without_documents(file_store: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MEDINTAKE_LLM_API_KEY", "sk-test")
    result = runner.invoke(app, ["analyze", "patient-1"])
    assert result.exit_code == 0
    assert "No processed documents" in result.output
