"""CLI for medintake: questionnaire, upload completion, analysis and review."""

from __future__ import annotations

import asyncio
import dataclasses
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from medintake.core.config import AppSettings
from medintake.core.startup_checks import validate_settings
from medintake.exceptions import IntakeError, ProcessingTimeout
from medintake.gate.polling import wait_for_completion
from medintake.logging_config import setup_logging
from medintake.models import Question
from medintake.questionnaire import TEMPLATE_VERSION, get_default_questions
from medintake.review.session import ReviewSession, ReviewState
from medintake.services import Services, build_services

app = typer.Typer(name="medintake", help="Patient-intake document extraction and review")
console = Console()


def _settings(verbose: bool) -> AppSettings:
    settings = AppSettings()
    if verbose:
        settings.observability.log_level = "DEBUG"
    setup_logging(settings.observability)
    return settings


def _services(verbose: bool, *, needs_model: bool = True) -> Services:
    settings = _settings(verbose)
    if needs_model:
        try:
            validate_settings(settings)
        except ValueError as exc:
            console.print(f"[red]{exc}[/red]")
            raise typer.Exit(code=2) from exc
    return build_services(settings)


def _format_answer(question: Question) -> str:
    if question.answer is None:
        return "[dim]-[/dim]"
    if isinstance(question.answer, bool):
        return "yes" if question.answer else "no"
    return question.answer


def _question_table(title: str, questions: list[Question]) -> Table:
    table = Table(title=title)
    table.add_column("ID", style="cyan")
    table.add_column("Question")
    table.add_column("Type")
    table.add_column("Answer")
    table.add_column("Confidence", justify="right")
    table.add_column("Source")
    for q in questions:
        table.add_row(
            q.id,
            q.text,
            q.answer_type,
            _format_answer(q),
            f"{q.confidence:.2f}",
            q.source or "",
        )
    return table


def _fail(exc: IntakeError) -> None:
    console.print(f"[red]{type(exc).__name__}: {exc.message}[/red]")
    if exc.details:
        console.print(f"[dim]{exc.details}[/dim]")
    raise typer.Exit(code=1)


@app.command()
def questions() -> None:
    """Print the default questionnaire."""
    defaults = get_default_questions()
    console.print(_question_table(f"Questionnaire {TEMPLATE_VERSION}", defaults))
    console.print(f"\nTotal questions: {len(defaults)}")


@app.command("complete-uploads")
def complete_uploads(
    patient_id: str = typer.Argument(..., help="Patient who owns the documents"),
    document_ids: list[int] = typer.Argument(..., help="Document ids of the upload batch"),
    max_attempts: Optional[int] = typer.Option(None, help="Override the number of polling attempts"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Wait until every document is processed, then extract answers into a new form."""
    services = _services(verbose)
    policy = services.backoff
    if max_attempts:
        policy = dataclasses.replace(policy, max_attempts=max_attempts)

    try:
        result = asyncio.run(wait_for_completion(services.gate, patient_id, document_ids, policy))
    except ProcessingTimeout as exc:
        console.print(f"[yellow]{exc.message}; still unprocessed: {exc.unprocessed_ids}[/yellow]")
        raise typer.Exit(code=1) from exc
    except IntakeError as exc:
        _fail(exc)
        return

    if result.error:
        retry_hint = " (retryable)" if result.retryable else ""
        console.print(f"[yellow]Form {result.form_id} created but extraction failed{retry_hint}: {result.error}[/yellow]")
        return

    console.print(f"[green]{result.message}[/green]")
    console.print(f"Form: {result.form_id}")
    if result.analysis_result:
        console.print(f"Answers extracted: {len(result.analysis_result.answers)}")


@app.command()
def analyze(
    patient_id: str = typer.Argument(..., help="Patient whose documents are analyzed"),
    doc: Optional[list[int]] = typer.Option(None, "--doc", help="Restrict to these document ids"),
    form_id: Optional[int] = typer.Option(None, "--form-id", help="Target form (default: latest)"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Run answer extraction for a patient's processed documents."""
    services = _services(verbose)
    try:
        outcome = asyncio.run(services.orchestrator.run(patient_id, doc or None, form_id=form_id))
    except IntakeError as exc:
        _fail(exc)
        return

    if not outcome.success:
        console.print(f"[yellow]{outcome.message}[/yellow]")
        return

    table = Table(title=f"Extracted answers (form {outcome.form_id})")
    table.add_column("Question", style="cyan")
    table.add_column("Answer")
    table.add_column("Confidence", justify="right")
    table.add_column("Source")
    for question_id, answer in outcome.answers.items():
        table.add_row(question_id, str(answer.answer), f"{answer.confidence:.2f}", answer.source or "")
    console.print(table)
    console.print(f"\nDocuments analyzed: {outcome.document_count}")


@app.command()
def review(
    form_id: int = typer.Argument(..., help="Form to review"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Show the questions of a form that still need human review."""
    services = _services(verbose, needs_model=False)
    session = ReviewSession(services.forms)
    state = asyncio.run(session.load(form_id=form_id))

    if state is ReviewState.ERROR:
        console.print(f"[red]{session.error}[/red]")
        raise typer.Exit(code=1)
    if state is ReviewState.COMPLETE:
        console.print(f"[green]Form {form_id} is complete: every answer is confirmed.[/green]")
        return

    console.print(_question_table(f"Form {form_id}: needs review", session.under_review))
    console.print(
        f"\n{len(session.under_review)} of {len(session.questions)} questions need review"
    )


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address (default from MEDINTAKE_API_HOST)"),
    port: Optional[int] = typer.Option(None, help="Port (default from MEDINTAKE_API_PORT)"),
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    settings = AppSettings()
    uvicorn.run(
        "medintake.api.app:create_app",
        factory=True,
        host=host or settings.api.host,
        port=port or settings.api.port,
    )


if __name__ == "__main__":
    app()
