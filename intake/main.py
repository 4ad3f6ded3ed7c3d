"""Command-line entry point for the translation intake engine.

Usage:
    intake analyze brochure.docx
    intake quote brochure.docx --lang French --lang German
    intake submit brochure.docx --lang French --wait
"""

import asyncio
from collections.abc import Coroutine
from pathlib import Path
from typing import Any, Optional

import typer

from intake.analysis.exceptions import AnalysisError
from intake.analysis.models import DocumentAnalysis, UploadedFile
from intake.config.settings import Settings
from intake.logging.logger import Log
from intake.pricing.calculator import CalculationSummary
from intake.session.session import IntakeSession, build_session
from intake.submission.exceptions import SubmissionError
from intake.workflow.exceptions import WorkflowError

app = typer.Typer(
    name="intake",
    help="Submit documents for translation and wait for completion.",
    add_completion=False,
)


def _load_upload(path: Path) -> UploadedFile:
    if not path.is_file():
        typer.echo(f"File not found: {path}", err=True)
        raise typer.Exit(code=2)
    return UploadedFile(file_name=path.name, content=path.read_bytes())


def _print_analysis(analysis: DocumentAnalysis) -> None:
    typer.echo(f"File:            {analysis.file_name}")
    typer.echo(f"Format:          {analysis.file_format.value}")
    typer.echo(f"Size:            {analysis.file_size_bytes} bytes")
    typer.echo(f"Words:           {analysis.word_count}")
    typer.echo(f"Characters:      {analysis.char_count}")
    typer.echo(f"Images w/ text:  {analysis.images_with_text}")
    typer.echo(f"Source language: {analysis.source_language}")
    typer.echo(f"Subject matter:  {analysis.subject_matter}")


def _print_summary(summary: CalculationSummary) -> None:
    typer.echo(f"Total chars:     {summary.total_chars}")
    typer.echo(f"Credits:         {summary.credits_required}")
    typer.echo(f"Total cost:      {summary.formatted_cost}")


async def _open_session() -> IntakeSession:
    settings = Settings()
    Log.configure(settings.log_level)
    return await build_session(settings)


async def _analyze(path: Path) -> None:
    async with await _open_session() as session:
        workflow = await session.start_workflow(_load_upload(path))
        if workflow.request is not None:
            _print_analysis(workflow.request.analysis)


async def _quote(path: Path, languages: list[str]) -> None:
    async with await _open_session() as session:
        workflow = await session.start_workflow(_load_upload(path))
        session.select_languages(workflow, languages)
        _print_summary(session.complete_selection(workflow))


async def _submit(
    path: Path,
    languages: list[str],
    project: str | None,
    wait: bool,
    timeout: float,
) -> None:
    async with await _open_session() as session:
        workflow = await session.start_workflow(_load_upload(path), project_name=project)
        session.select_languages(workflow, languages)
        _print_summary(session.complete_selection(workflow))
        job_id = await session.submit_request(workflow)
        typer.echo(f"Submitted job {job_id}")
        if not wait:
            return

        async def _await_completion() -> None:
            async for feed in session.subscribe_notifications():
                for notification in feed:
                    if notification.job_id == job_id:
                        typer.echo(f"{notification.title}: {notification.message}")
                        return

        try:
            await asyncio.wait_for(_await_completion(), timeout=timeout)
        except asyncio.TimeoutError:
            typer.echo(f"Job {job_id} still pending after {timeout:.0f}s", err=True)
            raise typer.Exit(code=1)


def _run(coro: Coroutine[Any, Any, None]) -> None:
    try:
        asyncio.run(coro)
    except (AnalysisError, WorkflowError, SubmissionError) as exc:
        typer.echo(f"{type(exc).__name__}: {exc}", err=True)
        raise typer.Exit(code=1) from exc


@app.command()
def analyze(path: Path = typer.Argument(..., help="Document to analyze")) -> None:
    """Analyze a document and print its statistics."""
    _run(_analyze(path))


@app.command()
def quote(
    path: Path = typer.Argument(..., help="Document to price"),
    lang: list[str] = typer.Option(..., "--lang", "-l", help="Target language (repeatable)"),
) -> None:
    """Analyze a document and price it for the given target languages."""
    _run(_quote(path, lang))


@app.command()
def submit(
    path: Path = typer.Argument(..., help="Document to translate"),
    lang: list[str] = typer.Option(..., "--lang", "-l", help="Target language (repeatable)"),
    project: Optional[str] = typer.Option(None, "--project", "-p", help="Project name"),
    wait: bool = typer.Option(True, "--wait/--no-wait", help="Wait for the completion notification"),
    timeout: float = typer.Option(3600.0, "--timeout", help="Seconds to wait for completion"),
) -> None:
    """Run the full intake workflow and submit the translation job."""
    _run(_submit(path, lang, project, wait, timeout))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
