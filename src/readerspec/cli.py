"""CLI entry point for readerspec."""

import sys
import time
from pathlib import Path

import click

from readerspec.checker import check_documents
from readerspec.config import Settings
from readerspec.errors import DocumentNotFoundError
from readerspec.llm import LlmClient
from readerspec.logging_utils import configure_logging
from readerspec.translator.service import TranslationService
from readerspec.watcher import FileWatcher


def _build_service(settings: Settings, model: str | None, api_key: str | None) -> TranslationService:
    client = LlmClient(
        model=model or settings.model,
        temperature=settings.temperature,
        max_tokens=settings.max_tokens,
        api_key=api_key or settings.api_key,
    )
    return TranslationService(client=client, extension=settings.extension)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging.")
@click.pass_context
def main(ctx: click.Context, verbose: bool):
    """readerspec: validate and AI-translate .readerspec.md resource descriptions."""
    settings = Settings()
    configure_logging("DEBUG" if verbose else settings.log_level)
    ctx.obj = settings


@main.command()
@click.option("-s", "--specs", default=None, type=click.Path(path_type=Path), help="Path to specs directory.")
@click.pass_obj
def check(settings: Settings, specs: Path | None):
    """Validate every .readerspec.md document against the schema."""
    specs = specs or settings.specs_path
    click.echo(f"Checking specs in {specs}...")
    try:
        report = check_documents(specs, settings.extension)
    except DocumentNotFoundError as e:
        raise click.ClickException(str(e))

    if not report.outcomes:
        click.echo(f"No *{settings.extension} files found.")
        return

    click.echo(f"Found {len(report.outcomes)} spec file(s).")
    for outcome in report.outcomes:
        if outcome.is_valid:
            click.echo(f"  {outcome.name}: valid")
        else:
            click.echo(f"  {outcome.name}: {len(outcome.errors)} error(s)")
            for error in outcome.errors:
                click.echo(f"    - {error}")
        for warning in outcome.warnings:
            click.echo(f"    warning: {warning}")
        for suggestion in outcome.suggestions:
            click.echo(f"    suggestion: {suggestion}")

    click.echo(f"Valid specs: {report.valid_count}")
    click.echo(f"Invalid specs: {report.invalid_count}")
    click.echo(f"Total errors: {report.total_errors}")
    if not report.ok:
        sys.exit(1)


@main.command()
@click.option("-f", "--file", "file_path", default=None, type=click.Path(exists=True, path_type=Path), help="Translate a single document.")
@click.option("-s", "--specs", default=None, type=click.Path(path_type=Path), help="Path to specs directory.")
@click.option("-w", "--watch", is_flag=True, help="Watch for changes and translate automatically.")
@click.option("-m", "--model", default=None, help="LLM model to use.")
@click.option("-k", "--api-key", default=None, help="Completion service API key (or set READERSPEC_API_KEY).")
@click.pass_obj
def translate(settings: Settings, file_path: Path | None, specs: Path | None, watch: bool, model: str | None, api_key: str | None):
    """Translate human-readable sections into the readerspec JSON block."""
    service = _build_service(settings, model, api_key)
    specs = specs or settings.specs_path

    if watch:
        watcher = FileWatcher(service, [specs], delay=settings.debounce_seconds, extension=settings.extension)
        watcher.start()
        click.echo(f"Watching {specs} for changes. Press Ctrl+C to stop.")
        try:
            while watcher.is_watching:
                time.sleep(1)
        except KeyboardInterrupt:
            click.echo("Shutting down file watcher...")
        finally:
            watcher.stop()
        return

    if file_path:
        result = service.translate_and_update(file_path)
        if not result.success:
            raise click.ClickException(f"Translation failed: {result.error}")
        click.echo(f"Translated {file_path}")
        if result.confidence is not None:
            click.echo(f"Translation confidence: {result.confidence * 100:.1f}%")
        return

    click.echo(f"Translating all *{settings.extension} files in {specs}...")
    try:
        summary = service.translate_all(specs)
    except DocumentNotFoundError as e:
        raise click.ClickException(str(e))

    for path, result in summary.results.items():
        if result.success:
            click.echo(f"  Success: {path}")
        else:
            click.echo(f"  Failed: {path} - {result.error}")

    click.echo(f"Successful: {summary.success_count}")
    click.echo(f"Failed: {summary.failure_count}")
    click.echo(f"Total files: {len(summary.results)}")
    if summary.failure_count:
        sys.exit(1)
