#!/usr/bin/env python3
"""
Command-line interface for session-transcript-schema.

Provides commands to validate transcripts, export the JSON Schema and list the
shape catalog.
"""

from __future__ import annotations

import traceback
from pathlib import Path
from typing import Literal

import pydantic
import typer

from session_transcript.cli.logger import CLILogger
from session_transcript.config import get_settings
from session_transcript.exceptions import NoTranscriptFilesError, TranscriptSchemaError
from session_transcript.schema_export import write_json_schema
from session_transcript.schemas.transcript.catalog import list_shapes
from session_transcript.schemas.transcript.records import SCHEMA_VERSION
from session_transcript.services.scanner import ScanStats, aggregate, find_transcript_files, scan_files

app = typer.Typer(
    name='transcript-schema',
    help='Validate Claude Code session transcripts and export their JSON Schema',
    add_completion=False,
)


@app.command()
def validate(
    paths: list[Path] | None = typer.Argument(
        None, help='Transcript files or directories (default: every transcript under the projects directory)'
    ),
    projects_dir: Path | None = typer.Option(
        None, '--projects-dir', help='Projects directory to scan when no paths are given'
    ),
    samples: int | None = typer.Option(None, '--samples', '-n', min=0, help='Failing lines sampled per record type'),
    issues: int | None = typer.Option(None, '--issues', min=1, help='Issues shown per sampled line'),
    workers: int | None = typer.Option(None, '--workers', '-j', min=1, help='Parallel worker processes'),
    fallbacks: bool = typer.Option(False, '--fallbacks', help='Report passthrough/open shape usage'),
    verbose: bool = typer.Option(False, '--verbose', '-v', help='Verbose output'),
) -> None:
    """Validate every line of one or more session transcripts.

    Exits with status 1 when any line fails (or when nothing was found to scan).
    """
    logger = CLILogger(verbose=verbose)

    try:
        settings = get_settings()
        max_samples = samples if samples is not None else settings.MAX_SAMPLES_PER_TYPE
        max_issues = issues if issues is not None else settings.MAX_ISSUES_PER_SAMPLE
        search_paths = list(paths) if paths else [(projects_dir or settings.PROJECTS_DIR).expanduser()]

        files = find_transcript_files(search_paths, logger=logger)
        if not files:
            raise NoTranscriptFilesError(search_paths)
        logger.info(f'Found {len(files)} transcript file(s)')

        results = scan_files(
            files,
            workers=workers if workers is not None else settings.WORKERS,
            max_samples=max_samples,
            max_issues=max_issues,
            track_fallbacks=fallbacks,
            logger=logger,
        )
        stats = aggregate(results, max_samples=max_samples)

    except TranscriptSchemaError as e:
        typer.secho(f'Error: {e}', fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    except Exception as e:
        logger.error(f'Failed to validate transcripts: {e}')
        if verbose:
            traceback.print_exc()
        raise typer.Exit(1)

    _print_report(stats, show_fallbacks=fallbacks)
    if stats['failed'] > 0:
        raise typer.Exit(1)


def _print_report(stats: ScanStats, *, show_fallbacks: bool) -> None:
    """Print the validation summary, failure samples and fallback counts."""
    typer.secho('=== Claude Code JSONL Schema Validation ===', bold=True)
    typer.echo()
    typer.echo(f'Files scanned:  {stats["files"]}')
    typer.echo(f'Total lines:    {stats["total_lines"]}')
    typer.echo(f'  Passed:       {stats["passed"]}')
    typer.echo(f'  Failed:       {stats["failed"]}')
    typer.echo(f'  Pass rate:    {stats["pass_rate"]:.2f}%')
    typer.echo()

    if stats['failed'] > 0:
        typer.secho('--- Failures by type ---', bold=True)
        typer.echo()
        for record_type, bucket in stats['failures']:
            typer.secho(f'{record_type}: {bucket["count"]} failures', fg=typer.colors.RED)
            for sample in bucket['samples']:
                typer.echo(f'  {sample}')
            if bucket['count'] > len(bucket['samples']):
                typer.echo(f'  ... and {bucket["count"] - len(bucket["samples"])} more')
            typer.echo()

    if show_fallbacks and stats['fallbacks']:
        typer.secho('--- Passthrough / open shapes ---', bold=True)
        typer.echo()
        for shape, count in sorted(stats['fallbacks'].items(), key=lambda item: (-item[1], item[0])):
            typer.echo(f'  {shape}: {count}')
        typer.echo()

    if stats['failed'] == 0:
        typer.secho('✓ All lines validated successfully!', fg=typer.colors.GREEN)
    else:
        typer.secho(f'✗ Validation failed for {stats["failed"]} lines', fg=typer.colors.RED)


@app.command('export-schema')
def export_schema(
    output: Path | None = typer.Argument(None, help='Output .json path (default: TRANSCRIPT_SCHEMA_SCHEMA_OUTPUT)'),
) -> None:
    """Export the JSON Schema (draft 2020-12) for a transcript line."""
    try:
        output_path = output or get_settings().SCHEMA_OUTPUT
        stats = write_json_schema(output_path)
    except (OSError, pydantic.ValidationError) as e:
        typer.secho(f'Error: {e}', fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    typer.secho(f'✓ Exported JSON Schema to: {output_path}', fg=typer.colors.GREEN)
    typer.echo(f'  Schema version: {SCHEMA_VERSION}')
    typer.echo(f'  Size: {stats["size_bytes"]:,} bytes')
    typer.echo(f'  {stats["definitions"]} shape definitions')
    typer.echo(f'  {stats["tagged_unions"]} definitions with tagged unions')


@app.command()
def shapes(
    policy: Literal['closed', 'passthrough', 'open'] | None = typer.Option(
        None, '--policy', '-p', help='Only list shapes with this field policy'
    ),
) -> None:
    """List every shape in the catalog with its field policy."""
    infos = list_shapes(policy)
    width = max((len(info.name) for info in infos), default=0)
    for info in infos:
        color = typer.colors.YELLOW if info.policy != 'closed' else None
        typer.secho(f'{info.name:<{width}}  {info.policy:<11}  {info.module}', fg=color)
    typer.echo()
    typer.echo(f'{len(infos)} shapes')


def main() -> None:
    """Entry point for CLI."""
    app()


if __name__ == '__main__':
    main()
