"""Tests for the transcript-schema command line."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from session_transcript.cli.main import app

EDGE_CASES_DIR = Path(__file__).parent.parent / 'fixtures' / 'edge_cases'

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep the developer's environment out of CLI runs."""
    monkeypatch.delenv('LOAD_ENV_FILE', raising=False)
    monkeypatch.setenv('TRANSCRIPT_SCHEMA_PROJECTS_DIR', str(tmp_path / 'projects'))


def test_validate_fixtures_pass() -> None:
    result = runner.invoke(app, ['validate', str(EDGE_CASES_DIR)])

    assert result.exit_code == 0, result.output
    assert 'Failed:       0' in result.output
    assert 'All lines validated successfully' in result.output


def test_validate_reports_failures(tmp_path: Path) -> None:
    transcript = tmp_path / 'session.jsonl'
    transcript.write_text('{"type": "ghost"}\n{oops\n{"type": "summary", "summary": "s", "leafUuid": "u"}\n')

    result = runner.invoke(app, ['validate', str(transcript)])

    assert result.exit_code == 1
    assert 'Total lines:    3' in result.output
    assert 'Pass rate:    33.33%' in result.output
    assert 'ghost: 1 failures' in result.output
    assert 'JSON_PARSE_ERROR: 1 failures' in result.output
    assert 'Validation failed for 2 lines' in result.output


def test_validate_defaults_to_projects_dir(tmp_path: Path) -> None:
    project = tmp_path / 'projects' / '-home-dev-project'
    project.mkdir(parents=True)
    (project / 'session.jsonl').write_text('{"type": "summary", "summary": "s", "leafUuid": "u"}\n')

    result = runner.invoke(app, ['validate', '--verbose'])

    assert result.exit_code == 0, result.output
    assert '[INFO] Found 1 transcript file(s)' in result.output


def test_validate_no_files(tmp_path: Path) -> None:
    result = runner.invoke(app, ['validate', str(tmp_path)])

    assert result.exit_code == 1
    assert 'No .jsonl transcript files found' in result.output


def test_validate_fallbacks_section(tmp_path: Path) -> None:
    transcript = tmp_path / 'session.jsonl'
    transcript.write_bytes((EDGE_CASES_DIR / 'system_subtypes.jsonl').read_bytes())

    result = runner.invoke(app, ['validate', str(transcript), '--fallbacks'])

    assert result.exit_code == 0, result.output
    assert 'GenericSystemRecord: 1' in result.output


def test_export_schema(tmp_path: Path) -> None:
    output = tmp_path / 'schema.json'

    result = runner.invoke(app, ['export-schema', str(output)])

    assert result.exit_code == 0, result.output
    assert 'Exported JSON Schema' in result.output
    assert '$defs' in json.loads(output.read_text())


def test_shapes_filtered_by_policy() -> None:
    result = runner.invoke(app, ['shapes', '--policy', 'open'])

    assert result.exit_code == 0, result.output
    assert 'ExternalToolInput' in result.output
    assert 'BashToolInput' not in result.output
    assert '3 shapes' in result.output
