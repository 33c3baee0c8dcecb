"""Tests for settings loading."""

from __future__ import annotations

from pathlib import Path

import pydantic
import pytest

from session_transcript.config import TranscriptSchemaSettings, get_settings, lazy_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv('LOAD_ENV_FILE', raising=False)
    for name in ('PROJECTS_DIR', 'MAX_SAMPLES_PER_TYPE', 'MAX_ISSUES_PER_SAMPLE', 'WORKERS', 'SCHEMA_OUTPUT'):
        monkeypatch.delenv(f'TRANSCRIPT_SCHEMA_{name}', raising=False)


def test_defaults() -> None:
    settings = get_settings()

    assert settings.PROJECTS_DIR == Path('~/.claude/projects').expanduser()
    assert settings.MAX_SAMPLES_PER_TYPE == 3
    assert settings.MAX_ISSUES_PER_SAMPLE == 3
    assert settings.WORKERS == 1


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv('TRANSCRIPT_SCHEMA_WORKERS', '4')
    monkeypatch.setenv('TRANSCRIPT_SCHEMA_PROJECTS_DIR', '~/elsewhere')

    settings = get_settings()

    assert settings.WORKERS == 4
    assert settings.PROJECTS_DIR == Path('~/elsewhere').expanduser()


@pytest.mark.parametrize(('name', 'value'), [('WORKERS', '0'), ('MAX_SAMPLES_PER_TYPE', '-1')])
def test_invalid_values_rejected(monkeypatch: pytest.MonkeyPatch, name: str, value: str) -> None:
    monkeypatch.setenv(f'TRANSCRIPT_SCHEMA_{name}', value)

    with pytest.raises(pydantic.ValidationError):
        get_settings()


def test_env_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    env_file = tmp_path / 'test.env'
    env_file.write_text('TRANSCRIPT_SCHEMA_MAX_SAMPLES_PER_TYPE=7\nUNRELATED=1\n')
    monkeypatch.setenv('LOAD_ENV_FILE', str(env_file))

    assert get_settings().MAX_SAMPLES_PER_TYPE == 7


def test_missing_env_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        get_settings(env_file=str(tmp_path / 'missing.env'))


def test_lazy_settings_defer_loading(monkeypatch: pytest.MonkeyPatch) -> None:
    settings = lazy_settings()
    monkeypatch.setenv('TRANSCRIPT_SCHEMA_WORKERS', '3')

    assert settings.WORKERS == 3
    assert isinstance(settings, TranscriptSchemaSettings)
