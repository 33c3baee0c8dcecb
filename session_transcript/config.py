"""
Configuration for session-transcript-schema.

Settings are read from TRANSCRIPT_SCHEMA_* environment variables, optionally
from a .env file named by LOAD_ENV_FILE. CLI options override them per call.
"""

from __future__ import annotations

import os
import pathlib
from typing import TypeVar

import lazy_object_proxy
import pydantic
import pydantic_settings

T = TypeVar('T', bound='TranscriptSchemaSettings')


class TranscriptSchemaSettings(pydantic_settings.BaseSettings):
    """Settings for transcript validation and schema export."""

    model_config = pydantic_settings.SettingsConfigDict(
        env_prefix='TRANSCRIPT_SCHEMA_',
        env_file_encoding='utf-8',
        case_sensitive=True,  # Fail fast on misconfiguration
        extra='ignore',  # .env files may carry unrelated variables
    )

    # Application metadata
    APP_NAME: str = 'session-transcript-schema'

    # Where Claude Code keeps per-project transcript directories
    PROJECTS_DIR: pathlib.Path = pathlib.Path('~/.claude/projects')

    # Report shaping
    MAX_SAMPLES_PER_TYPE: int = 3  # Failing lines sampled per record type
    MAX_ISSUES_PER_SAMPLE: int = 3  # Issues shown per sampled line

    # Parallelism (1 = sequential)
    WORKERS: int = 1

    # Default output path for export-schema
    SCHEMA_OUTPUT: pathlib.Path = pathlib.Path('session-transcript.schema.json')

    @pydantic.field_validator('PROJECTS_DIR')
    @classmethod
    def expand_projects_dir(cls, v: pathlib.Path) -> pathlib.Path:
        """Expand ~ so the default works without a shell."""
        return v.expanduser()

    @pydantic.field_validator('MAX_SAMPLES_PER_TYPE', 'MAX_ISSUES_PER_SAMPLE')
    @classmethod
    def validate_sample_limits(cls, v: int) -> int:
        """Sample limits must be non-negative (0 disables samples)."""
        if v < 0:
            raise ValueError('sample limits must be >= 0')
        return v

    @pydantic.field_validator('WORKERS')
    @classmethod
    def validate_workers(cls, v: int) -> int:
        """Validate worker count is at least 1."""
        if v < 1:
            raise ValueError('WORKERS must be >= 1')
        return v


def get_settings(settings_class: type[T] = TranscriptSchemaSettings, env_file: str | None = None) -> T:
    """
    Factory for creating settings with dynamic .env file loading.

    LOAD_ENV_FILE environment variable specifies custom .env file path.
    When unset, loads from environment variables only.

    Args:
        settings_class: Settings class to instantiate
        env_file: Optional path to .env file (overrides LOAD_ENV_FILE)

    Returns:
        Settings instance

    Raises:
        FileNotFoundError: If specified .env file doesn't exist
    """
    env_file_path = env_file or os.getenv('LOAD_ENV_FILE')

    if not env_file_path:
        return settings_class()  # No .env file, load from environment only

    resolved_path = pathlib.Path(env_file_path).resolve()
    if not resolved_path.exists():
        raise FileNotFoundError(f'Environment file not found: {resolved_path}')

    return settings_class(_env_file=resolved_path)


def lazy_settings(settings_class: type[T] = TranscriptSchemaSettings) -> T:
    """
    Lazy settings - defers instantiation until first access.

    Args:
        settings_class: Settings class to instantiate

    Returns:
        Proxy that instantiates settings on first access
    """
    return lazy_object_proxy.Proxy(lambda: get_settings(settings_class))
