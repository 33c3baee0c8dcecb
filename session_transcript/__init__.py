"""
Validate and normalize Claude Code session transcripts.

Every line of a session transcript (~/.claude/projects/<project>/<session>.jsonl)
is one JSON record. validate_line() checks a parsed line against the shape
catalog and reports every violation with a plain field path; build_json_schema()
exports the same catalog as a JSON Schema document.
"""

from __future__ import annotations

from session_transcript.exceptions import (
    NoTranscriptFilesError,
    TranscriptDiscoveryError,
    TranscriptSchemaError,
    TranscriptValidationError,
)
from session_transcript.reporting import (
    LineError,
    LineValidationResult,
    ValidationIssue,
    find_fallbacks,
    parse_line,
    to_report,
    validate_line,
)
from session_transcript.schema_export import build_json_schema, render_json_schema, write_json_schema
from session_transcript.schemas.transcript.records import (
    CLAUDE_CODE_MAX_VERSION,
    CLAUDE_CODE_MIN_VERSION,
    SCHEMA_VERSION,
)

__all__ = [
    'CLAUDE_CODE_MAX_VERSION',
    'CLAUDE_CODE_MIN_VERSION',
    'SCHEMA_VERSION',
    'LineError',
    'LineValidationResult',
    'ValidationIssue',
    'find_fallbacks',
    'parse_line',
    'to_report',
    'validate_line',
    'build_json_schema',
    'render_json_schema',
    'write_json_schema',
    'NoTranscriptFilesError',
    'TranscriptDiscoveryError',
    'TranscriptSchemaError',
    'TranscriptValidationError',
]
