"""
Shared exceptions for session-transcript-schema.

Data problems in a transcript line are never raised: validate_line() returns them
as a LineValidationResult. Exceptions are reserved for callers that ask for a
raising API (parse_line) and for failures around the data (missing files).

Exception Hierarchy:
    TranscriptSchemaError (base)
    ├── TranscriptValidationError (parse_line on an invalid line)
    └── TranscriptDiscoveryError (transcript file lookup failures)
        └── NoTranscriptFilesError (nothing to validate)
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from session_transcript.reporting import LineValidationResult


class TranscriptSchemaError(Exception):
    """Base exception for all session-transcript-schema errors."""


class TranscriptValidationError(TranscriptSchemaError):
    """Raised by parse_line() when a line does not validate."""

    def __init__(self, result: LineValidationResult) -> None:
        self.result = result
        error = result.error
        kind = error.kind if error else 'unknown'
        issues = error.issues if error else []
        lines = [f"{'.'.join(issue.path) or '<root>'}: {issue.message}" for issue in issues[:5]]
        if len(issues) > 5:
            lines.append(f'... and {len(issues) - 5} more')
        record_type = result.type or '?'
        super().__init__(f'Invalid {record_type} line ({kind}):\n  ' + '\n  '.join(lines))


class TranscriptDiscoveryError(TranscriptSchemaError):
    """Base exception for transcript file lookup failures."""


class NoTranscriptFilesError(TranscriptDiscoveryError):
    """Raised when no .jsonl transcripts are found under the given paths."""

    def __init__(self, paths: Sequence[Path]) -> None:
        self.paths = list(paths)
        paths_str = ', '.join(str(p) for p in self.paths) or '<none>'
        super().__init__(f'No .jsonl transcript files found in: {paths_str}')
