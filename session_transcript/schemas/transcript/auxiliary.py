"""
Auxiliary files that live next to session transcripts.

- sessions-index.json: per-project index of sessions (SessionIndex)
- history.jsonl: global prompt history, one HistoryEntry per line

Neither is a transcript line; both are exported into the JSON Schema $defs so
consumers can validate them with the same document.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from session_transcript.schemas.transcript.base import StrictModel
from session_transcript.schemas.types import PathStr


class SessionIndexEntry(StrictModel):
    """One session in sessions-index.json."""

    sessionId: str
    fullPath: PathStr
    fileMtime: int | float  # Milliseconds since epoch
    firstPrompt: str
    summary: str
    messageCount: int
    created: str
    modified: str
    gitBranch: str
    projectPath: PathStr
    isSidechain: bool


class SessionIndex(StrictModel):
    """Contents of a project's sessions-index.json."""

    version: int
    entries: Sequence[SessionIndexEntry]
    originalPath: PathStr


class InlinePastedContent(StrictModel):
    """Pasted text stored inline in history.jsonl."""

    id: int
    type: str
    content: str


class HashedPastedContent(StrictModel):
    """Pasted text stored out of line and referenced by hash."""

    id: int
    type: str
    contentHash: str


class HistoryEntry(StrictModel):
    """One line of history.jsonl."""

    display: str
    pastedContents: Mapping[str, InlinePastedContent | HashedPastedContent]
    timestamp: int | float  # Milliseconds since epoch
    project: PathStr


AUXILIARY_MODELS: Sequence[type[StrictModel]] = (SessionIndex, HistoryEntry)
