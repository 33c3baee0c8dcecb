"""
Export a JSON Schema document from the transcript catalog.

The document is derived from the Pydantic models (TypeAdapter.json_schema), never
written by hand, so it cannot drift from what validate_line() enforces. Nested
shapes live in $defs under their model names and are shared by reference.

Other tools can consume it for:
- TypeScript type generation
- Cross-language validation of transcripts
- Documentation
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, TypedDict

import pydantic

from session_transcript.schemas.transcript.auxiliary import AUXILIARY_MODELS
from session_transcript.schemas.transcript.records import (
    CLAUDE_CODE_MAX_VERSION,
    CLAUDE_CODE_MIN_VERSION,
    SCHEMA_VERSION,
    TranscriptLine,
)

JSON_SCHEMA_DIALECT = 'https://json-schema.org/draft/2020-12/schema'
SCHEMA_TITLE = 'Claude Code Session Transcript Line'
SCHEMA_DESCRIPTION = (
    'Schema for a single JSONL line in a Claude Code session transcript. Each line is one of '
    '7 types: summary, file-history-snapshot, user, assistant, system, progress, or queue-operation.'
)


class SchemaStats(TypedDict):
    """Counts reported after an export."""

    definitions: int
    tagged_unions: int
    size_bytes: int


def build_json_schema() -> dict[str, Any]:
    """
    Build the JSON Schema document for a transcript line.

    SessionIndex and HistoryEntry (auxiliary files) are merged into $defs.
    Building twice yields identical documents.
    """
    schema = pydantic.TypeAdapter(TranscriptLine).json_schema(mode='validation')
    defs: dict[str, Any] = dict(schema.pop('$defs', {}))

    for model in AUXILIARY_MODELS:
        aux_schema = model.model_json_schema(mode='validation')
        for name, definition in aux_schema.pop('$defs', {}).items():
            defs.setdefault(name, definition)
        defs.setdefault(model.__name__, aux_schema)

    document: dict[str, Any] = {
        '$schema': JSON_SCHEMA_DIALECT,
        'title': SCHEMA_TITLE,
        'description': SCHEMA_DESCRIPTION,
        'x-schema-version': SCHEMA_VERSION,
        'x-claude-code-compatibility': {
            'min': CLAUDE_CODE_MIN_VERSION,
            'max': CLAUDE_CODE_MAX_VERSION,
        },
    }
    document.update(schema)
    document['$defs'] = {name: defs[name] for name in sorted(defs)}
    return document


def render_json_schema(schema: dict[str, Any] | None = None) -> str:
    """Serialize the schema document (2-space indent, trailing newline)."""
    return json.dumps(schema if schema is not None else build_json_schema(), indent=2, ensure_ascii=False) + '\n'


def write_json_schema(output_path: Path) -> SchemaStats:
    """
    Write the schema document to a file.

    Args:
        output_path: Destination .json file (parent directories are created)

    Returns:
        Counts describing the written document
    """
    schema = build_json_schema()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(render_json_schema(schema), encoding='utf-8')

    definitions = schema.get('$defs', {})
    return SchemaStats(
        definitions=len(definitions),
        tagged_unions=sum(1 for definition in definitions.values() if _has_tagged_union(definition)),
        size_bytes=output_path.stat().st_size,
    )


def _has_tagged_union(definition: Any) -> bool:
    """True when a definition (or anything nested in it) is a oneOf over tagged shapes."""
    if isinstance(definition, dict):
        if 'oneOf' in definition:
            return True
        return any(_has_tagged_union(value) for value in definition.values())
    if isinstance(definition, list):
        return any(_has_tagged_union(item) for item in definition)
    return False
