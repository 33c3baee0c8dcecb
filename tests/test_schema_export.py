"""Tests for the JSON Schema export."""

from __future__ import annotations

import json
import re
from pathlib import Path

from session_transcript.schema_export import (
    JSON_SCHEMA_DIALECT,
    build_json_schema,
    render_json_schema,
    write_json_schema,
)
from session_transcript.schemas.transcript import (
    PERSISTED_OUTPUT_JSON_PATTERN,
    SCHEMA_VERSION,
    PersistedOutput,
    render_persisted_output,
)


def test_export_is_deterministic() -> None:
    """Building twice yields byte-identical documents."""
    assert render_json_schema(build_json_schema()) == render_json_schema(build_json_schema())


def test_metadata() -> None:
    schema = build_json_schema()

    assert schema['$schema'] == JSON_SCHEMA_DIALECT
    assert schema['x-schema-version'] == SCHEMA_VERSION
    assert set(schema['x-claude-code-compatibility']) == {'min', 'max'}
    assert schema['title']
    assert 'anyOf' in schema


def test_defs_sorted_and_named_by_shape() -> None:
    defs = build_json_schema()['$defs']

    assert list(defs) == sorted(defs)
    for name in (
        'SummaryRecord',
        'ToolResultRecord',
        'GenericSystemRecord',
        'PersistedToolResultBlock',
        'BashToolInput',
        'ExternalToolUseResult',
        'SessionIndex',
        'SessionIndexEntry',
        'HistoryEntry',
    ):
        assert name in defs, name


def test_nested_shapes_are_shared_by_reference() -> None:
    """Usage appears once in $defs and is referenced from both places that use it."""
    document = render_json_schema()

    assert document.count('"$ref": "#/$defs/Usage"') >= 2


def test_field_policies_in_schema() -> None:
    defs = build_json_schema()['$defs']

    assert defs['SummaryRecord']['additionalProperties'] is False
    assert defs['GenericSystemRecord'].get('additionalProperties', True) is not False
    assert defs['ExternalToolInput'].get('additionalProperties', True) is not False


def test_wire_aliases_in_schema() -> None:
    defs = build_json_schema()['$defs']

    assert {'-A', '-B', '-C', '-i', '-n'} <= set(defs['GrepToolInput']['properties'])
    assert '_simulatedSedEdit' in defs['BashToolInput']['properties']
    assert 'from' in defs['StatusChange']['properties']


def test_persisted_content_is_a_patterned_string() -> None:
    content = build_json_schema()['$defs']['PersistedToolResultBlock']['properties']['content']

    assert content['type'] == 'string'
    assert content['pattern'] == PERSISTED_OUTPUT_JSON_PATTERN


def test_persisted_pattern_is_portable_and_anchored() -> None:
    """The exported pattern avoids Python-only group syntax and matches only whole wrappers."""
    pattern = build_json_schema()['$defs']['PersistedToolResultBlock']['properties']['content']['pattern']
    wrapper = render_persisted_output(
        PersistedOutput(sizeDescription='1KB (approx)', filePath='/tmp/tool-results/toolu_1.txt', preview='a\nb')
    )

    assert '(?P<' not in pattern
    assert pattern.startswith('^')
    assert pattern.endswith('$')
    assert re.search(pattern, wrapper)
    assert re.search(pattern, 'junk before ' + wrapper) is None
    assert re.search(pattern, wrapper + ' junk after') is None


def test_write_json_schema(tmp_path: Path) -> None:
    output = tmp_path / 'nested' / 'transcript.schema.json'

    stats = write_json_schema(output)

    text = output.read_text(encoding='utf-8')
    assert text.endswith('}\n')
    assert json.loads(text) == build_json_schema()
    assert stats['size_bytes'] == output.stat().st_size
    assert stats['definitions'] == len(json.loads(text)['$defs'])
    assert stats['tagged_unions'] > 0
