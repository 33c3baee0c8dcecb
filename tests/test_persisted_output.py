"""Tests for the <persisted-output> wrapper transform."""

from __future__ import annotations

import pytest

from session_transcript.schemas.transcript.persisted_output import (
    PersistedOutput,
    is_persisted_output,
    parse_persisted_output,
    render_persisted_output,
)


@pytest.mark.parametrize(
    'output',
    [
        PersistedOutput(sizeDescription='34.3KB', filePath='/tmp/tool-results/toolu_01.txt', preview='ok'),
        PersistedOutput(sizeDescription='1.2MB', filePath='/a b/c (1).txt', preview='line 1\nline 2\n\nline 4'),
        PersistedOutput(sizeDescription='2KB', filePath='/x.txt', preview=''),
        PersistedOutput(sizeDescription='5KB', filePath='/x.txt', preview='<persisted-output>\nnested opener'),
        PersistedOutput(sizeDescription='1KB (approx)', filePath='/x.txt', preview='p'),
        PersistedOutput(sizeDescription='3KB', filePath='/out/a). Full.txt', preview='p'),
    ],
    ids=['single-line', 'multi-line', 'empty-preview', 'opener-in-preview', 'parens-in-size', 'separator-like-path'],
)
def test_render_then_parse_recovers_components(output: PersistedOutput) -> None:
    rendered = render_persisted_output(output)

    assert is_persisted_output(rendered)
    assert parse_persisted_output(rendered) == output


def test_render_uses_preview_size_label() -> None:
    output = PersistedOutput(sizeDescription='10KB', filePath='/x.txt', preview='abc')

    rendered = render_persisted_output(output, preview_size='4KB')

    assert rendered == (
        '<persisted-output>\n'
        'Output too large (10KB). Full output saved to: /x.txt\n'
        '\n'
        'Preview (first 4KB):\n'
        'abc\n'
        '</persisted-output>'
    )


@pytest.mark.parametrize(
    'content',
    [
        'plain tool output',
        '',
        ' <persisted-output>\n',
        '<persisted-output>',
        '<persisted-output> same line',
    ],
)
def test_prefix_check_rejects_non_wrappers(content: str) -> None:
    assert not is_persisted_output(content)
    assert parse_persisted_output(content) is None


@pytest.mark.parametrize(
    'content',
    [
        '<persisted-output>\nsomething else\n</persisted-output>',
        '<persisted-output>\nOutput too large (3KB). Full output saved to: /x.txt\n\nPreview (first 2KB):\nabc',
        '<persisted-output>\nOutput too large (3KB). Full output saved to: /x.txt\nPreview (first 2KB):\nabc\n</persisted-output>',
        '<persisted-output>\nOutput too large (3KB). Full output saved to: /x.txt\n\nPreview (first 2KB):\nabc\n</persisted-output>\ntrailing',
    ],
    ids=['wrong-body', 'no-closing-tag', 'no-blank-line', 'trailing-text'],
)
def test_prefix_match_without_template_match(content: str) -> None:
    """The cheap check only looks at the opener; the full parse needs the whole template."""
    assert is_persisted_output(content)
    assert parse_persisted_output(content) is None


def test_preview_stops_at_final_closing_tag() -> None:
    content = (
        '<persisted-output>\n'
        'Output too large (3KB). Full output saved to: /x.txt\n'
        '\n'
        'Preview (first 2KB):\n'
        'a\n'
        '</persisted-output>\n'
        'b\n'
        '</persisted-output>'
    )

    parsed = parse_persisted_output(content)

    assert parsed is not None
    assert parsed.preview == 'a\n</persisted-output>\nb'


@pytest.mark.parametrize(
    ('output', 'preview_size'),
    [
        (PersistedOutput(sizeDescription='', filePath='/x.txt', preview='p'), '2KB'),
        (PersistedOutput(sizeDescription='3KB', filePath='', preview='p'), '2KB'),
        (PersistedOutput(sizeDescription='3\nKB', filePath='/x.txt', preview='p'), '2KB'),
        (PersistedOutput(sizeDescription='3KB', filePath='/x\n.txt', preview='p'), '2KB'),
        (PersistedOutput(sizeDescription='3KB). Full output saved to: /y', filePath='/x.txt', preview='p'), '2KB'),
        (PersistedOutput(sizeDescription='3KB', filePath='/x.txt', preview='p'), ''),
    ],
    ids=['empty-size', 'empty-path', 'multi-line-size', 'multi-line-path', 'separator-in-size', 'empty-preview-size'],
)
def test_render_rejects_components_that_cannot_parse_back(output: PersistedOutput, preview_size: str) -> None:
    with pytest.raises(ValueError):
        render_persisted_output(output, preview_size=preview_size)
