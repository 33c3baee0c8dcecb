"""
Persisted output wrapper for large tool results.

When a tool result is too large for inline JSONL, Claude Code replaces the
tool_result block's `content` with an XML-like wrapper and saves the full text
under `<session>/tool-results/<tool-use-id>.txt`:

    <persisted-output>
    Output too large (34.3KB). Full output saved to: /path/to/tool-results/toolu_01.txt

    Preview (first 2KB):
    ...first ~2KB of output...
    </persisted-output>

The full output is always available via the parent record's toolUseResult field
(never truncated) or via the .txt file at filePath.

Two entry points with different costs:
- is_persisted_output(): prefix check only, for callers that classify without validating
- parse_persisted_output(): full structural match, used by PersistedToolResultBlock
"""

from __future__ import annotations

import re

from session_transcript.schemas.transcript.base import StrictModel
from session_transcript.schemas.types import PathStr

PERSISTED_OUTPUT_OPEN_TAG = '<persisted-output>'
PERSISTED_OUTPUT_CLOSE_TAG = '</persisted-output>'

# Preview is captured non-greedily so it stops at the first closing tag that ends the string.
# The size label may contain parentheses; it ends at the first "). Full output saved to: ".
PERSISTED_OUTPUT_PATTERN = re.compile(
    r'<persisted-output>\n'
    r'Output too large \((?P<size>.+?)\)\. Full output saved to: (?P<path>.+?)\n'
    r'\n'
    r'Preview \(first .+?\):\n'
    r'(?P<preview>[\s\S]*?)\n'
    r'</persisted-output>'
)

# Same template for JSON Schema consumers: ECMA-262 syntax with no named groups,
# anchored at both ends
PERSISTED_OUTPUT_JSON_PATTERN = (
    r'^<persisted-output>\n'
    r'Output too large \(.+?\)\. Full output saved to: .+?\n'
    r'\n'
    r'Preview \(first .+?\):\n'
    r'[\s\S]*?\n'
    r'</persisted-output>$'
)


class PersistedOutput(StrictModel):
    """Parsed representation of a <persisted-output> wrapper."""

    sizeDescription: str  # e.g. "34.3KB"
    filePath: PathStr  # Absolute path of the saved .txt file
    preview: str  # Leading slice of the output, may span many lines


def is_persisted_output(content: str) -> bool:
    """Return True if content looks like a <persisted-output> wrapper (prefix check only)."""
    return content.startswith(PERSISTED_OUTPUT_OPEN_TAG + '\n')


def parse_persisted_output(content: str) -> PersistedOutput | None:
    """
    Parse a <persisted-output> wrapper into its components.

    Args:
        content: Raw tool_result content string

    Returns:
        PersistedOutput on a full structural match, None otherwise
    """
    if not is_persisted_output(content):
        return None
    match = PERSISTED_OUTPUT_PATTERN.fullmatch(content)
    if match is None:
        return None
    return PersistedOutput(
        sizeDescription=match['size'],
        filePath=match['path'],
        preview=match['preview'],
    )


def render_persisted_output(output: PersistedOutput, preview_size: str = '2KB') -> str:
    """
    Render a PersistedOutput back into the wrapper text Claude Code writes.

    Args:
        output: Parsed wrapper components
        preview_size: Size label shown in the "Preview (first ...)" line

    Returns:
        Wrapper string that parse_persisted_output() maps back to the same components

    Raises:
        ValueError: If sizeDescription or filePath is empty or spans lines, or sizeDescription
            contains the ". Full output saved to: " separator
    """
    if not output.sizeDescription or not output.filePath or not preview_size:
        raise ValueError('Persisted output size, path and preview size must be non-empty')
    if '\n' in output.sizeDescription or '\n' in output.filePath or '\n' in preview_size:
        raise ValueError('Persisted output size, path and preview size must be single-line')
    if '). Full output saved to: ' in output.sizeDescription:
        raise ValueError(f'Size description cannot be rendered unambiguously: {output.sizeDescription!r}')
    return (
        f'{PERSISTED_OUTPUT_OPEN_TAG}\n'
        f'Output too large ({output.sizeDescription}). Full output saved to: {output.filePath}\n'
        f'\n'
        f'Preview (first {preview_size}):\n'
        f'{output.preview}\n'
        f'{PERSISTED_OUTPUT_CLOSE_TAG}'
    )
