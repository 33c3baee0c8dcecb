"""Tests for the transcript scanner service."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from session_transcript.services.scanner import (
    JSON_PARSE_ERROR,
    UNKNOWN_TYPE_BUCKET,
    aggregate,
    find_transcript_files,
    format_pct,
    scan_file,
    scan_files,
)


class RecordingLogger:
    """LoggerProtocol implementation that keeps every message."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def info(self, message: str) -> None:
        self.messages.append(('info', message))

    def warning(self, message: str) -> None:
        self.messages.append(('warning', message))

    def error(self, message: str) -> None:
        self.messages.append(('error', message))


def write_jsonl(path: Path, lines: list[Any]) -> Path:
    """Write raw strings as-is and everything else as JSON, one per line."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text('\n'.join(line if isinstance(line, str) else json.dumps(line) for line in lines) + '\n')
    return path


SUMMARY = {'type': 'summary', 'summary': 'Fix tests', 'leafUuid': 'u-1'}
QUEUE = {'type': 'queue-operation', 'operation': 'enqueue', 'timestamp': '2026-01-20T10:00:00Z', 'sessionId': 's'}


# ==============================================================================
# Discovery
# ==============================================================================


def test_find_transcript_files(tmp_path: Path) -> None:
    """Directories are searched recursively (subagent files), files taken as given, missing paths warned about."""
    session = write_jsonl(tmp_path / 'proj' / 'b.jsonl', [SUMMARY])
    subagent = write_jsonl(tmp_path / 'proj' / 'b' / 'subagents' / 'agent-1.jsonl', [SUMMARY])
    other = write_jsonl(tmp_path / 'other' / 'a.jsonl', [SUMMARY])
    (tmp_path / 'proj' / 'notes.txt').write_text('not a transcript')
    logger = RecordingLogger()

    found = find_transcript_files([tmp_path / 'proj', other, other, tmp_path / 'missing'], logger=logger)

    assert found == sorted([session, subagent, other])
    assert logger.messages == [('warning', f'Path not found: {tmp_path / "missing"}')]


# ==============================================================================
# Scanning
# ==============================================================================


def test_scan_file_counts_and_buckets(tmp_path: Path) -> None:
    path = write_jsonl(
        tmp_path / 's.jsonl',
        [
            SUMMARY,
            '',
            '{not json',
            {'type': 'summary', 'summary': 'x'},
            {'no': 'type'},
            {'type': 'ghost'},
            QUEUE,
        ],
    )

    result = scan_file(path)

    assert result['total_lines'] == 6  # blank line skipped
    assert result['passed'] == 2
    assert result['failed'] == 4
    assert result['failures'][JSON_PARSE_ERROR] == {'count': 1, 'samples': [f'{path}:3 — {{not json'])}
    assert result['failures']['summary'] == {'count': 1, 'samples': [f'{path}:4 → leafUuid — Field required']}
    assert result['failures'][UNKNOWN_TYPE_BUCKET]['count'] == 1
    assert result['failures']['ghost']['samples'] == [f'{path}:6 → type — Unknown type: ghost']


def test_scan_file_caps_samples_and_issues(tmp_path: Path) -> None:
    bad = {'type': 'summary', 'a': 1, 'b': 2, 'c': 3, 'd': 4}
    path = write_jsonl(tmp_path / 's.jsonl', [bad] * 5)

    result = scan_file(path, max_samples=2, max_issues=1)

    bucket = result['failures']['summary']
    assert bucket['count'] == 5
    assert len(bucket['samples']) == 2
    assert all(sample.count(' — ') == 1 for sample in bucket['samples'])


def test_scan_file_tracks_fallbacks(tmp_path: Path, envelope: dict[str, Any]) -> None:
    system = {**envelope, 'type': 'system', 'subtype': 'frobnicate', 'extra': 1}
    path = write_jsonl(tmp_path / 's.jsonl', [system, system, SUMMARY])

    assert scan_file(path)['fallbacks'] == {'GenericSystemRecord': 2}
    assert scan_file(path, track_fallbacks=False)['fallbacks'] == {}


@pytest.mark.parametrize('workers', [1, 2])
def test_scan_files_preserves_input_order(tmp_path: Path, workers: int) -> None:
    files = [write_jsonl(tmp_path / f'{i}.jsonl', [SUMMARY] * (i + 1)) for i in range(3)]

    results = scan_files(files, workers=workers)

    assert [r['file'] for r in results] == [str(f) for f in files]
    assert [r['total_lines'] for r in results] == [1, 2, 3]


def test_scan_files_logs_mode(tmp_path: Path) -> None:
    files = [write_jsonl(tmp_path / 'a.jsonl', [SUMMARY])]
    logger = RecordingLogger()

    scan_files(files, logger=logger)

    assert logger.messages == [('info', 'Scanning 1 file(s) sequentially')]


# ==============================================================================
# Aggregation
# ==============================================================================


def test_aggregate_merges_in_file_order(tmp_path: Path) -> None:
    first = write_jsonl(tmp_path / 'a.jsonl', [SUMMARY, '{bad', '{bad'])
    second = write_jsonl(tmp_path / 'b.jsonl', ['{bad', {'type': 'ghost'}, QUEUE])

    stats = aggregate([scan_file(first), scan_file(second)], max_samples=2)

    assert stats['files'] == 2
    assert stats['total_lines'] == 6
    assert stats['passed'] == 2
    assert stats['failed'] == 4
    assert stats['pass_rate'] == 33.33
    assert [name for name, _ in stats['failures']] == [JSON_PARSE_ERROR, 'ghost']
    parse_errors = dict(stats['failures'])[JSON_PARSE_ERROR]
    assert parse_errors['count'] == 3
    assert parse_errors['samples'] == [f'{first}:2 — {{bad', f'{first}:3 — {{bad']


def test_aggregate_empty() -> None:
    stats = aggregate([])

    assert stats['files'] == 0
    assert stats['pass_rate'] == 0.0
    assert stats['failures'] == []


@pytest.mark.parametrize(
    ('numerator', 'denominator', 'floor', 'expected'),
    [
        (2, 3, True, 66.66),
        (2, 3, False, 66.67),
        (1, 1, True, 100.0),
        (999_999, 1_000_000, True, 99.99),
        (0, 0, True, 0.0),
    ],
)
def test_format_pct(numerator: int, denominator: int, floor: bool, expected: float) -> None:
    assert format_pct(numerator, denominator, floor=floor) == expected
