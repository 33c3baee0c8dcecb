"""
Transcript scanner - validates every line of one or more .jsonl transcripts.

Streams each file line by line, parses with orjson and hands each object to
validate_line(). Failures are bucketed by record type (JSON_PARSE_ERROR for
lines that are not JSON, UNKNOWN when the line has no usable type), with a
capped number of sample messages per bucket.

Files can be scanned sequentially or across a process pool; results are always
merged in input order so reports are deterministic.
"""

from __future__ import annotations

import functools
import math
from collections import Counter
from collections.abc import Iterable, Sequence
from concurrent.futures import ProcessPoolExecutor
from pathlib import Path
from typing import TypedDict

import orjson

from session_transcript.protocols import LoggerProtocol, NullLogger
from session_transcript.reporting import find_fallbacks, validate_line

JSON_PARSE_ERROR = 'JSON_PARSE_ERROR'
UNKNOWN_TYPE_BUCKET = 'UNKNOWN'


# ==============================================================================
# Type Definitions
# ==============================================================================


class FailureBucket(TypedDict):
    """Failures for one record type."""

    count: int
    samples: list[str]  # 'file:line → path — message; ...' (capped)


class FileScanResult(TypedDict):
    """Result of scanning a single transcript file."""

    file: str
    total_lines: int
    passed: int
    failed: int
    failures: dict[str, FailureBucket]
    fallbacks: Counter[str]  # Shape name -> number of uses


class ScanStats(TypedDict):
    """Aggregated statistics across all scanned files."""

    files: int
    total_lines: int
    passed: int
    failed: int
    pass_rate: float  # Percent, floored to 2 decimals (never overstated)
    failures: list[tuple[str, FailureBucket]]  # Sorted by count, most frequent first
    fallbacks: Counter[str]


# ==============================================================================
# Discovery
# ==============================================================================


def find_transcript_files(paths: Iterable[Path], logger: LoggerProtocol = NullLogger()) -> list[Path]:
    """
    Expand paths into the sorted list of .jsonl files to scan.

    Files are taken as given; directories are searched recursively (subagent
    transcripts live in nested subagents/ directories).
    """
    found: set[Path] = set()
    for path in paths:
        if path.is_file():
            found.add(path)
        elif path.is_dir():
            found.update(p for p in path.glob('**/*.jsonl') if p.is_file())
        else:
            logger.warning(f'Path not found: {path}')
    return sorted(found)


# ==============================================================================
# Scanning
# ==============================================================================


def _record_failure(bucket: FailureBucket, sample: str, max_samples: int) -> None:
    bucket['count'] += 1
    if len(bucket['samples']) < max_samples:
        bucket['samples'].append(sample)


def scan_file(
    path: Path,
    *,
    max_samples: int = 3,
    max_issues: int = 3,
    track_fallbacks: bool = True,
) -> FileScanResult:
    """
    Validate every line of one transcript file.

    Args:
        path: Transcript .jsonl file
        max_samples: Sample messages kept per failure bucket
        max_issues: Issues shown in each sample
        track_fallbacks: Count passthrough/open shapes in valid records

    Returns:
        Per-file counts, failure buckets and fallback counts
    """
    result: FileScanResult = {
        'file': str(path),
        'total_lines': 0,
        'passed': 0,
        'failed': 0,
        'failures': {},
        'fallbacks': Counter(),
    }

    with open(path, 'rb') as f:
        for line_num, raw_line in enumerate(f, 1):
            line = raw_line.strip()
            if not line:
                continue
            result['total_lines'] += 1

            try:
                obj = orjson.loads(line)
            except orjson.JSONDecodeError:
                result['failed'] += 1
                bucket = result['failures'].setdefault(JSON_PARSE_ERROR, {'count': 0, 'samples': []})
                preview = line[:120].decode('utf-8', errors='replace')
                _record_failure(bucket, f'{path}:{line_num} — {preview}', max_samples)
                continue

            outcome = validate_line(obj)
            if outcome.success:
                result['passed'] += 1
                if track_fallbacks:
                    result['fallbacks'].update(usage['shape'] for usage in find_fallbacks(outcome.record))
                continue

            result['failed'] += 1
            bucket = result['failures'].setdefault(outcome.type or UNKNOWN_TYPE_BUCKET, {'count': 0, 'samples': []})
            issues = outcome.error.issues if outcome.error else ()
            summary = '; '.join(f'{".".join(issue.path)} — {issue.message}' for issue in issues[:max_issues])
            _record_failure(bucket, f'{path}:{line_num} → {summary}', max_samples)

    return result


def scan_files(
    files: Sequence[Path],
    *,
    workers: int = 1,
    max_samples: int = 3,
    max_issues: int = 3,
    track_fallbacks: bool = True,
    logger: LoggerProtocol = NullLogger(),
) -> list[FileScanResult]:
    """
    Scan many files, sequentially or across a process pool.

    Results come back in the order of `files` regardless of which worker
    finished first.
    """
    scan = functools.partial(
        scan_file,
        max_samples=max_samples,
        max_issues=max_issues,
        track_fallbacks=track_fallbacks,
    )

    if workers <= 1 or len(files) <= 1:
        logger.info(f'Scanning {len(files)} file(s) sequentially')
        return [scan(path) for path in files]

    logger.info(f'Scanning {len(files)} files with {workers} workers')
    with ProcessPoolExecutor(max_workers=workers) as executor:
        return list(executor.map(scan, files))


# ==============================================================================
# Aggregation
# ==============================================================================


def format_pct(numerator: int, denominator: int, *, floor: bool) -> float:
    """Format a percentage with floor (never overstate) or ceil (never understate)."""
    if denominator == 0:
        return 0.0
    raw = numerator / denominator * 10000
    return math.floor(raw) / 100 if floor else math.ceil(raw) / 100


def aggregate(results: Iterable[FileScanResult], max_samples: int = 3) -> ScanStats:
    """
    Merge per-file results into totals.

    Samples are kept in file order up to max_samples per bucket. Buckets are
    sorted by count (ties broken by name).
    """
    files = 0
    total_lines = passed = failed = 0
    failures: dict[str, FailureBucket] = {}
    fallbacks: Counter[str] = Counter()

    for result in results:
        files += 1
        total_lines += result['total_lines']
        passed += result['passed']
        failed += result['failed']
        fallbacks.update(result['fallbacks'])
        for record_type, bucket in result['failures'].items():
            merged = failures.setdefault(record_type, {'count': 0, 'samples': []})
            merged['count'] += bucket['count']
            room = max_samples - len(merged['samples'])
            if room > 0:
                merged['samples'].extend(bucket['samples'][:room])

    return ScanStats(
        files=files,
        total_lines=total_lines,
        passed=passed,
        failed=failed,
        pass_rate=format_pct(passed, total_lines, floor=True),
        failures=sorted(failures.items(), key=lambda item: (-item[1]['count'], item[0])),
        fallbacks=fallbacks,
    )
