"""Service layer for transcript scanning."""

from session_transcript.services.scanner import (
    FileScanResult,
    ScanStats,
    aggregate,
    find_transcript_files,
    scan_file,
    scan_files,
)

__all__ = [
    'FileScanResult',
    'ScanStats',
    'aggregate',
    'find_transcript_files',
    'scan_file',
    'scan_files',
]
