"""
Schema definitions for session-transcript-schema.

- types: foundation models (closed / passthrough / open) and shared annotations
- transcript: the session transcript shape catalog
"""

from __future__ import annotations

from session_transcript.schemas.types import (
    BaseStrictModel,
    EmptyDict,
    FieldPolicy,
    PathStr,
    PermissiveModel,
    field_policy,
)

__all__ = [
    'BaseStrictModel',
    'EmptyDict',
    'FieldPolicy',
    'PathStr',
    'PermissiveModel',
    'field_policy',
]
