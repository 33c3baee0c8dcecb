"""
Record dispatch: pick the one shape that must validate a raw transcript line.

Dispatch looks at observable features of the line and never tries whole-record
shapes in sequence. A closed shape that rejects an extra field must report that
field, not hand the line to a broader sibling that happens to accept it.

    type                     -> shape
    summary                  -> SummaryRecord
    file-history-snapshot    -> FileHistorySnapshotRecord
    assistant                -> AssistantRecord
    progress                 -> ProgressRecord
    queue-operation          -> QueueOperationRecord
    user                     -> resolve_user_model()
    system                   -> resolve_system_model()
    anything else            -> None (unknown type)
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

import pydantic

from session_transcript.schemas.transcript.records import (
    ApiErrorSystemRecord,
    AssistantRecord,
    CompactBoundarySystemRecord,
    FileHistorySnapshotRecord,
    GenericSystemRecord,
    HumanPromptRecord,
    LocalCommandSystemRecord,
    MicrocompactBoundarySystemRecord,
    ProgressRecord,
    QueueOperationRecord,
    RichContentRecord,
    SummaryRecord,
    ToolResultRecord,
    TurnDurationSystemRecord,
)

# Record types whose `type` value maps to exactly one shape
SIMPLE_RECORD_MODELS: Mapping[str, type[pydantic.BaseModel]] = MappingProxyType(
    {
        'summary': SummaryRecord,
        'file-history-snapshot': FileHistorySnapshotRecord,
        'assistant': AssistantRecord,
        'progress': ProgressRecord,
        'queue-operation': QueueOperationRecord,
    }
)

# Known system subtypes; anything else goes to GenericSystemRecord
SYSTEM_SUBTYPE_MODELS: Mapping[str, type[pydantic.BaseModel]] = MappingProxyType(
    {
        'turn_duration': TurnDurationSystemRecord,
        'api_error': ApiErrorSystemRecord,
        'compact_boundary': CompactBoundarySystemRecord,
        'microcompact_boundary': MicrocompactBoundarySystemRecord,
        'local_command': LocalCommandSystemRecord,
    }
)

RECORD_TYPES: frozenset[str] = frozenset({*SIMPLE_RECORD_MODELS, 'user', 'system'})


def get_record_type(obj: Any) -> str | None:
    """Return the line's `type` tag, or None when the line has no usable tag."""
    if not isinstance(obj, Mapping):
        return None
    record_type = obj.get('type')
    return record_type if isinstance(record_type, str) else None


def resolve_user_model(obj: Mapping[str, Any]) -> type[pydantic.BaseModel]:
    """
    Pick the user record shape from the line's features.

    Evaluated once, in this order:
    1. `toolUseResult` key present -> ToolResultRecord (wins over content shape)
    2. message.content is a string -> HumanPromptRecord
    3. otherwise                   -> RichContentRecord
    """
    if 'toolUseResult' in obj:
        return ToolResultRecord
    message = obj.get('message')
    if isinstance(message, Mapping) and isinstance(message.get('content'), str):
        return HumanPromptRecord
    return RichContentRecord


def resolve_system_model(obj: Mapping[str, Any]) -> type[pydantic.BaseModel]:
    """Pick the system record shape by `subtype`; unknown or missing subtypes are generic."""
    subtype = obj.get('subtype')
    if isinstance(subtype, str) and subtype in SYSTEM_SUBTYPE_MODELS:
        return SYSTEM_SUBTYPE_MODELS[subtype]
    return GenericSystemRecord


def resolve_record_model(obj: Any) -> type[pydantic.BaseModel] | None:
    """
    Map a raw line to the single shape that must validate it.

    Args:
        obj: Parsed JSON value of one transcript line

    Returns:
        The shape to validate against, or None when the line has no usable
        `type` tag or its tag is not a known record type
    """
    record_type = get_record_type(obj)
    if record_type is None:
        return None
    if record_type == 'user':
        return resolve_user_model(obj)
    if record_type == 'system':
        return resolve_system_model(obj)
    return SIMPLE_RECORD_MODELS.get(record_type)
