"""
Line validation and result reporting.

validate_line() is the core entry point: it dispatches a parsed transcript line
to its one shape, validates it, and returns a LineValidationResult. It never
raises for data problems; every violation comes back as a ValidationIssue with
a plain field path.

Error kinds:
    missing_discriminator  line is not an object, or has no string `type`
    unknown_type           `type` is not one of the 7 record kinds
    shape_violation        one or more field-level mismatches
    transform_rejected     only persisted-output template mismatches remain

Paths: pydantic error locations carry union member labels (model names,
'str', 'list[...]', 'function-wrap[...]'). clean_path() walks the raw input
alongside the location and keeps only real keys and indices, so a path reads
exactly like the JSON it points into: ('message', 'content', '0', 'input', 'command').
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Literal, TypedDict

import pydantic

from session_transcript.dispatch import get_record_type, resolve_record_model
from session_transcript.exceptions import TranscriptValidationError
from session_transcript.schemas.types import PermissiveModel, field_policy

ErrorKind = Literal['missing_discriminator', 'unknown_type', 'shape_violation', 'transform_rejected']

# Core schema labels pydantic puts in error locations for non-model union members
_BUILTIN_LABELS = frozenset({'str', 'int', 'float', 'bool', 'none', 'bytes', 'any', 'dict', 'list'})


# ==============================================================================
# Result Types
# ==============================================================================


class ValidationIssue(pydantic.BaseModel):
    """One violation: where it is, what is wrong, and pydantic's error type."""

    model_config = pydantic.ConfigDict(frozen=True)

    path: tuple[str, ...]
    message: str
    code: str  # e.g. 'extra_forbidden', 'missing', 'transform_rejected'


class LineError(pydantic.BaseModel):
    """Why a line failed."""

    model_config = pydantic.ConfigDict(frozen=True)

    kind: ErrorKind
    issues: tuple[ValidationIssue, ...]


class LineValidationResult(pydantic.BaseModel):
    """
    Outcome of validating one transcript line.

    Fields:
        success: True when the line validated against its shape
        type: Record type from the line's `type` tag (set even on failure when known)
        shape: Name of the shape the line was dispatched to
        error: Kind and full list of issues (failure only)
        value: Normalized JSON value with transforms applied (success only)
        record: Validated model instance (success only)
    """

    model_config = pydantic.ConfigDict(frozen=True)

    success: bool
    type: str | None = None
    shape: str | None = None
    error: LineError | None = None
    value: Any = None
    record: Any = pydantic.Field(None, exclude=True)  # Typed record model; left out of dumps


class FallbackUsage(TypedDict):
    """A passthrough or open shape found in a validated record."""

    path: str  # Dot-separated path to the shape ('(root)' for the record itself)
    shape: str  # Class name (e.g. ExternalToolInput, GenericSystemRecord)
    policy: str  # 'passthrough' | 'open'
    tool_name: str | None  # Tool name when the shape is a tool input
    extra_fields: dict[str, str]  # Field name -> type name


# ==============================================================================
# Path Cleaning
# ==============================================================================


def _is_union_label(segment: str) -> bool:
    """True for location segments pydantic adds for union members, never for data keys."""
    return (
        segment[:1].isupper()
        or '[' in segment
        or segment.startswith('function-')
        or segment.startswith('constrained-')
        or segment in _BUILTIN_LABELS
    )


def clean_path(loc: Sequence[str | int], raw: Any) -> tuple[str, ...]:
    """
    Convert a pydantic error location into a plain field path.

    A segment that is a key (or index) of the raw value at that point is kept
    and the walk descends into it. Otherwise a union member label is dropped,
    and anything else (a missing required field) is kept as-is.

    Example:
        loc = ('message', 'content', 0, 'ToolUseBlock', 'input', 'command')
        -> ('message', 'content', '0', 'input', 'command')
    """
    parts: list[str] = []
    current = raw
    for segment in loc:
        if isinstance(current, Mapping) and isinstance(segment, str) and segment in current:
            parts.append(segment)
            current = current[segment]
        elif (
            isinstance(current, Sequence)
            and not isinstance(current, str)
            and isinstance(segment, int)
            and 0 <= segment < len(current)
        ):
            parts.append(str(segment))
            current = current[segment]
        elif isinstance(segment, str) and _is_union_label(segment):
            continue
        else:
            parts.append(str(segment))
            current = None
    return tuple(parts)


def issues_from_error(error: pydantic.ValidationError, raw: Any) -> tuple[ValidationIssue, ...]:
    """
    Flatten a pydantic ValidationError into issues with clean paths.

    Union members that fail the same way report the same (path, message) more
    than once; duplicates are dropped, first occurrence order kept.
    """
    seen: set[tuple[tuple[str, ...], str, str]] = set()
    issues: list[ValidationIssue] = []
    for line_error in error.errors(include_url=False):
        path = clean_path(line_error['loc'], raw)
        key = (path, line_error['msg'], line_error['type'])
        if key in seen:
            continue
        seen.add(key)
        issues.append(ValidationIssue(path=path, message=line_error['msg'], code=line_error['type']))
    return tuple(issues)


# ==============================================================================
# Validation
# ==============================================================================


def _failure(
    kind: ErrorKind,
    issues: Sequence[ValidationIssue],
    record_type: str | None = None,
    shape: str | None = None,
) -> LineValidationResult:
    return LineValidationResult(
        success=False,
        type=record_type,
        shape=shape,
        error=LineError(kind=kind, issues=tuple(issues)),
    )


def validate_line(obj: Any) -> LineValidationResult:
    """
    Validate one parsed transcript line.

    Args:
        obj: Parsed JSON value of the line

    Returns:
        LineValidationResult. On success it carries the validated record and
        its normalized JSON value; on failure the error kind and every issue.
    """
    record_type = get_record_type(obj)
    if record_type is None:
        return _failure(
            'missing_discriminator',
            [ValidationIssue(path=('type',), message='Missing type field', code='missing_discriminator')],
        )

    model = resolve_record_model(obj)
    if model is None:
        return _failure(
            'unknown_type',
            [ValidationIssue(path=('type',), message=f'Unknown type: {record_type}', code='unknown_type')],
            record_type=record_type,
        )

    try:
        record = model.model_validate(obj)
    except pydantic.ValidationError as e:
        issues = issues_from_error(e, obj)
        kind: ErrorKind = (
            'transform_rejected'
            if issues and all(issue.code == 'transform_rejected' for issue in issues)
            else 'shape_violation'
        )
        return _failure(kind, issues, record_type=record_type, shape=model.__name__)

    return LineValidationResult(
        success=True,
        type=record_type,
        shape=model.__name__,
        value=record.model_dump(mode='json', by_alias=True, exclude_unset=True),
        record=record,
    )


def parse_line(obj: Any) -> pydantic.BaseModel:
    """
    Validate one parsed transcript line and return the typed record.

    Raises:
        TranscriptValidationError: If the line does not validate (carries the result)
    """
    result = validate_line(obj)
    if not result.success or result.record is None:
        raise TranscriptValidationError(result)
    return result.record


def to_report(result: LineValidationResult) -> dict[str, Any]:
    """
    Render a result in the external report format.

    {success: bool, type?: str, error?: {issues: [{path: [str], message: str}]}}
    """
    report: dict[str, Any] = {'success': result.success}
    if result.type is not None:
        report['type'] = result.type
    if result.error is not None:
        report['error'] = {
            'issues': [{'path': list(issue.path), 'message': issue.message} for issue in result.error.issues]
        }
    return report


# ==============================================================================
# Fallback Detection
# ==============================================================================


def find_fallbacks(obj: Any, path: str = '', tool_name: str | None = None) -> list[FallbackUsage]:
    """
    Recursively find all PermissiveModel instances in a validated record.

    Detects where a passthrough or open shape accepted data: external tool
    inputs and results, generic system records, vendor-extended error causes.

    Args:
        obj: The object to search (typically a validated record)
        path: Current dot-separated path for reporting
        tool_name: Tool name context (set when descending into a tool_use input)

    Returns:
        List of FallbackUsage, in field order
    """
    fallbacks: list[FallbackUsage] = []

    if isinstance(obj, PermissiveModel):
        fallbacks.append(
            FallbackUsage(
                path=path or '(root)',
                shape=type(obj).__name__,
                policy=field_policy(type(obj)),
                tool_name=tool_name,
                extra_fields={k: type(v).__name__ for k, v in obj.get_extra_fields().items()},
            )
        )

    if isinstance(obj, pydantic.BaseModel):
        for field_name, field in type(obj).model_fields.items():
            value = getattr(obj, field_name, None)
            if value is None:
                continue
            key = field.alias or field_name
            child_path = f'{path}.{key}' if path else key
            current_tool_name = tool_name
            if field_name == 'input' and isinstance(getattr(obj, 'name', None), str):
                current_tool_name = obj.name
            fallbacks.extend(find_fallbacks(value, child_path, current_tool_name))

    elif isinstance(obj, Mapping):
        for key, value in obj.items():
            child_path = f'{path}.{key}' if path else str(key)
            fallbacks.extend(find_fallbacks(value, child_path, tool_name))

    elif isinstance(obj, (list, tuple)):
        for i, item in enumerate(obj):
            child_path = f'{path}[{i}]' if path else f'[{i}]'
            fallbacks.extend(find_fallbacks(item, child_path, tool_name))

    return fallbacks
