"""
Registry of every named shape in the transcript catalog.

The registry is derived, not maintained by hand: it walks the field annotations
of every record shape (and the auxiliary file shapes) and collects each model it
reaches. Adding a field that references a new model registers that model.
"""

from __future__ import annotations

import typing
from collections.abc import Iterator, Mapping, Sequence
from types import MappingProxyType

import pydantic

from session_transcript.schemas.transcript.auxiliary import AUXILIARY_MODELS
from session_transcript.schemas.transcript.records import TranscriptLine
from session_transcript.schemas.transcript.tool_inputs import ToolInput
from session_transcript.schemas.types import FieldPolicy, field_policy


class ShapeInfo(pydantic.BaseModel):
    """Summary of one catalog shape."""

    model_config = pydantic.ConfigDict(frozen=True)

    name: str
    module: str
    policy: FieldPolicy
    required: Sequence[str]
    optional: Sequence[str]


def _iter_models(tp: object) -> Iterator[type[pydantic.BaseModel]]:
    """Yield every model class referenced by a type expression, outermost first."""
    if isinstance(tp, typing.TypeAliasType):
        yield from _iter_models(tp.__value__)
        return
    if isinstance(tp, type) and issubclass(tp, pydantic.BaseModel):
        yield tp
        return
    for arg in typing.get_args(tp):
        yield from _iter_models(arg)


def _walk(roots: Sequence[object]) -> dict[str, type[pydantic.BaseModel]]:
    found: dict[str, type[pydantic.BaseModel]] = {}
    stack = [model for root in reversed(roots) for model in reversed(list(_iter_models(root)))]
    while stack:
        model = stack.pop()
        if model.__name__ in found:
            continue
        found[model.__name__] = model
        for field in reversed(list(model.model_fields.values())):
            stack.extend(reversed(list(_iter_models(field.annotation))))
    return found


# ToolInput is listed explicitly: ToolUseBlock dispatches on it by name at runtime
SHAPES: Mapping[str, type[pydantic.BaseModel]] = MappingProxyType(
    _walk([TranscriptLine, ToolInput, *AUXILIARY_MODELS])
)


def get_shape(name: str) -> type[pydantic.BaseModel]:
    """Look up a shape by its stable name (raises KeyError for unknown names)."""
    return SHAPES[name]


def describe_shape(model: type[pydantic.BaseModel]) -> ShapeInfo:
    """Summarize a shape: name, field policy, required and optional wire keys."""
    required = []
    optional = []
    for name, field in model.model_fields.items():
        key = field.alias or name
        (required if field.is_required() else optional).append(key)
    return ShapeInfo(
        name=model.__name__,
        module=model.__module__.rsplit('.', 1)[-1],
        policy=field_policy(model),
        required=required,
        optional=optional,
    )


def list_shapes(policy: FieldPolicy | None = None) -> list[ShapeInfo]:
    """Every catalog shape sorted by name, optionally filtered by field policy."""
    infos = [describe_shape(model) for model in SHAPES.values()]
    if policy is not None:
        infos = [info for info in infos if info.policy == policy]
    return sorted(infos, key=lambda info: info.name)
