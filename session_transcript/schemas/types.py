"""
Shared type definitions for transcript schemas.

Centralizes the foundation models and annotations used across the catalog.

Layering:
- This module provides FOUNDATION types (BaseStrictModel, PermissiveModel, EmptyDict, PathStr)
- schemas/transcript/ builds every record and nested shape on top of these
- Field policy is carried by the base class: closed shapes inherit BaseStrictModel,
  passthrough and open shapes inherit PermissiveModel
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal

import pydantic

# ==============================================================================
# Base Strict Model (Foundation)
# ==============================================================================


class BaseStrictModel(pydantic.BaseModel):
    """
    Foundation strict model - the "closed" field policy.

    Uses extra='forbid' to reject unknown fields - any field not modeled
    causes immediate validation failure (fail-fast).

    The transcript package defines its own StrictModel that inherits from this,
    enabling domain-specific customization while sharing the core validation config.
    """

    model_config = pydantic.ConfigDict(
        extra='forbid',  # Reject unknown fields (fail-fast)
        strict=True,  # Strict type coercion
        frozen=True,  # Immutable after creation
    )


# ==============================================================================
# Permissive Model (Foundation)
# ==============================================================================


class PermissiveModel(pydantic.BaseModel):
    """
    Foundation permissive model - the "passthrough" and "open" field policies.

    Symmetry with BaseStrictModel:
    - BaseStrictModel: extra='forbid' (rejects unknown fields)
    - PermissiveModel: extra='allow' (accepts and preserves unknown fields)

    A subclass that declares fields is passthrough: declared fields are checked,
    everything else rides along untouched. A subclass with no fields is open and
    accepts any JSON object.

    Use as the LAST type in ordered unions to catch unknown structures:

        ToolUseResult = Annotated[
            BashToolUseResult | ... | ExternalToolUseResult,
            pydantic.Field(union_mode='left_to_right'),
        ]

        class ExternalToolUseResult(PermissiveModel):
            pass

    Detection: isinstance(x, PermissiveModel) catches all fallback usages,
    enabling the scanner to report untyped structures.
    """

    model_config = pydantic.ConfigDict(
        extra='allow',  # Accept unknown fields (graceful fallback)
        strict=True,  # Strict type coercion for known fields
        frozen=True,  # Immutable after creation
    )

    def get_extra_fields(self) -> dict[str, object]:
        """Get extra fields captured by this permissive model.

        Returns only the unknown fields, not defined model fields.
        Useful for inspection and logging of untyped structures.
        """
        return dict(self.__pydantic_extra__) if self.__pydantic_extra__ else {}


# ==============================================================================
# Empty JSON Types
# ==============================================================================


class EmptyDict(BaseStrictModel):
    """
    Marker type for an always-empty JSON object {}.

    With extra='forbid', a model with no fields will only validate against
    an empty dict.

    Example:
        meta: EmptyDict  # Always {} - fails if a key ever shows up
    """

    pass


# ==============================================================================
# Field Policy
# ==============================================================================

FieldPolicy = Literal['closed', 'passthrough', 'open']


def field_policy(model: type[pydantic.BaseModel]) -> FieldPolicy:
    """Classify a model by how it treats undeclared fields."""
    if model.model_config.get('extra') != 'allow':
        return 'closed'
    return 'passthrough' if model.model_fields else 'open'


# ==============================================================================
# Tagged Unions
# ==============================================================================


def tag_dispatch(field: str, tags: Mapping[str, str]) -> pydantic.Discriminator:
    """
    Build a discriminator that routes a value to a union member by a tag field.

    Members are labelled with pydantic.Tag(<shape name>) rather than the raw tag
    value, so error locations carry a shape name that can never be mistaken for
    a real field (a text block has both type='text' and a 'text' field).

    Args:
        field: Name of the tag field (usually 'type')
        tags: Mapping of tag value -> shape name used in pydantic.Tag

    Returns:
        Discriminator that reports an 'invalid_tag' error for unknown tag values

    Example:
        ContentBlock = Annotated[
            Annotated[TextBlock, pydantic.Tag('TextBlock')]
            | Annotated[ThinkingBlock, pydantic.Tag('ThinkingBlock')],
            tag_dispatch('type', {'text': 'TextBlock', 'thinking': 'ThinkingBlock'}),
        ]
    """
    expected = ', '.join(repr(tag) for tag in tags)

    def discriminate(value: Any) -> str | None:
        if isinstance(value, Mapping):
            tag = value.get(field)
        else:
            tag = getattr(value, field, None)
        return tags.get(tag) if isinstance(tag, str) else None

    return pydantic.Discriminator(
        discriminate,
        custom_error_type='invalid_tag',
        custom_error_message=f"Input should have '{field}' set to one of {expected}",
    )


# ==============================================================================
# Primitive Types
# ==============================================================================

type PathStr = str
"""A filesystem path (file or directory) as a string."""
