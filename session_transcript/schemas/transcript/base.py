"""
Transcript-layer base models.

Every shape in schemas/transcript/ inherits from one of these two classes; the
class picked IS the shape's field policy.
"""

from __future__ import annotations

from session_transcript.schemas.types import BaseStrictModel, PermissiveModel


class StrictModel(BaseStrictModel):
    """Transcript-layer strict model (closed field policy).

    Inherits from BaseStrictModel (extra='forbid', strict=True, frozen=True).
    Domain-specific customization can be added here if needed.
    """

    pass


__all__ = ['StrictModel', 'PermissiveModel']
