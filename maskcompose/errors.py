"""Error taxonomy for the compositing engine."""

from __future__ import annotations


class MaskComposeError(RuntimeError):
    """Base class for engine errors."""


class MaskDecodeError(MaskComposeError):
    """Raised when a single mask blob is malformed or unreadable (recoverable)."""


class DimensionMismatchError(MaskComposeError):
    """Raised when the base image cannot serve as a compositing target."""


class RenderSurfaceError(MaskComposeError):
    """Raised when a drawing surface for compositing/annotation cannot be acquired."""
