"""Mask compositing & annotation engine."""

from .models.style import Mode
from .pipeline.compositing_pipeline import count_objects, redact_regions, run_compositing

__all__ = ["Mode", "count_objects", "redact_regions", "run_compositing"]
