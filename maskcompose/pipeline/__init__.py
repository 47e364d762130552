from .compositing_pipeline import count_objects, redact_regions, run_compositing

__all__ = ["count_objects", "redact_regions", "run_compositing"]
