from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class Mode(str, Enum):
    """Operating policy: tinted + numbered overlays, or opaque redaction."""
    COUNT = "count"
    REDACT = "redact"


@dataclass(frozen=True)
class Style:
    """
    Visual treatment for one mask.

    hard_edge=True  → alpha is binary (0 / 255)
    hard_edge=False → alpha is quantized to ``opacity`` inside the mask
    """
    color: Tuple[int, int, int]
    opacity: int
    hard_edge: bool
