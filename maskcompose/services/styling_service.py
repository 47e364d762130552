from __future__ import annotations
from typing import Tuple

from ..models.style import Mode, Style
from .threshold_service import ThresholdService

PALETTE: Tuple[Tuple[int, int, int], ...] = (
    (255, 0, 0),      # red
    (0, 255, 0),      # green
    (0, 0, 255),      # blue
    (255, 165, 0),    # orange
    (128, 0, 128),    # purple
    (0, 255, 255),    # cyan
    (255, 0, 255),    # magenta
)
REDACT_COLOR = (0, 0, 0)


class StylingService:
    """
    Picks the visual treatment of a mask from its index and the active mode.
    Indices that differ by a multiple of len(PALETTE) share a color.
    """

    def style_for(self, index: int, mode: Mode) -> Style:
        mode = Mode(mode)
        opacity = ThresholdService.opacity_for(mode)
        if mode is Mode.REDACT:
            return Style(color=REDACT_COLOR, opacity=opacity, hard_edge=True)
        return Style(color=PALETTE[index % len(PALETTE)], opacity=opacity, hard_edge=False)
