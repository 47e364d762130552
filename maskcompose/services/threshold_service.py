from __future__ import annotations
import numpy as np

from ..models.alpha_mask import AlphaMask
from ..models.style import Mode

MASK_THRESHOLD = 100     # of 255; strictly greater-than
COUNT_OPACITY = 120      # soft tint, underlying image stays visible
REDACT_OPACITY = 255     # total coverage

_OPACITY = {
    Mode.COUNT: COUNT_OPACITY,
    Mode.REDACT: REDACT_OPACITY,
}


class ThresholdService:
    """Converts raw mask intensity into per-pixel alpha."""

    @staticmethod
    def opacity_for(mode: Mode) -> int:
        return _OPACITY[Mode(mode)]

    def threshold(self, intensity: int, mode: Mode) -> int:
        return self.opacity_for(mode) if intensity > MASK_THRESHOLD else 0

    def threshold_buffer(self, intensity: np.ndarray, mode: Mode) -> AlphaMask:
        """
        Args
        ----
        intensity : np.ndarray  (H, W)  uint8

        Returns
        -------
        AlphaMask with values in {0, opacity_for(mode)}
        """
        alpha = np.where(intensity > MASK_THRESHOLD, self.opacity_for(mode), 0).astype(np.uint8)
        return AlphaMask(alpha=alpha)
