from __future__ import annotations
from dataclasses import dataclass
import numpy as np


@dataclass
class AlphaMask:
    alpha: np.ndarray  # Shape (H, W), dtype uint8, per-pixel opacity.

    @property
    def width(self) -> int:
        return int(self.alpha.shape[1])

    @property
    def height(self) -> int:
        return int(self.alpha.shape[0])
