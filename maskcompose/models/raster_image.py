from __future__ import annotations
from dataclasses import dataclass
import numpy as np


@dataclass
class RasterImage:
    """
    Simple data object: RGBA pixels, row-major.
    No OpenCV logic outside the repositories.
    """
    pixels: np.ndarray  # Shape (H, W, 4), dtype uint8, RGBA order.

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    def copy(self) -> "RasterImage":
        return RasterImage(pixels=self.pixels.copy())

    def tobytes(self) -> bytes:
        return self.pixels.tobytes()

    @classmethod
    def blank(cls, width: int, height: int, color=(0, 0, 0, 255)) -> "RasterImage":
        pixels = np.empty((height, width, 4), dtype=np.uint8)
        pixels[...] = color
        return cls(pixels=pixels)

