from __future__ import annotations
import logging
from typing import Sequence, Tuple

import numpy as np

from ..errors import DimensionMismatchError
from ..models.alpha_mask import AlphaMask
from ..models.raster_image import RasterImage
from ..models.style import Style

logger = logging.getLogger(__name__)


class CompositingService:
    """
    Painter's-algorithm layering of styled masks onto a base image.

    • The base image is never written to; every call works on its own copy.
    • Later masks are painted over earlier ones.
    """

    @staticmethod
    def check_target(base: RasterImage) -> None:
        """Raise DimensionMismatchError if *base* cannot be composited onto."""
        pixels = base.pixels
        if not isinstance(pixels, np.ndarray) or pixels.ndim != 3 or pixels.shape[2] != 4:
            raise DimensionMismatchError(
                f"Base image must be an (H, W, 4) RGBA array, got {getattr(pixels, 'shape', None)}"
            )
        if pixels.dtype != np.uint8:
            raise DimensionMismatchError(f"Base image must be uint8, got {pixels.dtype}")
        if base.width == 0 or base.height == 0:
            raise DimensionMismatchError(f"Base image has zero size: {base.width}x{base.height}")

    @staticmethod
    def _effective_alpha(alpha_u8: np.ndarray, style: Style) -> np.ndarray:
        """
        Per-pixel alpha as dictated by *style*:
        hard edge → binary, every covered pixel at full ``style.opacity``
        soft      → mask alpha capped at ``style.opacity``
        """
        if style.hard_edge:
            return np.where(alpha_u8 > 0, style.opacity, 0).astype(np.uint8)
        return np.minimum(alpha_u8, style.opacity).astype(np.uint8)

    @staticmethod
    def _compose(acc: np.ndarray, alpha_u8: np.ndarray, color: Tuple[int, int, int]) -> None:
        """
        Source-over blend of a flat-colored layer onto *acc* in place.

        out_rgb = src * a + dst * (1 - a)
        out_a   = a + dst_a * (1 - a)
        """
        alpha = alpha_u8.astype("float32")[..., None] / 255.0   # (H,W,1)
        src = np.asarray(color, dtype="float32")

        acc[..., :3] = src * alpha + acc[..., :3] * (1.0 - alpha)
        acc[..., 3:] = 255.0 * alpha + acc[..., 3:] * (1.0 - alpha)

    def composite(
        self,
        base: RasterImage,
        styled_masks: Sequence[Tuple[AlphaMask, Style]],
    ) -> RasterImage:
        self.check_target(base)
        if not styled_masks:
            return base.copy()

        acc = base.pixels.astype("float32")
        for i, (alpha_mask, style) in enumerate(styled_masks):
            if alpha_mask.alpha.shape != (base.height, base.width):
                raise DimensionMismatchError(
                    f"Alpha mask {i} is {alpha_mask.width}x{alpha_mask.height}, "
                    f"base image is {base.width}x{base.height}"
                )
            self._compose(acc, self._effective_alpha(alpha_mask.alpha, style), style.color)

        logger.debug(f"Composited {len(styled_masks)} layers onto {base.width}x{base.height} image")
        return RasterImage(pixels=np.clip(np.rint(acc), 0, 255).astype(np.uint8))
