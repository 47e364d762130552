from __future__ import annotations
import logging
import os
from functools import lru_cache
from typing import Optional, Sequence, Tuple

import numpy as np
from PIL import Image as PILImage, ImageDraw, ImageFilter, ImageFont
from dotenv import load_dotenv

from ..errors import RenderSurfaceError
from ..models.bounding_box import BoundingBox
from ..models.raster_image import RasterImage

logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()

RADIUS_MIN, RADIUS_MAX = 10, 20
FONT_MIN, FONT_MAX = 16, 32
DISC_FILL = (255, 255, 255, 230)      # near-opaque white
OUTLINE_FILL = (0, 0, 0, 255)
OUTLINE_WIDTH = 2
LABEL_FILL = (0, 0, 0, 255)
SHADOW_FILL = (0, 0, 0, 128)
SHADOW_BLUR = 2


def marker_geometry(box: BoundingBox) -> Tuple[float, float]:
    """
    Returns (radius, font_size) for the marker of *box*.

    radius    = clamp(width / 3,   10, 20)
    font_size = clamp(width * 0.4, 16, 32)
    """
    width = box.width
    radius = min(RADIUS_MAX, max(RADIUS_MIN, width / 3))
    font_size = min(FONT_MAX, max(FONT_MIN, width * 0.4))
    return radius, font_size


@lru_cache(maxsize=32)
def _load_font(font_path: str, size: int) -> ImageFont.FreeTypeFont:
    try:
        return ImageFont.truetype(font_path, size)
    except OSError:
        logger.warning(f"Bold font '{font_path}' not available, using Pillow regular default at {size}px")
        return ImageFont.load_default(size=size)


class AnnotationService:
    """
    Draws numbered markers (white disc, black outline, black bold label)
    centered on bounding boxes. Count mode only.
    """

    def __init__(self):
        self.FONT_PATH = os.getenv("MARKER_FONT_PATH", "DejaVuSans-Bold.ttf")

    @staticmethod
    def _surface(image: RasterImage) -> PILImage.Image:
        try:
            return PILImage.fromarray(np.ascontiguousarray(image.pixels)).convert("RGBA")
        except (TypeError, ValueError) as err:
            raise RenderSurfaceError(f"Cannot create drawing surface: {err}") from err

    def annotate(
        self,
        image: RasterImage,
        boxes: Sequence[Optional[BoundingBox]],
        labels: Sequence[int] | None = None,
    ) -> RasterImage:
        """
        Args
        ----
        image  : composited image to draw on
        boxes  : one box per marker; ``None`` and non-finite boxes are skipped
        labels : marker numbers; defaults to ``i + 1`` for the box at index i

        Returns
        -------
        New RasterImage with the markers drawn.
        """
        if labels is None:
            labels = range(1, len(boxes) + 1)
        markers = []
        for box, label in zip(boxes, labels):
            if box is None:
                continue
            if not box.is_finite():
                logger.warning(f"Skipping marker {label}: non-finite box {box}")
                continue
            markers.append((box, label))
        if not markers:
            return image

        surface = self._surface(image)
        try:
            shadow = PILImage.new("RGBA", surface.size, (0, 0, 0, 0))
            overlay = PILImage.new("RGBA", surface.size, (0, 0, 0, 0))
        except (ValueError, MemoryError) as err:
            raise RenderSurfaceError(f"Cannot allocate annotation layers: {err}") from err

        shadow_draw = ImageDraw.Draw(shadow)
        draw = ImageDraw.Draw(overlay)

        for box, label in markers:
            cx, cy = box.center
            radius, font_size = marker_geometry(box)
            disc = [cx - radius, cy - radius, cx + radius, cy + radius]

            shadow_draw.ellipse(disc, fill=SHADOW_FILL)
            draw.ellipse(disc, fill=DISC_FILL, outline=OUTLINE_FILL, width=OUTLINE_WIDTH)

            font = _load_font(self.FONT_PATH, int(round(font_size)))
            draw.text((cx, cy), str(label), fill=LABEL_FILL, font=font, anchor="mm")

        # soft shadow first, markers on top
        shadow = shadow.filter(ImageFilter.GaussianBlur(SHADOW_BLUR))
        surface = PILImage.alpha_composite(surface, shadow)
        surface = PILImage.alpha_composite(surface, overlay)

        logger.debug(f"Drew {len(markers)} markers")
        return RasterImage(pixels=np.asarray(surface, dtype=np.uint8).copy())
