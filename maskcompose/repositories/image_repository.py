import base64
import os
from io import BytesIO
from pathlib import Path
from typing import Union

import cv2
import numpy as np
from PIL import Image as PILImage
from dotenv import load_dotenv

from ..models.raster_image import RasterImage

# Load environment variables
load_dotenv()

_TO_RGBA = {
    3: cv2.COLOR_BGR2RGBA,
    4: cv2.COLOR_BGRA2RGBA,
}


class ImageRepository:
    """
    Handles decoding and encoding of RasterImage entities.
    """
    def __init__(self):
        self.OUTPUT_FORMAT = os.getenv("OUTPUT_IMG_FORMAT", "PNG").upper()

    @staticmethod
    def _to_rgba(arr: np.ndarray) -> np.ndarray:
        if arr.dtype == np.uint16:
            arr = (arr >> 8).astype(np.uint8)
        if arr.ndim == 2:
            return cv2.cvtColor(arr, cv2.COLOR_GRAY2RGBA)
        return cv2.cvtColor(arr, _TO_RGBA[arr.shape[2]])

    def from_bytes(self, blob: bytes) -> RasterImage:
        arr = cv2.imdecode(np.frombuffer(blob, dtype=np.uint8), cv2.IMREAD_UNCHANGED) if blob else None
        if arr is None:
            raise ValueError("Base image bytes are not a readable image")
        return RasterImage(pixels=self._to_rgba(arr))

    def load(self, path: Union[str, Path]) -> RasterImage:
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Image not found or unreadable: {path}")
        return self.from_bytes(path.read_bytes())

    def encode(self, image: RasterImage, fmt: str | None = None) -> bytes:
        fmt = (fmt or self.OUTPUT_FORMAT).upper()
        pil_image = PILImage.fromarray(np.ascontiguousarray(image.pixels))
        if fmt in ("JPEG", "JPG"):
            # JPEG has no alpha channel
            fmt = "JPEG"
            pil_image = pil_image.convert("RGB")

        buffer = BytesIO()
        pil_image.save(buffer, format=fmt)
        return buffer.getvalue()

    def to_data_url(self, image: RasterImage, fmt: str | None = None) -> str:
        """Encode as a ``data:`` URL for display."""
        fmt = (fmt or self.OUTPUT_FORMAT).upper()
        mime = "jpeg" if fmt in ("JPEG", "JPG") else fmt.lower()
        encoded = base64.b64encode(self.encode(image, fmt)).decode("utf-8")
        return f"data:image/{mime};base64,{encoded}"

    def save(self, image: RasterImage, path: Union[str, Path]) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        fmt = PILImage.registered_extensions().get(path.suffix.lower(), self.OUTPUT_FORMAT)
        path.write_bytes(self.encode(image, fmt))
        return path
