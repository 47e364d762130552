# repositories/mask_repository.py
import base64
import binascii
import os

import cv2
import numpy as np
from dotenv import load_dotenv

from ..errors import MaskDecodeError
from ..models.mask import Mask

load_dotenv()

_INTERPOLATIONS = {
    "nearest": cv2.INTER_NEAREST,
    "linear": cv2.INTER_LINEAR,
}


class MaskRepository:
    """
    One-mask decode + resample.

    • Decodes the PNG blob with OpenCV.
    • Stretches the red channel to the base image resolution.
    """

    def __init__(self) -> None:
        name = os.getenv("MASK_RESIZE_INTERPOLATION", "nearest").strip().lower()
        if name not in _INTERPOLATIONS:
            raise ValueError(f"Unsupported MASK_RESIZE_INTERPOLATION: {name!r}")
        self.interpolation = _INTERPOLATIONS[name]

    # ---------- private helpers ----------
    @staticmethod
    def _raw_bytes(mask: Mask) -> bytes:
        if not mask.base64_encoded:
            return mask.encoded_data
        try:
            # wrapped base64 (line breaks, spaces) is still valid payload
            return base64.b64decode(b"".join(mask.encoded_data.split()), validate=True)
        except (binascii.Error, ValueError) as err:
            raise MaskDecodeError(f"invalid base64 payload: {err}") from err

    @staticmethod
    def _decode_bgr(blob: bytes) -> np.ndarray:
        if not blob:
            raise MaskDecodeError("empty mask blob")
        buf = np.frombuffer(blob, dtype=np.uint8)
        try:
            arr = cv2.imdecode(buf, cv2.IMREAD_COLOR)
        except cv2.error as err:
            raise MaskDecodeError(f"OpenCV could not decode mask: {err}") from err
        if arr is None:
            raise MaskDecodeError("mask blob is not a readable image")
        return arr

    # ---------- public API ----------
    def retrieve_intensity(self, mask: Mask, target_width: int, target_height: int) -> np.ndarray:
        """
        Returns uint8 intensity (target_height, target_width) taken from the
        red channel of the decoded mask (R=G=B for grayscale masks).
        """
        bgr = self._decode_bgr(self._raw_bytes(mask))
        mask.native_height, mask.native_width = bgr.shape[:2]

        red = bgr[:, :, 2]
        if red.shape != (target_height, target_width):
            # whole-image stretch, not area-aware
            red = cv2.resize(red, (target_width, target_height), interpolation=self.interpolation)
        return np.ascontiguousarray(red, dtype=np.uint8)
