import base64

import cv2
import numpy as np
import pytest

from maskcompose.models import RasterImage


def encode_png(arr: np.ndarray) -> bytes:
    ok, buf = cv2.imencode(".png", arr)
    assert ok
    return buf.tobytes()


@pytest.fixture
def png_mask():
    """Factory: (H, W) uint8 intensity array -> PNG bytes."""
    return encode_png


@pytest.fixture
def b64_mask():
    """Factory: (H, W) uint8 intensity array -> base64 PNG string."""
    def _make(arr: np.ndarray) -> str:
        return base64.b64encode(encode_png(arr)).decode("ascii")
    return _make


@pytest.fixture
def gray_base():
    """Factory: opaque uniform gray base image."""
    def _make(width: int, height: int, value: int = 100) -> RasterImage:
        return RasterImage.blank(width, height, (value, value, value, 255))
    return _make
