import base64

import cv2
import numpy as np
import pytest

from maskcompose.models import RasterImage
from maskcompose.repositories import ImageRepository


def _gradient(width: int = 6, height: int = 4) -> RasterImage:
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    pixels[..., 0] = np.arange(width, dtype=np.uint8)[None, :] * 40
    pixels[..., 1] = 7
    pixels[..., 2] = np.arange(height, dtype=np.uint8)[:, None] * 60
    pixels[..., 3] = 255
    return RasterImage(pixels=pixels)


def test_png_encoding_is_lossless():
    repo = ImageRepository()
    image = _gradient()

    decoded = repo.from_bytes(repo.encode(image, "PNG"))

    assert decoded.tobytes() == image.tobytes()


def test_from_bytes_converts_bgr_and_gray_to_rgba():
    repo = ImageRepository()
    bgr = np.zeros((2, 2, 3), dtype=np.uint8)
    bgr[..., 2] = 255
    gray = np.full((2, 2), 50, dtype=np.uint8)

    color = repo.from_bytes(cv2.imencode(".png", bgr)[1].tobytes())
    mono = repo.from_bytes(cv2.imencode(".png", gray)[1].tobytes())

    assert color.pixels[0, 0].tolist() == [255, 0, 0, 255]
    assert mono.pixels[0, 0].tolist() == [50, 50, 50, 255]


def test_unreadable_bytes_are_rejected():
    with pytest.raises(ValueError):
        ImageRepository().from_bytes(b"garbage")
    with pytest.raises(ValueError):
        ImageRepository().from_bytes(b"")


def test_data_url():
    url = ImageRepository().to_data_url(_gradient(), "PNG")

    assert url.startswith("data:image/png;base64,")
    assert base64.b64decode(url.split(",", 1)[1])[:8] == b"\x89PNG\r\n\x1a\n"


def test_save_and_load(tmp_path):
    repo = ImageRepository()
    image = _gradient()

    path = repo.save(image, tmp_path / "out" / "result.png")
    jpeg = repo.save(image, tmp_path / "result.jpg")

    assert repo.load(path).tobytes() == image.tobytes()
    assert jpeg.read_bytes()[:2] == b"\xff\xd8"
    with pytest.raises(FileNotFoundError):
        repo.load(tmp_path / "missing.png")
