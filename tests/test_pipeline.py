import numpy as np
import pytest

from maskcompose.errors import DimensionMismatchError
from maskcompose.models import BoundingBox, CompositeStatus, Mask, Mode, RasterImage, SegmentationResult
from maskcompose.pipeline import count_objects, redact_regions, run_compositing
from maskcompose.services import AnnotationService


def _tint(channel_value: int, base_value: int = 100) -> int:
    a = 120 / 255
    return round(channel_value * a + base_value * (1 - a))


def _half_masks(png_mask, width: int, height: int):
    left = np.zeros((height, width), dtype=np.uint8)
    left[:, : width // 2] = 255
    right = np.zeros((height, width), dtype=np.uint8)
    right[:, width // 2:] = 255
    return Mask(encoded_data=png_mask(left)), Mask(encoded_data=png_mask(right))


def test_redact_full_mask_gives_solid_black(png_mask, gray_base):
    base = gray_base(100, 100)
    # native resolution differs from the base image
    mask = Mask(encoded_data=png_mask(np.full((50, 50), 255, dtype=np.uint8)))

    result = run_compositing(base, [mask], mode=Mode.REDACT)

    assert result.status is CompositeStatus.COMPLETED
    assert result.count == 1
    assert result.errors == []
    assert (result.image.pixels[..., :3] == 0).all()
    assert (result.image.pixels[..., 3] == 255).all()


def test_count_two_masks_colors_and_markers(png_mask, gray_base):
    base = gray_base(200, 100)
    left, right = _half_masks(png_mask, 200, 100)
    boxes = [BoundingBox(0, 0, 100, 100), BoundingBox(100, 0, 200, 100)]

    result = run_compositing(base, [left, right], boxes, Mode.COUNT)
    px = result.image.pixels.astype(int)

    assert result.count == 2
    assert not result.is_empty
    # red tint on the left, green tint on the right
    assert px[5, 5, :3].tolist() == [_tint(255), _tint(0), _tint(0)]
    assert px[5, 195, :3].tolist() == [_tint(0), _tint(255), _tint(0)]
    # markers at the box midpoints (50, 50) and (150, 50)
    assert (px[50, 35, :3] > 200).all()
    assert (px[50, 135, :3] > 200).all()
    assert px[42:58, 42:58, :3].min() < 80
    assert px[42:58, 142:158, :3].min() < 80


def test_corrupt_mask_is_skipped_and_reported(png_mask, gray_base):
    base = gray_base(20, 20)
    good = Mask(encoded_data=png_mask(np.full((20, 20), 255, dtype=np.uint8)))
    corrupt = Mask(encoded_data=b"\x89PNG broken")

    result = run_compositing(base, [corrupt, good], mode=Mode.REDACT)

    assert result.count == 1
    assert len(result.errors) == 1
    assert result.errors[0].index == 0
    assert (result.image.pixels[..., :3] == 0).all()


def test_zero_masks_in_redact_mode_signals_no_regions(gray_base):
    base = gray_base(30, 30)
    before = base.tobytes()

    result = run_compositing(base, [], mode=Mode.REDACT)

    assert result.is_empty
    assert result.status is CompositeStatus.NO_REGIONS
    assert result.count == 0
    assert result.image.tobytes() == before
    assert base.tobytes() == before


def test_zero_masks_in_count_mode_returns_base_with_count_zero(gray_base):
    base = gray_base(30, 30)

    result = run_compositing(base, [], [BoundingBox(0, 0, 10, 10)], Mode.COUNT)

    assert result.count == 0
    assert result.is_empty
    assert result.image.tobytes() == base.tobytes()


def test_all_masks_failing_is_empty_with_errors(gray_base):
    result = run_compositing(gray_base(10, 10), [Mask(encoded_data=b"x")], mode=Mode.COUNT)

    assert result.is_empty
    assert [f.index for f in result.errors] == [0]


def test_failed_mask_is_skipped_from_numbering(png_mask, gray_base):
    base = gray_base(200, 100)
    left, right = _half_masks(png_mask, 200, 100)
    boxes = [BoundingBox(0, 0, 100, 100), BoundingBox(100, 0, 200, 100)]

    result = run_compositing(base, [Mask(encoded_data=b"bad"), right], boxes, Mode.COUNT)
    px = result.image.pixels.astype(int)

    assert result.count == 1
    # failed object gets neither tint nor marker
    assert (px[:, :90, :3] == 100).all()
    # surviving mask keeps its positional color (index 1 → green) and a marker
    assert px[5, 195, :3].tolist() == [_tint(0), _tint(255), _tint(0)]
    assert (px[50, 135, :3] > 200).all()


def test_masks_without_boxes_are_not_numbered(png_mask, gray_base):
    base = gray_base(200, 100)
    left, right = _half_masks(png_mask, 200, 100)

    result = run_compositing(base, [left, right], [BoundingBox(0, 0, 100, 100)], Mode.COUNT)
    px = result.image.pixels.astype(int)

    assert result.count == 2
    assert (px[50, 35, :3] > 200).all()
    assert px[50, 135, :3].tolist() == [_tint(0), _tint(255), _tint(0)]


def test_repeated_runs_start_from_pristine_base(png_mask, gray_base):
    base = gray_base(20, 20)
    mask = Mask(encoded_data=png_mask(np.full((20, 20), 255, dtype=np.uint8)))

    first = run_compositing(base, [mask], [BoundingBox(0, 0, 20, 20)], Mode.COUNT)
    second = run_compositing(base, [mask], [BoundingBox(0, 0, 20, 20)], Mode.COUNT)

    assert first.image.tobytes() == second.image.tobytes()
    assert (base.pixels == 100).sum() == 20 * 20 * 3


def test_zero_sized_base_is_fatal(png_mask):
    base = RasterImage(pixels=np.zeros((0, 10, 4), dtype=np.uint8))
    mask = Mask(encoded_data=png_mask(np.full((4, 4), 255, dtype=np.uint8)))

    with pytest.raises(DimensionMismatchError):
        run_compositing(base, [mask], mode=Mode.REDACT)


def test_use_case_wrappers(b64_mask, gray_base):
    base = gray_base(40, 40)
    response = {
        "output": {
            "masks_b64": [b64_mask(np.full((10, 10), 255, dtype=np.uint8))],
            "boxes": [[0, 0, 40, 40]],
        }
    }
    segmentation = SegmentationResult.from_response(response)

    counted = count_objects(base, segmentation)
    redacted = redact_regions(base, segmentation)

    assert counted.mode is Mode.COUNT and counted.count == 1
    assert redacted.mode is Mode.REDACT and redacted.count == 1
    assert (redacted.image.pixels[..., :3] == 0).all()


def test_non_finite_box_does_not_abort_count_run(b64_mask, gray_base):
    base = gray_base(40, 40)
    segmentation = SegmentationResult.from_response({
        "masks": [b64_mask(np.full((40, 40), 255, dtype=np.uint8))],
        "boxes": [[float("nan"), 0, 5, 5]],
    })

    result = count_objects(base, segmentation)

    assert result.count == 1
    assert result.errors == []
    assert result.image.pixels[20, 20, :3].tolist() == [_tint(255), _tint(0), _tint(0)]


def test_markers_read_one_and_two_in_mask_order(png_mask, gray_base):
    base = gray_base(200, 100)
    left, right = _half_masks(png_mask, 200, 100)
    boxes = [BoundingBox(0, 0, 100, 100), BoundingBox(100, 0, 200, 100)]

    result = run_compositing(base, [left, right], boxes, Mode.COUNT)
    tinted = run_compositing(base, [left, right], (), Mode.COUNT).image

    numbered = AnnotationService().annotate(tinted, boxes, labels=[1, 2])
    swapped = AnnotationService().annotate(tinted, boxes, labels=[2, 1])
    assert result.image.tobytes() == numbered.tobytes()
    assert result.image.tobytes() != swapped.tobytes()


def test_survivor_after_failed_mask_is_numbered_one(png_mask, gray_base):
    base = gray_base(200, 100)
    _, right = _half_masks(png_mask, 200, 100)
    masks = [Mask(encoded_data=b"bad"), right]
    boxes = [BoundingBox(0, 0, 100, 100), BoundingBox(100, 0, 200, 100)]

    result = run_compositing(base, masks, boxes, Mode.COUNT)
    tinted = run_compositing(base, masks, (), Mode.COUNT).image

    one = AnnotationService().annotate(tinted, [boxes[1]], labels=[1])
    two = AnnotationService().annotate(tinted, [boxes[1]], labels=[2])
    assert result.image.tobytes() == one.tobytes()
    assert result.image.tobytes() != two.tobytes()
