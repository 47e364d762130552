# pipeline/compositing_pipeline.py
from __future__ import annotations
import logging
from typing import List, Optional, Sequence

from ..models.bounding_box import BoundingBox
from ..models.composite_result import CompositeResult, CompositeStatus
from ..models.mask import Mask
from ..models.raster_image import RasterImage
from ..models.segmentation_result import SegmentationResult
from ..models.style import Mode
from ..services.annotation_service import AnnotationService
from ..services.compositing_service import CompositingService
from ..services.mask_decoder_service import MaskDecoderService
from ..services.styling_service import StylingService
from ..services.threshold_service import ThresholdService

logger = logging.getLogger(__name__)


def run_compositing(
    base: RasterImage,
    masks: Sequence[Mask],
    boxes: Sequence[Optional[BoundingBox]] = (),
    mode: Mode = Mode.COUNT,
    *,
    decoder_service: MaskDecoderService = MaskDecoderService(),
    threshold_service: ThresholdService = ThresholdService(),
    styling_service: StylingService = StylingService(),
    compositing_service: CompositingService = CompositingService(),
    annotation_service: AnnotationService = AnnotationService(),
) -> CompositeResult:
    """
    Render per-object masks onto *base*:
        • decode every mask concurrently (join before compositing)
        • threshold + style each surviving mask
        • composite in input order (later masks paint over earlier ones)
        • count mode: draw numbered markers on the matching boxes

    *base* is only read; the result always holds a fresh image.
    Masks that fail to decode are reported in ``result.errors`` and skipped
    from both compositing and numbering.
    """
    mode = Mode(mode)
    # fatal conditions abort before any decoding
    compositing_service.check_target(base)

    decoded, failures = decoder_service.decode_all(masks, base.width, base.height)

    if not decoded:
        if mode is Mode.REDACT:
            logger.info("No areas found to redact")
        else:
            logger.info("No objects found to count")
        return CompositeResult(
            image=base.copy(),
            count=0,
            mode=mode,
            status=CompositeStatus.NO_REGIONS,
            errors=failures,
        )

    styled = []
    for index, intensity in decoded:
        # color follows the mask's input position
        style = styling_service.style_for(index, mode)
        styled.append((threshold_service.threshold_buffer(intensity, mode), style))

    image = compositing_service.composite(base, styled)

    if mode is Mode.COUNT:
        marker_boxes: List[BoundingBox] = []
        labels: List[int] = []
        for rank, (index, _) in enumerate(decoded, 1):
            if index < len(boxes) and boxes[index] is not None:
                marker_boxes.append(boxes[index])
                labels.append(rank)
        image = annotation_service.annotate(image, marker_boxes, labels)

    logger.info(
        f"{mode.value}: composited {len(decoded)} of {len(masks)} masks "
        f"({len(failures)} failed to decode)"
    )
    return CompositeResult(image=image, count=len(decoded), mode=mode, errors=failures)


def count_objects(base: RasterImage, segmentation: SegmentationResult, **services) -> CompositeResult:
    """Tinted, numbered overlay of every detected object."""
    return run_compositing(base, segmentation.masks, segmentation.boxes, Mode.COUNT, **services)


def redact_regions(base: RasterImage, segmentation: SegmentationResult, **services) -> CompositeResult:
    """Opaque black patches over every detected region; boxes are not used."""
    return run_compositing(base, segmentation.masks, (), Mode.REDACT, **services)
