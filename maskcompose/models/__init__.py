from .raster_image import RasterImage
from .mask import Mask
from .bounding_box import BoundingBox
from .alpha_mask import AlphaMask
from .style import Mode, Style
from .segmentation_result import SegmentationResult
from .composite_result import CompositeResult, CompositeStatus, DecodeFailure

__all__ = [
    "RasterImage",
    "Mask",
    "BoundingBox",
    "AlphaMask",
    "Mode",
    "Style",
    "SegmentationResult",
    "CompositeResult",
    "CompositeStatus",
    "DecodeFailure",
]
