from .mask_decoder_service import MaskDecoderService
from .threshold_service import ThresholdService
from .styling_service import StylingService
from .compositing_service import CompositingService
from .annotation_service import AnnotationService

__all__ = [
    "MaskDecoderService",
    "ThresholdService",
    "StylingService",
    "CompositingService",
    "AnnotationService",
]
