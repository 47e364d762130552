from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import List

from .raster_image import RasterImage
from .style import Mode


class CompositeStatus(str, Enum):
    COMPLETED = "completed"
    NO_REGIONS = "no_regions"   # nothing survived decoding; image is the untouched base


@dataclass
class DecodeFailure:
    index: int    # position of the mask in the input sequence
    reason: str


@dataclass
class CompositeResult:
    """
    Data object returned by the compositing pipeline.
    ``count`` is the number of masks actually composited.
    """
    image: RasterImage
    count: int
    mode: Mode
    status: CompositeStatus = CompositeStatus.COMPLETED
    errors: List[DecodeFailure] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.status is CompositeStatus.NO_REGIONS
