from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .bounding_box import BoundingBox
from .mask import Mask

logger = logging.getLogger(__name__)


@dataclass
class SegmentationResult:
    """
    Masks + boxes as returned by the segmentation collaborator.

    ``boxes[i]`` is assumed to describe the same object as ``masks[i]``.
    Unusable box entries are kept as ``None`` so later indices stay aligned.
    """
    masks: List[Mask] = field(default_factory=list)
    boxes: List[Optional[BoundingBox]] = field(default_factory=list)

    @classmethod
    def from_response(cls, data: Dict[str, Any]) -> "SegmentationResult":
        # Hosted job runners nest the payload under "output"
        payload = data.get("output") or data
        if not isinstance(payload, dict):
            raise ValueError(f"Unsupported segmentation response payload: {type(payload).__name__}")

        raw_masks = payload.get("masks_b64") or payload.get("masks") or []
        raw_boxes = payload.get("boxes") or []

        masks = [Mask.from_b64(str(m)) for m in raw_masks]

        boxes: List[Optional[BoundingBox]] = []
        for i, raw in enumerate(raw_boxes):
            try:
                boxes.append(BoundingBox.from_sequence(raw))
            except (TypeError, ValueError) as err:
                logger.warning(f"Ignoring box {i}: {err}")
                boxes.append(None)

        return cls(masks=masks, boxes=boxes)
