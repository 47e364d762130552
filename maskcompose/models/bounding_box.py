from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Sequence, Tuple


@dataclass(frozen=True)
class BoundingBox:
    x1: float
    y1: float
    x2: float
    y2: float

    @property
    def width(self) -> float:
        return self.x2 - self.x1

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x1 + self.x2) / 2, (self.y1 + self.y2) / 2

    def is_finite(self) -> bool:
        return all(math.isfinite(v) for v in (self.x1, self.y1, self.x2, self.y2))

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> "BoundingBox":
        """Build from a ``[x1, y1, x2, y2]`` quadruple; extra entries are ignored."""
        if len(values) < 4:
            raise ValueError(f"Bounding box needs 4 coordinates, got {len(values)}")
        box = cls(*(float(v) for v in values[:4]))
        if not box.is_finite():
            raise ValueError(f"Bounding box has non-finite coordinates: {list(values[:4])}")
        return box
