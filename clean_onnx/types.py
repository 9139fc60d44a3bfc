from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Tuple


@dataclass(frozen=True)
class BoundingBox:
    """
    One detected object region in original image pixel coordinates.

    Corners are stored as decoded; call `canonical()` to get x1 <= x2 and
    y1 <= y2. All area helpers canonicalise first.
    """

    label: str
    confidence: float
    x1: float
    y1: float
    x2: float
    y2: float

    def as_xyxy(self) -> Tuple[float, float, float, float]:
        return self.x1, self.y1, self.x2, self.y2

    def canonical(self) -> "BoundingBox":
        x1, x2 = min(self.x1, self.x2), max(self.x1, self.x2)
        y1, y2 = min(self.y1, self.y2), max(self.y1, self.y2)
        if (x1, y1, x2, y2) == self.as_xyxy():
            return self
        return replace(self, x1=x1, y1=y1, x2=x2, y2=y2)

    def area(self) -> float:
        b = self.canonical()
        return (b.x2 - b.x1) * (b.y2 - b.y1)

    def intersection(self, other: "BoundingBox") -> float:
        a = self.canonical()
        b = other.canonical()
        w = max(0.0, min(a.x2, b.x2) - max(a.x1, b.x1))
        h = max(0.0, min(a.y2, b.y2) - max(a.y1, b.y1))
        return w * h

    def union(self, other: "BoundingBox") -> float:
        return self.area() + other.area() - self.intersection(other)

    def iou(self, other: "BoundingBox") -> float:
        # Two zero-area boxes have no union; treat them as non-overlapping.
        union = self.union(other)
        if union <= 0.0:
            return 0.0
        return self.intersection(other) / union

    def to_rect(self) -> Tuple[int, int, int, int]:
        """
        Integer pixel rectangle (truncated corners, canonical order), handy for drawing.
        """

        x1, y1, x2, y2 = int(self.x1), int(self.y1), int(self.x2), int(self.y2)
        return min(x1, x2), min(y1, y2), max(x1, x2), max(y1, y2)

    def __str__(self) -> str:
        return (
            f"Object {self.label} (confidence {self.confidence:f}): "
            f"({self.x1:f}, {self.y1:f}), ({self.x2:f}, {self.y2:f})"
        )


def canonicalize(box: BoundingBox) -> BoundingBox:
    return box.canonical()


def area(box: BoundingBox) -> float:
    return box.area()


def intersection_area(a: BoundingBox, b: BoundingBox) -> float:
    return a.intersection(b)


def union_area(a: BoundingBox, b: BoundingBox) -> float:
    return a.union(b)


def iou(a: BoundingBox, b: BoundingBox) -> float:
    return a.iou(b)
