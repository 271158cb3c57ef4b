"""Page geometry and the safe content area.

All coordinates are inches on a 16:9 page of 10 x 5.625 in.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from pptx.util import Emu

SLIDE_WIDTH_IN = 10.0
SLIDE_HEIGHT_IN = 5.625

# float slack when comparing edges
_EPSILON = 1e-6


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    w: float
    h: float

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def bottom(self) -> float:
        return self.y + self.h

    @property
    def center(self) -> "tuple[float, float]":
        return (self.x + self.w / 2, self.y + self.h / 2)

    @classmethod
    def centered(cls, cx: float, cy: float, w: float, h: float) -> "Rect":
        return cls(cx - w / 2, cy - h / 2, w, h)

    def contains(self, other: "Rect", tolerance: float = _EPSILON) -> bool:
        return (
            other.x >= self.x - tolerance
            and other.y >= self.y - tolerance
            and other.right <= self.right + tolerance
            and other.bottom <= self.bottom + tolerance
        )


SAFE_AREA = Rect(x=0.8, y=0.7, w=8.4, h=4.5)


def rotated_bounds(rect: Rect, rotation_deg: float = 0.0) -> Rect:
    """Axis-aligned bounding box of ``rect`` rotated about its center."""
    if not rotation_deg:
        return rect
    theta = math.radians(rotation_deg)
    cos_t, sin_t = abs(math.cos(theta)), abs(math.sin(theta))
    w = rect.w * cos_t + rect.h * sin_t
    h = rect.w * sin_t + rect.h * cos_t
    cx, cy = rect.center
    return Rect.centered(cx, cy, w, h)


def shape_bounds(shape) -> Rect:
    """Rotated bounding box of a placed python-pptx shape, in inches."""
    rect = Rect(
        Emu(shape.left).inches,
        Emu(shape.top).inches,
        Emu(shape.width).inches,
        Emu(shape.height).inches,
    )
    return rotated_bounds(rect, getattr(shape, "rotation", 0.0))
