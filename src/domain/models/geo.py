from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Point:
    """A position on a projected 2D plane (survey grid or drawing surface)."""

    x: float
    y: float

    def __post_init__(self) -> None:
        if not math.isfinite(self.x):
            raise ValueError(f"Invalid x coordinate: {self.x}")
        if not math.isfinite(self.y):
            raise ValueError(f"Invalid y coordinate: {self.y}")


@dataclass(frozen=True, slots=True)
class Segment:
    start: Point
    end: Point

    def point_at(self, percentage: float) -> Point:
        return Point(
            x=self.start.x + (self.end.x - self.start.x) * percentage,
            y=self.start.y + (self.end.y - self.start.y) * percentage,
        )
