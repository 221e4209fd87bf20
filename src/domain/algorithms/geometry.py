from __future__ import annotations

from typing import Iterable

from src.domain.models.geo import Point, Segment


def interpolate(a: Point, b: Point, percentage: float) -> Point:
    """Point at `percentage` (0 -> a, 1 -> b) along the segment a-b."""

    return Segment(start=a, end=b).point_at(percentage)


def centroid(points: Iterable[Point]) -> Point:
    """Arithmetic mean of the given points."""

    total_x = 0.0
    total_y = 0.0
    count = 0
    for p in points:
        total_x += p.x
        total_y += p.y
        count += 1

    if count == 0:
        raise ValueError("Cannot compute the centroid of an empty set of points")

    return Point(x=total_x / count, y=total_y / count)
