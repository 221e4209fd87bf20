from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from src.domain.models.geo import Point
from src.domain.models.network import Stop


@dataclass(frozen=True, slots=True)
class Bounds:
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @classmethod
    def from_points(cls, points: Iterable[Point]) -> Bounds:
        pts = list(points)
        if not pts:
            raise ValueError("Cannot compute the bounds of an empty set of points")
        return cls(
            min_x=min(p.x for p in pts),
            min_y=min(p.y for p in pts),
            max_x=max(p.x for p in pts),
            max_y=max(p.y for p in pts),
        )

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y


@dataclass(frozen=True, slots=True)
class Viewport:
    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Invalid viewport size: {self.width}x{self.height}")

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


def _scale(bounds: Bounds, viewport: Viewport) -> float:
    if bounds.width == 0 and bounds.height == 0:
        return 0.0
    if bounds.height == 0:
        return viewport.width / bounds.width
    if bounds.width == 0:
        return viewport.height / bounds.height
    if bounds.width / bounds.height > viewport.aspect_ratio:
        # Source is wider: width binds, vertical slack is centered.
        return viewport.width / bounds.width
    return viewport.height / bounds.height


def project(
    point: Point, bounds: Bounds, viewport: Viewport, *, flip_y: bool = True
) -> Point:
    """Map a survey-grid point into the viewport, keeping the aspect ratio.

    With `flip_y` the vertical axis is mirrored, since drawing surfaces grow
    downwards while grid northings grow upwards.
    """

    scale = _scale(bounds, viewport)
    offset_x = (viewport.width - bounds.width * scale) / 2.0
    offset_y = (viewport.height - bounds.height * scale) / 2.0

    x = (point.x - bounds.min_x) * scale + offset_x
    y = (point.y - bounds.min_y) * scale + offset_y
    if flip_y:
        y = viewport.height - y
    return Point(x=x, y=y)


@dataclass(frozen=True, slots=True)
class CoordinateProjector:
    """One mapping shared by every element drawn on the same viewport."""

    bounds: Bounds
    viewport: Viewport
    flip_y: bool = True

    @classmethod
    def from_points(
        cls, points: Iterable[Point], viewport: Viewport, *, flip_y: bool = True
    ) -> CoordinateProjector:
        return cls(bounds=Bounds.from_points(points), viewport=viewport, flip_y=flip_y)

    @classmethod
    def from_stops(
        cls, stops: Iterable[Stop], viewport: Viewport, *, flip_y: bool = True
    ) -> CoordinateProjector:
        return cls.from_points((s.position for s in stops), viewport, flip_y=flip_y)

    def project(self, point: Point) -> Point:
        return project(point, self.bounds, self.viewport, flip_y=self.flip_y)
