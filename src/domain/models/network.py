from __future__ import annotations

from dataclasses import dataclass

from .geo import Point, Segment


@dataclass(frozen=True, slots=True)
class StopArea:
    """A cluster of nearby stops drawn as a single node.

    The center is the centroid of the member stops and is fixed at build time.
    """

    code: str
    name: str
    center: Point
    stop_codes: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class Stop:
    code: str
    name: str
    position: Point
    area: StopArea


@dataclass(frozen=True, slots=True)
class Line:
    code: str
    journey_pattern_codes: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class JourneyPattern:
    """A route shape: ordered stops with cumulative distances from the first one."""

    code: str
    stops: tuple[Stop, ...]
    distances: tuple[float, ...]
    line_code: str | None = None
    direction: int | None = None

    @property
    def total_distance(self) -> float:
        return self.distances[-1]


def link_key(stop_a_code: str, stop_b_code: str) -> str:
    return f"{stop_a_code}|{stop_b_code}"


@dataclass(frozen=True, slots=True)
class Link:
    """Directed pair of adjacent stops shared by one or more journey patterns."""

    stop_a: Stop
    stop_b: Stop

    @property
    def key(self) -> str:
        return link_key(self.stop_a.code, self.stop_b.code)

    @property
    def area_segment(self) -> Segment:
        return Segment(start=self.stop_a.area.center, end=self.stop_b.area.center)

    def area_point_at(self, percentage: float) -> Point:
        return self.area_segment.point_at(percentage)
