from __future__ import annotations

from typing import Mapping, Sequence

from src.domain.models.geo import Point
from src.domain.models.journey import ScheduleSample
from src.domain.models.network import JourneyPattern, Link, link_key


def _fraction(value: float, start: float, end: float) -> float:
    # Zero-length segments stay at their start.
    span = end - start
    if span == 0:
        return 0.0
    return (value - start) / span


def distance_at_time(schedule: Sequence[ScheduleSample], time: float) -> float:
    """Distance traveled at `time`, assuming linear motion between samples.

    Times before the first sample or after the last one are clamped.
    """

    if not schedule:
        raise ValueError("Schedule must contain at least one sample")

    first = schedule[0]
    last = schedule[-1]
    if time == last.time:
        return last.distance
    if len(schedule) == 1 or time <= first.time:
        return first.distance
    if time >= last.time:
        return last.distance

    for i in range(len(schedule) - 1):
        a = schedule[i]
        b = schedule[i + 1]
        if a.time <= time < b.time:
            p = _fraction(time, a.time, b.time)
            return a.distance + p * (b.distance - a.distance)

    # Unreachable for a non-decreasing schedule.
    return last.distance


def time_at_distance(a: ScheduleSample, b: ScheduleSample, distance: float) -> float:
    """Time at which a vehicle following a->b exactly reaches `distance`."""

    p = _fraction(distance, a.distance, b.distance)
    return a.time + p * (b.time - a.time)


def segment_index_for_distance(distances: Sequence[float], distance: float) -> int:
    """Index i with distances[i] <= distance < distances[i + 1].

    Out-of-range distances map to the first or last segment.
    """

    last_segment = len(distances) - 2
    if distance <= distances[0]:
        return 0
    if distance >= distances[-1]:
        return last_segment
    for i in range(last_segment + 1):
        if distances[i] <= distance < distances[i + 1]:
            return i
    return last_segment


def position_from_distance(
    journey_pattern: JourneyPattern, links: Mapping[str, Link], distance: float
) -> Point:
    """Position of a vehicle that traveled `distance` along the journey pattern.

    Vehicles move along the segment joining the centers of the stop areas of
    two consecutive stops, not along the raw stop-to-stop segment.
    """

    stops = journey_pattern.stops
    distances = journey_pattern.distances

    if distance >= distances[-1]:
        link = links[link_key(stops[-2].code, stops[-1].code)]
        return link.area_point_at(1.0)

    if distance <= distances[0]:
        link = links[link_key(stops[0].code, stops[1].code)]
        return link.area_point_at(0.0)

    i = segment_index_for_distance(distances, distance)
    p = _fraction(distance, distances[i], distances[i + 1])
    link = links[link_key(stops[i].code, stops[i + 1].code)]
    return link.area_point_at(p)
