from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from src.domain.algorithms.interpolation import time_at_distance
from src.domain.models.journey import ScheduleSample
from src.domain.models.status import VehicleStatus


@dataclass(frozen=True, slots=True)
class Tolerance:
    """Seconds a vehicle may run ahead of (`early_s`) or behind (`late_s`)
    the theoretical time and still count as on time."""

    early_s: float = 15.0
    late_s: float = 120.0

    def __post_init__(self) -> None:
        if self.early_s < 0 or self.late_s < 0:
            raise ValueError("Tolerances must be non-negative")


DEFAULT_TOLERANCE = Tolerance()

# Exact match against the theoretical time, as older datasets were checked.
STRICT_TOLERANCE = Tolerance(early_s=0.0, late_s=0.0)


def theoretical_time(
    static_schedule: Sequence[ScheduleSample], distance: float
) -> float | None:
    """Time at which the static schedule reaches `distance`.

    Returns None when no schedule segment covers the distance.
    """

    for a, b in zip(static_schedule, static_schedule[1:]):
        if a.distance <= distance <= b.distance:
            return time_at_distance(a, b, distance)
    return None


def classify(
    time: float, th_time: float, tolerance: Tolerance = DEFAULT_TOLERANCE
) -> VehicleStatus:
    if time < th_time - tolerance.early_s:
        return VehicleStatus.EARLY
    if time <= th_time + tolerance.late_s:
        return VehicleStatus.ONTIME
    return VehicleStatus.LATE


def status_at(
    static_schedule: Sequence[ScheduleSample],
    time: float,
    distance: float,
    tolerance: Tolerance = DEFAULT_TOLERANCE,
) -> VehicleStatus:
    """Compare a vehicle seen at `distance` at `time` against the schedule."""

    th_time = theoretical_time(static_schedule, distance)
    if th_time is None:
        return VehicleStatus.UNDEFINED
    return classify(time, th_time, tolerance)


def is_prognosed(time: float, now: float) -> bool:
    """True for observations still in the future, i.e. projections."""

    return time > now
