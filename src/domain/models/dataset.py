from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Sequence

from .journey import VehicleJourney
from .marker import Marker
from .network import JourneyPattern, Line, Link, Stop, StopArea, link_key


@dataclass(frozen=True, slots=True)
class RawDataset:
    """The raw input records, keyed by code, as read from storage."""

    scheduled_stop_points: Mapping[str, Mapping[str, Any]]
    journey_patterns: Mapping[str, Mapping[str, Any]]
    vehicle_journeys: Mapping[str, Mapping[str, Any]]
    markers: Sequence[Mapping[str, Any]] = ()


@dataclass(frozen=True, slots=True)
class NetworkModel:
    """The linked, read-only transport network.

    All registries are read-only views; only the realtime payload of each
    vehicle journey may change after construction. `markers` is keyed by
    vehicle journey code.
    """

    stops: Mapping[str, Stop]
    stop_areas: Mapping[str, StopArea]
    journey_patterns: Mapping[str, JourneyPattern]
    links: Mapping[str, Link]
    lines: Mapping[str, Line]
    vehicle_journeys: Mapping[str, VehicleJourney]
    markers: Mapping[str, tuple[Marker, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for name in (
            "stops",
            "stop_areas",
            "journey_patterns",
            "links",
            "lines",
            "vehicle_journeys",
            "markers",
        ):
            value = getattr(self, name)
            if not isinstance(value, MappingProxyType):
                object.__setattr__(self, name, MappingProxyType(dict(value)))

    def markers_for(self, vehicle_journey_code: str) -> tuple[Marker, ...]:
        return self.markers.get(vehicle_journey_code, ())

    def link_for(self, stop_a: Stop, stop_b: Stop) -> Link | None:
        return self.links.get(link_key(stop_a.code, stop_b.code))

    @property
    def earliest_time(self) -> float | None:
        if not self.vehicle_journeys:
            return None
        return min(vj.first_time for vj in self.vehicle_journeys.values())

    @property
    def latest_time(self) -> float | None:
        if not self.vehicle_journeys:
            return None
        return max(vj.last_time for vj in self.vehicle_journeys.values())
