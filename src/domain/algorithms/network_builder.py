from __future__ import annotations

import logging
import math
from typing import Any, Iterable, Mapping, Sequence

from src.domain.algorithms.geometry import centroid
from src.domain.exceptions import (
    InvalidScheduleError,
    NetworkModelError,
    UnresolvedReferenceError,
)
from src.domain.models.dataset import NetworkModel, RawDataset
from src.domain.models.geo import Point
from src.domain.models.journey import (
    LiveVehicle,
    RealtimePayload,
    ScheduleSample,
    VehicleJourney,
)
from src.domain.models.marker import Marker
from src.domain.models.network import JourneyPattern, Line, Link, Stop, StopArea

logger = logging.getLogger(__name__)


def _check_non_decreasing(code: str, label: str, values: Sequence[float]) -> None:
    for i in range(1, len(values)):
        if values[i] < values[i - 1]:
            raise InvalidScheduleError(
                code,
                f"{label} decrease at index {i} ({values[i - 1]} -> {values[i]})",
            )


def _numbers(code: str, label: str, raw: Any) -> tuple[float, ...]:
    try:
        values = tuple(float(v) for v in raw)
    except (TypeError, ValueError) as exc:
        raise InvalidScheduleError(code, f"{label} must be numbers") from exc
    # NaN compares false both ways and would slip past the ordering check.
    if not all(math.isfinite(v) for v in values):
        raise InvalidScheduleError(code, f"{label} must be finite numbers")
    return values


def build_stops(
    raw_stops: Mapping[str, Mapping[str, Any]],
) -> tuple[dict[str, Stop], dict[str, StopArea]]:
    """Build stop areas from the raw groupings, then the stops holding them."""

    positions: dict[str, Point] = {}
    members_by_area: dict[str, list[str]] = {}
    for code, raw in raw_stops.items():
        area_code = raw.get("area", raw.get("stopAreaRef"))
        if not area_code:
            raise NetworkModelError(f"Stop {code!r} has no stop area")
        try:
            positions[code] = Point(x=float(raw["x"]), y=float(raw["y"]))
        except (KeyError, TypeError, ValueError) as exc:
            raise NetworkModelError(f"Stop {code!r} has an invalid position") from exc
        members_by_area.setdefault(str(area_code), []).append(code)

    stop_areas: dict[str, StopArea] = {}
    for area_code, member_codes in members_by_area.items():
        first = raw_stops[member_codes[0]]
        stop_areas[area_code] = StopArea(
            code=area_code,
            name=str(first.get("name") or member_codes[0]),
            center=centroid(positions[c] for c in member_codes),
            stop_codes=tuple(member_codes),
        )

    stops: dict[str, Stop] = {}
    for code, raw in raw_stops.items():
        area_code = str(raw.get("area", raw.get("stopAreaRef")))
        stops[code] = Stop(
            code=code,
            name=str(raw.get("name") or code),
            position=positions[code],
            area=stop_areas[area_code],
        )

    return stops, stop_areas


def build_journey_patterns(
    raw_journey_patterns: Mapping[str, Mapping[str, Any]],
    stops: Mapping[str, Stop],
) -> dict[str, JourneyPattern]:
    journey_patterns: dict[str, JourneyPattern] = {}
    for code, raw in raw_journey_patterns.items():
        stop_codes = list(raw.get("pointsInSequence") or ())
        distances = _numbers(code, "distances", raw.get("distances") or ())

        if len(stop_codes) < 2:
            raise InvalidScheduleError(code, "a journey pattern needs at least 2 stops")
        if len(distances) != len(stop_codes):
            raise InvalidScheduleError(
                code,
                f"{len(stop_codes)} stops but {len(distances)} distances",
            )
        if distances[0] != 0:
            raise InvalidScheduleError(code, "the first distance must be 0")
        _check_non_decreasing(code, "distances", distances)

        resolved: list[Stop] = []
        for stop_code in stop_codes:
            stop = stops.get(stop_code)
            if stop is None:
                raise UnresolvedReferenceError("stop", stop_code, referenced_by=code)
            resolved.append(stop)

        line_ref = raw.get("lineRef")
        direction = raw.get("direction")
        journey_patterns[code] = JourneyPattern(
            code=code,
            stops=tuple(resolved),
            distances=distances,
            line_code=str(line_ref) if line_ref is not None else None,
            direction=int(direction) if direction is not None else None,
        )
    return journey_patterns


def rebuild_links(journey_patterns: Iterable[JourneyPattern]) -> dict[str, Link]:
    """Link registry over every pair of consecutive stops; shared pairs collapse."""

    links: dict[str, Link] = {}
    for jp in journey_patterns:
        for stop_a, stop_b in zip(jp.stops, jp.stops[1:]):
            link = Link(stop_a=stop_a, stop_b=stop_b)
            links.setdefault(link.key, link)
    return links


def build_lines(journey_patterns: Iterable[JourneyPattern]) -> dict[str, Line]:
    grouped: dict[str, list[str]] = {}
    for jp in journey_patterns:
        if jp.line_code is None:
            continue
        grouped.setdefault(jp.line_code, []).append(jp.code)
    return {
        code: Line(code=code, journey_pattern_codes=tuple(jp_codes))
        for code, jp_codes in grouped.items()
    }


def _raw_vehicles(raw_realtime: Any) -> Iterable[tuple[str, Mapping[str, Any]]]:
    # Feeds ship either a list of vehicles or a mapping keyed by vehicle number.
    if isinstance(raw_realtime, Mapping):
        for number, raw in raw_realtime.items():
            yield str(raw.get("vehicleNumber", number)), raw
        return
    for raw in raw_realtime:
        yield str(raw.get("vehicleNumber")), raw


def parse_realtime(
    code: str, raw_realtime: Any, *, cancelled: bool = False
) -> RealtimePayload:
    """Turn the raw realtime records of one vehicle journey into a snapshot."""

    vehicles: list[LiveVehicle] = []
    for vehicle_number, raw in _raw_vehicles(raw_realtime or ()):
        label = f"{code}/{vehicle_number}"
        times = _numbers(label, "times", raw.get("times") or ())
        distances = _numbers(label, "distances", raw.get("distances") or ())
        if not times:
            raise InvalidScheduleError(label, "no realtime observations")
        if len(times) != len(distances):
            raise InvalidScheduleError(
                label, f"{len(times)} times but {len(distances)} distances"
            )
        _check_non_decreasing(label, "times", times)
        _check_non_decreasing(label, "distances", distances)
        vehicles.append(
            LiveVehicle(
                vehicle_number=vehicle_number,
                samples=tuple(
                    ScheduleSample(time=t, distance=d) for t, d in zip(times, distances)
                ),
            )
        )
    return RealtimePayload(vehicles=tuple(vehicles), cancelled=bool(cancelled))


def build_vehicle_journeys(
    raw_vehicle_journeys: Mapping[str, Mapping[str, Any]],
    journey_patterns: Mapping[str, JourneyPattern],
) -> dict[str, VehicleJourney]:
    vehicle_journeys: dict[str, VehicleJourney] = {}
    for code, raw in raw_vehicle_journeys.items():
        jp_code = raw.get("journeyPatternRef")
        jp = journey_patterns.get(jp_code) if jp_code is not None else None
        if jp is None:
            raise UnresolvedReferenceError(
                "journey pattern", str(jp_code), referenced_by=code
            )

        times = _numbers(code, "times", raw.get("times") or ())
        if len(times) != len(jp.stops):
            raise InvalidScheduleError(
                code, f"{len(times)} times for {len(jp.stops)} stops of {jp.code!r}"
            )
        _check_non_decreasing(code, "times", times)

        realtime = None
        if raw.get("realtime") is not None or raw.get("cancelled"):
            realtime = parse_realtime(
                code, raw.get("realtime"), cancelled=bool(raw.get("cancelled"))
            )

        vehicle_journeys[code] = VehicleJourney(
            code=code, journey_pattern=jp, times=times, initial_realtime=realtime
        )
    return vehicle_journeys


def build_markers(
    raw_markers: Iterable[Mapping[str, Any]],
    vehicle_journeys: Mapping[str, VehicleJourney],
) -> dict[str, tuple[Marker, ...]]:
    """Attach markers to their vehicle journey, or to one of its vehicles.

    Markers naming an unknown trip, or a vehicle the trip does not track, are
    skipped.
    """

    grouped: dict[str, list[Marker]] = {}
    for index, raw in enumerate(raw_markers):
        marker_id = raw.get("id")
        if marker_id is None:
            raise NetworkModelError(f"Marker #{index} has no id")
        marker_id = str(marker_id)

        reference = raw.get("reference") or {}
        vj_code = reference.get("vehicleJourneyCode")
        vj = vehicle_journeys.get(str(vj_code)) if vj_code is not None else None
        if vj is None:
            logger.warning("Skipping marker %r for unknown trip %r", marker_id, vj_code)
            continue

        raw_vehicle = reference.get("vehicleNumber")
        vehicle_number = str(raw_vehicle) if raw_vehicle is not None else None
        if vehicle_number is not None:
            payload = vj.realtime
            if payload is None or payload.vehicle(vehicle_number) is None:
                logger.warning(
                    "Skipping marker %r for untracked vehicle %s/%s",
                    marker_id,
                    vj.code,
                    vehicle_number,
                )
                continue

        (time,) = _numbers(marker_id, "time", [raw.get("time")])
        url = raw.get("url")
        grouped.setdefault(vj.code, []).append(
            Marker(
                id=marker_id,
                vehicle_journey_code=vj.code,
                time=time,
                message=str(raw.get("message") or ""),
                url=str(url) if url else None,
                vehicle_number=vehicle_number,
            )
        )

    return {
        code: tuple(sorted(markers, key=lambda m: m.time))
        for code, markers in grouped.items()
    }


def build_network(
    raw_stops: Mapping[str, Mapping[str, Any]],
    raw_journey_patterns: Mapping[str, Mapping[str, Any]],
    raw_vehicle_journeys: Mapping[str, Mapping[str, Any]],
    raw_markers: Iterable[Mapping[str, Any]] = (),
) -> NetworkModel:
    """Link the raw schedule records into a read-only network model.

    Any unresolved code or malformed sequence aborts the whole build.
    """

    stops, stop_areas = build_stops(raw_stops)
    journey_patterns = build_journey_patterns(raw_journey_patterns, stops)
    links = rebuild_links(journey_patterns.values())
    lines = build_lines(journey_patterns.values())
    vehicle_journeys = build_vehicle_journeys(raw_vehicle_journeys, journey_patterns)
    markers = build_markers(raw_markers, vehicle_journeys)

    logger.info(
        "Built network: %d stops, %d stop areas, %d journey patterns, "
        "%d links, %d lines, %d vehicle journeys, %d markers",
        len(stops),
        len(stop_areas),
        len(journey_patterns),
        len(links),
        len(lines),
        len(vehicle_journeys),
        sum(len(m) for m in markers.values()),
    )

    return NetworkModel(
        stops=stops,
        stop_areas=stop_areas,
        journey_patterns=journey_patterns,
        links=links,
        lines=lines,
        vehicle_journeys=vehicle_journeys,
        markers=markers,
    )


def build_network_from_dataset(dataset: RawDataset) -> NetworkModel:
    return build_network(
        dataset.scheduled_stop_points,
        dataset.journey_patterns,
        dataset.vehicle_journeys,
        dataset.markers,
    )
