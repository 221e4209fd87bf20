from __future__ import annotations

from typing import Iterable

from src.domain.models.journey import RealtimePayload, VehicleJourney


def is_active(
    vehicle_journey: VehicleJourney,
    time: float,
    realtime: RealtimePayload | None = None,
) -> bool:
    """True if `time` is inside the scheduled or any observed time window.

    `realtime` is the snapshot to check; when omitted the journey's current
    snapshot is read once.
    """

    if vehicle_journey.first_time <= time <= vehicle_journey.last_time:
        return True

    payload = realtime if realtime is not None else vehicle_journey.realtime
    if payload is None:
        return False
    return any(v.is_observed_at(time) for v in payload.vehicles)


def active_trips(
    vehicle_journeys: Iterable[VehicleJourney], time: float
) -> tuple[VehicleJourney, ...]:
    return tuple(vj for vj in vehicle_journeys if is_active(vj, time))
