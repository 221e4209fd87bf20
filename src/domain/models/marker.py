from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Marker:
    """An annotation pinned to a trip, or to one tracked vehicle of a trip.

    `vehicle_number` is None for markers that concern the whole trip.
    """

    id: str
    vehicle_journey_code: str
    time: float
    message: str = ""
    url: str | None = None
    vehicle_number: str | None = None
