from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .geo import Point
from .marker import Marker


class VehicleStatus(str, Enum):
    EARLY = "early"
    ONTIME = "ontime"
    LATE = "late"
    UNDEFINED = "undefined"


STATIC_VEHICLE_NUMBER = "0"


@dataclass(frozen=True, slots=True)
class VehiclePosition:
    """Where a vehicle is at a query time and how it compares to the schedule."""

    vehicle_number: str
    position: Point
    distance: float
    status: VehicleStatus
    prognosed: bool = False


@dataclass(frozen=True, slots=True)
class ObservedPosition:
    time: float
    distance: float
    status: VehicleStatus
    prognosed: bool = False


@dataclass(frozen=True, slots=True)
class VehicleHistory:
    vehicle_number: str
    positions: tuple[ObservedPosition, ...] = ()
    markers: tuple[Marker, ...] = ()


@dataclass(frozen=True, slots=True)
class TripPositions:
    trip_code: str
    positions: tuple[VehiclePosition, ...]
    cancelled: bool = False
