from .dataset import NetworkModel, RawDataset
from .geo import Point, Segment
from .journey import LiveVehicle, RealtimePayload, ScheduleSample, VehicleJourney
from .marker import Marker
from .network import JourneyPattern, Line, Link, Stop, StopArea, link_key
from .status import (
    STATIC_VEHICLE_NUMBER,
    ObservedPosition,
    TripPositions,
    VehicleHistory,
    VehiclePosition,
    VehicleStatus,
)

__all__ = [
    "JourneyPattern",
    "Line",
    "Link",
    "LiveVehicle",
    "Marker",
    "NetworkModel",
    "ObservedPosition",
    "Point",
    "RawDataset",
    "RealtimePayload",
    "STATIC_VEHICLE_NUMBER",
    "ScheduleSample",
    "Segment",
    "Stop",
    "StopArea",
    "TripPositions",
    "VehicleHistory",
    "VehicleJourney",
    "VehiclePosition",
    "VehicleStatus",
    "link_key",
]
