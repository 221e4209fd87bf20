from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

Status = Literal["early", "ontime", "late", "undefined"]


class PointSchema(BaseModel):
    x: float
    y: float


class ActiveTripsSchema(BaseModel):
    time: float
    trip_codes: list[str]


class VehiclePositionSchema(BaseModel):
    vehicle_number: str
    position: PointSchema
    distance: float
    status: Status
    prognosed: bool = False


class TripPositionsSchema(BaseModel):
    trip_code: str
    time: float
    cancelled: bool = False
    vehicles: list[VehiclePositionSchema]


class ObservedPositionSchema(BaseModel):
    time: float
    clock_time: str
    distance: float
    status: Status
    prognosed: bool = False


class MarkerSchema(BaseModel):
    id: str
    time: float
    clock_time: str
    at: datetime | None = None
    message: str = ""
    url: str | None = None
    vehicle_number: str | None = None


class VehicleHistorySchema(BaseModel):
    vehicle_number: str
    positions: list[ObservedPositionSchema]
    markers: list[MarkerSchema] = []


class TripHistorySchema(BaseModel):
    trip_code: str
    vehicles: list[VehicleHistorySchema]


class TimeRangeSchema(BaseModel):
    earliest: float | None = None
    latest: float | None = None


class ViewportSchema(BaseModel):
    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)


class TripMarkersSchema(BaseModel):
    trip_code: str
    markers: list[MarkerSchema]
