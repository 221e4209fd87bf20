from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from src.adapters.api.dependencies import get_trajectory_service
from src.adapters.api.schemas.trips import (
    ActiveTripsSchema,
    MarkerSchema,
    ObservedPositionSchema,
    PointSchema,
    TimeRangeSchema,
    TripHistorySchema,
    TripMarkersSchema,
    TripPositionsSchema,
    VehicleHistorySchema,
    VehiclePositionSchema,
    ViewportSchema,
)
from src.app.services.trajectory_service import TrajectoryService
from src.domain.algorithms.time_utils import format_hhmmss, parse_time_value
from src.domain.exceptions import UnknownTripError
from src.domain.models import Marker, Point, VehiclePosition

router = APIRouter(tags=["trips"])


def _parse_time(raw: str | None, *, name: str) -> float | None:
    if raw is None:
        return None
    try:
        return parse_time_value(raw)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=f"Invalid {name}: {exc}") from exc


def _marker_to_schema(m: Marker, service: TrajectoryService) -> MarkerSchema:
    return MarkerSchema(
        id=m.id,
        time=m.time,
        clock_time=format_hhmmss(m.time),
        at=service.service_datetime(m.time),
        message=m.message,
        url=m.url,
        vehicle_number=m.vehicle_number,
    )


def _position_to_schema(p: VehiclePosition) -> VehiclePositionSchema:
    return VehiclePositionSchema(
        vehicle_number=p.vehicle_number,
        position=PointSchema(x=p.position.x, y=p.position.y),
        distance=p.distance,
        status=p.status.value,
        prognosed=p.prognosed,
    )


@router.get("/trips/active", response_model=ActiveTripsSchema)
def list_active_trips(
    time: str = Query(..., description="Seconds or HH:MM:SS"),
    service: TrajectoryService = Depends(get_trajectory_service),
) -> ActiveTripsSchema:
    t = _parse_time(time, name="time")
    return ActiveTripsSchema(time=t, trip_codes=list(service.get_active_trips(t)))


@router.get("/trips/positions", response_model=list[TripPositionsSchema])
def list_trip_positions(
    time: str = Query(..., description="Seconds or HH:MM:SS"),
    now: str | None = Query(default=None),
    service: TrajectoryService = Depends(get_trajectory_service),
) -> list[TripPositionsSchema]:
    t = _parse_time(time, name="time")
    trips = service.get_trip_positions_at_time(t, now=_parse_time(now, name="now"))
    return [
        TripPositionsSchema(
            trip_code=trip.trip_code,
            time=t,
            cancelled=trip.cancelled,
            vehicles=[_position_to_schema(p) for p in trip.positions],
        )
        for trip in trips
    ]


@router.get("/trips/time-range", response_model=TimeRangeSchema)
def get_time_range(
    service: TrajectoryService = Depends(get_trajectory_service),
) -> TimeRangeSchema:
    earliest, latest = service.dataset_time_range()
    return TimeRangeSchema(earliest=earliest, latest=latest)


@router.get("/trips/{trip_code}/positions", response_model=TripPositionsSchema)
def get_trip_positions(
    trip_code: str,
    time: str = Query(..., description="Seconds or HH:MM:SS"),
    now: str | None = Query(default=None),
    service: TrajectoryService = Depends(get_trajectory_service),
) -> TripPositionsSchema:
    t = _parse_time(time, name="time")
    try:
        trip = service.get_trip_positions(
            trip_code, t, now=_parse_time(now, name="now")
        )
    except UnknownTripError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    return TripPositionsSchema(
        trip_code=trip.trip_code,
        time=t,
        cancelled=trip.cancelled,
        vehicles=[_position_to_schema(p) for p in trip.positions],
    )


@router.get("/trips/{trip_code}/history", response_model=TripHistorySchema)
def get_trip_history(
    trip_code: str,
    now: str | None = Query(default=None),
    service: TrajectoryService = Depends(get_trajectory_service),
) -> TripHistorySchema:
    try:
        history = service.get_vehicle_history(
            trip_code, now=_parse_time(now, name="now")
        )
    except UnknownTripError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    return TripHistorySchema(
        trip_code=trip_code,
        vehicles=[
            VehicleHistorySchema(
                vehicle_number=h.vehicle_number,
                positions=[
                    ObservedPositionSchema(
                        time=o.time,
                        clock_time=format_hhmmss(o.time),
                        distance=o.distance,
                        status=o.status.value,
                        prognosed=o.prognosed,
                    )
                    for o in h.positions
                ],
                markers=[_marker_to_schema(m, service) for m in h.markers],
            )
            for h in history
        ],
    )


@router.get("/trips/{trip_code}/markers", response_model=TripMarkersSchema)
def get_trip_markers(
    trip_code: str,
    service: TrajectoryService = Depends(get_trajectory_service),
) -> TripMarkersSchema:
    # Unknown trips surface as 404 through the application-level handler.
    markers = service.get_markers(trip_code)
    return TripMarkersSchema(
        trip_code=trip_code,
        markers=[_marker_to_schema(m, service) for m in markers],
    )


@router.put("/viewport", response_model=ViewportSchema)
def set_viewport(
    req: ViewportSchema,
    service: TrajectoryService = Depends(get_trajectory_service),
) -> ViewportSchema:
    service.configure_viewport(width=req.width, height=req.height)
    return req


@router.post("/viewport/project", response_model=PointSchema)
def project_point(
    req: PointSchema,
    service: TrajectoryService = Depends(get_trajectory_service),
) -> PointSchema:
    p = service.project_to_viewport(Point(x=req.x, y=req.y))
    return PointSchema(x=p.x, y=p.y)
