from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Callable

from src.app.ports.output import IDatasetRepository
from src.domain.algorithms.activity import active_trips
from src.domain.algorithms.deviation import (
    DEFAULT_TOLERANCE,
    Tolerance,
    is_prognosed,
    status_at,
)
from src.domain.algorithms.interpolation import (
    distance_at_time,
    position_from_distance,
)
from src.domain.algorithms.network_builder import build_network_from_dataset
from src.domain.algorithms.projection import CoordinateProjector, Viewport
from src.domain.algorithms.time_utils import (
    seconds_since_midnight,
    service_datetime_from_seconds,
)
from src.domain.exceptions import UnknownTripError
from src.domain.models import (
    STATIC_VEHICLE_NUMBER,
    Marker,
    NetworkModel,
    ObservedPosition,
    Point,
    RealtimePayload,
    TripPositions,
    VehicleHistory,
    VehicleJourney,
    VehiclePosition,
    VehicleStatus,
)

logger = logging.getLogger(__name__)


def _wall_clock_seconds() -> float:
    return seconds_since_midnight(datetime.now())


@dataclass(slots=True)
class TrajectoryService:
    """Answers "where is this trip at time T and is it on schedule?".

    The network is built once from the dataset repository on first use and
    shared by every query afterwards.

    Env vars:
      - VIEWPORT_WIDTH / VIEWPORT_HEIGHT: drawing area (default 1000x800)
      - DEVIATION_EARLY_TOLERANCE_S / DEVIATION_LATE_TOLERANCE_S: on-time band
      - SERVICE_DATE: ISO date the service-day seconds are counted from
    """

    dataset_repository: IDatasetRepository
    viewport: Viewport | None = None
    tolerance: Tolerance | None = None
    clock: Callable[[], float] = _wall_clock_seconds
    service_date: date | None = None

    _network: NetworkModel | None = field(default=None, init=False, repr=False)
    _projector: CoordinateProjector | None = field(
        default=None, init=False, repr=False
    )
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False
    )

    def __post_init__(self) -> None:
        if self.viewport is None:
            self.viewport = Viewport(
                width=float(os.getenv("VIEWPORT_WIDTH") or 1000),
                height=float(os.getenv("VIEWPORT_HEIGHT") or 800),
            )
        if self.tolerance is None:
            self.tolerance = Tolerance(
                early_s=float(
                    os.getenv("DEVIATION_EARLY_TOLERANCE_S")
                    or DEFAULT_TOLERANCE.early_s
                ),
                late_s=float(
                    os.getenv("DEVIATION_LATE_TOLERANCE_S")
                    or DEFAULT_TOLERANCE.late_s
                ),
            )
        if self.service_date is None and os.getenv("SERVICE_DATE"):
            self.service_date = date.fromisoformat(os.environ["SERVICE_DATE"])

    def network(self) -> NetworkModel:
        network = self._network
        if network is not None:
            return network

        with self._lock:
            if self._network is None:
                dataset = self.dataset_repository.load_dataset()
                self._network = build_network_from_dataset(dataset)
            return self._network

    def _trip(self, trip_code: str) -> VehicleJourney:
        vj = self.network().vehicle_journeys.get(trip_code)
        if vj is None:
            raise UnknownTripError(trip_code)
        return vj

    def _now(self, now: float | None) -> float:
        return float(now) if now is not None else float(self.clock())

    def dataset_time_range(self) -> tuple[float | None, float | None]:
        network = self.network()
        return network.earliest_time, network.latest_time

    def get_active_trips(self, time: float) -> tuple[str, ...]:
        trips = active_trips(self.network().vehicle_journeys.values(), time)
        return tuple(sorted(vj.code for vj in trips))

    def _trip_positions(
        self, vj: VehicleJourney, time: float, now: float
    ) -> TripPositions:
        # One read of the snapshot; a concurrent swap is not seen half-applied.
        payload = vj.realtime
        return TripPositions(
            trip_code=vj.code,
            positions=self._positions(vj, payload, time, now),
            cancelled=payload.cancelled if payload is not None else False,
        )

    def _positions(
        self,
        vj: VehicleJourney,
        payload: RealtimePayload | None,
        time: float,
        now: float,
    ) -> tuple[VehiclePosition, ...]:
        network = self.network()
        jp = vj.journey_pattern
        prognosed = is_prognosed(time, now)

        if payload is not None and payload.vehicles:
            out: list[VehiclePosition] = []
            for vehicle in payload.vehicles:
                if not vehicle.is_observed_at(time):
                    continue
                distance = distance_at_time(vehicle.samples, time)
                out.append(
                    VehiclePosition(
                        vehicle_number=vehicle.vehicle_number,
                        position=position_from_distance(jp, network.links, distance),
                        distance=distance,
                        status=status_at(
                            vj.static_schedule, time, distance, self.tolerance
                        ),
                        prognosed=prognosed,
                    )
                )
            return tuple(out)

        if not vj.first_time <= time <= vj.last_time:
            return ()

        distance = distance_at_time(vj.static_schedule, time)
        return (
            VehiclePosition(
                vehicle_number=STATIC_VEHICLE_NUMBER,
                position=position_from_distance(jp, network.links, distance),
                distance=distance,
                status=VehicleStatus.ONTIME,
                prognosed=prognosed,
            ),
        )

    def get_positions_at_time(
        self, trip_code: str, time: float, *, now: float | None = None
    ) -> tuple[VehiclePosition, ...]:
        """Position, distance and schedule status of each vehicle of a trip.

        Trips with realtime data report one entry per vehicle observed at
        `time`; other trips report a single entry following the schedule.
        """

        return self.get_trip_positions(trip_code, time, now=now).positions

    def get_trip_positions(
        self, trip_code: str, time: float, *, now: float | None = None
    ) -> TripPositions:
        return self._trip_positions(self._trip(trip_code), time, self._now(now))

    def get_trip_positions_at_time(
        self, time: float, *, now: float | None = None
    ) -> tuple[TripPositions, ...]:
        network = self.network()
        current = self._now(now)

        return tuple(
            self._trip_positions(network.vehicle_journeys[code], time, current)
            for code in self.get_active_trips(time)
        )

    def get_vehicle_history(
        self, trip_code: str, *, now: float | None = None
    ) -> tuple[VehicleHistory, ...]:
        """Every realtime observation of a trip, classified against its schedule."""

        vj = self._trip(trip_code)
        payload = vj.realtime
        if payload is None:
            return ()

        current = self._now(now)
        markers = self.network().markers_for(vj.code)
        return tuple(
            VehicleHistory(
                vehicle_number=vehicle.vehicle_number,
                positions=tuple(
                    ObservedPosition(
                        time=s.time,
                        distance=s.distance,
                        status=status_at(
                            vj.static_schedule, s.time, s.distance, self.tolerance
                        ),
                        prognosed=is_prognosed(s.time, current),
                    )
                    for s in vehicle.samples
                ),
                markers=tuple(
                    m for m in markers if m.vehicle_number == vehicle.vehicle_number
                ),
            )
            for vehicle in payload.vehicles
        )

    def get_markers(self, trip_code: str) -> tuple[Marker, ...]:
        """Markers of a trip and of its tracked vehicles, ordered by time."""

        return self.network().markers_for(self._trip(trip_code).code)

    def service_datetime(self, seconds: float) -> datetime | None:
        if self.service_date is None:
            return None
        return service_datetime_from_seconds(self.service_date, seconds)

    def configure_viewport(self, *, width: float, height: float) -> None:
        with self._lock:
            self.viewport = Viewport(width=width, height=height)
            self._projector = None

    def projector(self) -> CoordinateProjector:
        projector = self._projector
        if projector is not None:
            return projector

        network = self.network()
        with self._lock:
            if self._projector is None:
                viewport = self.viewport
                if viewport is None:
                    raise RuntimeError("Viewport is not configured")
                self._projector = CoordinateProjector.from_stops(
                    network.stops.values(), viewport
                )
                logger.debug("Projector bounds: %s", self._projector.bounds)
            return self._projector

    def project_to_viewport(self, point: Point) -> Point:
        return self.projector().project(point)
