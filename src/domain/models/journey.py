from __future__ import annotations

import threading
from dataclasses import InitVar, dataclass, field, replace

from .network import JourneyPattern


@dataclass(frozen=True, slots=True)
class ScheduleSample:
    """One (time, distance) pair. Time is seconds on the service-day axis."""

    time: float
    distance: float


@dataclass(frozen=True, slots=True)
class LiveVehicle:
    """Observations of one tracked vehicle, sampled independently of the stops."""

    vehicle_number: str
    samples: tuple[ScheduleSample, ...]

    @property
    def first_time(self) -> float:
        return self.samples[0].time

    @property
    def last_time(self) -> float:
        return self.samples[-1].time

    def is_observed_at(self, time: float) -> bool:
        if not self.samples:
            return False
        return self.first_time <= time <= self.last_time


@dataclass(frozen=True, slots=True)
class RealtimePayload:
    """Immutable snapshot of the realtime data of a vehicle journey."""

    vehicles: tuple[LiveVehicle, ...] = ()
    cancelled: bool = False
    generation: int = 0

    def vehicle(self, vehicle_number: str) -> LiveVehicle | None:
        return next(
            (v for v in self.vehicles if v.vehicle_number == vehicle_number), None
        )


@dataclass(slots=True, eq=False)
class VehicleJourney:
    """One scheduled run of a journey pattern.

    Everything but the realtime payload is fixed at build time. The payload is
    swapped as a whole by `replace_realtime`; readers should take the
    `realtime` snapshot once and work on that reference only.
    """

    code: str
    journey_pattern: JourneyPattern
    times: tuple[float, ...]
    initial_realtime: InitVar[RealtimePayload | None] = None

    static_schedule: tuple[ScheduleSample, ...] = field(init=False)
    _realtime: RealtimePayload | None = field(default=None, init=False, repr=False)
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False
    )

    def __post_init__(self, initial_realtime: RealtimePayload | None) -> None:
        self.static_schedule = tuple(
            ScheduleSample(time=t, distance=d)
            for t, d in zip(self.times, self.journey_pattern.distances)
        )
        self._realtime = initial_realtime

    @property
    def first_time(self) -> float:
        return self.times[0]

    @property
    def last_time(self) -> float:
        return self.times[-1]

    @property
    def realtime(self) -> RealtimePayload | None:
        return self._realtime

    def replace_realtime(self, payload: RealtimePayload | None) -> RealtimePayload | None:
        """Swap the realtime snapshot, bumping its generation counter."""

        with self._lock:
            if payload is None:
                self._realtime = None
                return None
            previous = self._realtime
            generation = (previous.generation if previous is not None else 0) + 1
            snapshot = replace(payload, generation=generation)
            self._realtime = snapshot
            return snapshot
