from __future__ import annotations

from functools import lru_cache

from src.adapters.persistence.local_dataset_repository import LocalDatasetRepository
from src.adapters.realtime.http_realtime_feed_provider import HttpRealtimeFeedProvider
from src.app.services.realtime_update_service import RealtimeUpdateService
from src.app.services.trajectory_service import TrajectoryService


@lru_cache(maxsize=1)
def get_trajectory_service() -> TrajectoryService:
    # One instance per process: the network is built once and shared.
    return TrajectoryService(dataset_repository=LocalDatasetRepository())


@lru_cache(maxsize=1)
def get_realtime_update_service() -> RealtimeUpdateService:
    return RealtimeUpdateService(
        trajectory_service=get_trajectory_service(),
        feed_provider=HttpRealtimeFeedProvider(),
    )
