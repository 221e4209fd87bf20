from __future__ import annotations

import asyncio
import logging
import os

from src.adapters.persistence.local_dataset_repository import LocalDatasetRepository
from src.adapters.realtime.http_realtime_feed_provider import HttpRealtimeFeedProvider
from src.app.services.realtime_update_service import RealtimeUpdateService
from src.app.services.trajectory_service import TrajectoryService

logger = logging.getLogger(__name__)


async def run(service: RealtimeUpdateService, *, interval_s: float, loop: bool) -> None:
    while True:
        try:
            await service.refresh()
        except Exception:
            # Keep polling: the previous snapshots stay in place.
            logger.exception("Realtime refresh failed")
        if not loop:
            return
        await asyncio.sleep(interval_s)


def main() -> None:
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))

    trajectory = TrajectoryService(dataset_repository=LocalDatasetRepository())
    service = RealtimeUpdateService(
        trajectory_service=trajectory,
        feed_provider=HttpRealtimeFeedProvider(),
    )

    interval_s = float(os.getenv("REALTIME_POLL_INTERVAL_S") or 30)
    loop = os.getenv("WORKER_LOOP", "1").strip().lower() not in {"0", "false", "no"}

    asyncio.run(run(service, interval_s=interval_s, loop=loop))


if __name__ == "__main__":
    main()
