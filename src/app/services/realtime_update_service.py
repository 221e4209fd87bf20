from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from src.app.ports.output import IRealtimeFeedProvider
from src.app.services.trajectory_service import TrajectoryService
from src.domain.algorithms.network_builder import parse_realtime
from src.domain.models import RealtimePayload, VehicleJourney

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RealtimeUpdateService:
    """Replaces the realtime payload of vehicle journeys from feed snapshots.

    A snapshot is parsed completely before any payload is swapped, so a
    malformed update leaves every journey on its previous data.
    """

    trajectory_service: TrajectoryService
    feed_provider: IRealtimeFeedProvider | None = None

    def apply_update(self, updates: Mapping[str, Mapping[str, Any]]) -> int:
        network = self.trajectory_service.network()

        parsed: list[tuple[VehicleJourney, RealtimePayload]] = []
        for code, raw in updates.items():
            vj = network.vehicle_journeys.get(code)
            if vj is None:
                logger.warning("Skipping realtime update for unknown trip %r", code)
                continue
            payload = parse_realtime(
                code, raw.get("realtime"), cancelled=bool(raw.get("cancelled"))
            )
            parsed.append((vj, payload))

        for vj, payload in parsed:
            vj.replace_realtime(payload)

        logger.info("Applied realtime update to %d vehicle journeys", len(parsed))
        return len(parsed)

    async def refresh(self) -> int:
        if self.feed_provider is None:
            return 0
        updates = await self.feed_provider.fetch_updates()
        return self.apply_update(updates)
