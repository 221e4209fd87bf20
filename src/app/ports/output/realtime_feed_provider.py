from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping


class IRealtimeFeedProvider(ABC):
    """Port for obtaining the latest realtime snapshot, keyed by trip code.

    Each value carries `realtime` (the live vehicles of the trip) and an
    optional `cancelled` flag, in the dataset's raw format.
    """

    @abstractmethod
    async def fetch_updates(self) -> Mapping[str, Mapping[str, Any]]:
        raise NotImplementedError
