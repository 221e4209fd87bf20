from .dataset_repository import IDatasetRepository
from .realtime_feed_provider import IRealtimeFeedProvider

__all__ = [
    "IDatasetRepository",
    "IRealtimeFeedProvider",
]
