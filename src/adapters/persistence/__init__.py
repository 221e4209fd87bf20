from .local_dataset_repository import LocalDatasetRepository

__all__ = [
    "LocalDatasetRepository",
]
