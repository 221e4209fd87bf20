from __future__ import annotations

from abc import ABC, abstractmethod

from src.domain.models.dataset import RawDataset


class IDatasetRepository(ABC):
    """Port for loading the static schedule dataset."""

    @abstractmethod
    def load_dataset(self) -> RawDataset:
        raise NotImplementedError
