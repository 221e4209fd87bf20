from __future__ import annotations

from typing import Any

import pytest

from src.domain.algorithms.network_builder import build_network
from src.domain.models import NetworkModel, RawDataset


def make_raw_dataset() -> dict[str, Any]:
    """Two journey patterns sharing the S3 -> S4 link.

    Markers M3 (unknown trip) and M4 (untracked vehicle) are dropped at build.

    Stop area centers: A1 (1, 0), A2 (10, 0), A3 (11, 10).
    """

    return {
        "scheduledStopPoints": {
            "S1": {"name": "Central North", "x": 0.0, "y": 0.0, "area": "A1"},
            "S2": {"name": "Central South", "x": 2.0, "y": 0.0, "area": "A1"},
            "S3": {"name": "Market", "x": 10.0, "y": 0.0, "area": "A2"},
            "S4": {"name": "Harbour East", "x": 10.0, "y": 10.0, "area": "A3"},
            "S5": {"name": "Harbour West", "x": 12.0, "y": 10.0, "area": "A3"},
        },
        "journeyPatterns": {
            "JP1": {
                "pointsInSequence": ["S1", "S3", "S4"],
                "distances": [0, 40, 100],
                "lineRef": "L1",
                "direction": 1,
            },
            "JP2": {
                "pointsInSequence": ["S2", "S3", "S4"],
                "distances": [0, 50, 110],
                "lineRef": "L1",
                "direction": 2,
            },
        },
        "vehicleJourneys": {
            "VJ1": {"journeyPatternRef": "JP1", "times": [1000, 1200, 1400]},
            "VJ2": {
                "journeyPatternRef": "JP2",
                "times": [2000, 2100, 2300],
                "realtime": [
                    {
                        "vehicleNumber": 7,
                        "times": [2050, 2150, 2500],
                        "distances": [10, 50, 110],
                    }
                ],
            },
        },
        "markers": [
            {
                "id": "M1",
                "reference": {"vehicleJourneyCode": "VJ2", "vehicleNumber": 7},
                "time": 2150,
                "message": "Door fault",
                "url": "https://example.org/incidents/1",
            },
            {
                "id": "M2",
                "reference": {"vehicleJourneyCode": "VJ2"},
                "time": 2000,
                "message": "Late departure",
            },
            {
                "id": "M3",
                "reference": {"vehicleJourneyCode": "VJ9"},
                "time": 1000,
            },
            {
                "id": "M4",
                "reference": {"vehicleJourneyCode": "VJ2", "vehicleNumber": 99},
                "time": 2100,
            },
        ],
    }


@pytest.fixture()
def raw_dataset() -> dict[str, Any]:
    return make_raw_dataset()


@pytest.fixture()
def network(raw_dataset: dict[str, Any]) -> NetworkModel:
    return build_network(
        raw_dataset["scheduledStopPoints"],
        raw_dataset["journeyPatterns"],
        raw_dataset["vehicleJourneys"],
        raw_dataset["markers"],
    )


class FakeDatasetRepository:
    def __init__(self, data: dict[str, Any]) -> None:
        self.data = data
        self.loads = 0

    def load_dataset(self) -> RawDataset:
        self.loads += 1
        return RawDataset(
            scheduled_stop_points=self.data["scheduledStopPoints"],
            journey_patterns=self.data["journeyPatterns"],
            vehicle_journeys=self.data["vehicleJourneys"],
            markers=tuple(self.data.get("markers", ())),
        )


@pytest.fixture()
def dataset_repository(raw_dataset: dict[str, Any]) -> FakeDatasetRepository:
    return FakeDatasetRepository(raw_dataset)


@pytest.fixture()
def anyio_backend() -> str:
    return "asyncio"
