from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from src.app.ports.output import IDatasetRepository
from src.domain.exceptions import NetworkModelError
from src.domain.models import RawDataset


def _read_json_object(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as fp:
        data = json.load(fp)
    if not isinstance(data, dict):
        raise NetworkModelError(f"{path} does not contain a JSON object")
    return data


def _markers(path: Path, data: dict[str, Any]) -> list[dict[str, Any]]:
    raw = data.get("markers")
    if raw is None:
        return []
    if not isinstance(raw, list) or not all(isinstance(m, dict) for m in raw):
        raise NetworkModelError(f"{path}: 'markers' must be a list of objects")
    return raw


@dataclass(slots=True)
class LocalDatasetRepository(IDatasetRepository):
    """Loads the schedule dataset from a JSON file.

    The file holds three objects keyed by code: `scheduledStopPoints`,
    `journeyPatterns` and `vehicleJourneys`, plus an optional `markers` list.
    Markers may also come from a separate file shaped `{"markers": [...]}`.

    Env vars:
      - DATASET_PATH: path to the JSON file (default data/dataset.json)
      - MARKERS_PATH: optional path to a separate markers file
    """

    path: str | Path | None = None
    markers_path: str | Path | None = None

    def _path(self) -> Path:
        value = self.path or os.getenv("DATASET_PATH") or "data/dataset.json"
        return Path(value)

    def _markers_path(self) -> Path | None:
        value = self.markers_path or os.getenv("MARKERS_PATH")
        return Path(value) if value else None

    def load_dataset(self) -> RawDataset:
        path = self._path()
        data = _read_json_object(path)

        missing = [
            key
            for key in ("scheduledStopPoints", "journeyPatterns", "vehicleJourneys")
            if not isinstance(data.get(key), dict)
        ]
        if missing:
            raise NetworkModelError(f"{path} is missing {', '.join(missing)}")

        markers = _markers(path, data)
        markers_path = self._markers_path()
        if markers_path is not None:
            markers = markers + _markers(markers_path, _read_json_object(markers_path))

        return RawDataset(
            scheduled_stop_points=data["scheduledStopPoints"],
            journey_patterns=data["journeyPatterns"],
            vehicle_journeys=data["vehicleJourneys"],
            markers=tuple(markers),
        )
