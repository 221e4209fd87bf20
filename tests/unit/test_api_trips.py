from __future__ import annotations

import httpx
import pytest

from src.adapters.api.dependencies import (
    get_realtime_update_service,
    get_trajectory_service,
)
from src.app.services.realtime_update_service import RealtimeUpdateService
from src.app.services.trajectory_service import TrajectoryService
from src.domain.algorithms.projection import Viewport
from src.main import app


@pytest.fixture()
def service(dataset_repository):
    svc = TrajectoryService(
        dataset_repository=dataset_repository,
        viewport=Viewport(width=1200, height=1000),
        clock=lambda: 2200.0,
    )
    app.dependency_overrides[get_trajectory_service] = lambda: svc
    yield svc
    app.dependency_overrides.clear()


async def _get(path: str, **kwargs) -> httpx.Response:
    transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.request(kwargs.pop("method", "GET"), path, **kwargs)


@pytest.mark.unit
@pytest.mark.anyio
async def test_health() -> None:
    resp = await _get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


@pytest.mark.unit
@pytest.mark.anyio
async def test_active_trips_accepts_seconds_and_clock_time(service) -> None:
    resp = await _get("/trips/active", params={"time": "1400"})
    assert resp.status_code == 200
    assert resp.json() == {"time": 1400.0, "trip_codes": ["VJ1"]}

    resp = await _get("/trips/active", params={"time": "00:40:00"})
    assert resp.json()["trip_codes"] == ["VJ2"]


@pytest.mark.unit
@pytest.mark.anyio
async def test_invalid_time_is_rejected(service) -> None:
    resp = await _get("/trips/active", params={"time": "noon"})
    assert resp.status_code == 422


@pytest.mark.unit
@pytest.mark.anyio
async def test_trip_positions(service) -> None:
    resp = await _get("/trips/VJ2/positions", params={"time": "2100"})

    assert resp.status_code == 200
    payload = resp.json()
    assert payload["trip_code"] == "VJ2"
    assert payload["cancelled"] is False
    (vehicle,) = payload["vehicles"]
    assert vehicle["vehicle_number"] == "7"
    assert vehicle["status"] == "ontime"
    assert vehicle["prognosed"] is False
    assert vehicle["distance"] == pytest.approx(30.0)
    assert vehicle["position"]["x"] == pytest.approx(6.4)


@pytest.mark.unit
@pytest.mark.anyio
async def test_unknown_trip_is_404(service) -> None:
    resp = await _get("/trips/VJ9/positions", params={"time": "2100"})
    assert resp.status_code == 404
    assert "VJ9" in resp.json()["detail"]

    resp = await _get("/trips/VJ9/history")
    assert resp.status_code == 404


@pytest.mark.unit
@pytest.mark.anyio
async def test_trip_history(service) -> None:
    resp = await _get("/trips/VJ2/history", params={"now": "2200"})

    assert resp.status_code == 200
    (vehicle,) = resp.json()["vehicles"]
    assert [p["status"] for p in vehicle["positions"]] == ["ontime", "ontime", "late"]
    assert [p["prognosed"] for p in vehicle["positions"]] == [False, False, True]


@pytest.mark.unit
@pytest.mark.anyio
async def test_positions_of_all_active_trips(service) -> None:
    resp = await _get("/trips/positions", params={"time": "1100"})

    assert resp.status_code == 200
    (trip,) = resp.json()
    assert trip["trip_code"] == "VJ1"
    assert trip["vehicles"][0]["position"] == {"x": 5.5, "y": 0.0}


@pytest.mark.unit
@pytest.mark.anyio
async def test_time_range(service) -> None:
    resp = await _get("/trips/time-range")
    assert resp.json() == {"earliest": 1000.0, "latest": 2300.0}


@pytest.mark.unit
@pytest.mark.anyio
async def test_viewport_projection(service) -> None:
    resp = await _get("/viewport/project", method="POST", json={"x": 12, "y": 10})
    assert resp.json() == {"x": 1200.0, "y": 0.0}

    resp = await _get(
        "/viewport", method="PUT", json={"width": 120, "height": 100}
    )
    assert resp.status_code == 200

    resp = await _get("/viewport/project", method="POST", json={"x": 12, "y": 10})
    assert resp.json() == {"x": 120.0, "y": 0.0}


@pytest.mark.unit
@pytest.mark.anyio
async def test_realtime_refresh(service) -> None:
    class _FakeFeedProvider:
        async def fetch_updates(self):
            return {"VJ1": {"realtime": [], "cancelled": True}}

    updater = RealtimeUpdateService(
        trajectory_service=service, feed_provider=_FakeFeedProvider()
    )
    app.dependency_overrides[get_realtime_update_service] = lambda: updater

    resp = await _get("/realtime/refresh", method="POST")

    assert resp.status_code == 200
    assert resp.json()["updated_trips"] == 1

    resp = await _get("/trips/VJ1/positions", params={"time": "1100"})
    assert resp.json()["cancelled"] is True


@pytest.mark.unit
@pytest.mark.anyio
async def test_malformed_dataset_is_reported_as_json_error(
    dataset_repository,
) -> None:
    dataset_repository.data["journeyPatterns"]["JP1"]["pointsInSequence"] = [
        "S1",
        "S9",
        "S4",
    ]
    svc = TrajectoryService(dataset_repository=dataset_repository)
    app.dependency_overrides[get_trajectory_service] = lambda: svc

    resp = await _get("/trips/active", params={"time": "1100"})

    app.dependency_overrides.clear()

    assert resp.status_code == 500
    assert "S9" in resp.json()["detail"]


@pytest.mark.unit
@pytest.mark.anyio
async def test_trip_markers(service) -> None:
    resp = await _get("/trips/VJ2/markers")

    assert resp.status_code == 200
    payload = resp.json()
    assert payload["trip_code"] == "VJ2"
    assert [m["id"] for m in payload["markers"]] == ["M2", "M1"]
    door = payload["markers"][1]
    assert door["vehicle_number"] == "7"
    assert door["clock_time"] == "00:35:50"
    assert door["message"] == "Door fault"
    assert door["at"] is None


@pytest.mark.unit
@pytest.mark.anyio
async def test_unknown_trip_markers_is_404(service) -> None:
    resp = await _get("/trips/VJ9/markers")

    assert resp.status_code == 404
    assert "VJ9" in resp.json()["detail"]


@pytest.mark.unit
@pytest.mark.anyio
async def test_history_reports_clock_times_and_vehicle_markers(service) -> None:
    resp = await _get("/trips/VJ2/history", params={"now": "2200"})

    (vehicle,) = resp.json()["vehicles"]
    assert [p["clock_time"] for p in vehicle["positions"]] == [
        "00:34:10",
        "00:35:50",
        "00:41:40",
    ]
    assert [m["id"] for m in vehicle["markers"]] == ["M1"]


@pytest.mark.unit
@pytest.mark.anyio
async def test_unexpected_errors_stay_opaque(service, monkeypatch) -> None:
    monkeypatch.delenv("TRAJECTORY_REVEAL_ERRORS", raising=False)
    service.viewport = None

    resp = await _get("/viewport/project", method="POST", json={"x": 1, "y": 1})

    assert resp.status_code == 500
    assert resp.json() == {"detail": "Internal Server Error"}

    monkeypatch.setenv("TRAJECTORY_REVEAL_ERRORS", "1")
    resp = await _get("/viewport/project", method="POST", json={"x": 1, "y": 1})

    assert resp.json() == {"detail": "Viewport is not configured"}
