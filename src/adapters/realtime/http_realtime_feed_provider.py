from __future__ import annotations

import asyncio
import os
import time
from dataclasses import dataclass, field
from typing import Any, Mapping

import httpx

from src.app.ports.output import IRealtimeFeedProvider


@dataclass(slots=True)
class HttpRealtimeFeedProvider(IRealtimeFeedProvider):
    """Fetches the realtime vehicle journeys snapshot (JSON) over HTTP.

    Env vars:
      - REALTIME_FEED_URL: URL returning `{"vehicleJourneys": {...}}`
      - REALTIME_FEED_HEADERS: optional headers, as 'Key:Value;Key2:Value2'
      - REALTIME_FEED_TIMEOUT_S: request timeout (default 10)
      - REALTIME_FEED_CACHE_TTL_S: in-process cache TTL seconds (default 25)

    Notes:
      - If URL is not configured, returns an empty mapping.
      - Cache is per-process and shared across requests.
    """

    url: str | None = None
    headers_raw: str | None = None
    timeout_s: float = 10.0
    cache_ttl_s: float = 25.0
    transport: httpx.AsyncBaseTransport | None = None

    # In-process cache
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False, repr=False)
    _cached_at_monotonic: float = 0.0
    _cached_updates: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.url is None:
            self.url = os.getenv("REALTIME_FEED_URL")
        if self.headers_raw is None:
            self.headers_raw = os.getenv("REALTIME_FEED_HEADERS")
        if os.getenv("REALTIME_FEED_TIMEOUT_S"):
            self.timeout_s = float(os.environ["REALTIME_FEED_TIMEOUT_S"])
        if os.getenv("REALTIME_FEED_CACHE_TTL_S"):
            self.cache_ttl_s = float(os.environ["REALTIME_FEED_CACHE_TTL_S"])

    def _headers(self) -> dict[str, str]:
        raw = (self.headers_raw or "").strip()
        if not raw:
            return {}
        headers: dict[str, str] = {}
        for part in raw.split(";"):
            part = part.strip()
            if ":" not in part:
                continue
            k, v = part.split(":", 1)
            k = k.strip()
            if k:
                headers[k] = v.strip()
        return headers

    async def fetch_updates(self) -> Mapping[str, Mapping[str, Any]]:
        if not self.url:
            return {}

        async with self._lock:
            now_mono = time.monotonic()
            if (
                self._cached_updates
                and (now_mono - self._cached_at_monotonic) < self.cache_ttl_s
            ):
                return self._cached_updates

            async with httpx.AsyncClient(
                timeout=self.timeout_s, transport=self.transport
            ) as client:
                resp = await client.get(self.url, headers=self._headers())
                resp.raise_for_status()
                payload = resp.json()

            updates = _parse_updates(payload)

            self._cached_at_monotonic = time.monotonic()
            self._cached_updates = updates
            return updates


def _parse_updates(payload: Any) -> dict[str, Mapping[str, Any]]:
    if not isinstance(payload, dict):
        raise ValueError("Realtime feed must be a JSON object")

    # Accept either the dataset envelope or a bare mapping of trips.
    journeys = payload.get("vehicleJourneys", payload)
    if not isinstance(journeys, dict):
        raise ValueError("Realtime feed 'vehicleJourneys' must be an object")

    out: dict[str, Mapping[str, Any]] = {}
    for code, raw in journeys.items():
        if not isinstance(raw, dict):
            continue
        out[str(code)] = {
            "realtime": raw.get("realtime") or [],
            "cancelled": bool(raw.get("cancelled", False)),
        }
    return out
