from __future__ import annotations

from datetime import date, datetime, timedelta


def service_datetime_from_seconds(base: date | datetime, seconds: float) -> datetime:
    """Convert seconds on the service-day axis into an absolute datetime.

    Supports times over 24h (e.g. 25:10:00) by rolling into the next day.
    """

    if isinstance(base, datetime):
        day0 = base.replace(hour=0, minute=0, second=0, microsecond=0)
    else:
        day0 = datetime(base.year, base.month, base.day)
    return day0 + timedelta(seconds=float(seconds))


def seconds_since_midnight(dt: datetime) -> float:
    return dt.hour * 3600 + dt.minute * 60 + dt.second + dt.microsecond / 1e6


def parse_hhmmss(raw: str) -> int:
    # Hours may exceed 24 for trips running past midnight.
    parts = raw.strip().split(":")
    if len(parts) not in (2, 3):
        raise ValueError(f"Invalid time {raw!r}, expected HH:MM[:SS]")
    hh, mm = int(parts[0]), int(parts[1])
    ss = int(parts[2]) if len(parts) == 3 else 0
    if hh < 0 or not (0 <= mm < 60) or not (0 <= ss < 60):
        raise ValueError(f"Invalid time {raw!r}")
    return hh * 3600 + mm * 60 + ss


def format_hhmmss(seconds: float) -> str:
    total = int(seconds)
    hh, rest = divmod(total, 3600)
    mm, ss = divmod(rest, 60)
    return f"{hh:02d}:{mm:02d}:{ss:02d}"


def parse_time_value(raw: str | float | int) -> float:
    """Accept seconds (number or numeric string) or an HH:MM[:SS] string."""

    if isinstance(raw, (int, float)):
        return float(raw)
    text = raw.strip()
    if ":" in text:
        return float(parse_hhmmss(text))
    return float(text)
