"""Time zone utilities shared across AikiNote views and the sync layer."""

from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

DEFAULT_TZ = "Asia/Tokyo"

# fractional seconds directly before the offset or the end of the string
_FRACTION_RE = re.compile(r"\.(\d+)(?=[+-]\d|$)")


def resolve_tz(tz_name: Optional[str]) -> ZoneInfo:
    """Return ``ZoneInfo(tz_name)``, falling back to UTC for unknown names."""
    if not tz_name:
        return ZoneInfo("UTC")
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        print(f"[time_utils] Unknown time zone {tz_name!r}, using UTC")
        return ZoneInfo("UTC")


def parse_iso(dt_iso: str | datetime) -> datetime:
    """Parse an ISO timestamp; naive values are treated as UTC.

    PostgREST trims trailing zeros from fractional seconds, so the fraction is
    padded (or cut) to the six digits ``datetime.fromisoformat`` accepts on
    every supported Python.
    """

    if isinstance(dt_iso, datetime):
        dt = dt_iso
    else:
        text = str(dt_iso).strip().replace("Z", "+00:00")
        text = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
        dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=ZoneInfo("UTC"))
    return dt


def to_tz(dt_iso: str | datetime, tz: str) -> datetime:
    """Parse ISO timestamp and convert to timezone ``tz`` (IANA name)."""

    return parse_iso(dt_iso).astimezone(resolve_tz(tz))


def to_local_date(dt_iso: str | datetime, tz: str) -> str:
    """Return the ``YYYY-MM-DD`` calendar date of ``dt_iso`` in ``tz``."""

    return to_tz(dt_iso, tz).date().isoformat()


def utc_day_bounds(day: str | date) -> Tuple[str, str]:
    """Return inclusive ISO bounds covering ``day`` in UTC."""

    if isinstance(day, str):
        day = date.fromisoformat(day)
    start = datetime.combine(day, time.min, tzinfo=ZoneInfo("UTC"))
    end = start + timedelta(days=1) - timedelta(microseconds=1)
    return start.isoformat(), end.isoformat()


def utc_now_iso() -> str:
    return datetime.now(ZoneInfo("UTC")).isoformat()


__all__ = [
    "DEFAULT_TZ",
    "parse_iso",
    "resolve_tz",
    "to_local_date",
    "to_tz",
    "utc_day_bounds",
    "utc_now_iso",
]
