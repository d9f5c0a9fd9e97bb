"""Time parsing and formatting utilities."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, tzinfo
from typing import Iterable

from zoneinfo import ZoneInfo


def tzinfo_from_name(tz_name: str) -> tzinfo:
    """Create tzinfo from an IANA timezone name.

    Args:
        tz_name: Timezone name like "Europe/Amsterdam" or "UTC".

    Returns:
        tzinfo instance.

    Raises:
        ValueError: If timezone name is invalid on this system.
    """

    try:
        return ZoneInfo(tz_name)
    except Exception as exc:  # ZoneInfo raises KeyError / ZoneInfoNotFoundError / ValueError (platform dependent)
        raise ValueError(f"Invalid timezone: {tz_name!r}. Example: Europe/Amsterdam") from exc


def ensure_aware(dt: datetime, tz_name: str = "UTC") -> datetime:
    """Attach tz_name to a naive datetime; aware datetimes pass through unchanged."""

    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC if tz_name == "UTC" else tzinfo_from_name(tz_name))
    return dt


def dt_from_epoch_ms(epoch_ms: int, tz_name: str) -> datetime:
    """Convert epoch milliseconds to timezone-aware datetime.

    Args:
        epoch_ms: Unix epoch milliseconds.
        tz_name: IANA timezone name.

    Returns:
        Timezone-aware datetime.
    """

    tz = tzinfo_from_name(tz_name)
    return datetime.fromtimestamp(epoch_ms / 1000.0, tz=tz)


def epoch_ms_from_dt(dt: datetime) -> int:
    """Convert a datetime to epoch milliseconds.

    Args:
        dt: Datetime. If naive, will be treated as UTC (discouraged).

    Returns:
        Epoch milliseconds.
    """

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return int(dt.timestamp() * 1000)


def parse_dt(text: str, tz_name: str) -> datetime:
    """Parse datetime text to a timezone-aware datetime.

    Supported formats:
      - "YYYY-MM-DD HH:MM:SS"
      - "YYYY-MM-DDTHH:MM:SS" (fractional seconds allowed)
      - with optional timezone offset, e.g. "+02:00" or "Z"

    If timezone is missing, it will be assumed to be tz_name. An explicit
    offset is preserved as-is.

    Raises:
        ValueError: If cannot parse.
    """

    s = text.strip().replace("T", " ")
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(s)
    except ValueError as exc:
        raise ValueError(f"Cannot parse time: {text!r}. Expected e.g. 2024-05-01 16:11:00") from exc
    return ensure_aware(dt, tz_name)


def format_clock(dt: datetime, tz_name: str) -> str:
    """Render dt as HH:MM:SS in the given timezone."""

    return dt.astimezone(tzinfo_from_name(tz_name)).strftime("%H:%M:%S")


def format_hhmmss(seconds: float) -> str:
    s = int(round(max(0.0, seconds)))
    h = s // 3600
    m = (s % 3600) // 60
    sec = s % 60
    return f"{h:02d}:{m:02d}:{sec:02d}"


@dataclass(frozen=True, slots=True)
class DeltaStats:
    """Sampling interval stats (seconds)."""

    count: int
    min_s: float
    median_s: float
    p95_s: float
    max_s: float


def delta_stats(times_sorted: Iterable[datetime]) -> DeltaStats | None:
    """Compute basic sampling-interval statistics.

    Args:
        times_sorted: Sample times sorted ascending.

    Returns:
        DeltaStats or None if less than 2 points.
    """

    ts = list(times_sorted)
    if len(ts) < 2:
        return None
    deltas = [(ts[i] - ts[i - 1]).total_seconds() for i in range(1, len(ts)) if ts[i] >= ts[i - 1]]
    if not deltas:
        return None
    deltas.sort()
    n = len(deltas)
    median = deltas[n // 2] if n % 2 == 1 else 0.5 * (deltas[n // 2 - 1] + deltas[n // 2])
    p95 = deltas[int(0.95 * (n - 1))]
    return DeltaStats(
        count=n,
        min_s=deltas[0],
        median_s=median,
        p95_s=p95,
        max_s=deltas[-1],
    )
