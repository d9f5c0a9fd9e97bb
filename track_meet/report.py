"""Meeting interval reporting: console lines, CSV and JSON payloads."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Any, Sequence

from track_meet.models import COORD_DECIMALS, Coordinate, MeetingInterval, MeetingResult, TrackPoint
from track_meet.timeutils import epoch_ms_from_dt, format_clock, format_hhmmss, tzinfo_from_name


def format_latlon(lat: float | None, lon: float | None, decimals: int = COORD_DECIMALS) -> str:
    """Render "lat;lon" with a fixed number of decimals (bare ";" when missing)."""

    if lat is None or lon is None:
        return ";"
    return f"{lat:.{decimals}f};{lon:.{decimals}f}"


def format_point_latlon(p: TrackPoint | None, decimals: int = COORD_DECIMALS) -> str:
    if p is None:
        return format_latlon(None, None, decimals)
    return format_latlon(p.latitude, p.longitude, decimals)


def format_interval_line(interval: MeetingInterval, tz_name: str, decimals: int = COORD_DECIMALS) -> str:
    """One human-readable line per interval, times as HH:MM:SS in tz_name."""

    loc = interval.location
    return (
        f" - From {format_clock(interval.start, tz_name)} to {format_clock(interval.end, tz_name)}, "
        f"Closest Location: {format_latlon(loc.latitude, loc.longitude, decimals)}, "
        f"Closest Wp1: {format_point_latlon(interval.nearest_a, decimals)}, "
        f"Closest Wp2: {format_point_latlon(interval.nearest_b, decimals)}"
    )


def format_result(result: MeetingResult, tz_name: str, decimals: int = COORD_DECIMALS) -> list[str]:
    if not result.met:
        return ["No meeting detected."]
    lines = ["They met! Intervals and approximate closest locations:"]
    lines.extend(format_interval_line(iv, tz_name, decimals) for iv in result.intervals)
    return lines


def _coord_dict(c: Coordinate) -> dict[str, float]:
    return {"latitude": c.latitude, "longitude": c.longitude}


def _point_dict(p: TrackPoint | None, tz_name: str) -> dict[str, Any] | None:
    if p is None:
        return None
    tz = tzinfo_from_name(tz_name)
    return {
        "time": p.time.astimezone(tz).isoformat(),
        "latitude": p.latitude,
        "longitude": p.longitude,
        "elevation_m": p.elevation_m,
        "name": p.name,
    }


def interval_to_dict(interval: MeetingInterval, tz_name: str) -> dict[str, Any]:
    tz = tzinfo_from_name(tz_name)
    return {
        "start": interval.start.astimezone(tz).isoformat(),
        "end": interval.end.astimezone(tz).isoformat(),
        "duration_seconds": interval.duration_seconds,
        "location": _coord_dict(interval.location),
        "raw_location": _coord_dict(interval.raw_location),
        "min_distance_m": interval.min_distance_m,
        "instants": interval.instants,
        "nearest_a": _point_dict(interval.nearest_a, tz_name),
        "nearest_b": _point_dict(interval.nearest_b, tz_name),
    }


def result_to_dict(result: MeetingResult, tz_name: str) -> dict[str, Any]:
    """JSON-serialisable view of a MeetingResult."""

    return {
        "met": result.met,
        "threshold_m": result.threshold_m,
        "timeline_instants": result.timeline_instants,
        "total_seconds": result.total_seconds,
        "intervals": [interval_to_dict(iv, tz_name) for iv in result.intervals],
    }


CSV_FIELDNAMES = [
    "interval_id",
    "start_time",
    "end_time",
    "duration_seconds",
    "duration_hhmmss",
    "latitude",
    "longitude",
    "min_distance_m",
    "instants",
    "nearest_a_time",
    "nearest_a_latitude",
    "nearest_a_longitude",
    "nearest_b_time",
    "nearest_b_latitude",
    "nearest_b_longitude",
    "start_epoch_ms",
    "end_epoch_ms",
]


def write_meetings_csv(intervals: Sequence[MeetingInterval], out_path: str | Path, tz_name: str) -> None:
    """Write meeting intervals to CSV (one row per interval)."""

    tz = tzinfo_from_name(tz_name)

    def _nearest_cols(prefix: str, p: TrackPoint | None) -> dict[str, Any]:
        if p is None:
            return {f"{prefix}_time": "", f"{prefix}_latitude": "", f"{prefix}_longitude": ""}
        return {
            f"{prefix}_time": p.time.astimezone(tz).isoformat(sep=" "),
            f"{prefix}_latitude": p.latitude,
            f"{prefix}_longitude": p.longitude,
        }

    p = Path(out_path)
    with p.open("w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(f, fieldnames=CSV_FIELDNAMES)
        w.writeheader()
        for i, iv in enumerate(intervals, start=1):
            w.writerow(
                {
                    "interval_id": i,
                    "start_time": iv.start.astimezone(tz).isoformat(sep=" "),
                    "end_time": iv.end.astimezone(tz).isoformat(sep=" "),
                    "duration_seconds": f"{iv.duration_seconds:.3f}",
                    "duration_hhmmss": format_hhmmss(iv.duration_seconds),
                    "latitude": iv.location.latitude,
                    "longitude": iv.location.longitude,
                    "min_distance_m": f"{iv.min_distance_m:.3f}",
                    "instants": iv.instants,
                    **_nearest_cols("nearest_a", iv.nearest_a),
                    **_nearest_cols("nearest_b", iv.nearest_b),
                    "start_epoch_ms": epoch_ms_from_dt(iv.start),
                    "end_epoch_ms": epoch_ms_from_dt(iv.end),
                }
            )
