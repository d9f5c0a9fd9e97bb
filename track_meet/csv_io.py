"""CSV input for recorded tracks."""

from __future__ import annotations

import csv
import logging
from pathlib import Path

from track_meet.models import DEFAULT_TZ, TrackPoint
from track_meet.timeutils import dt_from_epoch_ms, parse_dt

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("latitude", "longitude")
TIME_COLUMNS = ("time", "geoTime")


class CsvFormatError(ValueError):
    """A row or header of the track CSV cannot be understood."""


def _parse_float(value: str) -> float:
    return float(value.strip())


def _parse_row(row: dict[str, str], time_column: str, tz_name: str) -> TrackPoint:
    raw_time = (row.get(time_column) or "").strip()
    if not raw_time:
        raise ValueError(f"empty {time_column!r}")
    if time_column == "geoTime":
        t = dt_from_epoch_ms(int(raw_time), "UTC")
    else:
        t = parse_dt(raw_time, tz_name)

    elevation = (row.get("elevation") or row.get("altitude") or "").strip()
    return TrackPoint(
        time=t,
        latitude=_parse_float(row["latitude"]),
        longitude=_parse_float(row["longitude"]),
        elevation_m=_parse_float(elevation) if elevation else None,
        name=(row.get("name") or "").strip() or None,
    )


def load_csv_points(csv_path: str | Path, tz_name: str = DEFAULT_TZ) -> list[TrackPoint]:
    """Load all points of a track CSV into memory.

    Args:
        csv_path: Path to the CSV.
        tz_name: Timezone for ISO times without an offset.

    Returns:
        Points in file order.

    Raises:
        CsvFormatError: On a missing column or an unparsable row.

    Notes:
        Accepted columns:
          - time: ISO-8601 text, or geoTime: Unix epoch milliseconds
          - latitude/longitude: decimal degrees
          - elevation or altitude, name: optional
    """

    p = Path(csv_path)
    points: list[TrackPoint] = []

    with p.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        fieldnames = reader.fieldnames or ()
        if not fieldnames:
            logger.debug("%s: empty file", p.name)
            return points

        missing = [c for c in REQUIRED_COLUMNS if c not in fieldnames]
        time_column = next((c for c in TIME_COLUMNS if c in fieldnames), None)
        if time_column is None:
            missing.append("time")
        if missing:
            raise CsvFormatError(f"missing column(s) {missing}; found {list(fieldnames)}")

        for row in reader:
            try:
                points.append(_parse_row(row, time_column, tz_name))
            except (AttributeError, KeyError, ValueError, TypeError, OverflowError) as exc:
                # line_num counts the header, so it matches the editor's line number
                raise CsvFormatError(f"line {reader.line_num}: {exc}") from exc

    logger.debug("%s: read %d point(s)", p.name, len(points))
    return points
