"""Load a track file of any supported format."""

from __future__ import annotations

from pathlib import Path

import gpxpy.gpx

from track_meet.csv_io import load_csv_points
from track_meet.gpx_io import load_gpx_points
from track_meet.models import DEFAULT_TZ
from track_meet.track import Track

SUPPORTED_SUFFIXES = (".gpx", ".csv")


class TrackLoadError(ValueError):
    """A track file could not be read or parsed."""

    def __init__(self, path: str | Path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = Path(path)
        self.reason = reason


def load_track(path: str | Path, *, label: str | None = None, tz_name: str = DEFAULT_TZ) -> Track:
    """Load a .gpx or .csv file into a time-sorted Track.

    Args:
        path: Input file; the format is chosen by suffix.
        label: Track label for reports. Defaults to the file stem.
        tz_name: Timezone for CSV times without an offset.

    Returns:
        Track (possibly empty).

    Raises:
        TrackLoadError: If the file is missing, unreadable or malformed.
    """

    p = Path(path)
    suffix = p.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise TrackLoadError(p, f"unsupported file type {p.suffix!r} (expected one of {', '.join(SUPPORTED_SUFFIXES)})")

    try:
        if suffix == ".gpx":
            points = load_gpx_points(p)
        else:
            points = load_csv_points(p, tz_name=tz_name)
    except (OSError, UnicodeDecodeError, ValueError, gpxpy.gpx.GPXException) as exc:
        raise TrackLoadError(p, str(exc) or type(exc).__name__) from exc

    return Track(points, label=p.stem if label is None else label)
