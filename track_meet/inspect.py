"""Inspect a loaded track: coverage, sampling and extent."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from track_meet.timeutils import DeltaStats, delta_stats
from track_meet.track import Track


@dataclass(frozen=True, slots=True)
class InspectResult:
    """High-level track inspection result."""

    label: str
    points: int
    start: datetime | None
    end: datetime | None
    delta: DeltaStats | None
    min_lat: float | None
    max_lat: float | None
    min_lon: float | None
    max_lon: float | None
    duplicate_times: int

    @property
    def duration_seconds(self) -> float:
        if self.start is None or self.end is None:
            return 0.0
        return (self.end - self.start).total_seconds()


def inspect_track(track: Track) -> InspectResult:
    """Inspect an already-loaded track."""

    if not track:
        return InspectResult(
            label=track.label,
            points=0,
            start=None,
            end=None,
            delta=None,
            min_lat=None,
            max_lat=None,
            min_lon=None,
            max_lon=None,
            duplicate_times=0,
        )

    times = track.times
    dupe = 0
    for i in range(1, len(times)):
        if times[i] == times[i - 1]:
            dupe += 1

    lats = [p.latitude for p in track]
    lons = [p.longitude for p in track]
    return InspectResult(
        label=track.label,
        points=len(track),
        start=track.start,
        end=track.end,
        delta=delta_stats(times),
        min_lat=min(lats),
        max_lat=max(lats),
        min_lon=min(lons),
        max_lon=max(lons),
        duplicate_times=dupe,
    )


def overlap_seconds(a: Track, b: Track) -> float:
    """Length of the time range both tracks cover (0 if disjoint or empty)."""

    if not a or not b:
        return 0.0
    lo = max(a.start, b.start)
    hi = min(a.end, b.end)
    return max(0.0, (hi - lo).total_seconds())
