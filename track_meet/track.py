"""Time-ordered tracks and position interpolation."""

from __future__ import annotations

from bisect import bisect_left
from datetime import datetime
from typing import Iterable, Iterator, Sequence

from track_meet.models import Coordinate, TrackPoint


class Track:
    """Read-only, time-sorted sequence of points recorded for one subject.

    Points are sorted on construction. The sort is stable, so points that share
    a timestamp keep their input order.
    """

    __slots__ = ("_label", "_points", "_times")

    def __init__(self, points: Iterable[TrackPoint], label: str = "") -> None:
        self._label = label
        self._points: tuple[TrackPoint, ...] = tuple(sorted(points, key=lambda p: p.time))
        self._times: tuple[datetime, ...] = tuple(p.time for p in self._points)

    @property
    def label(self) -> str:
        return self._label

    @property
    def points(self) -> Sequence[TrackPoint]:
        return self._points

    @property
    def times(self) -> Sequence[datetime]:
        return self._times

    @property
    def start(self) -> datetime | None:
        return self._times[0] if self._times else None

    @property
    def end(self) -> datetime | None:
        return self._times[-1] if self._times else None

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[TrackPoint]:
        return iter(self._points)

    def __bool__(self) -> bool:
        return bool(self._points)

    def __repr__(self) -> str:
        return f"Track(label={self._label!r}, points={len(self._points)}, start={self.start}, end={self.end})"

    def covers(self, t: datetime) -> bool:
        """Whether t lies inside the recorded time range (inclusive)."""

        return bool(self._times) and self._times[0] <= t <= self._times[-1]

    def interpolate(self, t: datetime) -> Coordinate | None:
        """Linearly interpolate the position at time t.

        Args:
            t: Query time (timezone-aware, like the track's points).

        Returns:
            The coordinate at t, or None if t is outside the recorded range.

        Notes:
            Latitude and longitude are interpolated independently in degrees.
            An exact timestamp match returns the recorded coordinate unchanged;
            with duplicate timestamps the first point in track order wins.
        """

        if not self.covers(t):
            return None

        idx = bisect_left(self._times, t)
        after = self._points[idx]
        if after.time == t:
            return after.coordinate

        # covers() guarantees idx > 0 here: t > times[0]
        before = self._points[idx - 1]
        span_s = (after.time - before.time).total_seconds()
        if span_s == 0:
            return before.coordinate

        frac = (t - before.time).total_seconds() / span_s
        return Coordinate(
            before.latitude + (after.latitude - before.latitude) * frac,
            before.longitude + (after.longitude - before.longitude) * frac,
        )


def interpolate(track: Track, t: datetime) -> Coordinate | None:
    """Module-level alias of Track.interpolate."""

    return track.interpolate(t)
