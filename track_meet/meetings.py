"""Co-presence detection between two tracks.

The pipeline is:
    merge_timeline -> sweep -> resolve_interval

merge_timeline builds the evaluation grid (every instant either subject was
sampled at), sweep walks it comparing interpolated positions and segments the
grid into maximal "together" runs, and resolve_interval anchors each run's
location to the recorded points nearest to it.
"""

from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Sequence

from track_meet.geo import distance_m, midpoint
from track_meet.models import (
    DEFAULT_THRESHOLD_M,
    Coordinate,
    MeetingInterval,
    MeetingResult,
    RawInterval,
    TrackPoint,
)
from track_meet.track import Track

logger = logging.getLogger(__name__)


class SweepState(enum.Enum):
    APART = "apart"
    TOGETHER = "together"


@dataclass(slots=True)
class _Run:
    """Running state of the currently open "together" run."""

    start: datetime
    min_distance_m: float
    best_location: Coordinate
    instants: int = 1

    def close(self, end: datetime) -> RawInterval:
        return RawInterval(
            start=self.start,
            end=end,
            best_location=self.best_location,
            min_distance_m=self.min_distance_m,
            instants=self.instants,
        )


def merge_timeline(track_a: Track, track_b: Track) -> list[datetime]:
    """Return the sorted, de-duplicated union of both tracks' timestamps."""

    return sorted(set(track_a.times) | set(track_b.times))


def sweep(
    track_a: Track,
    track_b: Track,
    threshold_m: float = DEFAULT_THRESHOLD_M,
    timeline: Sequence[datetime] | None = None,
) -> list[RawInterval]:
    """Segment the merged timeline into maximal runs of proximity.

    Args:
        track_a: Track of subject A.
        track_b: Track of subject B.
        threshold_m: Separation (meters) at or below which both count as together.
        timeline: Precomputed merge_timeline(track_a, track_b), if available.

    Returns:
        Raw intervals in chronological order (empty if they never met).

    Raises:
        ValueError: If threshold_m is negative or not finite.
    """

    _check_threshold(threshold_m)
    if timeline is None:
        timeline = merge_timeline(track_a, track_b)

    intervals: list[RawInterval] = []
    # a run needs two instants to span anything
    if len(timeline) < 2:
        return intervals

    state = SweepState.APART
    run: _Run | None = None

    for i, t in enumerate(timeline):
        pos_a = track_a.interpolate(t)
        pos_b = track_b.interpolate(t)

        if pos_a is None or pos_b is None:
            # outside one track's range: ends the run at the previous instant
            if run is not None:
                intervals.append(run.close(timeline[i - 1]))
                run = None
                state = SweepState.APART
            continue

        d = distance_m(pos_a, pos_b)
        close = d <= threshold_m

        if state is SweepState.APART:
            if close:
                run = _Run(start=t, min_distance_m=d, best_location=pos_a)
                state = SweepState.TOGETHER
        else:
            if run is None:
                raise RuntimeError(f"sweep is {state.value} at {t.isoformat()} without an open run")
            if close:
                run.instants += 1
                if d < run.min_distance_m:
                    run.min_distance_m = d
                    run.best_location = pos_a
            else:
                intervals.append(run.close(t))
                run = None
                state = SweepState.APART

    if run is not None:
        intervals.append(run.close(timeline[-1]))

    return intervals


def nearest_point(points: Iterable[TrackPoint], location: Coordinate) -> TrackPoint | None:
    """Find the recorded point closest to location (first one wins on ties)."""

    best: TrackPoint | None = None
    best_d = math.inf
    for p in points:
        d = distance_m(location, p.coordinate)
        if d < best_d:
            best_d = d
            best = p
    return best


def resolve_interval(raw: RawInterval, track_a: Track, track_b: Track) -> MeetingInterval:
    """Anchor a raw interval's location to recorded points of both tracks.

    The reported location becomes the midpoint between each track's recorded
    point nearest to the raw best location. If either track has no points the
    raw location is kept and the missing nearest point is None.
    """

    nearest_a = nearest_point(track_a, raw.best_location)
    nearest_b = nearest_point(track_b, raw.best_location)

    location = raw.best_location
    if nearest_a is not None and nearest_b is not None:
        location = midpoint(nearest_a.coordinate, nearest_b.coordinate)

    return MeetingInterval(
        start=raw.start,
        end=raw.end,
        location=location,
        nearest_a=nearest_a,
        nearest_b=nearest_b,
        raw_location=raw.best_location,
        min_distance_m=raw.min_distance_m,
        instants=raw.instants,
    )


def find_meetings(
    track_a: Track,
    track_b: Track,
    threshold_m: float = DEFAULT_THRESHOLD_M,
) -> MeetingResult:
    """Find every interval in which both subjects were within threshold_m."""

    timeline = merge_timeline(track_a, track_b)
    logger.debug(
        "Merged timeline: %d instants (%s=%d points, %s=%d points)",
        len(timeline),
        track_a.label or "A",
        len(track_a),
        track_b.label or "B",
        len(track_b),
    )

    raw_intervals = sweep(track_a, track_b, threshold_m, timeline=timeline)
    intervals = tuple(resolve_interval(raw, track_a, track_b) for raw in raw_intervals)
    logger.info("Found %d meeting interval(s) within %.1f m", len(intervals), threshold_m)
    return MeetingResult(intervals=intervals, threshold_m=threshold_m, timeline_instants=len(timeline))


def _check_threshold(threshold_m: float) -> None:
    if not math.isfinite(threshold_m) or threshold_m < 0:
        raise ValueError(f"threshold_m must be a finite, non-negative number of meters, got {threshold_m!r}")
