"""Data models for track points and meeting intervals."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Final


@dataclass(frozen=True, slots=True)
class Coordinate:
    """A position in decimal degrees."""

    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class TrackPoint:
    """A single recorded location sample.

    Attributes:
        time: Timezone-aware sample time.
        latitude: Latitude in decimal degrees.
        longitude: Longitude in decimal degrees.
        elevation_m: Elevation in meters, if the source carries one.
        name: Waypoint name, if the source carries one.
    """

    time: datetime
    latitude: float
    longitude: float
    elevation_m: float | None = None
    name: str | None = None

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.latitude, self.longitude)


@dataclass(frozen=True, slots=True)
class RawInterval:
    """A maximal run of timeline instants where both subjects were close.

    best_location is subject A's interpolated position at the instant of
    minimal separation inside the run.
    """

    start: datetime
    end: datetime
    best_location: Coordinate
    min_distance_m: float
    instants: int


@dataclass(frozen=True, slots=True)
class MeetingInterval:
    """A reported co-presence interval.

    Note:
        location is the midpoint of nearest_a and nearest_b when both exist,
        otherwise it falls back to raw_location.
    """

    start: datetime
    end: datetime
    location: Coordinate
    nearest_a: TrackPoint | None
    nearest_b: TrackPoint | None
    raw_location: Coordinate
    min_distance_m: float
    instants: int

    @property
    def duration_seconds(self) -> float:
        """Interval duration in seconds."""

        return max(0.0, (self.end - self.start).total_seconds())

    @property
    def resolved(self) -> bool:
        """Whether the location is anchored to recorded points of both tracks."""

        return self.nearest_a is not None and self.nearest_b is not None


@dataclass(frozen=True, slots=True)
class MeetingResult:
    """Outcome of comparing two tracks."""

    intervals: tuple[MeetingInterval, ...]
    threshold_m: float
    timeline_instants: int

    @property
    def met(self) -> bool:
        return bool(self.intervals)

    @property
    def total_seconds(self) -> float:
        return sum(iv.duration_seconds for iv in self.intervals)


DEFAULT_THRESHOLD_M: Final[float] = 20.0
DEFAULT_TZ: Final[str] = "UTC"
COORD_DECIMALS: Final[int] = 4
