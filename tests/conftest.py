"""Shared builders for track tests."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from track_meet.models import TrackPoint
from track_meet.track import Track

DAY = datetime(2024, 5, 1, tzinfo=UTC)

# Museumplein, Amsterdam
MEET_LAT = 52.3605
MEET_LON = 4.8745


def at(hms: str) -> datetime:
    """UTC datetime on the test day from "HH:MM:SS"."""

    h, m, s = (int(x) for x in hms.split(":"))
    return DAY + timedelta(hours=h, minutes=m, seconds=s)


def secs(n: float) -> datetime:
    """UTC datetime n seconds after midnight of the test day."""

    return DAY + timedelta(seconds=n)


def pt(t: datetime | str, lat: float, lon: float) -> TrackPoint:
    return TrackPoint(time=at(t) if isinstance(t, str) else t, latitude=lat, longitude=lon)


@pytest.fixture
def crossing_tracks() -> tuple[Track, Track]:
    """A waits at the meeting spot; B arrives at 16:11:00, stays 51s, then leaves."""

    track_a = Track(
        [
            pt("16:11:00", MEET_LAT, MEET_LON),
            pt("16:11:30", MEET_LAT, MEET_LON),
            pt("16:12:00", MEET_LAT, MEET_LON),
        ],
        label="A",
    )
    track_b = Track(
        [
            pt("16:10:50", MEET_LAT + 0.0010, MEET_LON),  # ~111 m north
            pt("16:11:00", MEET_LAT, MEET_LON),
            pt("16:11:50", MEET_LAT, MEET_LON),
            pt("16:11:51", MEET_LAT - 0.0010, MEET_LON),  # ~111 m south
        ],
        label="B",
    )
    return track_a, track_b
