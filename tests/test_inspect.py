"""Tests for track inspection."""

import pytest

from conftest import pt, secs
from track_meet.inspect import inspect_track, overlap_seconds
from track_meet.timeutils import delta_stats
from track_meet.track import Track


def test_inspect_track() -> None:
    track = Track(
        [pt(secs(0), 1.0, 5.0), pt(secs(10), 2.0, 4.0), pt(secs(10), 3.0, 6.0), pt(secs(40), 0.5, 5.5)],
        label="A",
    )
    res = inspect_track(track)
    assert res.label == "A"
    assert res.points == 4
    assert (res.start, res.end) == (secs(0), secs(40))
    assert res.duration_seconds == 40.0
    assert res.duplicate_times == 1
    assert (res.min_lat, res.max_lat, res.min_lon, res.max_lon) == (0.5, 3.0, 4.0, 6.0)
    assert res.delta is not None
    assert res.delta.count == 3
    assert res.delta.max_s == 30.0


def test_inspect_empty_track() -> None:
    res = inspect_track(Track([]))
    assert res.points == 0
    assert res.delta is None
    assert res.duration_seconds == 0.0


def test_delta_stats() -> None:
    stats = delta_stats([secs(0), secs(1), secs(3), secs(6)])
    assert stats is not None
    assert (stats.min_s, stats.median_s, stats.max_s) == (1.0, 2.0, 3.0)
    assert delta_stats([secs(0)]) is None


@pytest.mark.parametrize(
    "a_times,b_times,expected",
    [
        ((0, 100), (50, 200), 50.0),
        ((0, 100), (100, 200), 0.0),
        ((0, 10), (20, 30), 0.0),
        ((0, 100), (20, 30), 10.0),
    ],
)
def test_overlap_seconds(a_times, b_times, expected) -> None:
    a = Track([pt(secs(t), 0.0, 0.0) for t in a_times])
    b = Track([pt(secs(t), 0.0, 0.0) for t in b_times])
    assert overlap_seconds(a, b) == expected
    assert overlap_seconds(a, Track([])) == 0.0
