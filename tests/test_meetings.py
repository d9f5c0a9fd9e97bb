"""Tests for timeline merging, the proximity sweep and interval resolution."""

import math

import pytest

from conftest import MEET_LAT, MEET_LON, at, pt, secs
from track_meet.geo import distance_m, midpoint
from track_meet.meetings import find_meetings, merge_timeline, nearest_point, resolve_interval, sweep
from track_meet.models import Coordinate, RawInterval
from track_meet.track import Track

# ~55 m north of the meeting spot
FAR_LAT = MEET_LAT + 0.0005


def _static(times: list[float], lat: float = MEET_LAT, lon: float = MEET_LON) -> Track:
    return Track([pt(secs(t), lat, lon) for t in times])


def _is_apart(track_a: Track, track_b: Track, t, threshold_m: float) -> bool:
    a = track_a.interpolate(t)
    b = track_b.interpolate(t)
    return a is None or b is None or distance_m(a, b) > threshold_m


class TestMergeTimeline:
    def test_union_sorted_and_deduplicated(self) -> None:
        a = _static([0, 10, 20, 20])
        b = _static([5, 10, 30])
        assert merge_timeline(a, b) == [secs(t) for t in (0, 5, 10, 20, 30)]

    def test_strictly_ascending(self) -> None:
        a = _static([3, 1, 2, 2, 9])
        b = _static([9, 4, 1])
        tl = merge_timeline(a, b)
        assert all(x < y for x, y in zip(tl, tl[1:]))

    def test_empty_tracks(self) -> None:
        assert merge_timeline(Track([]), Track([])) == []
        assert merge_timeline(Track([]), _static([1, 2])) == [secs(1), secs(2)]


class TestSweep:
    def test_single_crossing(self, crossing_tracks) -> None:
        track_a, track_b = crossing_tracks
        intervals = sweep(track_a, track_b, 20.0)
        assert len(intervals) == 1
        iv = intervals[0]
        assert iv.start == at("16:11:00")
        assert iv.end == at("16:11:51")
        assert iv.best_location == Coordinate(MEET_LAT, MEET_LON)
        assert iv.min_distance_m == 0.0

    def test_no_overlap(self) -> None:
        a = _static([0, 10, 20, 30, 40, 50])
        b = _static([100, 110, 120, 150], lat=FAR_LAT)
        assert sweep(a, b, 20.0) == []
        result = find_meetings(a, b, 20.0)
        assert not result.met
        assert result.intervals == ()

    def test_overlapping_in_time_but_always_far(self) -> None:
        a = _static([0, 10, 20, 30])
        b = _static([5, 15, 25], lat=FAR_LAT)
        assert sweep(a, b, 20.0) == []

    def test_separate_runs_are_not_merged(self) -> None:
        a = _static([0, 10, 20, 30, 40, 50, 60, 70, 80, 90, 100])
        b = Track(
            [
                pt(secs(0), MEET_LAT, MEET_LON),
                pt(secs(10), MEET_LAT, MEET_LON),
                pt(secs(20), MEET_LAT, MEET_LON),
                pt(secs(30), FAR_LAT, MEET_LON),
                pt(secs(40), FAR_LAT, MEET_LON),
                pt(secs(50), MEET_LAT, MEET_LON),
                pt(secs(60), MEET_LAT, MEET_LON),
                pt(secs(70), FAR_LAT, MEET_LON),
            ]
        )
        intervals = sweep(a, b, 20.0)
        assert [(iv.start, iv.end) for iv in intervals] == [(secs(0), secs(30)), (secs(50), secs(70))]
        assert [iv.instants for iv in intervals] == [3, 2]

    def test_alternating_instants_open_and_close_a_run_each(self) -> None:
        times = list(range(0, 90, 10))
        a = _static(times)
        b = Track([pt(secs(t), FAR_LAT if (t // 10) % 2 else MEET_LAT, MEET_LON) for t in times])
        intervals = sweep(a, b, 20.0)
        assert [(iv.start, iv.end) for iv in intervals] == [
            (secs(0), secs(10)),
            (secs(20), secs(30)),
            (secs(40), secs(50)),
            (secs(60), secs(70)),
            (secs(80), secs(80)),
        ]
        assert all(iv.instants == 1 for iv in intervals)

    def test_intervals_are_maximal(self) -> None:
        a = Track([pt(secs(t), MEET_LAT, MEET_LON + 0.00001 * (t % 7)) for t in range(0, 300, 13)])
        b = Track(
            [pt(secs(t), FAR_LAT if (t // 40) % 2 else MEET_LAT, MEET_LON) for t in range(5, 290, 17)]
        )
        timeline = merge_timeline(a, b)
        intervals = sweep(a, b, 20.0)
        assert len(intervals) >= 2
        for prev, nxt in zip(intervals, intervals[1:]):
            assert prev.end <= nxt.start
            gap = [t for t in timeline if prev.end <= t < nxt.start]
            assert any(_is_apart(a, b, t, 20.0) for t in gap)

    def test_threshold_is_inclusive(self) -> None:
        a = _static([0, 10])
        b = _static([0, 10], lat=FAR_LAT)
        d = distance_m(Coordinate(MEET_LAT, MEET_LON), Coordinate(FAR_LAT, MEET_LON))

        intervals = sweep(a, b, d)
        assert len(intervals) == 1
        assert intervals[0].min_distance_m == d
        assert sweep(a, b, math.nextafter(d, 0.0)) == []

    def test_data_gap_closes_at_previous_instant(self) -> None:
        a = _static([0, 10, 20, 30, 40])
        b = _static([0, 10, 20])
        intervals = sweep(a, b, 20.0)
        assert [(iv.start, iv.end) for iv in intervals] == [(secs(0), secs(20))]

    def test_open_run_is_flushed_at_last_instant(self) -> None:
        a = _static([0, 10, 20])
        b = _static([5, 20, 25])
        intervals = sweep(a, b, 20.0)
        # 25 is outside A, so the run ends at 20
        assert [(iv.start, iv.end) for iv in intervals] == [(secs(5), secs(20))]

        c = _static([0, 10, 20])
        intervals = sweep(a, c, 20.0)
        assert [(iv.start, iv.end) for iv in intervals] == [(secs(0), secs(20))]

    def test_single_instant_timeline_has_no_interval(self) -> None:
        a = _static([0])
        b = _static([0])
        assert sweep(a, b, 20.0) == []

    def test_earliest_minimum_wins(self) -> None:
        a = Track([pt(secs(0), 52.0, 4.0), pt(secs(10), 52.0, 4.001)])
        b = Track([pt(secs(0), 52.0001, 4.0), pt(secs(10), 52.0001, 4.001)])
        intervals = sweep(a, b, 20.0)
        assert len(intervals) == 1
        assert intervals[0].best_location == Coordinate(52.0, 4.0)

    def test_best_location_is_track_a_position_at_closest_instant(self) -> None:
        a = Track([pt(secs(0), 52.0, 4.0), pt(secs(10), 52.0, 4.0002), pt(secs(20), 52.0, 4.0004)])
        b = Track(
            [pt(secs(0), 52.00015, 4.0), pt(secs(10), 52.00002, 4.0002), pt(secs(20), 52.00012, 4.0004)]
        )
        intervals = sweep(a, b, 20.0)
        assert len(intervals) == 1
        assert intervals[0].best_location == Coordinate(52.0, 4.0002)
        assert intervals[0].min_distance_m == pytest.approx(2.2, abs=0.1)

    def test_duplicate_timestamps_scenario(self) -> None:
        a = Track([pt(secs(0), MEET_LAT, MEET_LON), pt(secs(10), MEET_LAT, MEET_LON), pt(secs(10), FAR_LAT, MEET_LON)])
        b = _static([0, 5, 10])
        intervals = sweep(a, b, 20.0)
        assert [(iv.start, iv.end) for iv in intervals] == [(secs(0), secs(10))]

    @pytest.mark.parametrize("bad", [-1.0, math.inf, math.nan])
    def test_rejects_invalid_threshold(self, bad: float) -> None:
        with pytest.raises(ValueError):
            sweep(_static([0, 1]), _static([0, 1]), bad)


class TestResolver:
    def test_nearest_point_first_minimum_wins(self) -> None:
        track = Track([pt(secs(0), 1.0, 1.0), pt(secs(1), 2.0, 2.0), pt(secs(2), 2.0, 2.0)])
        found = nearest_point(track, Coordinate(2.0, 2.0))
        assert found is track.points[1]

    def test_nearest_point_of_empty_track(self) -> None:
        assert nearest_point(Track([]), Coordinate(0.0, 0.0)) is None

    def test_location_is_midpoint_of_nearest_recorded_points(self) -> None:
        a = Track([pt(secs(0), 52.0, 4.0), pt(secs(60), 52.0002, 4.0003), pt(secs(120), 52.001, 4.001)])
        b = Track([pt(secs(30), 51.9999, 4.0001), pt(secs(90), 52.00025, 4.00028), pt(secs(150), 52.002, 4.0)])
        raw = RawInterval(
            start=secs(60), end=secs(90), best_location=Coordinate(52.0002, 4.0003), min_distance_m=3.0, instants=2
        )

        iv = resolve_interval(raw, a, b)

        best_a = min(a, key=lambda p: distance_m(raw.best_location, p.coordinate))
        best_b = min(b, key=lambda p: distance_m(raw.best_location, p.coordinate))
        assert iv.nearest_a == best_a
        assert iv.nearest_b == best_b
        assert iv.location == midpoint(best_a.coordinate, best_b.coordinate)
        assert iv.raw_location == raw.best_location
        assert iv.resolved
        assert (iv.start, iv.end, iv.min_distance_m, iv.instants) == (raw.start, raw.end, 3.0, 2)

    def test_empty_track_degrades_to_raw_location(self) -> None:
        a = _static([0, 10])
        raw = RawInterval(
            start=secs(0), end=secs(10), best_location=Coordinate(1.5, 2.5), min_distance_m=0.0, instants=2
        )
        iv = resolve_interval(raw, a, Track([]))
        assert iv.location == Coordinate(1.5, 2.5)
        assert iv.nearest_a is not None
        assert iv.nearest_b is None
        assert not iv.resolved


class TestFindMeetings:
    def test_single_crossing_report(self, crossing_tracks) -> None:
        track_a, track_b = crossing_tracks
        result = find_meetings(track_a, track_b)

        assert result.met
        assert result.threshold_m == 20.0
        assert result.timeline_instants == 6
        (iv,) = result.intervals
        assert (iv.start, iv.end) == (at("16:11:00"), at("16:11:51"))
        assert iv.duration_seconds == 51.0
        assert iv.location.latitude == pytest.approx(MEET_LAT)
        assert iv.location.longitude == pytest.approx(MEET_LON)
        assert iv.nearest_a == track_a.points[0]
        assert iv.nearest_b == track_b.points[1]
        assert result.total_seconds == 51.0

    def test_empty_tracks(self) -> None:
        result = find_meetings(Track([]), Track([]))
        assert not result.met
        assert result.timeline_instants == 0
