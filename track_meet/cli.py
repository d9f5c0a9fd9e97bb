"""Command-line interface for track_meet.

Run:
    python -m track_meet find-meetings --track-a "GPS 1.gpx" --track-b "GPS 2.gpx"
"""

from __future__ import annotations

import argparse
import json
import logging
import math
import sys
from time import perf_counter

from track_meet.inspect import inspect_track, overlap_seconds
from track_meet.loaders import TrackLoadError, load_track
from track_meet.meetings import find_meetings
from track_meet.models import COORD_DECIMALS, DEFAULT_THRESHOLD_M, DEFAULT_TZ
from track_meet.report import format_result, result_to_dict, write_meetings_csv
from track_meet.timeutils import format_hhmmss, tzinfo_from_name


def _timezone(value: str) -> str:
    try:
        tzinfo_from_name(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc
    return value


def _threshold(value: str) -> float:
    try:
        v = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}") from exc
    if not math.isfinite(v) or v < 0:
        raise argparse.ArgumentTypeError(f"must be a non-negative distance in meters, got {value!r}")
    return v


def _non_negative_int(value: str) -> int:
    try:
        v = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}") from exc
    if v < 0:
        raise argparse.ArgumentTypeError(f"must be zero or more, got {value!r}")
    return v


def _cmd_find_meetings(args: argparse.Namespace) -> int:
    started = perf_counter()

    try:
        track_a = load_track(args.track_a, label="A", tz_name=args.tz)
        track_b = load_track(args.track_b, label="B", tz_name=args.tz)
    except TrackLoadError as exc:
        print(f"Error parsing {exc.path}: {exc.reason}", file=sys.stderr)
        return 1

    print(
        f"Tracks loaded and sorted: A={len(track_a)} points, B={len(track_b)} points, "
        f"time overlap={format_hhmmss(overlap_seconds(track_a, track_b))}"
    )

    result = find_meetings(track_a, track_b, args.threshold_m)
    for line in format_result(result, args.tz, args.decimals):
        print(line)

    if args.out:
        write_meetings_csv(result.intervals, args.out, args.tz)
        print(f"Exported: {args.out}")

    if args.json:
        print(json.dumps(result_to_dict(result, args.tz), ensure_ascii=False, indent=2))

    elapsed_ms = (perf_counter() - started) * 1000.0
    print(f"Total calculation time: {elapsed_ms:.2f} ms")
    return 0


def _cmd_inspect(args: argparse.Namespace) -> int:
    try:
        track = load_track(args.track, tz_name=args.tz)
    except TrackLoadError as exc:
        print(f"Error parsing {exc.path}: {exc.reason}", file=sys.stderr)
        return 1

    res = inspect_track(track)
    tz = tzinfo_from_name(args.tz)

    print("### Points")
    print(f"points={res.points}, duplicate_times={res.duplicate_times}")
    print()

    if res.start is not None and res.end is not None:
        print(f"### Time range ({args.tz})")
        start = res.start.astimezone(tz)
        end = res.end.astimezone(tz)
        print(f"start={start.isoformat(sep=' ')}, end={end.isoformat(sep=' ')}, span={format_hhmmss(res.duration_seconds)}")
        print()

    if res.delta is not None:
        print("### Sampling interval (seconds)")
        print(
            f"count={res.delta.count}, min={res.delta.min_s:.3f}, median={res.delta.median_s:.3f}, "
            f"p95={res.delta.p95_s:.3f}, max={res.delta.max_s:.3f}"
        )
        print()

    print("### Lat/lon range")
    print(f"lat=[{res.min_lat}, {res.max_lat}], lon=[{res.min_lon}, {res.max_lon}]")

    if args.json:
        payload = {
            "label": res.label,
            "points": res.points,
            "start": None if res.start is None else res.start.astimezone(tz).isoformat(),
            "end": None if res.end is None else res.end.astimezone(tz).isoformat(),
            "duration_seconds": res.duration_seconds,
            "sampling": None
            if res.delta is None
            else {
                "count": res.delta.count,
                "min_s": res.delta.min_s,
                "median_s": res.delta.median_s,
                "p95_s": res.delta.p95_s,
                "max_s": res.delta.max_s,
            },
            "lat_range": [res.min_lat, res.max_lat],
            "lon_range": [res.min_lon, res.max_lon],
            "duplicate_times": res.duplicate_times,
        }
        print()
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""

    p = argparse.ArgumentParser(prog="track_meet")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging to stderr")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_fm = sub.add_parser("find-meetings", help="Find the intervals in which two tracks were at the same place")
    p_fm.add_argument("--track-a", type=str, required=True, help="Track of subject A (.gpx or .csv)")
    p_fm.add_argument("--track-b", type=str, required=True, help="Track of subject B (.gpx or .csv)")
    p_fm.add_argument(
        "--threshold-m",
        type=_threshold,
        default=DEFAULT_THRESHOLD_M,
        help=f"Maximum separation in meters that counts as together (default {DEFAULT_THRESHOLD_M:g}, inclusive)",
    )
    p_fm.add_argument("--tz", type=_timezone, default=DEFAULT_TZ, help="Display timezone (IANA), default UTC")
    p_fm.add_argument(
        "--decimals", type=_non_negative_int, default=COORD_DECIMALS, help="Coordinate decimals in console output"
    )
    p_fm.add_argument("--out", type=str, default=None, help="Also export intervals to this CSV path")
    p_fm.add_argument("--json", action="store_true", help="Also print the result as JSON")
    p_fm.set_defaults(func=_cmd_find_meetings)

    p_ins = sub.add_parser("inspect", help="Summarise one track: time range, sampling intervals, extent")
    p_ins.add_argument("--track", type=str, required=True, help="Track file (.gpx or .csv)")
    p_ins.add_argument("--tz", type=_timezone, default=DEFAULT_TZ, help="Display timezone (IANA)")
    p_ins.add_argument("--json", action="store_true", help="Also print JSON")
    p_ins.set_defaults(func=_cmd_inspect)

    return p


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""

    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
