from __future__ import annotations

import argparse
import math
import random
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path

import gpxpy.gpx


@dataclass(frozen=True, slots=True)
class Spot:
    name: str
    lat: float
    lon: float


def _offset(spot: Spot, north_m: float, east_m: float) -> tuple[float, float]:
    """Shift a spot by meters (small-distance approximation)."""

    lat = spot.lat + north_m / 111_320.0
    lon = spot.lon + east_m / (111_320.0 * math.cos(math.radians(spot.lat)))
    return lat, lon


def _jitter_step(rng: random.Random, base_s: float) -> timedelta:
    return timedelta(seconds=max(1.0, rng.uniform(0.5 * base_s, 1.5 * base_s)))


def generate_tracks(
    *,
    seed: int,
    start: datetime,
    meet: Spot,
    stay: timedelta,
) -> tuple[gpxpy.gpx.GPX, gpxpy.gpx.GPX]:
    """Two tracks with irregular, different sampling: B walks to A, stays, leaves."""

    rng = random.Random(seed)

    # A idles around the meeting spot for the whole window, sparse sampling
    gpx_a = gpxpy.gpx.GPX()
    end = start + stay + timedelta(minutes=20)
    cur = start
    while cur <= end:
        lat, lon = _offset(meet, rng.uniform(-3.0, 3.0), rng.uniform(-3.0, 3.0))
        gpx_a.waypoints.append(gpxpy.gpx.GPXWaypoint(latitude=round(lat, 7), longitude=round(lon, 7), time=cur))
        cur += _jitter_step(rng, 45.0)

    # B approaches from ~600m east, stays, then leaves north, denser sampling
    gpx_b = gpxpy.gpx.GPX()
    arrive = start + timedelta(minutes=8)
    leave = arrive + stay
    cur = start
    while cur <= end:
        if cur < arrive:
            left_s = (arrive - cur).total_seconds()
            lat, lon = _offset(meet, 0.0, 1.25 * left_s)
        elif cur <= leave:
            lat, lon = _offset(meet, rng.uniform(-4.0, 4.0), rng.uniform(-4.0, 4.0))
        else:
            gone_s = (cur - leave).total_seconds()
            lat, lon = _offset(meet, 1.4 * gone_s, 0.0)
        gpx_b.waypoints.append(gpxpy.gpx.GPXWaypoint(latitude=round(lat, 7), longitude=round(lon, 7), time=cur))
        cur += _jitter_step(rng, 15.0)

    return gpx_a, gpx_b


def main() -> int:
    p = argparse.ArgumentParser(description="Generate two fake GPX tracks that meet once (for demo/testing).")
    p.add_argument("--out-dir", type=str, default="data", help="Output directory")
    p.add_argument("--seed", type=int, default=42, help="Random seed (reproducible)")
    p.add_argument("--start", type=str, default="2024-05-01 16:00:00", help="Start time in UTC")
    p.add_argument("--stay-minutes", type=float, default=6.0, help="How long B stays with A")
    args = p.parse_args()

    start = datetime.fromisoformat(args.start).replace(tzinfo=timezone.utc)
    meet = Spot("museumplein", 52.3605, 4.8745)
    gpx_a, gpx_b = generate_tracks(seed=args.seed, start=start, meet=meet, stay=timedelta(minutes=args.stay_minutes))

    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    for name, gpx in (("GPS 1.gpx", gpx_a), ("GPS 2.gpx", gpx_b)):
        path = out_dir / name
        path.write_text(gpx.to_xml(), encoding="utf-8")
        print(f"Generated: {path} (points={len(gpx.waypoints)}, seed={args.seed})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
