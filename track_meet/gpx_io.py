"""GPX input for recorded tracks."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Iterator

import gpxpy
import gpxpy.gpx

from track_meet.models import TrackPoint
from track_meet.timeutils import ensure_aware

logger = logging.getLogger(__name__)

SAMPLE_TAGS = ("wpt", "trkpt", "rtept")

GPXSample = gpxpy.gpx.GPXWaypoint | gpxpy.gpx.GPXTrackPoint | gpxpy.gpx.GPXRoutePoint


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _raw_time_texts(xml_text: str) -> dict[str, list[str]]:
    """<time> text of every sample element, per tag, in document order ("" if absent)."""

    root = ET.fromstring(xml_text.encode("utf-8"))
    texts: dict[str, list[str]] = {tag: [] for tag in SAMPLE_TAGS}
    for el in root.iter():
        tag = _local_name(el.tag)
        if tag not in texts:
            continue
        time_text = ""
        for child in el:
            if _local_name(child.tag) == "time":
                time_text = (child.text or "").strip()
                break
        texts[tag].append(time_text)
    return texts


def _iter_gpx_samples(gpx: gpxpy.gpx.GPX) -> Iterator[tuple[str, GPXSample]]:
    for w in gpx.waypoints:
        yield "wpt", w
    for track in gpx.tracks:
        for segment in track.segments:
            for p in segment.points:
                yield "trkpt", p
    for route in gpx.routes:
        for p in route.points:
            yield "rtept", p


def load_gpx_points(gpx_path: str | Path) -> list[TrackPoint]:
    """Load every timestamped sample of a GPX file.

    Args:
        gpx_path: Path to the .gpx file.

    Returns:
        Points in file order: waypoints, then track points, then route points.

    Raises:
        OSError: If the file cannot be read.
        gpxpy.gpx.GPXException: If the document is not valid GPX.
        ValueError: If a sample carries a <time> that cannot be parsed.

    Notes:
        Samples with no <time> element are skipped (and counted in a warning).
        Naive times are treated as UTC.
    """

    p = Path(gpx_path)
    xml_text = p.read_text(encoding="utf-8")
    gpx = gpxpy.parse(xml_text)
    # gpxpy maps an unparsable <time> to None, same as a missing one
    raw_times = _raw_time_texts(xml_text)

    points: list[TrackPoint] = []
    seen = {tag: 0 for tag in SAMPLE_TAGS}
    untimed = 0
    for tag, s in _iter_gpx_samples(gpx):
        idx = seen[tag]
        seen[tag] += 1
        if s.time is None:
            texts = raw_times[tag]
            raw = texts[idx] if idx < len(texts) else ""
            if raw:
                raise ValueError(
                    f"<{tag}> #{idx + 1} at lat={s.latitude}, lon={s.longitude}: cannot parse time {raw!r}"
                )
            untimed += 1
            continue
        points.append(
            TrackPoint(
                time=ensure_aware(s.time),
                latitude=float(s.latitude),
                longitude=float(s.longitude),
                elevation_m=None if s.elevation is None else float(s.elevation),
                name=s.name or None,
            )
        )

    if untimed:
        logger.warning("%s: skipped %d point(s) without <time>", p.name, untimed)
    logger.debug("%s: read %d timestamped point(s)", p.name, len(points))
    return points
