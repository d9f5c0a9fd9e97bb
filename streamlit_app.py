from __future__ import annotations

from pathlib import Path

import streamlit as st

from track_meet.inspect import inspect_track, overlap_seconds
from track_meet.loaders import TrackLoadError, load_track
from track_meet.meetings import find_meetings
from track_meet.models import DEFAULT_THRESHOLD_M, DEFAULT_TZ, MeetingResult
from track_meet.report import format_latlon, format_point_latlon
from track_meet.timeutils import format_hhmmss, tzinfo_from_name
from track_meet.track import Track


@st.cache_data(show_spinner=False)
def _load(path: str, label: str, tz_name: str, mtime: float) -> Track:
    _ = mtime  # part of cache key so updated files reload automatically
    return load_track(path, label=label, tz_name=tz_name)


def _interval_rows(result: MeetingResult, tz_name: str) -> list[dict[str, object]]:
    tz = tzinfo_from_name(tz_name)
    rows: list[dict[str, object]] = []
    for i, iv in enumerate(result.intervals, start=1):
        rows.append(
            {
                "interval": i,
                "start_time": iv.start.astimezone(tz).isoformat(sep=" "),
                "end_time": iv.end.astimezone(tz).isoformat(sep=" "),
                "duration_hhmmss": format_hhmmss(iv.duration_seconds),
                "location": format_latlon(iv.location.latitude, iv.location.longitude),
                "nearest_a": format_point_latlon(iv.nearest_a),
                "nearest_b": format_point_latlon(iv.nearest_b),
                "min_distance_m": round(iv.min_distance_m, 2),
                "instants": iv.instants,
            }
        )
    return rows


def main() -> None:
    st.set_page_config(page_title="Track meetings", layout="wide")
    st.title("Did the two tracks meet?")

    with st.sidebar:
        st.subheader("Tracks")
        path_a = st.text_input("Track A (.gpx / .csv)", value="data/GPS 1.gpx")
        path_b = st.text_input("Track B (.gpx / .csv)", value="data/GPS 2.gpx")

        st.subheader("Parameters")
        threshold_m = st.number_input(
            "threshold_m (meters)", value=DEFAULT_THRESHOLD_M, min_value=0.0, step=5.0
        )
        tz_name = st.text_input("Timezone (IANA)", value=DEFAULT_TZ)

    for path in (path_a, path_b):
        if not Path(path).exists():
            st.error(f"File not found: {path!r}")
            return

    try:
        tzinfo_from_name(tz_name)
    except ValueError as exc:
        st.error(str(exc))
        return

    try:
        track_a = _load(path_a, "A", tz_name, Path(path_a).stat().st_mtime)
        track_b = _load(path_b, "B", tz_name, Path(path_b).stat().st_mtime)
    except TrackLoadError as exc:
        st.error(f"Error parsing {exc.path}: {exc.reason}")
        return

    with st.spinner("Sweeping the merged timeline ..."):
        result = find_meetings(track_a, track_b, float(threshold_m))

    st.subheader("Summary")
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Met", "yes" if result.met else "no")
    c2.metric("Intervals", str(len(result.intervals)))
    c3.metric("Total together", format_hhmmss(result.total_seconds))
    c4.metric("Time overlap of tracks", format_hhmmss(overlap_seconds(track_a, track_b)))

    with st.expander("Tracks", expanded=False):
        st.dataframe(
            [
                {
                    "track": res.label,
                    "points": res.points,
                    "start": "" if res.start is None else res.start.isoformat(sep=" "),
                    "end": "" if res.end is None else res.end.isoformat(sep=" "),
                    "median_interval_s": None if res.delta is None else round(res.delta.median_s, 1),
                    "duplicate_times": res.duplicate_times,
                }
                for res in (inspect_track(track_a), inspect_track(track_b))
            ],
            use_container_width=True,
        )

    st.subheader("Intervals")
    if not result.met:
        st.info("No meeting detected.")
    else:
        st.dataframe(_interval_rows(result, tz_name), use_container_width=True, height=420)

    st.caption(
        "A meeting interval is a maximal run of instants (the union of both tracks' sample times) at which the "
        "interpolated positions were within the threshold. Its location is the midpoint of each track's recorded "
        "point nearest to the closest approach."
    )


if __name__ == "__main__":
    main()
