"""Module entry point: python -m track_meet ..."""

from __future__ import annotations

from track_meet.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
