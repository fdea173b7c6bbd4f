"""Module entry point: python -m territory_tracker ..."""

from __future__ import annotations

from territory_tracker.main import main


if __name__ == "__main__":
    raise SystemExit(main())
