"""Command-line analyser: replay a recorded track and report loops and validity.

Usage:
    python run.py track.csv [--json]
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

from .config import LOOP_CLOSING_RADIUS_M, LOOP_MIN_AREA_SQ_M, MAP_FIT_NORMAL
from .errors import TrackFormatError
from .geometry.models import LocationFix, LoopTolerances
from .models import RunSummary
from .session import RunSession
from .track_io import load_fixes_csv, summary_to_dict
from .utils import (
    format_area,
    format_distance,
    format_duration,
    format_elevation,
    format_pace,
    json_dumps_sorted,
)


def _setup_logging(verbose: bool = False) -> None:
    if not logging.getLogger().hasHandlers():
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.INFO,
            format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        )


def _build_parser() -> argparse.ArgumentParser:
    """Return the CLI argument parser for the track analyser."""

    parser = argparse.ArgumentParser(
        description=(
            "Replay a recorded GPS track, validate it and list the closed"
            " loops that could be claimed as territory."
        )
    )
    parser.add_argument("track", type=Path, help="CSV file of location fixes")
    parser.add_argument(
        "--closing-radius-m",
        type=float,
        default=LOOP_CLOSING_RADIUS_M,
        help="Max start/end distance (metres) for a closed loop (default: %(default)s)",
    )
    parser.add_argument(
        "--min-area-sq-m",
        type=float,
        default=LOOP_MIN_AREA_SQ_M,
        help="Minimum enclosed loop area in m² (default: %(default)s)",
    )
    parser.add_argument(
        "--min-interval-ms",
        type=int,
        default=0,
        help="Drop fixes closer together than this (default: keep all)",
    )
    parser.add_argument("--padding", type=float, default=MAP_FIT_NORMAL)
    parser.add_argument(
        "--aspect-ratio",
        type=float,
        help="Viewport width/height used when fitting the map region",
    )
    parser.add_argument(
        "--json", action="store_true", help="Print the run summary as JSON"
    )
    parser.add_argument("--include-route", action="store_true")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def analyse_fixes(
    fixes: Sequence[LocationFix],
    session: RunSession,
) -> RunSummary:
    """Stream ``fixes`` through ``session`` and finish it."""

    for fix in fixes:
        session.add_fix(fix)
    return session.finish()


def _log_summary(summary: RunSummary) -> None:
    logging.info(
        "Distance %s in %s (pace %s/km, elevation gain %s)",
        format_distance(summary.total_distance_m),
        format_duration(int(summary.duration_s)),
        format_pace(summary.avg_speed_mps),
        format_elevation(summary.elevation_gain_m),
    )
    if summary.rejected_fixes:
        logging.info("Rejected fixes: %s", summary.rejected_fixes)
    if summary.valid:
        logging.info("Run is valid")
    else:
        logging.info("Run is not valid: %s", ", ".join(summary.reasons))
    if not summary.loops:
        logging.info("No closed loop found")
    for idx, loop in enumerate(summary.loops, start=1):
        logging.info(
            "Loop %d: %s, fixes %d-%d, centre (%.6f, %.6f)",
            idx,
            format_area(loop.area_sq_m),
            loop.start_index,
            loop.end_index,
            loop.centroid[0],
            loop.centroid[1],
        )
    if summary.region is not None:
        logging.info(
            "Map region centre (%.6f, %.6f) span %.5f x %.5f deg",
            summary.region.center_lat,
            summary.region.center_lng,
            summary.region.lat_delta,
            summary.region.lng_delta,
        )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point used via ``python run.py`` or ``python -m territory_tracker``."""

    parser = _build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    try:
        fixes = load_fixes_csv(args.track)
    except (TrackFormatError, OSError) as exc:
        logging.error("Failed to load track '%s': %s", args.track, exc)
        return 1
    logging.info("Loaded %d fixes from %s", len(fixes), args.track)

    session = RunSession(
        tolerances=LoopTolerances(
            closing_radius_m=args.closing_radius_m,
            min_area_sq_m=args.min_area_sq_m,
        ),
        min_interval_ms=args.min_interval_ms,
        padding_factor=args.padding,
        viewport_aspect_ratio=args.aspect_ratio,
    )
    summary = analyse_fixes(fixes, session)

    if args.json:
        print(json_dumps_sorted(summary_to_dict(summary, include_route=args.include_route)))
    else:
        _log_summary(summary)
    return 0
