"""Benchmark loop extraction on long synthetic runs.

Compares the exhaustive pair scan with the vectorised pre-filter and checks
that both return the same loops.
"""

from __future__ import annotations

import argparse
import math
import statistics
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Late imports rely on the adjusted sys.path above.
from territory_tracker.geometry.loops import extract_loops  # noqa: E402
from territory_tracker.geometry.models import LocationFix  # noqa: E402


@dataclass(slots=True)
class StageDurations:
    """Timing measurements (in seconds) for one benchmark iteration."""

    prefiltered: float
    exhaustive: float


@dataclass(slots=True)
class BenchmarkSummary:
    """Aggregated statistics for multiple benchmark iterations."""

    point_count: int
    iterations: int
    loops_found: int
    mean_prefiltered_ms: float
    mean_exhaustive_ms: float
    worst_prefiltered_ms: float


def _build_track(point_count: int) -> List[LocationFix]:
    """Generate laps of a ~400 m circuit sampled every ~8 m, drifting slowly east."""

    base_lat = 51.5
    base_lng = -0.1
    metres_per_deg_lng = 111_320.0 * math.cos(math.radians(base_lat))
    radius_m = 65.0
    per_lap = 50
    fixes = []
    for idx in range(point_count):
        angle = 2.0 * math.pi * idx / per_lap
        drift_m = idx * 0.4
        dx = radius_m * math.cos(angle) + drift_m
        dy = radius_m * math.sin(angle)
        fixes.append(
            LocationFix(
                latitude=base_lat + dy / 110_540.0,
                longitude=base_lng + dx / metres_per_deg_lng,
                timestamp_ms=idx * 2000,
                horizontal_accuracy_m=5.0,
            )
        )
    return fixes


def run_benchmark(point_count: int, iterations: int) -> BenchmarkSummary:
    """Time both extraction strategies and return aggregated timings."""

    if point_count < 20:
        raise ValueError("point_count must be at least 20")
    if iterations <= 0:
        raise ValueError("iterations must be positive")

    track = _build_track(point_count)
    durations: List[StageDurations] = []
    loops_found = 0
    for _ in range(iterations):
        start = time.perf_counter()
        fast = extract_loops(track)
        prefiltered = time.perf_counter() - start

        start = time.perf_counter()
        slow = extract_loops(track, exhaustive=True)
        exhaustive = time.perf_counter() - start

        if fast != slow:
            raise RuntimeError("Pre-filtered extraction diverged from the exhaustive scan")
        loops_found = len(fast)
        durations.append(StageDurations(prefiltered=prefiltered, exhaustive=exhaustive))

    return BenchmarkSummary(
        point_count=point_count,
        iterations=iterations,
        loops_found=loops_found,
        mean_prefiltered_ms=statistics.fmean(d.prefiltered for d in durations) * 1000.0,
        mean_exhaustive_ms=statistics.fmean(d.exhaustive for d in durations) * 1000.0,
        worst_prefiltered_ms=max(d.prefiltered for d in durations) * 1000.0,
    )


def _format_summary(summary: BenchmarkSummary) -> Dict[str, float]:
    """Return a JSON-friendly representation of the benchmark summary."""

    return {
        "point_count": summary.point_count,
        "iterations": summary.iterations,
        "loops_found": summary.loops_found,
        "mean_prefiltered_ms": summary.mean_prefiltered_ms,
        "mean_exhaustive_ms": summary.mean_exhaustive_ms,
        "worst_prefiltered_ms": summary.worst_prefiltered_ms,
    }


def _parse_args() -> argparse.Namespace:
    """Parse command-line arguments for the benchmark utility."""

    parser = argparse.ArgumentParser(
        description="Benchmark loop extraction on long synthetic runs",
    )
    parser.add_argument(
        "--points",
        type=int,
        default=1800,
        help="Number of fixes in the synthetic run (1800 = one hour at 2 s)",
    )
    parser.add_argument(
        "--iterations",
        type=int,
        default=3,
        help="Number of repetitions for averaging",
    )
    return parser.parse_args()


def main() -> None:
    """Entry point when running the module as a script."""

    args = _parse_args()
    summary = run_benchmark(args.points, args.iterations)
    formatted = _format_summary(summary)
    for key, value in formatted.items():
        if key in {"point_count", "iterations", "loops_found"}:
            print(f"{key}: {value}")
        else:
            print(f"{key}: {value:.3f}")


if __name__ == "__main__":
    main()
