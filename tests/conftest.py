"""Global pytest fixtures & helpers.

Adds project root to path and provides synthetic GPS tracks (square loops,
out-and-back paths, multi-loop runs) shared across the geometry tests.
"""
from __future__ import annotations

import math
import os
import sys
from typing import Iterable, List, Sequence, Tuple

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from territory_tracker.geometry.models import LocationFix

BASE_LAT = 51.5000
BASE_LNG = -0.1000

Metres = Tuple[float, float]

# offset_latlon uses the planar metres-per-degree of the area projection; the
# haversine sphere has slightly longer latitude degrees.
HAVERSINE_M_PER_DEG = 6_371_000.0 * math.pi / 180.0
NORTH_SCALE = HAVERSINE_M_PER_DEG / 110_540.0


# --- Factory helpers -------------------------------------------------
def offset_latlon(dx_m: float, dy_m: float, base: Tuple[float, float] = (BASE_LAT, BASE_LNG)):
    """Return (lat, lng) displaced ``dx_m`` east and ``dy_m`` north of ``base``."""
    lat0, lng0 = base
    lat = lat0 + dy_m / 110_540.0
    lng = lng0 + dx_m / (111_320.0 * math.cos(math.radians(lat0)))
    return (lat, lng)


def line_m(start: Metres, end: Metres, spacing_m: float) -> List[Metres]:
    """Points from ``start`` (inclusive) towards ``end`` (exclusive)."""
    (x0, y0), (x1, y1) = start, end
    length = math.hypot(x1 - x0, y1 - y0)
    steps = max(1, int(round(length / spacing_m)))
    return [(x0 + (x1 - x0) * k / steps, y0 + (y1 - y0) * k / steps) for k in range(steps)]


def square_m(origin: Metres, side_m: float, spacing_m: float) -> List[Metres]:
    """Counter-clockwise square starting at ``origin``; the start point is repeated at the end."""
    x, y = origin
    corners = [(x, y), (x + side_m, y), (x + side_m, y + side_m), (x, y + side_m)]
    path: List[Metres] = []
    for idx, corner in enumerate(corners):
        path.extend(line_m(corner, corners[(idx + 1) % 4], spacing_m))
    path.append((x, y))
    return path


def make_fixes(
    path_m: Iterable[Metres],
    *,
    interval_ms: int = 2000,
    accuracy_m: float = 5.0,
    start_ms: int = 1_700_000_000_000,
    base: Tuple[float, float] = (BASE_LAT, BASE_LNG),
) -> List[LocationFix]:
    fixes = []
    for idx, (dx, dy) in enumerate(path_m):
        lat, lng = offset_latlon(dx, dy, base)
        fixes.append(
            LocationFix(
                latitude=lat,
                longitude=lng,
                timestamp_ms=start_ms + idx * interval_ms,
                horizontal_accuracy_m=accuracy_m,
            )
        )
    return fixes


def fix_at(dx_m: float, dy_m: float, timestamp_ms: int, accuracy_m: float = 5.0, **extra) -> LocationFix:
    lat, lng = offset_latlon(dx_m, dy_m)
    return LocationFix(lat, lng, timestamp_ms, accuracy_m, **extra)


def out_and_back_m(length_m: float, spacing_m: float) -> List[Metres]:
    out = line_m((0.0, 0.0), (0.0, length_m), spacing_m)
    back = line_m((0.0, length_m), (0.0, 0.0), spacing_m)
    return out + back + [(0.0, 0.0)]


def two_square_m(side_m: float = 200.0, gap_m: float = 200.0, spacing_m: float = 10.0) -> List[Metres]:
    """Square A, a transit east along its base, then square B."""
    first = square_m((0.0, 0.0), side_m, spacing_m)
    transit = line_m((0.0, 0.0), (side_m + gap_m, 0.0), spacing_m)[1:]
    second = square_m((side_m + gap_m, 0.0), side_m, spacing_m)
    return first + transit + second


# --- Fixtures --------------------------------------------------------
@pytest.fixture
def square_track() -> List[LocationFix]:
    """~200 m square sampled every 10 m (81 fixes, closing on the start)."""
    return make_fixes(square_m((0.0, 0.0), 200.0, 10.0))


@pytest.fixture
def out_and_back_track() -> List[LocationFix]:
    """500 m straight out and 500 m back along the same line."""
    return make_fixes(out_and_back_m(500.0, 10.0))


@pytest.fixture
def two_loop_track() -> List[LocationFix]:
    return make_fixes(two_square_m())


@pytest.fixture
def make_track():
    def _make(path_m: Sequence[Metres], **kwargs) -> List[LocationFix]:
        return make_fixes(path_m, **kwargs)
    return _make
