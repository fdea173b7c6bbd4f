"""Central configuration for the territory tracker.

All values are defaults imported by the rest of the package. Each threshold
can be overridden through an environment variable (optionally via a local
`.env`). Callers that need different values per run build their own
``ValidationThresholds`` / ``LoopTolerances`` instead of patching these.
"""

from __future__ import annotations

import importlib
import os


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


# Load .env variables when python-dotenv is available.
_load_dotenv = None
try:
    _dotenv_mod = importlib.import_module("dotenv")
    _load_dotenv = getattr(_dotenv_mod, "load_dotenv", None)
except ImportError:
    _load_dotenv = None

if callable(_load_dotenv):
    # Load .env from the current directory or any parent folder.
    _load_dotenv()


# ---------------------------------------------------------------------------
# Earth model
# ---------------------------------------------------------------------------
# Mean Earth radius (metres) used by the haversine distance.
EARTH_RADIUS_M = 6_371_000.0

# Metres per degree used by the local planar projection for polygon areas.
METERS_PER_DEG_LNG_AT_EQUATOR = 111_320.0
METERS_PER_DEG_LAT = 110_540.0


# ---------------------------------------------------------------------------
# Point / run validation
# ---------------------------------------------------------------------------
# Fixes reporting a horizontal accuracy worse than this are dropped.
MAX_ACCURACY_M = _env_float("MAX_ACCURACY_M", 50.0)

# Implied speed between consecutive fixes above this is treated as a glitch.
MAX_SPEED_KMH = _env_float("MAX_SPEED_KMH", 25.0)

# A run shorter than this cannot be saved as valid.
MIN_RUN_DISTANCE_M = _env_float("MIN_RUN_DISTANCE_M", 100.0)

# Fraction of invalid consecutive pairs above which the whole run is rejected.
MAX_INVALID_PAIR_RATIO = _env_float("MAX_INVALID_PAIR_RATIO", 0.3)


# ---------------------------------------------------------------------------
# Loop extraction
# ---------------------------------------------------------------------------
# Max distance (metres) between two track points to treat the loop as closed.
LOOP_CLOSING_RADIUS_M = _env_float("LOOP_CLOSING_RADIUS_M", 50.0)

# Min enclosed area (m²); rules out straight out-and-back paths.
LOOP_MIN_AREA_SQ_M = _env_float("LOOP_MIN_AREA_SQ_M", 2000.0)

# Min distance (metres) the loop must reach from its anchor point.
LOOP_MIN_EXTENT_M = _env_float("LOOP_MIN_EXTENT_M", 50.0)

# Min index span (j - i) of a loop.
LOOP_MIN_POINTS = _env_int("LOOP_MIN_POINTS", 15)

# Tracks shorter than this never yield loops.
LOOP_MIN_TRACK_POINTS = _env_int("LOOP_MIN_TRACK_POINTS", 20)

# Target vertex budget when sampling a loop into a polygon.
LOOP_MAX_POLYGON_VERTICES = _env_int("LOOP_MAX_POLYGON_VERTICES", 50)

# Max claimable loops returned per run.
LOOP_MAX_CLAIMABLE = _env_int("LOOP_MAX_CLAIMABLE", 10)

# Extra metres allowed by the vectorised pre-filter before the exact check.
LOOP_PREFILTER_SLACK_M = _env_float("LOOP_PREFILTER_SLACK_M", 0.01)


# ---------------------------------------------------------------------------
# Run session
# ---------------------------------------------------------------------------
# Minimum spacing between accepted fixes (milliseconds).
SESSION_MIN_INTERVAL_MS = _env_int("SESSION_MIN_INTERVAL_MS", 2000)


# ---------------------------------------------------------------------------
# Map region fitting
# ---------------------------------------------------------------------------
# Padding factor that lets the path nearly fill the map.
MAP_FIT_TIGHT = 1.15

# Slightly more padding, e.g. for small thumbnails.
MAP_FIT_NORMAL = 1.35

# Minimum lat/lng delta (degrees). ~0.002 ≈ 220 m keeps short routes zoomable.
MAP_MIN_REGION_DELTA = 0.002
