"""General utility helpers shared across modules."""

from __future__ import annotations

import json
import math
from typing import Any

_PLACEHOLDER = "—"


def format_distance(meters: float) -> str:
    """Format metres as ``"850 m"`` below one kilometre, else ``"1.25 km"``."""

    if meters < 1000:
        return f"{round(meters)} m"
    return f"{meters / 1000:.2f} km"


def format_duration(seconds: int) -> str:
    """Format seconds as ``MM:SS``, or ``H:MM:SS`` once an hour is reached."""

    seconds = max(0, int(seconds))
    hours, rem = divmod(seconds, 3600)
    mins, sec = divmod(rem, 60)
    if hours > 0:
        return f"{hours}:{mins:02d}:{sec:02d}"
    return f"{mins:02d}:{sec:02d}"


def format_pace(meters_per_second: float) -> str:
    """Format a speed as pace in ``M:SS`` per kilometre."""

    if not math.isfinite(meters_per_second) or meters_per_second <= 0:
        return _PLACEHOLDER
    min_per_km = 1000 / meters_per_second / 60
    mins = math.floor(min_per_km)
    secs = round((min_per_km - mins) * 60)
    if secs == 60:
        mins, secs = mins + 1, 0
    return f"{mins}:{secs:02d}"


def format_elevation(meters: float) -> str:
    if not math.isfinite(meters) or meters < 0:
        return _PLACEHOLDER
    return f"{round(meters)} m"


def format_area(square_meters: float) -> str:
    """Format an area in km² with three decimals (``"0.040 km²"``)."""

    return f"{square_meters / 1e6:.3f} km²"


def json_dumps_sorted(value: Any) -> str:
    """Return canonical JSON for hashing / comparisons."""

    return json.dumps(value, sort_keys=True, separators=(",", ":"))
