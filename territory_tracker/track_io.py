"""Track reading layer (ingestion boundary) and JSON-friendly export helpers.

Malformed input is rejected here with :class:`TrackFormatError` so that the
geometry core only ever sees finite, well-formed fixes.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import pandas as pd

from .errors import TrackFormatError
from .geometry.models import LocationFix, MapRegion
from .models import RunSummary

PathLike = Union[str, Path]

_LAT_COL = "latitude"
_LNG_COL = "longitude"
_TIME_COL = "timestamp_ms"
_ACCURACY_COL = "horizontal_accuracy_m"
_SPEED_COL = "speed_mps"
_ALTITUDE_COL = "altitude_m"
_REQUIRED_COLS = {_LAT_COL, _LNG_COL, _TIME_COL, _ACCURACY_COL}

# Short names used by mobile location APIs.
_COLUMN_ALIASES = {
    "lat": _LAT_COL,
    "lng": _LNG_COL,
    "lon": _LNG_COL,
    "timestamp": _TIME_COL,
    "accuracy": _ACCURACY_COL,
    "speed": _SPEED_COL,
    "altitude": _ALTITUDE_COL,
}


def _is_blank(value: object) -> bool:
    return value is None or pd.isna(value) or str(value).strip() == ""


def _required_float(row: Mapping[str, Any], column: str, row_label: str) -> float:
    value = row.get(column)
    if _is_blank(value):
        raise TrackFormatError(f"Missing '{column}' in {row_label}")
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise TrackFormatError(f"Invalid '{column}' value {value!r} in {row_label}") from exc
    if not math.isfinite(number):
        raise TrackFormatError(f"Non-finite '{column}' in {row_label}")
    return number


def _optional_float(row: Mapping[str, Any], column: str) -> Optional[float]:
    value = row.get(column)
    if _is_blank(value):
        return None
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def ensure_finite_fix(fix: LocationFix) -> None:
    """Raise :class:`TrackFormatError` unless the fix has usable coordinates."""

    for name in ("latitude", "longitude", "timestamp_ms", "horizontal_accuracy_m"):
        value = getattr(fix, name)
        if not isinstance(value, numbers.Real):
            raise TrackFormatError(f"Fix has non-numeric {name}: {value!r}")
        if not math.isfinite(value):
            raise TrackFormatError(f"Fix has non-finite {name}: {value!r}")
    if not -90.0 <= fix.latitude <= 90.0:
        raise TrackFormatError(f"Latitude out of range: {fix.latitude}")
    if not -180.0 <= fix.longitude <= 180.0:
        raise TrackFormatError(f"Longitude out of range: {fix.longitude}")


def fixes_from_records(records: Iterable[Mapping[str, Any]]) -> List[LocationFix]:
    """Convert row mappings (CSV rows, JSON objects) into validated fixes."""

    fixes: List[LocationFix] = []
    for idx, raw in enumerate(records):
        row = {_COLUMN_ALIASES.get(str(k).strip(), str(k).strip()): v for k, v in raw.items()}
        row_label = f"row {idx + 1}"
        speed = _optional_float(row, _SPEED_COL)
        if speed is not None and speed < 0:
            # Negative speed is a "not available" sentinel on some devices.
            speed = None
        fix = LocationFix(
            latitude=_required_float(row, _LAT_COL, row_label),
            longitude=_required_float(row, _LNG_COL, row_label),
            timestamp_ms=int(_required_float(row, _TIME_COL, row_label)),
            horizontal_accuracy_m=_required_float(row, _ACCURACY_COL, row_label),
            speed_mps=speed,
            altitude_m=_optional_float(row, _ALTITUDE_COL),
        )
        ensure_finite_fix(fix)
        fixes.append(fix)
    return fixes


def load_fixes_csv(path: PathLike) -> List[LocationFix]:
    """Read a CSV of location fixes.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        TrackFormatError: If the file is not UTF-8 text, required columns are
            missing, or a row is malformed.
    """

    try:
        df = pd.read_csv(path)
    except (pd.errors.EmptyDataError, pd.errors.ParserError, UnicodeDecodeError) as exc:
        raise TrackFormatError(f"Unable to parse track file '{path}': {exc}") from exc
    columns = {_COLUMN_ALIASES.get(str(c).strip(), str(c).strip()) for c in df.columns}
    missing = _REQUIRED_COLS - columns
    if missing:
        raise TrackFormatError(
            f"Track file '{path}' missing required columns: {', '.join(sorted(missing))}"
        )
    return fixes_from_records(df.to_dict(orient="records"))


def polygon_to_pairs(polygon: Sequence[Sequence[float]]) -> List[List[float]]:
    """Return ``[[lat, lng], ...]`` including the closing vertex."""

    return [[float(lat), float(lng)] for lat, lng in polygon]


def region_to_dict(region: Optional[MapRegion]) -> Optional[Dict[str, float]]:
    if region is None:
        return None
    return asdict(region)


def summary_to_dict(summary: RunSummary, *, include_route: bool = False) -> Dict[str, Any]:
    """JSON-friendly representation of a finished run."""

    payload: Dict[str, Any] = {
        "valid": summary.valid,
        "reasons": list(summary.reasons),
        "can_claim_territory": summary.can_claim_territory,
        "total_distance_m": summary.total_distance_m,
        "duration_s": summary.duration_s,
        "elevation_gain_m": summary.elevation_gain_m,
        "accepted_fixes": summary.accepted_fixes,
        "rejected_fixes": dict(summary.rejected_fixes),
        "region": region_to_dict(summary.region),
        "loops": [
            {
                "area_sq_m": loop.area_sq_m,
                "centroid": list(loop.centroid),
                "start_index": loop.start_index,
                "end_index": loop.end_index,
                "polygon": polygon_to_pairs(loop.polygon),
            }
            for loop in summary.loops
        ],
    }
    if include_route:
        payload["route"] = polygon_to_pairs(summary.route)
    return payload


__all__ = [
    "ensure_finite_fix",
    "fixes_from_records",
    "load_fixes_csv",
    "polygon_to_pairs",
    "region_to_dict",
    "summary_to_dict",
]
