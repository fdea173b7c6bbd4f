"""GPS geometry processing: validation, loop extraction and region fitting.

This subpackage holds the numeric core. Nothing here performs I/O or keeps
state between calls.
"""

from .models import (
    ClaimableLoop,
    LatLon,
    LocationFix,
    LoopCandidate,
    LoopTolerances,
    MapRegion,
    PointValidation,
    Polygon,
    RunValidation,
    ValidationThresholds,
)
from .primitives import (
    distance_m,
    point_in_polygon,
    points_to_polygon,
    polygon_area_sq_m,
    polygon_centroid,
    total_distance_m,
)
from .validation import (
    DISTANCE_TOO_SHORT,
    LOW_ACCURACY,
    SPEED_EXCEEDED,
    TOO_MANY_INVALID_POINTS,
    elevation_gain_m,
    validate_point,
    validate_run,
)
from .loops import extract_loop_polygons, extract_loops, is_closed_loop
from .region import fit_region

__all__ = [
    "ClaimableLoop",
    "LatLon",
    "LocationFix",
    "LoopCandidate",
    "LoopTolerances",
    "MapRegion",
    "PointValidation",
    "Polygon",
    "RunValidation",
    "ValidationThresholds",
    "distance_m",
    "point_in_polygon",
    "points_to_polygon",
    "polygon_area_sq_m",
    "polygon_centroid",
    "total_distance_m",
    "DISTANCE_TOO_SHORT",
    "LOW_ACCURACY",
    "SPEED_EXCEEDED",
    "TOO_MANY_INVALID_POINTS",
    "elevation_gain_m",
    "validate_point",
    "validate_run",
    "extract_loop_polygons",
    "extract_loops",
    "is_closed_loop",
    "fit_region",
]
