"""Running territory tracker: GPS validation and closed-loop territory extraction."""

from .errors import SessionClosedError, TrackFormatError
from .geometry import (
    ClaimableLoop,
    LocationFix,
    LoopTolerances,
    MapRegion,
    ValidationThresholds,
    extract_loops,
    fit_region,
    is_closed_loop,
    validate_point,
    validate_run,
)
from .main import main
from .models import RunSummary
from .session import RunSession

__all__ = [
    "main",
    "ClaimableLoop",
    "LocationFix",
    "LoopTolerances",
    "MapRegion",
    "RunSession",
    "RunSummary",
    "ValidationThresholds",
    "extract_loops",
    "fit_region",
    "is_closed_loop",
    "validate_point",
    "validate_run",
    "SessionClosedError",
    "TrackFormatError",
]
