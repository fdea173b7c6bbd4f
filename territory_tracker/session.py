"""Per-run ingestion and completion.

A :class:`RunSession` owns the track for exactly one run. Fixes stream in
through :meth:`RunSession.add_fix`; accepted ones are appended, the rest are
counted by reason. :meth:`RunSession.finish` validates the run, extracts
claimable loops, fits a display region, and then discards the buffer.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import List, Optional, Tuple

from .config import MAP_FIT_NORMAL, SESSION_MIN_INTERVAL_MS
from .errors import SessionClosedError
from .geometry.loops import extract_loops
from .geometry.models import (
    LocationFix,
    LoopTolerances,
    PointValidation,
    ValidationThresholds,
)
from .geometry.primitives import distance_m
from .geometry.region import fit_region
from .geometry.validation import elevation_gain_m, validate_run, validate_point
from .models import RunSummary
from .track_io import ensure_finite_fix

TOO_FREQUENT = "too_frequent"

logger = logging.getLogger(__name__)


class RunSession:
    """Single-writer track buffer with its own thresholds."""

    def __init__(
        self,
        thresholds: Optional[ValidationThresholds] = None,
        tolerances: Optional[LoopTolerances] = None,
        *,
        min_interval_ms: int = SESSION_MIN_INTERVAL_MS,
        padding_factor: float = MAP_FIT_NORMAL,
        viewport_aspect_ratio: Optional[float] = None,
    ) -> None:
        self.thresholds = thresholds or ValidationThresholds()
        self.tolerances = tolerances or LoopTolerances()
        self.min_interval_ms = max(0, min_interval_ms)
        self.padding_factor = padding_factor
        self.viewport_aspect_ratio = viewport_aspect_ratio
        self._points: List[LocationFix] = []
        self._rejected: Counter[str] = Counter()
        self._distance_m = 0.0
        self._closed = False

    @property
    def points(self) -> Tuple[LocationFix, ...]:
        return tuple(self._points)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def distance_m(self) -> float:
        return self._distance_m

    @property
    def elevation_gain_m(self) -> float:
        return elevation_gain_m(self._points)

    @property
    def rejected(self) -> dict[str, int]:
        return dict(self._rejected)

    def add_fix(self, fix: LocationFix) -> PointValidation:
        """Validate ``fix`` against the last accepted fix and append it when valid.

        Raises:
            TrackFormatError: If the fix carries non-finite values.
            SessionClosedError: If the session has already finished.
        """

        if self._closed:
            raise SessionClosedError("Cannot add fixes to a finished run session")
        ensure_finite_fix(fix)
        last = self._points[-1] if self._points else None
        result = validate_point(fix, last, self.thresholds)
        if not result.valid:
            self._rejected[result.reason or "invalid"] += 1
            return result
        if last is not None and fix.timestamp_ms - last.timestamp_ms < self.min_interval_ms:
            self._rejected[TOO_FREQUENT] += 1
            return PointValidation(False, reason=TOO_FREQUENT, speed_kmh=result.speed_kmh)
        if last is not None:
            self._distance_m += distance_m(last, fix)
        self._points.append(fix)
        return result

    def finish(self) -> RunSummary:
        """Close the session and return the run verdict, loops and display region."""

        if self._closed:
            raise SessionClosedError("Run session already finished")
        self._closed = True
        points = self._points
        validation = validate_run(points, self.thresholds)
        loops = extract_loops(points, self.tolerances)
        route = [fix.latlon for fix in points]
        region = fit_region(route, self.padding_factor, self.viewport_aspect_ratio)
        duration_s = 0.0
        if len(points) >= 2:
            duration_s = max(0.0, (points[-1].timestamp_ms - points[0].timestamp_ms) / 1000.0)

        summary = RunSummary(
            valid=validation.valid,
            reasons=list(validation.reasons),
            loops=loops,
            region=region,
            route=route,
            total_distance_m=validation.total_distance_m,
            duration_s=duration_s,
            elevation_gain_m=elevation_gain_m(points),
            accepted_fixes=len(points),
            rejected_fixes=dict(self._rejected),
        )
        logger.info(
            "Run finished: fixes=%d distance=%.0fm valid=%s loops=%d",
            summary.accepted_fixes,
            summary.total_distance_m,
            summary.valid,
            len(loops),
        )
        self._points = []
        return summary


__all__ = ["RunSession", "TOO_FREQUENT"]
