"""Validation helpers for individual GPS fixes and whole runs."""

from __future__ import annotations

import logging
import math
from typing import Optional, Sequence

from .models import LocationFix, PointValidation, RunValidation, ValidationThresholds
from .primitives import distance_m, total_distance_m

LOW_ACCURACY = "low_accuracy"
SPEED_EXCEEDED = "speed_exceeded"
DISTANCE_TOO_SHORT = "distance_too_short"
TOO_MANY_INVALID_POINTS = "too_many_invalid_points"

DEFAULT_THRESHOLDS = ValidationThresholds()

logger = logging.getLogger(__name__)


def implied_speed_kmh(previous: LocationFix, point: LocationFix) -> Optional[float]:
    """Return the speed implied by two fixes, or ``None`` when time did not advance."""

    elapsed_s = (point.timestamp_ms - previous.timestamp_ms) / 1000.0
    if elapsed_s <= 0:
        return None
    return distance_m(previous, point) / elapsed_s * 3.6


def validate_point(
    point: LocationFix,
    previous: Optional[LocationFix] = None,
    thresholds: ValidationThresholds = DEFAULT_THRESHOLDS,
) -> PointValidation:
    """Check a fix for poor accuracy and for an implausible jump from ``previous``.

    Duplicate or out-of-order timestamps skip the speed check entirely so that
    simultaneous samples are never rejected for speed.
    """

    if point.horizontal_accuracy_m > thresholds.max_accuracy_m:
        return PointValidation(False, reason=LOW_ACCURACY)
    if previous is None:
        return PointValidation(True)
    speed = implied_speed_kmh(previous, point)
    if speed is not None and speed > thresholds.max_speed_kmh:
        return PointValidation(False, reason=SPEED_EXCEEDED, speed_kmh=speed)
    return PointValidation(True, speed_kmh=speed)


def validate_run(
    points: Sequence[LocationFix],
    thresholds: ValidationThresholds = DEFAULT_THRESHOLDS,
) -> RunValidation:
    """Judge a whole track; collects every failing reason rather than stopping early."""

    reasons = []
    total = total_distance_m(points)
    if total < thresholds.min_distance_m:
        reasons.append(DISTANCE_TOO_SHORT)

    pair_count = max(len(points) - 1, 0)
    invalid = 0
    for prev, current in zip(points, points[1:]):
        if not validate_point(current, prev, thresholds).valid:
            invalid += 1
    if pair_count and invalid > pair_count * thresholds.max_invalid_ratio:
        reasons.append(TOO_MANY_INVALID_POINTS)

    if reasons:
        logger.debug(
            "Run rejected: reasons=%s distance=%.1fm invalid_pairs=%d/%d",
            reasons,
            total,
            invalid,
            pair_count,
        )
    return RunValidation(
        valid=not reasons,
        reasons=reasons,
        total_distance_m=total,
        invalid_pairs=invalid,
    )


def elevation_gain_m(points: Sequence[LocationFix]) -> float:
    """Sum of positive altitude changes, ignoring fixes without a finite altitude."""

    gain = 0.0
    last_altitude: Optional[float] = None
    for point in points:
        altitude = point.altitude_m
        if altitude is None or not math.isfinite(altitude):
            continue
        if last_altitude is not None and altitude > last_altitude:
            gain += altitude - last_altitude
        last_altitude = altitude
    return float(gain)


__all__ = [
    "DISTANCE_TOO_SHORT",
    "LOW_ACCURACY",
    "SPEED_EXCEEDED",
    "TOO_MANY_INVALID_POINTS",
    "elevation_gain_m",
    "implied_speed_kmh",
    "validate_point",
    "validate_run",
]
