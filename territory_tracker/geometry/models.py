"""Dataclasses describing GPS inputs, thresholds and geometry results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .. import config

LatLon = Tuple[float, float]
Polygon = List[LatLon]


@dataclass(frozen=True, slots=True)
class LocationFix:
    """A single location sample as delivered by the device.

    Attributes:
        latitude: Latitude in decimal degrees.
        longitude: Longitude in decimal degrees.
        timestamp_ms: Monotonic timestamp in milliseconds.
        horizontal_accuracy_m: Reported horizontal accuracy in metres.
        speed_mps: Instantaneous speed in metres/second, when reported.
        altitude_m: Altitude in metres, when reported.
    """

    latitude: float
    longitude: float
    timestamp_ms: int
    horizontal_accuracy_m: float
    speed_mps: Optional[float] = None
    altitude_m: Optional[float] = None

    @property
    def latlon(self) -> LatLon:
        return (float(self.latitude), float(self.longitude))


@dataclass(frozen=True, slots=True)
class ValidationThresholds:
    """Limits applied when validating individual fixes and whole runs."""

    max_accuracy_m: float = config.MAX_ACCURACY_M
    max_speed_kmh: float = config.MAX_SPEED_KMH
    min_distance_m: float = config.MIN_RUN_DISTANCE_M
    max_invalid_ratio: float = config.MAX_INVALID_PAIR_RATIO


@dataclass(frozen=True, slots=True)
class LoopTolerances:
    """Configuration for the geometric thresholds used by loop extraction."""

    closing_radius_m: float = config.LOOP_CLOSING_RADIUS_M
    min_area_sq_m: float = config.LOOP_MIN_AREA_SQ_M
    min_extent_m: float = config.LOOP_MIN_EXTENT_M
    min_loop_points: int = config.LOOP_MIN_POINTS
    min_track_points: int = config.LOOP_MIN_TRACK_POINTS
    max_polygon_vertices: int = config.LOOP_MAX_POLYGON_VERTICES
    max_loops: int = config.LOOP_MAX_CLAIMABLE
    prefilter_slack_m: float = config.LOOP_PREFILTER_SLACK_M


@dataclass(frozen=True, slots=True)
class PointValidation:
    """Outcome of validating one fix against its predecessor."""

    valid: bool
    reason: Optional[str] = None
    speed_kmh: Optional[float] = None


@dataclass(slots=True)
class RunValidation:
    """Whole-track verdict together with the reasons it was rejected."""

    valid: bool
    reasons: List[str] = field(default_factory=list)
    total_distance_m: float = 0.0
    invalid_pairs: int = 0


@dataclass(slots=True)
class LoopCandidate:
    """A closed sub-path that passed every geometric check."""

    polygon: Polygon
    enclosed_area_sq_m: float
    max_extent_from_anchor_m: float
    start_index: int
    end_index: int


@dataclass(frozen=True, slots=True)
class ClaimableLoop:
    """A de-duplicated loop polygon suitable for a territory claim."""

    polygon: Polygon
    area_sq_m: float
    centroid: LatLon
    start_index: int
    end_index: int


@dataclass(frozen=True, slots=True)
class MapRegion:
    """Viewport centre and extents (degrees) framing a polyline."""

    center_lat: float
    center_lng: float
    lat_delta: float
    lng_delta: float
