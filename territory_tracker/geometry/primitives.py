"""Pure numeric helpers: distances, planar polygon areas, centroids and containment."""

from __future__ import annotations

import math
from typing import List, Optional, Sequence, Union

import numpy as np
from numpy.typing import NDArray

from ..config import (
    EARTH_RADIUS_M,
    LOOP_MAX_POLYGON_VERTICES,
    METERS_PER_DEG_LAT,
    METERS_PER_DEG_LNG_AT_EQUATOR,
)
from .models import LatLon, LocationFix, Polygon

MetricArray = NDArray[np.float64]
PointLike = Union[LocationFix, Sequence[float]]


def as_latlon(point: PointLike) -> LatLon:
    """Return ``(lat, lng)`` for a fix or any two-item coordinate sequence."""

    if isinstance(point, LocationFix):
        return (float(point.latitude), float(point.longitude))
    return (float(point[0]), float(point[1]))


def distance_m(a: PointLike, b: PointLike) -> float:
    """Compute the haversine distance in metres between two points.

    Args:
        a: First point, a :class:`LocationFix` or ``(lat, lng)`` pair.
        b: Second point.

    Returns:
        Great-circle distance on a sphere of radius 6 371 km.
    """

    lat1, lng1 = as_latlon(a)
    lat2, lng2 = as_latlon(b)
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)

    h = math.sin(d_phi / 2.0) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2.0) ** 2
    # Near-antipodal pairs can round h just past 1.
    h = min(1.0, max(0.0, h))
    c = 2.0 * math.atan2(math.sqrt(h), math.sqrt(1.0 - h))
    return EARTH_RADIUS_M * c


def distances_from(anchor: PointLike, lats: MetricArray, lngs: MetricArray) -> MetricArray:
    """Vectorised haversine distance from ``anchor`` to every ``(lats[k], lngs[k])``.

    Results can differ from :func:`distance_m` in the last few ulps, so callers
    that compare against a hard threshold must re-check survivors exactly.
    """

    lat0, lng0 = as_latlon(anchor)
    phi0 = math.radians(lat0)
    phi = np.radians(lats)
    d_phi = phi - phi0
    d_lambda = np.radians(lngs) - math.radians(lng0)
    h = np.sin(d_phi / 2.0) ** 2 + math.cos(phi0) * np.cos(phi) * np.sin(d_lambda / 2.0) ** 2
    # Rounding can push h a hair outside [0, 1].
    h = np.clip(h, 0.0, 1.0)
    return EARTH_RADIUS_M * 2.0 * np.arctan2(np.sqrt(h), np.sqrt(1.0 - h))


def total_distance_m(points: Sequence[PointLike]) -> float:
    """Return the path length as the sum of consecutive haversine distances."""

    total = 0.0
    for prev, current in zip(points, points[1:]):
        total += distance_m(prev, current)
    return total


def _distinct_count(polygon: Sequence[PointLike]) -> int:
    return len({as_latlon(pt) for pt in polygon})


def _open_ring(polygon: Sequence[PointLike]) -> List[LatLon]:
    """Return the ring vertices without the duplicated closing vertex."""

    ring = [as_latlon(pt) for pt in polygon]
    if len(ring) > 1 and ring[0] == ring[-1]:
        ring.pop()
    return ring


def polygon_area_sq_m(polygon: Sequence[PointLike]) -> float:
    """Approximate enclosed area in m² using a per-vertex flat projection.

    Each vertex is projected with its own latitude
    (``x = lng * 111320 * cos(lat)``, ``y = lat * 110540``) before applying the
    shoelace formula. Good for run-sized shapes, not geodesically exact.
    Returns 0 when the polygon has fewer than three distinct vertices.
    """

    if _distinct_count(polygon) < 3:
        return 0.0
    projected = []
    for lat, lng in (as_latlon(pt) for pt in polygon):
        x = lng * METERS_PER_DEG_LNG_AT_EQUATOR * math.cos(math.radians(lat))
        y = lat * METERS_PER_DEG_LAT
        projected.append((x, y))

    area = 0.0
    count = len(projected)
    for idx in range(count):
        xi, yi = projected[idx]
        xj, yj = projected[(idx + 1) % count]
        area += xi * yj - xj * yi
    return abs(area / 2.0)


def polygon_centroid(polygon: Sequence[PointLike]) -> Optional[LatLon]:
    """Arithmetic mean of the ring vertices (closing vertex excluded)."""

    ring = _open_ring(polygon)
    if not ring:
        return None
    lat_sum = sum(lat for lat, _ in ring)
    lng_sum = sum(lng for _, lng in ring)
    return (lat_sum / len(ring), lng_sum / len(ring))


def point_in_polygon(point: PointLike, polygon: Sequence[PointLike]) -> bool:
    """Ray-casting parity test treating latitude as y and longitude as x."""

    ring = _open_ring(polygon)
    if len(set(ring)) < 3:
        return False
    lat, lng = as_latlon(point)
    inside = False
    prev_lat, prev_lng = ring[-1]
    for cur_lat, cur_lng in ring:
        if (cur_lat > lat) != (prev_lat > lat):
            crossing = (prev_lng - cur_lng) * (lat - cur_lat) / (prev_lat - cur_lat) + cur_lng
            if lng < crossing:
                inside = not inside
        prev_lat, prev_lng = cur_lat, cur_lng
    return inside


def points_to_polygon(
    points: Sequence[PointLike],
    max_vertices: int = LOOP_MAX_POLYGON_VERTICES,
) -> Polygon:
    """Down-sample a whole track into a closed polygon.

    Keeps every ``max(1, n // max_vertices)``-th point and appends the first
    kept point again. An empty track gives an empty polygon.
    """

    step = max(1, len(points) // max(1, max_vertices))
    polygon: Polygon = [as_latlon(points[idx]) for idx in range(0, len(points), step)]
    if polygon:
        polygon.append(polygon[0])
    return polygon


__all__ = [
    "as_latlon",
    "distance_m",
    "distances_from",
    "point_in_polygon",
    "points_to_polygon",
    "polygon_area_sq_m",
    "polygon_centroid",
    "total_distance_m",
]
