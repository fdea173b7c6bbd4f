"""Map viewport fitting for displaying a route."""

from __future__ import annotations

import math
from typing import Optional, Sequence

import numpy as np

from ..config import MAP_FIT_NORMAL, MAP_MIN_REGION_DELTA
from .models import MapRegion
from .primitives import PointLike, as_latlon


def fit_region(
    polyline: Sequence[PointLike],
    padding_factor: float = MAP_FIT_NORMAL,
    viewport_aspect_ratio: Optional[float] = None,
    *,
    min_delta: float = MAP_MIN_REGION_DELTA,
) -> Optional[MapRegion]:
    """Compute the region (centre and deltas) that frames ``polyline``.

    Args:
        polyline: Route vertices as fixes or ``(lat, lng)`` pairs.
        padding_factor: Multiplier applied to the bounding box span.
        viewport_aspect_ratio: Optional ``width / height`` of the map view. When
            given, the under-represented delta is inflated so the route fills
            the frame without distortion.
        min_delta: Floor (degrees) for both deltas so tiny routes stay zoomable.

    Returns:
        A :class:`MapRegion`, or ``None`` for an empty polyline.
    """

    if not polyline:
        return None
    coords = np.asarray([as_latlon(pt) for pt in polyline], dtype=float)
    min_lat, min_lng = coords.min(axis=0)
    max_lat, max_lng = coords.max(axis=0)
    center_lat = float((min_lat + max_lat) / 2.0)
    center_lng = float((min_lng + max_lng) / 2.0)

    lat_delta = max(min_delta, float(max_lat - min_lat) * padding_factor)
    lng_delta = max(min_delta, float(max_lng - min_lng) * padding_factor)

    if viewport_aspect_ratio is not None and viewport_aspect_ratio > 0:
        # Longitude degrees shrink with cos(latitude).
        cos_lat = math.cos(math.radians(center_lat))
        region_aspect = (lng_delta * cos_lat) / lat_delta
        if region_aspect < viewport_aspect_ratio:
            lng_delta = (lat_delta * viewport_aspect_ratio) / cos_lat
        elif region_aspect > viewport_aspect_ratio:
            lat_delta = (lng_delta * cos_lat) / viewport_aspect_ratio

    return MapRegion(
        center_lat=center_lat,
        center_lng=center_lng,
        lat_delta=lat_delta,
        lng_delta=lng_delta,
    )


__all__ = ["fit_region"]
