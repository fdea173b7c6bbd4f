"""Closed-loop extraction: find sub-paths of a track that enclose real area.

A loop is a sub-range ``[i, j]`` of the track whose end point returns within
the closing radius of its anchor ``i`` and whose closed polygon encloses
enough area to be more than a straight out-and-back. Every qualifying pair in
the track is considered; the survivors are de-duplicated largest first by
dropping any loop whose centroid falls inside an already kept loop.
"""

from __future__ import annotations

import logging
from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np

from .models import ClaimableLoop, LoopCandidate, LoopTolerances, Polygon
from .primitives import (
    PointLike,
    as_latlon,
    distance_m,
    distances_from,
    point_in_polygon,
    polygon_area_sq_m,
    polygon_centroid,
)

DEFAULT_TOLERANCES = LoopTolerances()

logger = logging.getLogger(__name__)


def slice_to_closed_polygon(
    points: Sequence[PointLike],
    start: int,
    end: int,
    max_vertices: int = DEFAULT_TOLERANCES.max_polygon_vertices,
) -> Polygon:
    """Sample ``points[start..end]`` evenly and close the ring back at ``start``."""

    step = max(1, (end - start + 1) // max(1, max_vertices))
    polygon: Polygon = [as_latlon(points[k]) for k in range(start, end + 1, step)]
    if polygon:
        polygon.append(as_latlon(points[start]))
    return polygon


def _closing_pairs_exhaustive(
    points: Sequence[PointLike],
    tolerances: LoopTolerances,
) -> Iterator[Tuple[int, int]]:
    """Yield every ``(i, j)`` whose end point is within the closing radius."""

    count = len(points)
    for i in range(count - tolerances.min_loop_points):
        anchor = points[i]
        for j in range(i + tolerances.min_loop_points, count):
            if distance_m(anchor, points[j]) <= tolerances.closing_radius_m:
                yield i, j


def _closing_pairs_prefiltered(
    points: Sequence[PointLike],
    tolerances: LoopTolerances,
) -> Iterator[Tuple[int, int]]:
    """Same pairs as the exhaustive scan, using a vectorised distance pass per anchor.

    The vectorised distances only shortlist pairs (with a small slack); each
    shortlisted pair is confirmed with :func:`distance_m` so the yielded set is
    identical to the exhaustive scan.
    """

    count = len(points)
    coords = np.asarray([as_latlon(pt) for pt in points], dtype=float)
    lats = coords[:, 0]
    lngs = coords[:, 1]
    limit = tolerances.closing_radius_m + max(tolerances.prefilter_slack_m, 0.0)
    for i in range(count - tolerances.min_loop_points):
        first = i + tolerances.min_loop_points
        dists = distances_from(points[i], lats[first:], lngs[first:])
        nearby = np.nonzero(dists <= limit)[0]
        if nearby.size == 0:
            continue
        anchor = points[i]
        for offset in nearby.tolist():
            j = first + offset
            if distance_m(anchor, points[j]) <= tolerances.closing_radius_m:
                yield i, j


def _max_extent_m(points: Sequence[PointLike], start: int, end: int) -> float:
    anchor = points[start]
    return max(distance_m(anchor, points[k]) for k in range(start, end + 1))


def _evaluate_pair(
    points: Sequence[PointLike],
    start: int,
    end: int,
    tolerances: LoopTolerances,
) -> Optional[LoopCandidate]:
    """Return a candidate when ``points[start..end]`` forms a genuine loop."""

    polygon = slice_to_closed_polygon(points, start, end, tolerances.max_polygon_vertices)
    if len(polygon) < 4:
        return None
    area = polygon_area_sq_m(polygon)
    if area < tolerances.min_area_sq_m:
        return None
    extent = _max_extent_m(points, start, end)
    if extent < tolerances.min_extent_m:
        return None
    return LoopCandidate(
        polygon=polygon,
        enclosed_area_sq_m=area,
        max_extent_from_anchor_m=extent,
        start_index=start,
        end_index=end,
    )


def find_loop_candidates(
    points: Sequence[PointLike],
    tolerances: LoopTolerances = DEFAULT_TOLERANCES,
    *,
    exhaustive: bool = False,
) -> List[LoopCandidate]:
    """Collect every loop candidate in the track, in ``(i, j)`` scan order."""

    if len(points) < tolerances.min_track_points:
        return []
    pairs = (
        _closing_pairs_exhaustive(points, tolerances)
        if exhaustive
        else _closing_pairs_prefiltered(points, tolerances)
    )
    candidates: List[LoopCandidate] = []
    closing = 0
    for start, end in pairs:
        closing += 1
        candidate = _evaluate_pair(points, start, end, tolerances)
        if candidate is not None:
            candidates.append(candidate)
    logger.debug(
        "Loop scan over %d points: %d closing pairs, %d candidates",
        len(points),
        closing,
        len(candidates),
    )
    return candidates


def select_loops(
    candidates: Sequence[LoopCandidate],
    max_loops: int = DEFAULT_TOLERANCES.max_loops,
) -> List[ClaimableLoop]:
    """Greedy containment de-duplication, largest area first, capped at ``max_loops``."""

    ordered = sorted(candidates, key=lambda c: c.enclosed_area_sq_m, reverse=True)
    kept: List[ClaimableLoop] = []
    for candidate in ordered:
        if len(kept) >= max_loops:
            break
        centroid = polygon_centroid(candidate.polygon)
        if centroid is None:
            continue
        if any(point_in_polygon(centroid, loop.polygon) for loop in kept):
            continue
        kept.append(
            ClaimableLoop(
                polygon=candidate.polygon,
                area_sq_m=candidate.enclosed_area_sq_m,
                centroid=centroid,
                start_index=candidate.start_index,
                end_index=candidate.end_index,
            )
        )
    return kept


def extract_loops(
    points: Sequence[PointLike],
    tolerances: LoopTolerances = DEFAULT_TOLERANCES,
    *,
    exhaustive: bool = False,
) -> List[ClaimableLoop]:
    """Return the claimable loops in ``points``, largest first.

    Args:
        points: Accepted track fixes (or ``(lat, lng)`` pairs) in time order.
        tolerances: Thresholds controlling what counts as a loop.
        exhaustive: Skip the vectorised pre-filter and test every pair directly.

    Returns:
        Up to ``tolerances.max_loops`` loops. Empty when the track is too short
        or contains no qualifying loop.
    """

    candidates = find_loop_candidates(points, tolerances, exhaustive=exhaustive)
    if not candidates:
        return []
    loops = select_loops(candidates, tolerances.max_loops)
    logger.debug("Kept %d of %d loop candidates", len(loops), len(candidates))
    return loops


def extract_loop_polygons(
    points: Sequence[PointLike],
    tolerances: LoopTolerances = DEFAULT_TOLERANCES,
) -> List[Polygon]:
    """Polygons of :func:`extract_loops`, largest first."""

    return [loop.polygon for loop in extract_loops(points, tolerances)]


def is_closed_loop(
    points: Sequence[PointLike],
    tolerances: LoopTolerances = DEFAULT_TOLERANCES,
) -> bool:
    """True if the track contains at least one claimable loop."""

    return bool(extract_loops(points, tolerances))


__all__ = [
    "extract_loop_polygons",
    "extract_loops",
    "find_loop_candidates",
    "is_closed_loop",
    "select_loops",
    "slice_to_closed_polygon",
]
