"""Unit tests for the distance, area, centroid and containment helpers."""

from __future__ import annotations

import math

import numpy as np
import pytest

from conftest import NORTH_SCALE, offset_latlon, square_m
from territory_tracker.geometry.models import LocationFix
from territory_tracker.geometry.primitives import (
    distance_m,
    distances_from,
    point_in_polygon,
    points_to_polygon,
    polygon_area_sq_m,
    polygon_centroid,
    total_distance_m,
)


@pytest.mark.parametrize(
    "a,b",
    [
        ((51.5, -0.1), (51.51, -0.12)),
        ((-33.86, 151.2), (40.71, -74.0)),
        ((0.0, 179.9), (0.0, -179.9)),
    ],
)
def test_distance_is_symmetric_and_zero_on_self(a, b) -> None:
    assert distance_m(a, a) == 0.0
    assert distance_m(a, b) == pytest.approx(distance_m(b, a))
    assert distance_m(a, b) > 0


def test_distance_one_degree_latitude() -> None:
    expected = 6_371_000.0 * math.pi / 180.0
    assert distance_m((10.0, 20.0), (11.0, 20.0)) == pytest.approx(expected, rel=1e-9)


@pytest.mark.parametrize(
    "a,b",
    [
        ((0.0225, 0.0), (-0.0225, 180.0)),
        ((0.0, 0.0), (0.0, 180.0)),
        ((45.0, 10.0), (-45.0, -170.0)),
    ],
)
def test_distance_is_total_for_antipodal_points(a, b) -> None:
    half_circumference = 6_371_000.0 * math.pi
    assert distance_m(a, b) == pytest.approx(half_circumference, rel=1e-6)


def test_distance_accepts_fixes() -> None:
    a = LocationFix(51.5, -0.1, 0, 5.0)
    b = LocationFix(51.501, -0.1, 1000, 5.0)
    assert distance_m(a, b) == pytest.approx(distance_m((51.5, -0.1), (51.501, -0.1)))


def test_vectorised_distances_match_scalar() -> None:
    anchor = (51.5, -0.1)
    targets = [offset_latlon(dx, dy) for dx, dy in [(0, 0), (30, 40), (-120, 5), (400, -300)]]
    lats = np.asarray([t[0] for t in targets])
    lngs = np.asarray([t[1] for t in targets])
    vector = distances_from(anchor, lats, lngs)
    for value, target in zip(vector, targets):
        assert value == pytest.approx(distance_m(anchor, target), abs=1e-6)


def test_total_distance_sums_legs() -> None:
    path = [offset_latlon(0, 0), offset_latlon(0, 100), offset_latlon(0, 250)]
    assert total_distance_m(path) == pytest.approx(250.0 * NORTH_SCALE, rel=1e-6)
    assert total_distance_m([]) == 0.0
    assert total_distance_m(path[:1]) == 0.0


def test_square_area_close_to_planar_value() -> None:
    polygon = [offset_latlon(x, y) for x, y in square_m((0, 0), 200.0, 50.0)]
    assert polygon[0] == polygon[-1]
    assert polygon_area_sq_m(polygon) == pytest.approx(40_000.0, rel=0.02)


def test_area_is_orientation_independent() -> None:
    polygon = [offset_latlon(x, y) for x, y in [(0, 0), (120, 10), (90, 150), (-20, 80), (0, 0)]]
    assert polygon_area_sq_m(polygon) == pytest.approx(polygon_area_sq_m(list(reversed(polygon))))
    assert polygon_area_sq_m(polygon) > 0


@pytest.mark.parametrize(
    "polygon",
    [
        [],
        [(51.5, -0.1)],
        [(51.5, -0.1), (51.501, -0.1), (51.5, -0.1)],
        [(51.5, -0.1), (51.501, -0.1), (51.501, -0.1), (51.5, -0.1)],
    ],
)
def test_degenerate_polygons_have_zero_area(polygon) -> None:
    assert polygon_area_sq_m(polygon) == 0.0


def test_centroid_ignores_closing_vertex() -> None:
    polygon = [(0.0, 0.0), (0.0, 2.0), (2.0, 2.0), (2.0, 0.0), (0.0, 0.0)]
    assert polygon_centroid(polygon) == pytest.approx((1.0, 1.0))


def test_centroid_of_empty_polygon_is_none() -> None:
    assert polygon_centroid([]) is None


def test_point_in_polygon_parity() -> None:
    polygon = [(0.0, 0.0), (0.0, 2.0), (2.0, 2.0), (2.0, 0.0), (0.0, 0.0)]
    assert point_in_polygon((1.0, 1.0), polygon)
    assert not point_in_polygon((3.0, 1.0), polygon)
    assert not point_in_polygon((1.0, -0.5), polygon)


def test_point_in_concave_polygon() -> None:
    # U shape opening north; the notch is outside.
    polygon = [
        (0.0, 0.0), (0.0, 3.0), (3.0, 3.0), (3.0, 2.0), (1.0, 2.0),
        (1.0, 1.0), (3.0, 1.0), (3.0, 0.0), (0.0, 0.0),
    ]
    assert point_in_polygon((0.5, 1.5), polygon)
    assert not point_in_polygon((2.0, 1.5), polygon)
    assert point_in_polygon((2.0, 2.5), polygon)


@pytest.mark.parametrize(
    "polygon",
    [
        [],
        [(0.0, 0.0), (1.0, 1.0), (0.0, 0.0)],
        [(0.0, 0.0), (1.0, 1.0), (1.0, 1.0), (0.0, 0.0)],
    ],
)
def test_point_in_polygon_false_for_degenerate(polygon) -> None:
    assert not point_in_polygon((0.5, 0.5), polygon)


def test_points_to_polygon_closes_and_downsamples() -> None:
    points = [offset_latlon(x, y) for x, y in square_m((0, 0), 200.0, 2.0)]
    polygon = points_to_polygon(points, max_vertices=50)
    assert polygon[0] == polygon[-1]
    assert len(polygon) <= 2 * 50 + 1
    assert points_to_polygon([]) == []
