import math

import numpy as np

from mapgeo.neighborhoods.primitives import (
    LatLng,
    close_ring,
    is_closed,
    normalize_polygons,
    perpendicular_distance,
    polygon_group_area,
    polygons_are_finite,
    ring_area,
)
from mapgeo.neighborhoods.tests.fixtures.polygon_fixture import square_ring


def test_close_ring_appends_first_point():
    ring = close_ring([LatLng(0, 0), LatLng(0, 1), LatLng(1, 1)])
    assert len(ring) == 4
    assert ring[0] == ring[-1]


def test_close_ring_keeps_closed_ring_and_copies():
    src = square_ring(0, 0, 1, 1)
    ring = close_ring(src)
    assert ring == src
    assert ring is not src


def test_close_ring_too_short():
    assert close_ring([LatLng(0, 0), LatLng(1, 1)]) is None


def test_ring_area_signed():
    ccw = square_ring(0, 0, 2, 2)
    assert ring_area(ccw) == 4.0
    assert ring_area(list(reversed(ccw))) == -4.0
    assert ring_area([LatLng(0, 0), LatLng(1, 1)]) == 0.0


def test_polygon_group_area_adds_holes():
    outer = square_ring(0, 0, 10, 10)
    hole = list(reversed(square_ring(2, 2, 4, 4)))
    other = square_ring(20, 20, 23, 23)
    # holes count towards the priority key
    assert polygon_group_area([[outer, hole], [other]]) == 100.0 + 4.0 + 9.0


def test_perpendicular_distance_projection_and_clamp():
    start = LatLng(0.0, 0.0)
    end = LatLng(0.0, 10.0)
    assert math.isclose(perpendicular_distance(LatLng(3.0, 5.0), start, end), 3.0)
    # beyond the end of the segment -> distance to the endpoint
    assert math.isclose(perpendicular_distance(LatLng(4.0, 13.0), start, end), 5.0)
    assert math.isclose(perpendicular_distance(LatLng(-4.0, -3.0), start, end), 5.0)


def test_perpendicular_distance_zero_length_segment():
    p = LatLng(3.0, 4.0)
    origin = LatLng(0.0, 0.0)
    assert math.isclose(perpendicular_distance(p, origin, origin), 5.0)


def test_normalize_polygons_drops_degenerate():
    good = square_ring(0, 0, 1, 1)
    short = [LatLng(0, 0), LatLng(1, 1), LatLng(0, 0)]
    polygons = [[good, short], [short]]
    out = normalize_polygons(polygons)
    assert out == [[good]]
    # input untouched
    assert len(polygons[0]) == 2
    assert normalize_polygons(None) == []


def test_is_closed_and_finite():
    ring = square_ring(0, 0, 1, 1)
    assert is_closed(ring)
    assert not is_closed(ring[:-1])
    assert not is_closed([])
    assert polygons_are_finite([[ring]])
    bad = ring[:-1] + [LatLng(np.nan, 0.0)]
    assert not polygons_are_finite([[bad]])
