import pytest

from mapgeo.neighborhoods import simplify
from mapgeo.neighborhoods.primitives import LatLng
from mapgeo.neighborhoods.simplify import (
    rdp,
    simplify_polygons,
    simplify_ring,
    simplify_ring_adaptive,
)
from mapgeo.neighborhoods.tests.fixtures.polygon_fixture import (
    build_dense_ring,
    build_noisy_circle,
    build_star_ring,
    square_ring,
)


def test_rdp_collapses_collinear_points():
    line = [LatLng(0.0, float(i)) for i in range(10)]
    assert rdp(line, 0.001) == [line[0], line[-1]]


def test_rdp_keeps_far_point():
    pts = [LatLng(0.0, 0.0), LatLng(0.0, 1.0), LatLng(5.0, 2.0), LatLng(0.0, 3.0), LatLng(0.0, 4.0)]
    assert rdp(pts, 1.0) == [pts[0], pts[2], pts[4]]


def test_rdp_short_input_returned():
    pts = [LatLng(0.0, 0.0), LatLng(1.0, 1.0)]
    assert rdp(pts, 1.0) == pts


def test_simplify_ring_dense_square_to_corners():
    ring = build_dense_ring(50)
    simplified = simplify_ring(ring, 1e-6)
    assert simplified[0] == simplified[-1]
    assert len(simplified) < len(ring)
    corners = {(0.0, 0.0), (0.0, 1.0), (1.0, 1.0), (1.0, 0.0)}
    assert corners <= {(p.lat, p.lng) for p in simplified}


def test_simplify_ring_open_ring_stays_open():
    ring = build_dense_ring(20)[:-1]
    simplified = simplify_ring(ring, 1e-6)
    assert simplified[0] != simplified[-1]
    assert len(simplified) < len(ring)


def test_simplify_ring_never_degenerates():
    # a thin sliver collapses below three distinct points at this tolerance
    ring = [LatLng(0.0, 0.0), LatLng(0.00001, 0.5), LatLng(0.0, 1.0), LatLng(0.0, 0.0)]
    assert simplify_ring(ring, 0.01) == ring


@pytest.mark.parametrize('tolerance', [0.0, 1e-4, 1e-3, 1e-2, 0.5])
def test_simplify_never_increases_point_count(tolerance):
    for seed in range(5):
        ring = build_noisy_circle(400, seed=seed)
        assert len(simplify_ring(ring, tolerance)) <= len(ring)


@pytest.mark.parametrize('tolerance', [1e-4, 1e-3, 5e-3])
def test_simplify_idempotent(tolerance):
    ring = build_noisy_circle(500, seed=7)
    once = simplify_ring(ring, tolerance)
    assert simplify_ring(once, tolerance) == once


def test_simplify_does_not_mutate_input():
    ring = build_noisy_circle(100)
    before = list(ring)
    simplify_ring(ring, 1e-3)
    simplify_ring_adaptive(ring, max_points=10)
    assert ring == before


def test_adaptive_small_ring_unchanged():
    ring = square_ring(0, 0, 1, 1)
    out = simplify_ring_adaptive(ring)
    assert out == ring
    assert out is not ring


def test_adaptive_dense_ring_reduced_and_closed():
    ring = build_dense_ring(300)
    assert len(ring) > 900
    simplified = simplify_ring_adaptive(ring)
    assert len(simplified) < len(ring)
    assert len(simplified) <= 900
    assert simplified[0] == simplified[-1]


def test_adaptive_grows_tolerance_to_meet_cap():
    ring = build_noisy_circle(3000, noise=0.001)
    assert len(simplify_ring(ring, 1e-4)) > 300
    simplified = simplify_ring_adaptive(ring, max_points=300)
    assert len(simplified) <= 300
    assert simplified[0] == simplified[-1]


def test_adaptive_falls_back_to_original_when_cap_unreachable():
    ring = build_star_ring(1000)
    out = simplify_ring_adaptive(ring, max_points=900)
    assert out == ring


def _simplifies_only_above(threshold, tried):
    def fake_simplify_ring(ring, tolerance):
        tried.append(tolerance)
        if tolerance > threshold:
            return square_ring(0, 0, 1, 1)
        return list(ring)
    return fake_simplify_ring


def test_adaptive_tolerance_never_exceeds_max_tolerance(monkeypatch):
    # the cap is only reachable at 0.011, just past the 0.01 ceiling
    tried = []
    monkeypatch.setattr(simplify, 'simplify_ring', _simplifies_only_above(0.011, tried))
    ring = build_dense_ring(400)

    out = simplify_ring_adaptive(ring, max_points=900, base_tolerance=1e-4, max_tolerance=0.01)

    assert out == ring
    assert tried[0] == pytest.approx(1e-4)
    assert tried[-1] == pytest.approx(0.01)
    assert max(tried) <= 0.01
    assert all(b == pytest.approx(min(a * 1.5, 0.01)) for a, b in zip(tried, tried[1:]))


def test_adaptive_reaches_cap_when_max_tolerance_allows(monkeypatch):
    tried = []
    monkeypatch.setattr(simplify, 'simplify_ring', _simplifies_only_above(0.011, tried))

    out = simplify_ring_adaptive(build_dense_ring(400), max_points=900, max_tolerance=0.015)

    assert out == square_ring(0, 0, 1, 1)
    assert 0.011 < tried[-1] <= 0.015


@pytest.mark.parametrize('builder', [
    lambda: build_dense_ring(400),
    lambda: build_noisy_circle(2000, seed=3),
    lambda: build_star_ring(1200),
])
def test_adaptive_cap_or_unchanged(builder):
    ring = builder()
    out = simplify_ring_adaptive(ring)
    assert len(out) <= 900 or out == ring


def test_simplify_polygons_drops_short_rings_and_empty_polygons():
    good = square_ring(0, 0, 1, 1)
    short = [LatLng(0, 0), LatLng(1, 1), LatLng(0, 0)]
    out = simplify_polygons([[good, short], [short]])
    assert out == [[good]]
