"""
simplify.py

Bounded-error ring simplification for neighborhood boundaries.

Traced boundaries can carry tens of thousands of vertices. They are reduced
with Ramer-Douglas-Peucker (RDP) before any clipping. The adaptive variant
grows the tolerance until a per-ring point cap is met and otherwise keeps
the original ring, so geometry is never degraded to reach the cap.

Public functions:
- `rdp(points, tolerance)` -> simplified open polyline
- `simplify_ring(ring, tolerance)` -> simplified ring (closure preserved)
- `simplify_ring_adaptive(ring, max_points, base_tolerance, max_tolerance)`
- `simplify_polygons(polygons)` -> adaptive simplification of every ring
"""
from typing import List, Sequence
import logging

import numpy as np

from mapgeo.neighborhoods.config import MIN_RING_POINTS, SIMPLIFICATION
from mapgeo.neighborhoods.primitives import LatLng, PolygonRings, Ring, is_closed

logger = logging.getLogger(__name__)


def _segment_distances(lngs: np.ndarray, lats: np.ndarray, lo: int, hi: int) -> np.ndarray:
    """Distances of points lo+1..hi-1 to the segment lo-hi (clamped projection)."""
    x0, y0 = lngs[lo], lats[lo]
    vx = lngs[hi] - x0
    vy = lats[hi] - y0
    px = lngs[lo + 1:hi]
    py = lats[lo + 1:hi]
    denom = vx * vx + vy * vy
    if denom == 0:
        return np.hypot(px - x0, py - y0)
    t = ((px - x0) * vx + (py - y0) * vy) / denom
    t = np.clip(t, 0.0, 1.0)
    return np.hypot(px - (x0 + t * vx), py - (y0 + t * vy))


def rdp(points: Sequence[LatLng], tolerance: float) -> List[LatLng]:
    """Ramer-Douglas-Peucker over an open polyline.

    Each sub-range is split at its farthest point when that distance exceeds
    ``tolerance`` and collapsed to its endpoints otherwise. Sub-ranges are
    processed from an explicit stack, so very long rings cannot exhaust the
    recursion limit; the kept points are identical to the recursive form.
    """
    pts = list(points)
    n = len(pts)
    if n < 3:
        return pts

    lngs = np.fromiter((p.lng for p in pts), dtype=float, count=n)
    lats = np.fromiter((p.lat for p in pts), dtype=float, count=n)

    keep = np.zeros(n, dtype=bool)
    keep[0] = True
    keep[-1] = True
    stack = [(0, n - 1)]
    while stack:
        lo, hi = stack.pop()
        if hi - lo < 2:
            continue
        dists = _segment_distances(lngs, lats, lo, hi)
        idx = int(np.argmax(dists))
        if dists[idx] > tolerance:
            split = lo + 1 + idx
            keep[split] = True
            stack.append((split, hi))
            stack.append((lo, split))

    return [pts[i] for i in np.flatnonzero(keep)]


def simplify_ring(ring: Sequence[LatLng], tolerance: float) -> Ring:
    """Simplify a ring with RDP at a fixed tolerance.

    The closing point is stripped before simplification and restored after.
    When fewer than three distinct points would survive, a copy of the
    original ring is returned instead.
    """
    original = list(ring)
    if len(original) < MIN_RING_POINTS:
        return original
    closed = is_closed(original)
    points = original[:-1] if closed else original
    simplified = rdp(points, tolerance)
    if len(set(simplified)) < 3:
        return original
    if closed:
        simplified.append(LatLng(simplified[0].lat, simplified[0].lng))
    return simplified


def simplify_ring_adaptive(ring: Sequence[LatLng],
                           max_points: int = SIMPLIFICATION['max_points'],
                           base_tolerance: float = SIMPLIFICATION['base_tolerance'],
                           max_tolerance: float = SIMPLIFICATION['max_tolerance']) -> Ring:
    """Simplify ``ring`` until it has at most ``max_points`` points.

    Tolerance starts at ``base_tolerance`` and is multiplied by
    ``SIMPLIFICATION['tolerance_growth']`` (capped at ``max_tolerance``)
    while the cap is not met. If the cap still cannot be met, or the result
    would have fewer than four points, the original ring is returned.
    """
    original = list(ring)
    if len(original) <= max_points:
        return original

    growth = SIMPLIFICATION['tolerance_growth']
    tolerance = base_tolerance
    simplified = simplify_ring(original, tolerance)
    while len(simplified) > max_points and tolerance < max_tolerance:
        tolerance = min(tolerance * growth, max_tolerance)
        simplified = simplify_ring(original, tolerance)

    if len(simplified) > max_points:
        logger.debug('ring of %d points still has %d at tolerance %.6g; keeping original',
                     len(original), len(simplified), tolerance)
        return original
    if len(simplified) < MIN_RING_POINTS:
        logger.debug('ring of %d points degenerated to %d; keeping original',
                     len(original), len(simplified))
        return original
    return simplified


def simplify_polygons(polygons: Sequence[PolygonRings], **kwargs) -> List[PolygonRings]:
    """Adaptively simplify every ring; drop short rings and empty polygons.

    Keyword arguments are passed through to `simplify_ring_adaptive`.
    """
    out = []
    for rings in polygons:
        kept = []
        for ring in rings:
            simplified = simplify_ring_adaptive(ring, **kwargs)
            if len(simplified) >= MIN_RING_POINTS:
                kept.append(simplified)
        if kept:
            out.append(kept)
    return out
