"""
primitives.py

Point / ring / polygon types and the small amount of math shared by the
simplifier, the clipping wrapper and the spatial helpers.

Conventions:
- `LatLng` is (lat, lng) in geographic degrees. Planar math treats lng as x
  and lat as y.
- A `Ring` is a closed list of `LatLng` (first point == last point).
- `PolygonRings` is a list of rings; index 0 is the outer boundary and the
  remaining rings are holes.

Public functions:
- `close_ring(points)` -> closed copy or None
- `ring_area(ring)` -> signed shoelace area
- `polygon_group_area(polygons)` -> sum of absolute ring areas
- `perpendicular_distance(point, start, end)` -> point-to-segment distance
- `normalize_polygons(polygons)` -> drops degenerate rings / empty polygons
"""
from typing import Iterable, List, NamedTuple, Optional, Sequence
import math

from mapgeo.neighborhoods.config import MIN_RING_POINTS


class LatLng(NamedTuple):
    lat: float
    lng: float


Ring = List[LatLng]
PolygonRings = List[Ring]


def is_closed(ring: Sequence[LatLng]) -> bool:
    if len(ring) == 0:
        return False
    first = ring[0]
    last = ring[-1]
    return first.lat == last.lat and first.lng == last.lng


def close_ring(points: Iterable[LatLng]) -> Optional[Ring]:
    """Return a closed copy of ``points`` or None when fewer than 3 points."""
    ring = [LatLng(float(p[0]), float(p[1])) for p in points]
    if len(ring) < 3:
        return None
    if not is_closed(ring):
        ring.append(LatLng(ring[0].lat, ring[0].lng))
    return ring


def ring_area(ring: Sequence[LatLng]) -> float:
    """Signed shoelace area of a closed ring (lng = x, lat = y).

    Positive for counter-clockwise rings. Rings with fewer than three points
    have zero area.
    """
    if len(ring) < 3:
        return 0.0
    area = 0.0
    for i in range(len(ring) - 1):
        cur = ring[i]
        nxt = ring[i + 1]
        area += cur.lng * nxt.lat - nxt.lng * cur.lat
    return area / 2.0


def polygon_group_area(polygons: Iterable[PolygonRings]) -> float:
    """Sum of |ring_area| over every ring of every polygon.

    Holes are added, not subtracted. This is a priority key for ordering
    candidates and not the true covered area.
    """
    total = 0.0
    for rings in polygons:
        for ring in rings:
            total += abs(ring_area(ring))
    return total


def perpendicular_distance(point: LatLng, start: LatLng, end: LatLng) -> float:
    """Distance from ``point`` to the segment ``start``-``end``.

    The projection parameter is clamped to [0, 1]; a zero-length segment
    degrades to the point-to-point distance from ``start``.
    """
    dx = end.lng - start.lng
    dy = end.lat - start.lat
    if dx == 0 and dy == 0:
        return math.hypot(point.lng - start.lng, point.lat - start.lat)
    t = ((point.lng - start.lng) * dx + (point.lat - start.lat) * dy) / (dx * dx + dy * dy)
    t = max(0.0, min(1.0, t))
    proj_lng = start.lng + t * dx
    proj_lat = start.lat + t * dy
    return math.hypot(point.lng - proj_lng, point.lat - proj_lat)


def normalize_polygons(polygons: Optional[Iterable[PolygonRings]]) -> List[PolygonRings]:
    """Drop rings below MIN_RING_POINTS, then polygons with no rings left.

    Returns new lists; the caller's structures are not modified.
    """
    if not polygons:
        return []
    out = []
    for rings in polygons:
        kept = [list(ring) for ring in rings if len(ring) >= MIN_RING_POINTS]
        if kept:
            out.append(kept)
    return out


def is_finite_ring(ring: Iterable[LatLng]) -> bool:
    return all(math.isfinite(p.lat) and math.isfinite(p.lng) for p in ring)


def polygons_are_finite(polygons: Iterable[PolygonRings]) -> bool:
    return all(is_finite_ring(ring) for rings in polygons for ring in rings)
