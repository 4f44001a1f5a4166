"""
spatial.py

Spatial queries over the same ring representation used by the partition
engine: convex hull (label placement), centroid and point-in-polygon
(containment checks). These do not depend on the assembler.
"""
from typing import List, Optional, Sequence

from mapgeo.neighborhoods.config import CENTROID_AREA_EPSILON, HULL_KEY_DECIMALS, RAY_CAST_EPSILON
from mapgeo.neighborhoods.primitives import LatLng


def _cross(o: LatLng, a: LatLng, b: LatLng) -> float:
    return (a.lng - o.lng) * (b.lat - o.lat) - (a.lat - o.lat) * (b.lng - o.lng)


def convex_hull(points: Sequence[LatLng]) -> List[LatLng]:
    """Andrew's monotone chain hull, counter-clockwise in (lng, lat), open.

    Points are deduplicated on a HULL_KEY_DECIMALS-rounded key (first
    occurrence kept) and sorted by (lng, lat). Collinear points on the hull
    boundary are dropped.
    """
    if len(points) <= 2:
        return list(points)

    unique = {}
    for p in points:
        key = f'{p.lat:.{HULL_KEY_DECIMALS}f},{p.lng:.{HULL_KEY_DECIMALS}f}'
        unique.setdefault(key, p)
    ordered = sorted(unique.values(), key=lambda p: (p.lng, p.lat))
    if len(ordered) <= 2:
        return ordered

    lower: List[LatLng] = []
    for p in ordered:
        while len(lower) >= 2 and _cross(lower[-2], lower[-1], p) <= 0:
            lower.pop()
        lower.append(p)

    upper: List[LatLng] = []
    for p in reversed(ordered):
        while len(upper) >= 2 and _cross(upper[-2], upper[-1], p) <= 0:
            upper.pop()
        upper.append(p)

    # each half ends where the other begins
    return lower[:-1] + upper[:-1]


def polygon_centroid(ring: Sequence[LatLng]) -> Optional[LatLng]:
    """Area-weighted centroid of a ring (open or closed).

    Returns None for fewer than three points. Near-zero area rings
    (|A| < CENTROID_AREA_EPSILON) fall back to the mean of the ring points.
    """
    n = len(ring)
    if n < 3:
        return None

    area = 0.0
    cx = 0.0
    cy = 0.0
    for i in range(n):
        p = ring[i]
        q = ring[(i + 1) % n]
        f = p.lng * q.lat - q.lng * p.lat
        area += f
        cx += (p.lng + q.lng) * f
        cy += (p.lat + q.lat) * f
    area /= 2.0

    if abs(area) < CENTROID_AREA_EPSILON:
        return LatLng(sum(p.lat for p in ring) / n, sum(p.lng for p in ring) / n)

    return LatLng(cy / (6.0 * area), cx / (6.0 * area))


def is_point_in_polygon(point: LatLng, ring: Sequence[LatLng]) -> bool:
    """Even-odd ray casting test of ``point`` against ``ring``."""
    x = point.lng
    y = point.lat
    inside = False
    n = len(ring)
    j = n - 1
    for i in range(n):
        xi, yi = ring[i].lng, ring[i].lat
        xj, yj = ring[j].lng, ring[j].lat
        if (yi > y) != (yj > y):
            x_cross = (xj - xi) * (y - yi) / ((yj - yi) + RAY_CAST_EPSILON) + xi
            if x < x_cross:
                inside = not inside
        j = i
    return inside
