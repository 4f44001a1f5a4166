"""
clipping.py

Union / difference over multipolygons, delegated to shapely (GEOS).

Inside this module and the assembler a multipolygon is a plain nested list
of ``(lng, lat)`` pairs (x, y order, as GEOS expects)::

    [[[ (lng, lat), ... ], ...holes ], ...polygons ]

`from_clipping_multipolygon` turns such a structure back into `LatLng`
rings. Every result is re-normalized so callers never receive a ring with
fewer than four points or a polygon without rings.
"""
from typing import List, Sequence, Tuple
import logging

import numpy as np
import shapely
from shapely.errors import ShapelyError
from shapely.geometry import MultiPolygon, Polygon
from shapely.geometry.base import BaseGeometry

from mapgeo.neighborhoods.primitives import LatLng, PolygonRings, close_ring, normalize_polygons

logger = logging.getLogger(__name__)

ClippingRing = List[Tuple[float, float]]
ClippingPolygon = List[ClippingRing]
ClippingMultiPolygon = List[ClippingPolygon]


class ClippingError(ValueError):
    """Raised when GEOS cannot clip the given operands."""


def to_clipping_multipolygon(polygons: Sequence[PolygonRings]) -> ClippingMultiPolygon:
    return [[[(p.lng, p.lat) for p in ring] for ring in rings] for rings in polygons]


def from_clipping_multipolygon(multi: ClippingMultiPolygon) -> List[PolygonRings]:
    polygons = []
    for polygon in multi:
        rings = []
        for ring in polygon:
            closed = close_ring(LatLng(float(lat), float(lng)) for lng, lat in ring)
            if closed is not None:
                rings.append(closed)
        if rings:
            polygons.append(rings)
    return normalize_polygons(polygons)


def _polygonal_parts(geom: BaseGeometry) -> List[Polygon]:
    """Polygons contained in ``geom``; lines and points are discarded."""
    if geom is None or geom.is_empty:
        return []
    if isinstance(geom, Polygon):
        return [geom]
    if isinstance(geom, MultiPolygon):
        return [g for g in geom.geoms if not g.is_empty]
    parts = []
    for g in getattr(geom, 'geoms', []):
        parts.extend(_polygonal_parts(g))
    return parts


def _repair(polygons: List[Polygon]) -> MultiPolygon:
    """Make each part valid, then merge parts that overlap each other."""
    parts = []
    for poly in polygons:
        parts.extend(_polygonal_parts(poly if poly.is_valid else shapely.make_valid(poly)))
    if not parts:
        return MultiPolygon()
    return MultiPolygon(_polygonal_parts(shapely.union_all(parts)))


def to_shape(multi: ClippingMultiPolygon) -> MultiPolygon:
    """Build a valid shapely MultiPolygon from a clipping multipolygon.

    Raises `ClippingError` on non-finite coordinates or rings GEOS rejects.
    Self-intersecting parts are repaired with `shapely.make_valid` and parts
    overlapping each other are unioned, so no covered ground is lost.
    """
    for polygon in multi:
        for ring in polygon:
            if not np.all(np.isfinite(np.asarray(ring, dtype=float))):
                raise ClippingError('non-finite coordinate in clipping operand')
    try:
        polygons = [Polygon(polygon[0], polygon[1:]) for polygon in multi if polygon]
        geom = MultiPolygon(polygons)
        if not geom.is_valid:
            geom = _repair(polygons)
    except (ShapelyError, ValueError, TypeError) as e:
        raise ClippingError(f'cannot build clipping operand: {e}') from e
    return geom


def from_shape(geom: BaseGeometry) -> ClippingMultiPolygon:
    multi = []
    for poly in _polygonal_parts(geom):
        rings = [list(poly.exterior.coords)]
        rings.extend(list(interior.coords) for interior in poly.interiors)
        multi.append([[(float(x), float(y)) for x, y in ring] for ring in rings])
    return multi


def _renormalize(multi: ClippingMultiPolygon) -> ClippingMultiPolygon:
    return to_clipping_multipolygon(from_clipping_multipolygon(multi))


def union(first: ClippingMultiPolygon, second: ClippingMultiPolygon) -> ClippingMultiPolygon:
    """Union of two multipolygons; an empty operand returns the other one."""
    if len(first) == 0:
        return second
    if len(second) == 0:
        return first
    try:
        merged = to_shape(first).union(to_shape(second))
    except ShapelyError as e:
        raise ClippingError(f'union failed: {e}') from e
    return _renormalize(from_shape(merged))


def difference(subject: ClippingMultiPolygon, clip: ClippingMultiPolygon) -> ClippingMultiPolygon:
    """Part of ``subject`` not covered by ``clip``; empty ``clip`` is a no-op."""
    if len(clip) == 0:
        return subject
    try:
        remainder = to_shape(subject).difference(to_shape(clip))
    except ShapelyError as e:
        raise ClippingError(f'difference failed: {e}') from e
    return _renormalize(from_shape(remainder))


def subtract_polygon_groups(polygons: Sequence[PolygonRings],
                            clip: ClippingMultiPolygon) -> List[PolygonRings]:
    """`difference` taking and returning `LatLng` polygon groups."""
    if len(clip) == 0:
        return normalize_polygons(polygons)
    return from_clipping_multipolygon(difference(to_clipping_multipolygon(polygons), clip))


def repair_polygon_group(polygons: Sequence[PolygonRings]) -> List[PolygonRings]:
    """Return ``polygons`` as a valid group; overlapping parts are merged.

    Valid input comes back with the same rings.
    """
    return from_clipping_multipolygon(from_shape(to_shape(to_clipping_multipolygon(polygons))))
