"""
Neighborhood partition engine.

Turns overlapping neighborhood polygons into a disjoint (MECE) partition
and provides the spatial helpers used for labels and containment checks.

    from mapgeo.neighborhoods import build_mece

    result = build_mece(rows)
    result.to_dict()  # {'items': [...], 'debug': {...}}
"""

from mapgeo.neighborhoods.primitives import LatLng, ring_area, polygon_group_area
from mapgeo.neighborhoods.simplify import simplify_ring, simplify_ring_adaptive, simplify_polygons
from mapgeo.neighborhoods.clipping import ClippingError, union, difference
from mapgeo.neighborhoods.mece import (
    NeighborhoodInput,
    NeighborhoodOutput,
    MeceDebug,
    MeceResult,
    build_mece,
)
from mapgeo.neighborhoods.spatial import convex_hull, polygon_centroid, is_point_in_polygon
from mapgeo.neighborhoods.io import parse_polygon_bounds, to_geojson_multipolygon

__all__ = [
    "LatLng",
    "ring_area",
    "polygon_group_area",
    "simplify_ring",
    "simplify_ring_adaptive",
    "simplify_polygons",
    "ClippingError",
    "union",
    "difference",
    "NeighborhoodInput",
    "NeighborhoodOutput",
    "MeceDebug",
    "MeceResult",
    "build_mece",
    "convex_hull",
    "polygon_centroid",
    "is_point_in_polygon",
    "parse_polygon_bounds",
    "to_geojson_multipolygon",
]
