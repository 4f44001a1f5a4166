"""
io.py

Format adapters at the boundary of the partition engine.

Input: raw neighborhood ``bounds`` as delivered by the geo store are turned
into `LatLng` polygon groups by `parse_polygon_bounds`. Accepted forms:

- GeoJSON Polygon / MultiPolygon dicts (optionally wrapped in a Feature)
- objects exposing ``__geo_interface__`` (shapely geometries)
- PostGIS EWKB / WKB (bytes or hex text) and WKT text, read with shapely
- JSON text of any of the above
- bare coordinate arrays (polygon or multipolygon nesting, ``[lng, lat]``)
- any other string is scanned for numeric ``lng lat`` pairs of one ring

Anything unparseable yields None; the assembler drops such rows.

Output: `to_geojson_multipolygon` and the JSON row helpers used by the CLI.
"""
from typing import Any, Dict, IO, List, Optional, Sequence, Union
from numbers import Real
import json
import logging
import math
import os
import re

import shapely.wkb
import shapely.wkt
from shapely.errors import ShapelyError

from mapgeo.neighborhoods.config import COORDINATE_LIMITS
from mapgeo.neighborhoods.primitives import LatLng, PolygonRings, Ring, close_ring

logger = logging.getLogger(__name__)

_HEX_RE = re.compile(r'^(?:[0-9a-fA-F]{2})+$')
_NUMBER_RE = re.compile(r'-?\d+(?:\.\d+)?')
_WKB_MIN_HEX_LENGTH = 18  # byte order + type + one count


def is_valid_latitude(lat: Any) -> bool:
    lo, hi = COORDINATE_LIMITS['lat']
    return _is_number(lat) and math.isfinite(lat) and lo <= lat <= hi


def is_valid_longitude(lng: Any) -> bool:
    lo, hi = COORDINATE_LIMITS['lng']
    return _is_number(lng) and math.isfinite(lng) and lo <= lng <= hi


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def parse_coordinate_ring(coords: Any) -> Optional[Ring]:
    """Parse ``[[lng, lat], ...]`` into a closed ring.

    Returns None when the ring has fewer than three points or any pair is
    malformed or out of range. Extra ordinates (z, m) are ignored.
    """
    if not _is_sequence(coords) or len(coords) < 3:
        return None
    points = []
    for pair in coords:
        if not _is_sequence(pair) or len(pair) < 2:
            return None
        lng, lat = pair[0], pair[1]
        if not is_valid_longitude(lng) or not is_valid_latitude(lat):
            return None
        points.append(LatLng(float(lat), float(lng)))
    return close_ring(points)


def parse_polygon_coordinates(coords: Any) -> Optional[PolygonRings]:
    """Parse polygon coordinates: a single ring or a list of rings.

    Malformed rings are skipped; None when no ring survives.
    """
    if not _is_sequence(coords) or len(coords) == 0:
        return None
    first = coords[0]
    if _is_sequence(first) and len(first) > 0 and _is_number(first[0]):
        ring = parse_coordinate_ring(coords)
        return [ring] if ring else None
    rings = []
    for ring_coords in coords:
        ring = parse_coordinate_ring(ring_coords)
        if ring:
            rings.append(ring)
    return rings or None


def parse_multipolygon_coordinates(coords: Any) -> Optional[List[PolygonRings]]:
    if not _is_sequence(coords) or len(coords) == 0:
        return None
    polygons = []
    for polygon_coords in coords:
        rings = parse_polygon_coordinates(polygon_coords)
        if rings:
            polygons.append(rings)
    return polygons or None


def _parse_geojson(obj: Dict[str, Any]) -> Optional[List[PolygonRings]]:
    kind = obj.get('type')
    if kind == 'Feature':
        geometry = obj.get('geometry')
        return _parse_geojson(geometry) if isinstance(geometry, dict) else None
    coords = obj.get('coordinates')
    if not coords:
        return None
    if kind == 'Polygon':
        rings = parse_polygon_coordinates(coords)
        return [rings] if rings else None
    if kind == 'MultiPolygon':
        return parse_multipolygon_coordinates(coords)
    return None


def _parse_loose_string(value: str) -> Optional[List[PolygonRings]]:
    """Scan numeric ``lng lat`` pairs out of free text as a single ring."""
    numbers = [float(m) for m in _NUMBER_RE.findall(value)]
    if len(numbers) < 6:
        return None
    points = []
    for i in range(0, len(numbers) - 1, 2):
        lng, lat = numbers[i], numbers[i + 1]
        if not is_valid_longitude(lng) or not is_valid_latitude(lat):
            continue
        points.append(LatLng(lat, lng))
    ring = close_ring(points)
    return [[ring]] if ring else None


def _parse_string(value: str) -> Optional[List[PolygonRings]]:
    text = value.strip()
    if not text:
        return None
    if text.startswith('{') or text.startswith('['):
        try:
            decoded = json.loads(text)
        except ValueError:
            logger.debug('bounds look like JSON but do not decode')
            return None
        return parse_polygon_bounds(decoded)
    if len(text) >= _WKB_MIN_HEX_LENGTH and _HEX_RE.match(text):
        try:
            return parse_polygon_bounds(shapely.wkb.loads(text, hex=True))
        except (ShapelyError, ValueError, TypeError) as e:
            logger.debug('hex bounds are not WKB: %s', e)
            return None
    if text.upper().startswith('SRID=') and ';' in text:
        # EWKT; the SRID is always 4326 here
        text = text.split(';', 1)[1].strip()
    if text[:1].isalpha():
        try:
            return parse_polygon_bounds(shapely.wkt.loads(text))
        except (ShapelyError, ValueError, TypeError) as e:
            logger.debug('text bounds are not WKT (%s); scanning for coordinates', e)
    return _parse_loose_string(text)


def parse_polygon_bounds(bounds: Any) -> Optional[List[PolygonRings]]:
    """Turn opaque store geometry into `LatLng` polygon groups, or None."""
    if bounds is None:
        return None
    if isinstance(bounds, dict):
        return _parse_geojson(bounds)
    if isinstance(bounds, str):
        return _parse_string(bounds)
    if isinstance(bounds, (bytes, bytearray, memoryview)):
        try:
            return parse_polygon_bounds(shapely.wkb.loads(bytes(bounds)))
        except (ShapelyError, ValueError, TypeError) as e:
            logger.debug('binary bounds are not WKB: %s', e)
            return None
    if _is_sequence(bounds):
        rings = parse_polygon_coordinates(bounds)
        if rings:
            return [rings]
        return parse_multipolygon_coordinates(bounds)
    geo_interface = getattr(bounds, '__geo_interface__', None)
    if isinstance(geo_interface, dict):
        return _parse_geojson(geo_interface)
    logger.debug('unsupported bounds type %s', type(bounds).__name__)
    return None


def to_geojson_multipolygon(polygons: Sequence[PolygonRings]) -> Dict[str, Any]:
    return {
        'type': 'MultiPolygon',
        'coordinates': [
            [[[p.lng, p.lat] for p in ring] for ring in rings]
            for rings in polygons
        ],
    }


def load_rows(path: Union[str, os.PathLike]) -> List[Dict[str, Any]]:
    """Read neighborhood rows from a JSON file.

    Accepts a bare array of rows or an object with an ``items`` array.
    """
    with open(path, 'r', encoding='utf-8') as fh:
        data = json.load(fh)
    if isinstance(data, dict):
        data = data.get('items')
    if not isinstance(data, list):
        raise ValueError(f'{path}: expected a JSON array of neighborhood rows')
    return data


def dump_result(result, target: Union[str, os.PathLike, IO[str]], indent: Optional[int] = None) -> None:
    """Write a `MeceResult` (or anything with ``to_dict``) as JSON."""
    payload = result.to_dict() if hasattr(result, 'to_dict') else result
    if hasattr(target, 'write'):
        json.dump(payload, target, indent=indent)
        return
    with open(target, 'w', encoding='utf-8') as fh:
        json.dump(payload, fh, indent=indent)
