"""
mece.py

Turns independently authored (overlapping, nested) neighborhood polygons
into a Mutually-Exclusive-Collectively-Exhaustive partition.

Strategy:
1. Parse each row's bounds into rings and drop degenerate rings.
2. Simplify every ring adaptively (see `simplify.simplify_ring_adaptive`).
3. Order candidates by (summed ring area, name), smallest first.
4. Fold over the ordered candidates with an ``occupied`` accumulator: each
   candidate keeps only the part of its footprint not yet occupied, and
   that part is then added to ``occupied``. A candidate with nothing left
   is dropped and counted in ``overlap_removed``.

Smaller regions are therefore assigned first and keep their whole
footprint; coarser regions receive what remains. The fold is strictly
sequential.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union
import logging

from mapgeo.neighborhoods.clipping import (
    ClippingError,
    ClippingMultiPolygon,
    repair_polygon_group,
    subtract_polygon_groups,
    to_clipping_multipolygon,
    union,
)
from mapgeo.neighborhoods.io import parse_polygon_bounds, to_geojson_multipolygon
from mapgeo.neighborhoods.primitives import (
    PolygonRings,
    normalize_polygons,
    polygon_group_area,
    polygons_are_finite,
)
from mapgeo.neighborhoods.simplify import simplify_polygons
from mapgeo.neighborhoods.utils import log_dropped_neighborhood

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NeighborhoodInput:
    """One raw neighborhood row from the geo store. ``bounds`` is opaque."""
    id: str
    name: str
    city: str
    state: str
    bounds: Any = None

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> 'NeighborhoodInput':
        return cls(
            id=str(row.get('id', '')),
            name=str(row.get('name') or ''),
            city=str(row.get('city') or ''),
            state=str(row.get('state') or ''),
            bounds=row.get('bounds'),
        )


@dataclass(frozen=True)
class NeighborhoodOutput:
    id: str
    name: str
    city: str
    state: str
    bounds: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'city': self.city,
            'state': self.state,
            'bounds': self.bounds,
        }


@dataclass
class MeceDebug:
    total: int = 0
    parsed: int = 0
    overlap_removed: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            'total': self.total,
            'parsed': self.parsed,
            'overlap_removed': self.overlap_removed,
        }


@dataclass
class MeceResult:
    items: List[NeighborhoodOutput] = field(default_factory=list)
    debug: MeceDebug = field(default_factory=MeceDebug)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'items': [item.to_dict() for item in self.items],
            'debug': self.debug.to_dict(),
        }


@dataclass(frozen=True)
class _Candidate:
    row: NeighborhoodInput
    polygons: List[PolygonRings]
    area: float


def prepare_candidate(row: NeighborhoodInput, **simplify_kwargs) -> Optional[_Candidate]:
    """Parse, normalize and simplify one row; None when nothing usable remains."""
    polygons = normalize_polygons(parse_polygon_bounds(row.bounds))
    if not polygons:
        logger.debug('neighborhood %s (%s): no usable rings', row.id, row.name)
        return None
    if not polygons_are_finite(polygons):
        logger.debug('neighborhood %s (%s): non-finite coordinates', row.id, row.name)
        return None
    simplified = simplify_polygons(polygons, **simplify_kwargs)
    if not simplified:
        logger.debug('neighborhood %s (%s): nothing left after simplification', row.id, row.name)
        return None
    return _Candidate(row=row, polygons=simplified, area=polygon_group_area(simplified))


def _assemble_step(occupied: ClippingMultiPolygon,
                   candidate: _Candidate) -> Tuple[ClippingMultiPolygon, Optional[List[PolygonRings]]]:
    """One fold step: returns (new occupied, effective polygons or None).

    Raises `ClippingError` when GEOS fails; ``occupied`` is then unchanged.
    """
    if occupied:
        polygons = subtract_polygon_groups(candidate.polygons, occupied)
    else:
        polygons = repair_polygon_group(candidate.polygons)
    if not polygons:
        return occupied, None
    return union(occupied, to_clipping_multipolygon(polygons)), polygons


def build_mece(rows: Iterable[Union[NeighborhoodInput, Mapping[str, Any]]],
               **simplify_kwargs) -> MeceResult:
    """Assemble a disjoint partition from possibly overlapping neighborhoods.

    ``rows`` may hold `NeighborhoodInput` instances or plain mappings with
    ``id``, ``name``, ``city``, ``state`` and ``bounds`` keys. Extra keyword
    arguments override the adaptive simplification settings.

    Returns a `MeceResult` whose items are in assembly order (ascending
    priority area, then name).
    """
    inputs = [row if isinstance(row, NeighborhoodInput) else NeighborhoodInput.from_mapping(row)
              for row in rows]

    candidates = []
    for row in inputs:
        candidate = prepare_candidate(row, **simplify_kwargs)
        if candidate is not None:
            candidates.append(candidate)
    candidates.sort(key=lambda c: (c.area, c.row.name))

    debug = MeceDebug(total=len(inputs), parsed=len(candidates))
    items = []
    occupied: ClippingMultiPolygon = []
    for candidate in candidates:
        try:
            occupied, effective = _assemble_step(occupied, candidate)
        except ClippingError as e:
            log_dropped_neighborhood(candidate.row.id, candidate.row.name, e, stage='clipping')
            debug.overlap_removed += 1
            continue
        if effective is None:
            logger.debug('neighborhood %s (%s): fully covered by smaller neighborhoods',
                         candidate.row.id, candidate.row.name)
            debug.overlap_removed += 1
            continue
        row = candidate.row
        items.append(NeighborhoodOutput(
            id=row.id,
            name=row.name,
            city=row.city,
            state=row.state,
            bounds=to_geojson_multipolygon(effective),
        ))

    logger.info('mece: total=%d parsed=%d emitted=%d overlap_removed=%d',
                debug.total, debug.parsed, len(items), debug.overlap_removed)
    return MeceResult(items=items, debug=debug)
