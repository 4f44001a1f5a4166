"""Command line entry point: build a MECE partition from a JSON file of rows.

    mapgeo-mece rows.json -o partition.json --max-points 600 -v
"""
from typing import Optional, Sequence
import argparse
import logging
import sys

from mapgeo.neighborhoods.config import SIMPLIFICATION
from mapgeo.neighborhoods.io import dump_result, load_rows
from mapgeo.neighborhoods.mece import build_mece

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='mapgeo-mece',
        description='Partition overlapping neighborhood polygons into disjoint regions')
    parser.add_argument('input', help='JSON array of {id, name, city, state, bounds} rows')
    parser.add_argument('-o', '--output', default=None, help='output JSON path (default: stdout)')
    parser.add_argument('--max-points', type=int, default=SIMPLIFICATION['max_points'],
                        help='per-ring point cap for adaptive simplification')
    parser.add_argument('--indent', type=int, default=None, help='indent output JSON')
    parser.add_argument('-v', '--verbose', action='store_true', help='debug logging')
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    try:
        rows = load_rows(args.input)
    except (OSError, ValueError) as e:
        logger.error('cannot read %s: %s', args.input, e)
        return 2

    result = build_mece(rows, max_points=args.max_points)
    if args.output:
        dump_result(result, args.output, indent=args.indent)
        logger.info('wrote %d neighborhoods to %s', len(result.items), args.output)
    else:
        dump_result(result, sys.stdout, indent=args.indent)
        sys.stdout.write('\n')
    return 0


if __name__ == '__main__':
    sys.exit(main())
