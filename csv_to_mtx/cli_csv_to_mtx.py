#!/usr/bin/env python3
"""
CLI: CSV -> MTX

Usage:
    csv-to-mtx input.csv output.mtx [zones.csv]
    csv-to-mtx input.csv output.mtx.gz [zones.csv] --shape square
"""

import argparse
import logging
import sys
from pathlib import Path

from csv_to_mtx import pipeline
from csv_to_mtx.compression import GZIP, for_path
from csv_to_mtx.errors import MatrixConversionError
from csv_to_mtx.parser import Shape

OUTPUT_SUFFIXES = (".mtx", ".mtx.gz")


def build_parser():
    parser = argparse.ArgumentParser(description="Convert CSV matrix -> MTX")
    parser.add_argument("input", help="Input CSV file (square or origin,destination,value)")
    parser.add_argument("output", help="Output .mtx or .mtx.gz file")
    parser.add_argument("zones", nargs="?", default=None, help="Optional CSV listing zone ids in matrix order")
    parser.add_argument("--shape", choices=["auto"] + [s.value for s in Shape], default="auto",
                        help="Force the input shape instead of detecting it from the column count")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    csv_path = Path(args.input)
    out_path = Path(args.output)
    zones_path = Path(args.zones) if args.zones else None

    if not csv_path.exists():
        parser.error(f"Input CSV not found: {csv_path}")
    if zones_path is not None and not zones_path.exists():
        parser.error(f"Zones CSV not found: {zones_path}")
    if not out_path.name.lower().endswith(OUTPUT_SUFFIXES):
        parser.error(f"Output must end with {' or '.join(OUTPUT_SUFFIXES)}: {out_path}")

    shape = None if args.shape == "auto" else Shape(args.shape)
    try:
        matrix = pipeline.convert(csv_path, out_path, zones_path, shape)
    except (MatrixConversionError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    compressed = "yes" if for_path(out_path) is GZIP else "no"
    print(f"Found {matrix.dimension} zones")
    print(f"Wrote MTX to {out_path} (zones={matrix.dimension}, compressed={compressed})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
