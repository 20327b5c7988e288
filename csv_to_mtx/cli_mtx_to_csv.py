# csv_to_mtx/cli_mtx_to_csv.py
import argparse
import csv
import logging
import sys
from pathlib import Path

import numpy as np

from csv_to_mtx.errors import MatrixConversionError
from csv_to_mtx.parser import Shape
from csv_to_mtx.reader import MtxReader


def format_value(v):
    # shortest text that reads back as the same float32
    return str(np.float32(v))


def square_rows(matrix):
    yield ["zone"] + [str(z) for z in matrix.zones]
    for zone, row in zip(matrix.zones, matrix.values):
        yield [str(zone)] + [format_value(v) for v in row]


def column_rows(matrix, skip_zeros=False):
    yield ["origin", "destination", "value"]
    zones = matrix.zones.ids
    for i, origin in enumerate(zones):
        for j, destination in enumerate(zones):
            v = matrix.values[i, j]
            if skip_zeros and v == 0:
                continue
            yield [str(origin), str(destination), format_value(v)]


def write_csv(path, rows):
    path = Path(path)
    count = 0
    with path.open("w", encoding="utf-8", newline="") as f:
        w = csv.writer(f)
        for row in rows:
            w.writerow(row)
            count += 1
    return count


def main(argv=None):
    parser = argparse.ArgumentParser(description="Convert MTX -> CSV matrix")
    parser.add_argument("input", help="Input .mtx or .mtx.gz")
    parser.add_argument("output", help="Output .csv")
    parser.add_argument("--format", choices=[s.value for s in Shape], default=Shape.SQUARE.value,
                        help="square grid or origin,destination,value rows")
    parser.add_argument("--skip-zeros", action="store_true", help="Column format: omit zero cells")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    in_path = Path(args.input)
    if not in_path.exists():
        parser.error(f"Input MTX not found: {in_path}")

    try:
        matrix = MtxReader(in_path).read_matrix()
        if args.format == Shape.SQUARE.value:
            rows = square_rows(matrix)
        else:
            rows = column_rows(matrix, args.skip_zeros)
        count = write_csv(args.output, rows)
    except (MatrixConversionError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(f"Wrote CSV to {args.output} (zones={matrix.dimension}, rows={count - 1})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
