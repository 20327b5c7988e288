"""
csv_to_mtx/parser.py
Reads matrix CSV text in either of its two shapes:

  square   ,1,2,3          column   1,1,0.1
           1,0.1,0.2,0.3            1,2,0.2
           2,0.4,0.5,0.6            ...
           3,0.7,0.8,0.9

The shape is detected from the width of the first data row (3 columns is
column format, more is square) unless the caller forces one.
"""

import csv
import io
import logging
import math
from enum import Enum
from typing import List, Optional, Tuple

import numpy as np

from csv_to_mtx.errors import DuplicateZoneError, UnrecognizedShapeError, ValueParseError
from csv_to_mtx.matrix import DenseMatrix

log = logging.getLogger(__name__)

COLUMN_WIDTH = 3
FLOAT32_MAX = float(np.finfo(np.float32).max)


class Shape(Enum):
    SQUARE = "square"
    COLUMN = "column"


def csv_rows(text: str) -> List[Tuple[int, List[str]]]:
    """Return (row number, cells) for every non-blank CSV record, numbered from 1."""
    reader = csv.reader(io.StringIO(text.lstrip("\ufeff")))
    rows = []
    number = 0
    try:
        for number, cells in enumerate(reader, start=1):
            cells = [c.strip() for c in cells]
            if any(cells):
                rows.append((number, cells))
    except csv.Error as e:
        raise UnrecognizedShapeError(f"malformed CSV: {e}", number + 1) from e
    return rows


def parse_zone(text: str, row: int) -> int:
    try:
        return int(text)
    except ValueError:
        raise ValueParseError(row, text, "zone id") from None


def parse_value(text: str, row: int) -> float:
    try:
        value = float(text)
    except ValueError:
        raise ValueParseError(row, text, "number") from None
    if math.isfinite(value) and abs(value) > FLOAT32_MAX:
        raise ValueParseError(row, text, "32-bit float")
    return value


def is_numeric(text: str) -> bool:
    try:
        float(text)
    except ValueError:
        return False
    return True


def _check_unique(zones, rows):
    seen = set()
    for zone, row in zip(zones, rows):
        if zone in seen:
            raise DuplicateZoneError(zone, row)
        seen.add(zone)


class SquareTable:
    """Grid of values with its header row (destinations) and header column (origins)."""

    shape = Shape.SQUARE

    def __init__(self, destinations, header_row, origins, origin_rows, values):
        self.destinations = destinations
        self.header_row = header_row
        self.origins = origins
        self.origin_rows = origin_rows
        self.values = values

    def fill(self, values: np.ndarray, zones):
        rows = zones.positions(self.origins, self.origin_rows)
        cols = zones.positions(self.destinations, [self.header_row] * len(self.destinations))
        values[np.ix_(rows, cols)] = self.values


class ColumnTable:
    """(origin, destination, value) triples in file order."""

    shape = Shape.COLUMN

    def __init__(self, origins, destinations, values, rows):
        self.origins = origins
        self.destinations = destinations
        self.values = values
        self.rows = rows

    def fill(self, values: np.ndarray, zones):
        n = len(zones)
        flat = zones.positions(self.origins, self.rows) * n + zones.positions(self.destinations, self.rows)
        # keep the last occurrence of each cell
        _, first_from_end = np.unique(flat[::-1], return_index=True)
        keep = len(flat) - 1 - first_from_end
        values.flat[flat[keep]] = self.values[keep]


def _read_square(rows) -> SquareTable:
    header_row, header = rows[0]
    destinations = [parse_zone(c, header_row) for c in header[1:]]
    _check_unique(destinations, [header_row] * len(destinations))

    origins, origin_rows = [], []
    grid = np.empty((len(rows) - 1, len(header) - 1), dtype=np.float64)
    for i, (number, cells) in enumerate(rows[1:]):
        origins.append(parse_zone(cells[0], number))
        origin_rows.append(number)
        grid[i] = [parse_value(c, number) for c in cells[1:]]
    _check_unique(origins, origin_rows)
    return SquareTable(destinations, header_row, origins, origin_rows, grid)


def _read_column(rows) -> ColumnTable:
    number, first = rows[0]
    if not (is_numeric(first[0]) and is_numeric(first[1])):
        log.debug("skipping header row %d: %s", number, first)
        rows = rows[1:]

    origins, destinations, values, numbers = [], [], [], []
    for number, cells in rows:
        origins.append(parse_zone(cells[0], number))
        destinations.append(parse_zone(cells[1], number))
        values.append(parse_value(cells[2], number))
        numbers.append(number)
    return ColumnTable(origins, destinations, np.array(values, dtype=np.float64), numbers)


def read_matrix_csv(csv_text: str, shape: Optional[Shape] = None):
    """Read CSV text into a SquareTable or ColumnTable, still keyed by zone id."""
    rows = csv_rows(csv_text)
    if not rows:
        raise UnrecognizedShapeError("no data rows")

    first_row, first = rows[0]
    width = len(first)
    if width < COLUMN_WIDTH:
        raise UnrecognizedShapeError(f"expected at least {COLUMN_WIDTH} columns, found {width}", first_row)
    for number, cells in rows[1:]:
        if len(cells) != width:
            raise UnrecognizedShapeError(f"expected {width} columns, found {len(cells)}", number)

    if shape is None:
        shape = Shape.COLUMN if width == COLUMN_WIDTH else Shape.SQUARE
    else:
        shape = Shape(shape)
    if shape is Shape.COLUMN and width != COLUMN_WIDTH:
        raise UnrecognizedShapeError(f"column format needs {COLUMN_WIDTH} columns, found {width}", first_row)
    log.debug("reading %s matrix CSV: %d rows, %d columns", shape.value, len(rows), width)

    if shape is Shape.SQUARE:
        return _read_square(rows)
    return _read_column(rows)


def build_matrix(table, zones) -> DenseMatrix:
    """Place the table's cells into a dense matrix ordered by zones; unset cells are 0.0."""
    matrix = DenseMatrix.zeros(zones)
    table.fill(matrix.values, zones)
    return matrix


def parse(csv_text: str, zones, shape: Optional[Shape] = None) -> DenseMatrix:
    return build_matrix(read_matrix_csv(csv_text, shape), zones)
