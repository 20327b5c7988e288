"""
csv_to_mtx/zones.py
Zone ordering: an explicit zones file, or zones inferred from the matrix CSV.
"""

import logging
from typing import Iterable, Optional, Sequence

import numpy as np

from csv_to_mtx.errors import DuplicateZoneError, UnknownZoneError, ZoneOrderMismatchError
from csv_to_mtx.parser import Shape, csv_rows, is_numeric, parse_zone, read_matrix_csv

log = logging.getLogger(__name__)


class ZoneSet:
    """Ordered unique zone ids; a zone's position is its matrix row and column."""

    def __init__(self, zones: Iterable[int] = ()):
        self._ids = []
        self._index = {}
        for zone in zones:
            zone = int(zone)
            if zone in self._index:
                raise DuplicateZoneError(zone)
            self._index[zone] = len(self._ids)
            self._ids.append(zone)

    @property
    def ids(self) -> Sequence[int]:
        return tuple(self._ids)

    def position(self, zone: int, row: Optional[int] = None) -> int:
        try:
            return self._index[zone]
        except KeyError:
            raise UnknownZoneError(zone, row) from None

    def positions(self, zones: Sequence[int], rows: Optional[Sequence[Optional[int]]] = None) -> np.ndarray:
        if rows is None:
            rows = [None] * len(zones)
        return np.array([self.position(z, r) for z, r in zip(zones, rows)], dtype=np.intp)

    def __len__(self):
        return len(self._ids)

    def __iter__(self):
        return iter(self._ids)

    def __contains__(self, zone):
        return zone in self._index

    def __eq__(self, other):
        if not isinstance(other, ZoneSet):
            return NotImplemented
        return self._ids == other._ids

    def __repr__(self):
        return f"ZoneSet({self._ids!r})"


def read_zones_csv(zones_csv: str) -> ZoneSet:
    """Zone ids from the first column, in file order. A non-numeric first row is a header."""
    rows = csv_rows(zones_csv)
    if rows:
        number, cells = rows[0]
        if not is_numeric(cells[0]):
            log.debug("skipping zones header row %d: %s", number, cells)
            rows = rows[1:]

    seen = set()
    zones = []
    for number, cells in rows:
        zone = parse_zone(cells[0], number)
        if zone in seen:
            raise DuplicateZoneError(zone, number)
        seen.add(zone)
        zones.append(zone)
    log.debug("read %d zones from zones file", len(zones))
    return ZoneSet(zones)


def infer_zones(table) -> ZoneSet:
    """Zone order implied by the matrix itself.

    Square input uses its header row, which must match the header column
    position for position. Column input has no ordering of its own, so the
    zones are sorted ascending.
    """
    if table.shape is Shape.SQUARE:
        for position in range(max(len(table.destinations), len(table.origins))):
            row_zone = table.destinations[position] if position < len(table.destinations) else None
            column_zone = table.origins[position] if position < len(table.origins) else None
            if row_zone != column_zone:
                raise ZoneOrderMismatchError(position, row_zone, column_zone)
        zones = ZoneSet(table.destinations)
    else:
        zones = ZoneSet(sorted(set(table.origins) | set(table.destinations)))
    log.debug("inferred %d zones from %s CSV", len(zones), table.shape.value)
    return zones


def resolve(zones_csv: Optional[str], matrix_csv: str, shape: Optional[Shape] = None) -> ZoneSet:
    if zones_csv is not None:
        return read_zones_csv(zones_csv)
    return infer_zones(read_matrix_csv(matrix_csv, shape))
