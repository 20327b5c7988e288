#!/usr/bin/env python3
"""
csv_to_mtx/reader.py
Decoder for MTX matrices (see writer.py for the layout). Provides decode(),
read_mtx() and MtxReader.
"""

import logging
import struct
from pathlib import Path

import numpy as np

from csv_to_mtx.compression import NO_COMPRESSION, for_path
from csv_to_mtx.errors import TrailingDataError, TruncatedStreamError
from csv_to_mtx.matrix import DenseMatrix
from csv_to_mtx.writer import VALUE_DTYPE, ZONE_DTYPE
from csv_to_mtx.zones import ZoneSet

log = logging.getLogger(__name__)

HEADER_SIZE = 4


def read_u32(b, offset): return struct.unpack_from("<I", b, offset)[0], offset+4


def expected_size(n: int) -> int:
    return HEADER_SIZE + ZONE_DTYPE.itemsize * n + VALUE_DTYPE.itemsize * n * n


def _split(data: bytes):
    """Validate an uncompressed stream and return (n, zone ids, values)."""
    if len(data) < HEADER_SIZE:
        raise TruncatedStreamError(HEADER_SIZE, len(data))
    n, offset = read_u32(data, 0)
    expected = expected_size(n)
    if len(data) < expected:
        raise TruncatedStreamError(expected, len(data))
    if len(data) > expected:
        raise TrailingDataError(expected, len(data))

    zones = np.frombuffer(data, dtype=ZONE_DTYPE, count=n, offset=offset)
    offset += ZONE_DTYPE.itemsize * n
    values = np.frombuffer(data, dtype=VALUE_DTYPE, count=n * n, offset=offset).reshape(n, n)
    return n, zones, values


def decode(data: bytes, compression=NO_COMPRESSION) -> DenseMatrix:
    _, zones, values = _split(compression.decompress(bytes(data)))
    return DenseMatrix(ZoneSet(zones.tolist()), values)


class MtxReader:
    def __init__(self, path, compression=None):
        self.path = Path(path)
        self.compression = for_path(self.path) if compression is None else compression
        self.dimension = 0
        self.zones = ZoneSet()
        self._data = b""
        self._parse_header()

    def _parse_header(self):
        with open(self.path, "rb") as fh:
            raw = fh.read()
        self._data = self.compression.decompress(raw)
        self.dimension, zones, _ = _split(self._data)
        self.zones = ZoneSet(zones.tolist())
        log.debug("%s: %d zones, %d bytes (%s)", self.path, self.dimension, len(raw), self.compression.name)

    def read_matrix(self) -> DenseMatrix:
        _, _, values = _split(self._data)
        return DenseMatrix(self.zones, values)


def read_mtx(path, compression=None) -> DenseMatrix:
    return MtxReader(path, compression).read_matrix()
