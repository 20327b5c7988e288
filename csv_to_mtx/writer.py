#!/usr/bin/env python3
"""
csv_to_mtx/writer.py
Encoder for MTX matrices.

Layout (little-endian):
    u32          n, number of zones
    u32[n]       zone ids, row/column order
    f32[n*n]     values, row-major
The whole sequence is passed through the compression transform, if any.
"""

import logging
import os
import struct
from pathlib import Path

import numpy as np

from csv_to_mtx.compression import NO_COMPRESSION, for_path
from csv_to_mtx.errors import DimensionOverflowError, ZoneIdRangeError
from csv_to_mtx.matrix import DenseMatrix

log = logging.getLogger(__name__)

MAX_DIMENSION = 0xFFFFFFFF
MAX_ZONE_ID = 0xFFFFFFFF

ZONE_DTYPE = np.dtype("<u4")
VALUE_DTYPE = np.dtype("<f4")


def pack_u32(v): return struct.pack("<I", v)


def encode(matrix: DenseMatrix, compression=NO_COMPRESSION) -> bytes:
    n = matrix.dimension
    if n > MAX_DIMENSION:
        raise DimensionOverflowError(n, MAX_DIMENSION)
    for zone in matrix.zones:
        if not 0 <= zone <= MAX_ZONE_ID:
            raise ZoneIdRangeError(zone)

    ba = bytearray()
    ba += pack_u32(n)
    ba += np.asarray(matrix.zones.ids, dtype=ZONE_DTYPE).tobytes()
    ba += np.ascontiguousarray(matrix.values, dtype=VALUE_DTYPE).tobytes()
    data = compression.compress(bytes(ba))
    log.debug("encoded %d zones into %d bytes (%s)", n, len(data), compression.name)
    return data


def write_mtx(path, matrix: DenseMatrix, compression=None) -> int:
    """Write matrix to path; compression follows the extension unless given.

    The bytes go to a sibling ``.part`` file that is renamed into place, so a
    failed write never leaves a truncated MTX behind. Returns the bytes written.
    """
    path = Path(path)
    if compression is None:
        compression = for_path(path)
    data = encode(matrix, compression)

    part = path.with_name(path.name + ".part")
    try:
        with part.open("wb") as fh:
            fh.write(data)
        os.replace(part, path)
    except BaseException:
        if part.exists():
            part.unlink()
        raise
    log.debug("wrote %s", path)
    return len(data)
