"""
csv_to_mtx/pipeline.py
CSV file (+ optional zones file) -> MTX file.
"""

import logging
from pathlib import Path

from csv_to_mtx.errors import InputEncodingError
from csv_to_mtx.matrix import DenseMatrix
from csv_to_mtx.parser import build_matrix, read_matrix_csv
from csv_to_mtx.writer import write_mtx
from csv_to_mtx.zones import infer_zones, read_zones_csv

log = logging.getLogger(__name__)


def read_text(path) -> str:
    try:
        return Path(path).read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as e:
        raise InputEncodingError(path, e.start, e.reason) from e


def convert(input_path, output_path, zones_path=None, shape=None) -> DenseMatrix:
    """Convert one CSV matrix. Errors propagate; nothing is written on failure."""
    zones = read_zones_csv(read_text(zones_path)) if zones_path is not None else None
    table = read_matrix_csv(read_text(input_path), shape)
    if zones is None:
        zones = infer_zones(table)
    matrix = build_matrix(table, zones)
    size = write_mtx(output_path, matrix)
    log.info("converted %s -> %s (%d zones, %d bytes)", input_path, output_path, len(zones), size)
    return matrix
