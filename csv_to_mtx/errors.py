"""
csv_to_mtx/errors.py
Exceptions raised while converting CSV matrices to and from MTX.
"""

from typing import Optional


class MatrixConversionError(ValueError):
    """Base class for every conversion failure."""


class DuplicateZoneError(MatrixConversionError):
    def __init__(self, zone: int, row: Optional[int] = None):
        self.zone = zone
        self.row = row
        where = f" (row {row})" if row is not None else ""
        super().__init__(f"duplicate zone {zone}{where}")


class ZoneOrderMismatchError(MatrixConversionError):
    """Header row and header column of a square CSV disagree."""

    def __init__(self, position: int, row_zone: Optional[int], column_zone: Optional[int]):
        self.position = position
        self.row_zone = row_zone
        self.column_zone = column_zone
        super().__init__(
            f"zone order mismatch at position {position}: "
            f"header row has {_describe(row_zone)}, header column has {_describe(column_zone)}"
        )


class UnrecognizedShapeError(MatrixConversionError):
    def __init__(self, message: str, row: Optional[int] = None):
        self.row = row
        if row is not None:
            message = f"row {row}: {message}"
        super().__init__(message)


class UnknownZoneError(MatrixConversionError):
    def __init__(self, zone: int, row: Optional[int] = None):
        self.zone = zone
        self.row = row
        where = f" (row {row})" if row is not None else ""
        super().__init__(f"zone {zone} is not in the zone list{where}")


class ValueParseError(MatrixConversionError):
    def __init__(self, row: int, text: str, expected: str = "number"):
        self.row = row
        self.text = text
        self.expected = expected
        super().__init__(f"row {row}: cannot parse {text!r} as {expected}")


class DimensionOverflowError(MatrixConversionError):
    def __init__(self, dimension: int, limit: int):
        self.dimension = dimension
        self.limit = limit
        super().__init__(f"matrix dimension {dimension} exceeds header limit {limit}")


class ZoneIdRangeError(MatrixConversionError):
    def __init__(self, zone: int):
        self.zone = zone
        super().__init__(f"zone {zone} does not fit an unsigned 32-bit id")


class TruncatedStreamError(MatrixConversionError):
    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"truncated stream: expected {expected} bytes, got {actual}")


class TrailingDataError(MatrixConversionError):
    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"{actual - expected} unexpected bytes after {expected}-byte matrix")


class InputEncodingError(MatrixConversionError):
    def __init__(self, path, offset: int, reason: str):
        self.path = path
        self.offset = offset
        super().__init__(f"{path}: not valid UTF-8 at byte {offset} ({reason})")


class CorruptStreamError(MatrixConversionError):
    """Compressed input that the transform cannot undo."""


def _describe(zone):
    return "nothing" if zone is None else f"zone {zone}"
