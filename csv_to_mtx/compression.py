"""
csv_to_mtx/compression.py
Byte-stream transforms applied to a whole encoded matrix.
"""

import zlib
from pathlib import Path

from csv_to_mtx.errors import CorruptStreamError

# zlib window bits that select gzip framing instead of a raw zlib header
GZIP_WBITS = 16 + zlib.MAX_WBITS


class Compression:
    """Identity transform. Subclasses override compress/decompress as a lossless pair."""

    name = "none"

    def compress(self, data: bytes) -> bytes:
        return data

    def decompress(self, data: bytes) -> bytes:
        return data

    def __repr__(self):
        return f"<{type(self).__name__} {self.name}>"


class GzipCompression(Compression):
    name = "gzip"

    def __init__(self, level: int = zlib.Z_DEFAULT_COMPRESSION):
        self.level = level

    def compress(self, data: bytes) -> bytes:
        co = zlib.compressobj(self.level, zlib.DEFLATED, GZIP_WBITS)
        return co.compress(data) + co.flush()

    def decompress(self, data: bytes) -> bytes:
        try:
            return zlib.decompress(data, GZIP_WBITS)
        except zlib.error as e:
            raise CorruptStreamError(f"cannot decompress gzip stream: {e}") from e


NO_COMPRESSION = Compression()
GZIP = GzipCompression()


def for_path(path) -> Compression:
    """.gz output is gzip-compressed, anything else is written as is."""
    if Path(path).name.lower().endswith(".gz"):
        return GZIP
    return NO_COMPRESSION
