"""
csv_to_mtx/matrix.py
Dense origin/destination matrix bound to a zone ordering.
"""

import numpy as np

VALUE_TYPE = np.float32


class DenseMatrix:
    """n x n float32 values; row i / column j is the zone at position i / j."""

    def __init__(self, zones, values=None):
        n = len(zones)
        self.zones = zones
        if values is None:
            self.values = np.zeros((n, n), dtype=VALUE_TYPE)
        else:
            self.values = np.array(values, dtype=VALUE_TYPE)
            if self.values.shape != (n, n):
                raise ValueError(f"values have shape {self.values.shape}, expected {(n, n)}")

    @classmethod
    def zeros(cls, zones) -> "DenseMatrix":
        return cls(zones)

    @property
    def dimension(self) -> int:
        return len(self.zones)

    def value(self, origin: int, destination: int) -> float:
        return float(self.values[self.zones.position(origin), self.zones.position(destination)])

    def __eq__(self, other):
        if not isinstance(other, DenseMatrix):
            return NotImplemented
        return self.zones == other.zones and np.array_equal(self.values, other.values, equal_nan=True)

    def __repr__(self):
        return f"DenseMatrix(zones={len(self.zones)}, total={float(self.values.sum()):g})"
