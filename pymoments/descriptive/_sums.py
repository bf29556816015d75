"""
Compensated floating-point summation.

Neumaier's variant of Kahan summation: the rounding error of every addition
is carried in a separate compensation term. Two partial sums merge by adding
both the sum and the compensation, so a parallel fold keeps the error bound
of a sequential pass.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray


class CompensatedSum:
    """Running sum with a rounding-error compensation term."""

    __slots__ = ('_sum', '_c')

    def __init__(self, s: float = 0.0, c: float = 0.0):
        self._sum = s
        self._c = c

    @classmethod
    def of_array(cls, x: NDArray[np.float64]) -> CompensatedSum:
        """
        Sum of an array.

        Finite data is summed exactly and rounded once (math.fsum). Data
        with infinities, NaN or an overflowing sum falls back to the numpy
        sum, which carries the IEEE result.
        """
        if x.shape[0] == 0:
            return cls()
        with np.errstate(over='ignore', invalid='ignore'):
            s = float(np.sum(x))
        if math.isfinite(s):
            try:
                s = math.fsum(x.tolist())
            except OverflowError:
                # Partial sums overflow; keep the numpy result
                pass
        return cls(s)

    def add(self, x: float) -> None:
        s = self._sum
        t = s + x
        if abs(s) >= abs(x):
            self._c += (s - t) + x
        else:
            self._c += (x - t) + s
        self._sum = t

    def add_sum(self, other: CompensatedSum) -> None:
        # Read both terms first so that other may be self
        s, c = other._sum, other._c
        self.add(s)
        self._c += c

    def get(self) -> float:
        s = self._sum
        if not math.isfinite(s):
            # Overflow or non-finite input; the compensation is meaningless
            return s
        return s + self._c
