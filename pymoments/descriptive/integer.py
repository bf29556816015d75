"""
Exact streaming statistics over 64-bit integer values.

Sums and sums of squares are accumulated without rounding in fixed-width
integers (Int128, UInt192) sized for up to 2^63 values. A floating-point
result is produced only when it is read, with a single final rounding
for the sum and mean and at most a few roundings for the variance.

The integer statistics share the life cycle of the floating-point ones
(``create`` / ``of`` / ``of_range`` / ``accept`` / ``combine``) and add
exact reads: ``get_as_big_integer`` always succeeds, while
``get_as_long`` and ``get_as_int`` raise ArithmeticOverflowError when the
exact value does not fit.
"""

from __future__ import annotations

import math

from numpy.typing import ArrayLike

from pymoments.core.validation import (
    check_long, check_long_array, check_1d, check_from_to_index,
    LONG_MIN, LONG_MAX,
)
from pymoments.descriptive._wide import Int128, UInt192


def as_long_values(values: ArrayLike, name: str = 'values') -> list[int]:
    """Validate a 1D integer input and return it as Python ints."""
    x = check_long_array(values, name)
    check_1d(x, name)
    return x.tolist()


def compute_mean(s: Int128, n: int) -> float:
    """Exact sum divided by the count, rounded once. NaN when n = 0."""
    if n == 0:
        return math.nan
    # int / int is correctly rounded
    return s.to_big_integer() / n


def compute_variance(sum_sq: UInt192, s: Int128, n: int, biased: bool) -> float:
    """
    Variance from the exact sum and sum of squares.

    The precursor ``n * sum(x^2) - sum(x)^2`` is computed exactly, then
    divided once in double precision by ``n * (n - 1)`` (or ``n * n``).

    n = 0 gives NaN; n = 1 gives NaN (unbiased) or 0 (biased).
    """
    if n == 0:
        return math.nan
    if n == 1:
        return 0.0 if biased else math.nan
    if (n >> 32) == 0 and s.fits_long():
        # n * sum_sq and sum^2 fit the fixed widths
        diff = sum_sq.unsigned_multiply(n).subtract(s.square_low()).to_double()
    else:
        t = s.to_big_integer()
        diff = float(sum_sq.to_big_integer() * n - t * t)
    return diff / float(n * (n if biased else n - 1))


class _LongStatistic:
    """
    Shared construction for the integer statistics.

    Subclasses implement ``_build(values)`` which loads a list of Python
    ints (already range checked) into a new instance.
    """

    @classmethod
    def create(cls):
        """Create an empty instance."""
        return cls._build([])

    @classmethod
    def of(cls, values: ArrayLike):
        """
        Create an instance from all of ``values``.

        Raises:
            ValidationError: If values are not integers in the long range
            DimensionError: If values are not 1D
        """
        return cls._build(as_long_values(values))

    @classmethod
    def of_range(cls, values: ArrayLike, from_index: int, to_index: int):
        """
        Create an instance from ``values[from_index:to_index]``.

        Raises:
            IndexBoundsError: If the range is not within the array
        """
        x = check_long_array(values, 'values')
        check_1d(x, 'values')
        check_from_to_index(from_index, to_index, x.shape[0])
        return cls._build(x[from_index:to_index].tolist())

    @classmethod
    def _build(cls, x: list[int]):
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.get_as_double()!r})"


class LongSum(_LongStatistic):
    """Exact sum of long values."""

    def __init__(self, s: Int128):
        self._s = s

    @classmethod
    def _build(cls, x):
        s = Int128.create()
        for v in x:
            s.add_long(v)
        return cls(s)

    def accept(self, value: int) -> None:
        self._s.add(value)

    def combine(self, other: LongSum) -> LongSum:
        self._s.add(other._s)
        return self

    def get_as_double(self) -> float:
        return self._s.to_double()

    def get_as_long(self) -> int:
        return self._s.to_long_exact()

    def get_as_int(self) -> int:
        return self._s.to_int_exact()

    def get_as_big_integer(self) -> int:
        return self._s.to_big_integer()


class LongSumOfSquares(_LongStatistic):
    """
    Exact sum of squared long values.

    The sum is unsigned and can reach ~2^189; ``get_as_long`` raises
    ArithmeticOverflowError once it is 2^63 or more.
    """

    def __init__(self, ss: UInt192):
        self._ss = ss

    @classmethod
    def _build(cls, x):
        ss = UInt192.create()
        for v in x:
            ss.add_square_long(v)
        return cls(ss)

    def accept(self, value: int) -> None:
        self._ss.add_square(value)

    def combine(self, other: LongSumOfSquares) -> LongSumOfSquares:
        self._ss.add(other._ss)
        return self

    def get_as_double(self) -> float:
        return self._ss.to_double()

    def get_as_long(self) -> int:
        return self._ss.to_long_exact()

    def get_as_int(self) -> int:
        return self._ss.to_int_exact()

    def get_as_big_integer(self) -> int:
        return self._ss.to_big_integer()


class LongMean(_LongStatistic):
    """Mean of long values from the exact sum. NaN when empty."""

    def __init__(self, s: Int128, n: int):
        self._s = s
        self._n = n

    @classmethod
    def _build(cls, x):
        s = Int128.create()
        for v in x:
            s.add_long(v)
        return cls(s, len(x))

    def accept(self, value: int) -> None:
        self._s.add(value)
        self._n += 1

    def combine(self, other: LongMean) -> LongMean:
        self._s.add(other._s)
        self._n += other._n
        return self

    def get_as_double(self) -> float:
        return compute_mean(self._s, self._n)


class LongVariance(_LongStatistic):
    """
    Variance of long values.

    The result has at most a few ULP of error regardless of the magnitude
    of the values, since the sum of squared deviations is formed exactly.
    """

    def __init__(self, sum_sq: UInt192, s: Int128, n: int):
        self._sum_sq = sum_sq
        self._s = s
        self._n = n
        self._biased = False

    @classmethod
    def _build(cls, x):
        s = Int128.create()
        ss = UInt192.create()
        for v in x:
            s.add_long(v)
            ss.add_square_long(v)
        return cls(ss, s, len(x))

    def accept(self, value: int) -> None:
        value = check_long(value, 'value')
        self._sum_sq.add_square_long(value)
        self._s.add_long(value)
        self._n += 1

    def combine(self, other: LongVariance) -> LongVariance:
        self._sum_sq.add(other._sum_sq)
        self._s.add(other._s)
        self._n += other._n
        return self

    def set_biased(self, v: bool) -> LongVariance:
        """Set the bias correction and return this instance."""
        self._biased = bool(v)
        return self

    @property
    def biased(self) -> bool:
        return self._biased

    def get_as_double(self) -> float:
        return compute_variance(self._sum_sq, self._s, self._n, self._biased)


class LongStandardDeviation(LongVariance):
    """Square root of the exact-precursor variance."""

    def get_as_double(self) -> float:
        return math.sqrt(super().get_as_double())


class LongMin(_LongStatistic):
    """Minimum long value. ``LONG_MAX`` when empty."""

    def __init__(self, v: int):
        self._v = v

    @classmethod
    def _build(cls, x):
        return cls(min(x) if x else LONG_MAX)

    def accept(self, value: int) -> None:
        value = check_long(value, 'value')
        if value < self._v:
            self._v = value

    def combine(self, other: LongMin) -> LongMin:
        if other._v < self._v:
            self._v = other._v
        return self

    def get_as_double(self) -> float:
        return float(self._v)

    def get_as_long(self) -> int:
        return self._v


class LongMax(_LongStatistic):
    """Maximum long value. ``LONG_MIN`` when empty."""

    def __init__(self, v: int):
        self._v = v

    @classmethod
    def _build(cls, x):
        return cls(max(x) if x else LONG_MIN)

    def accept(self, value: int) -> None:
        value = check_long(value, 'value')
        if value > self._v:
            self._v = value

    def combine(self, other: LongMax) -> LongMax:
        if other._v > self._v:
            self._v = other._v
        return self

    def get_as_double(self) -> float:
        return float(self._v)

    def get_as_long(self) -> int:
        return self._v
