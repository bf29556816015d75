"""
Sample quantiles and the median.

Quantile positions follow the nine definitions of Hyndman & Fan (1996),
the same definitions as R's quantile() types 1-9. Types 1-3 are
discontinuous; types 4-9 interpolate linearly between adjacent order
statistics. The default is HF8, which is approximately median-unbiased
regardless of the distribution.

Unlike the streaming statistics these need all of the data at once, so
they are evaluated on an array and cannot be merged with ``combine``.
The input is never modified.

Reference:
    Hyndman, R.J. and Fan, Y. (1996) "Sample Quantiles in Statistical
    Packages", The American Statistician, 50(4), 361-365.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pymoments.core.exceptions import ValidationError
from pymoments.core.validation import check_numeric, check_1d, check_from_to_index


class NaNPolicy(Enum):
    """Treatment of NaN in the input."""
    INCLUDE = 'include'   # NaN sorts above +inf
    EXCLUDE = 'exclude'   # NaN values are removed
    ERROR = 'error'       # NaN raises ValidationError


class EstimationMethod(Enum):
    """Hyndman & Fan quantile definitions; the value is the R type."""
    HF1 = 1
    HF2 = 2
    HF3 = 3
    HF4 = 4
    HF5 = 5
    HF6 = 6
    HF7 = 7
    HF8 = 8
    HF9 = 9

    @classmethod
    def parse(cls, value: EstimationMethod | int | str) -> EstimationMethod:
        """
        Resolve a method from a member, its R type (1-9) or its name ('HF7').

        Raises:
            ValidationError: If the method is unknown
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, (int, np.integer)) and not isinstance(value, bool):
            if 1 <= value <= 9:
                return cls(int(value))
        elif isinstance(value, str) and value.strip().upper() in cls.__members__:
            return cls[value.strip().upper()]
        raise ValidationError(f"Unknown estimation method: {value!r}")

    def position(self, p: float, n: int) -> float:
        """Zero-based position of the p-th quantile of n sorted values."""
        pos = _POSITIONS[self](p, n)
        if pos < 0:
            return 0.0
        if pos > n - 1:
            return float(n - 1)
        return pos


def _hf2(p: float, n: int) -> float:
    # Average of the two order statistics at a discontinuity
    pos = n * p
    j = math.floor(pos)
    return j - 0.5 if pos == j else float(j)


_POSITIONS: dict[EstimationMethod, Callable[[float, int], float]] = {
    EstimationMethod.HF1: lambda p, n: math.ceil(n * p) - 1.0,
    EstimationMethod.HF2: _hf2,
    # round() is round-half-even
    EstimationMethod.HF3: lambda p, n: round(n * p) - 1.0,
    EstimationMethod.HF4: lambda p, n: n * p - 1,
    EstimationMethod.HF5: lambda p, n: n * p - 0.5,
    EstimationMethod.HF6: lambda p, n: (n + 1) * p - 1,
    EstimationMethod.HF7: lambda p, n: (n - 1) * p,
    EstimationMethod.HF8: lambda p, n: n * p + (p + 1) / 3 - 1,
    EstimationMethod.HF9: lambda p, n: (n + 0.25) * p - 0.625,
}


def _interpolate(a: float, b: float, t: float) -> float:
    """Linear interpolation between sorted a <= b for t in (0, 1)."""
    if a <= 0 and b >= 0:
        return t * b + (1.0 - t) * a
    if a == b:
        # Also handles infinities of the same sign
        return a
    return a + t * (b - a)


def _mean(a: Any, b: Any) -> float:
    if isinstance(a, np.integer) and isinstance(b, np.integer):
        return (int(a) + int(b)) / 2
    a = float(a)
    b = float(b)
    v = a + b
    if math.isfinite(v):
        return v * 0.5
    return a * 0.5 + b * 0.5


def _check_probability(p: float) -> float:
    if not (0 <= p <= 1):
        raise ValidationError(f"Invalid probability: {p}")
    return float(p)


def _check_probabilities(p: ArrayLike) -> NDArray[np.floating[Any]]:
    try:
        probs = np.atleast_1d(np.asarray(p, dtype=np.float64))
    except (ValueError, TypeError) as e:
        raise ValidationError(f"p: cannot convert to probabilities: {e}") from e
    if probs.ndim != 1:
        raise ValidationError(f"p: expected a scalar or 1D probabilities, got {probs.ndim}D")
    if probs.shape[0] == 0:
        raise ValidationError("No probabilities specified")
    for v in probs.tolist():
        _check_probability(v)
    return probs


def _prepare(values: ArrayLike, nan_policy: NaNPolicy, name: str = 'values') -> NDArray[Any]:
    x = check_numeric(values, name)
    check_1d(x, name)
    if not np.issubdtype(x.dtype, np.floating):
        return x
    x = x.astype(np.float64, copy=False)
    if nan_policy is NaNPolicy.INCLUDE:
        return x
    nan = np.isnan(x)
    if not nan.any():
        return x
    if nan_policy is NaNPolicy.EXCLUDE:
        return x[~nan]
    raise ValidationError(f"{name}: NaN at index {int(np.flatnonzero(nan)[0])}")


def _read(xs: NDArray[Any], positions: list[float]) -> NDArray[np.floating[Any]]:
    # xs holds the order statistics at every position needed
    out = np.empty(len(positions), dtype=np.float64)
    for k, pos in enumerate(positions):
        i = int(pos)
        if pos > i:
            out[k] = _interpolate(float(xs[i]), float(xs[i + 1]), pos - i)
        else:
            out[k] = xs[i]
    return out


@dataclass(frozen=True)
class Quantile:
    """
    Quantile of a sample.

    Immutable; ``with_method`` and ``with_nan_policy`` return copies.

        Quantile.with_defaults().evaluate(x, 0.9)
        Quantile().with_method(7).evaluate(x, [0.25, 0.5, 0.75])

    Empty input gives NaN and a single value gives that value for every p.

    Attributes:
        method: Position definition (default HF8)
        nan_policy: NaN handling (default INCLUDE)
    """
    method: EstimationMethod = EstimationMethod.HF8
    nan_policy: NaNPolicy = NaNPolicy.INCLUDE

    def __post_init__(self):
        object.__setattr__(self, 'method', EstimationMethod.parse(self.method))
        if not isinstance(self.nan_policy, NaNPolicy):
            raise ValidationError(
                f"nan_policy: expected NaNPolicy, got {self.nan_policy!r}"
            )

    @classmethod
    def with_defaults(cls) -> Quantile:
        return _DEFAULT_QUANTILE

    def with_method(self, v: EstimationMethod | int | str) -> Quantile:
        return replace(self, method=v)

    def with_nan_policy(self, v: NaNPolicy) -> Quantile:
        return replace(self, nan_policy=v)

    def evaluate(self, values: ArrayLike, p: float | ArrayLike) -> float | NDArray[np.floating[Any]]:
        """
        Quantile(s) of ``values``.

        Returns a float for a scalar ``p`` and an array for a sequence.

        Raises:
            ValidationError: If a probability is not in [0, 1], the values
                are not numeric, or NaN is present under NaNPolicy.ERROR
        """
        probs = _check_probabilities(p)
        q = self._compute(_prepare(values, self.nan_policy), probs)
        return float(q[0]) if np.ndim(p) == 0 else q

    def evaluate_range(
        self,
        values: ArrayLike,
        from_index: int,
        to_index: int,
        p: float | ArrayLike,
    ) -> float | NDArray[np.floating[Any]]:
        """
        Quantile(s) of ``values[from_index:to_index]``.

        Raises:
            IndexBoundsError: If the range is not within the array
        """
        probs = _check_probabilities(p)
        x = check_numeric(values, 'values')
        check_1d(x, 'values')
        check_from_to_index(from_index, to_index, x.shape[0])
        q = self._compute(_prepare(x[from_index:to_index], self.nan_policy), probs)
        return float(q[0]) if np.ndim(p) == 0 else q

    def evaluate_sorted(
        self,
        sorted_values: ArrayLike,
        p: float | ArrayLike,
    ) -> float | NDArray[np.floating[Any]]:
        """
        Quantile(s) of values already sorted in ascending order.

        No selection is done and the NaN policy is not applied.
        """
        probs = _check_probabilities(p)
        x = check_numeric(sorted_values, 'sorted_values')
        check_1d(x, 'sorted_values')
        n = x.shape[0]
        if n <= 1:
            q = np.full(probs.shape[0], float(x[0]) if n else math.nan)
        else:
            q = _read(x, [self.method.position(v, n) for v in probs.tolist()])
        return float(q[0]) if np.ndim(p) == 0 else q

    def _compute(self, x: NDArray[Any], probs: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
        n = x.shape[0]
        if n <= 1:
            return np.full(probs.shape[0], float(x[0]) if n else math.nan)
        positions = [self.method.position(v, n) for v in probs.tolist()]
        kth = set()
        for pos in positions:
            i = int(pos)
            kth.add(i)
            if pos > i:
                kth.add(i + 1)
        # Partial sort; NaN is placed after every other value
        xs = np.partition(x, sorted(kth))
        return _read(xs, positions)

    @staticmethod
    def probabilities(n: int, p1: float = 0.0, p2: float = 1.0) -> NDArray[np.floating[Any]]:
        """
        ``n`` evenly spaced probabilities strictly inside [p1, p2].

        With the defaults these are i / (n + 1) for i = 1..n.

        Raises:
            ValidationError: If n < 1 or the range is not valid
        """
        if isinstance(n, bool) or not isinstance(n, (int, np.integer)) or n < 1:
            raise ValidationError(f"Invalid number of probabilities: {n}")
        _check_probability(p1)
        _check_probability(p2)
        if p2 <= p1:
            raise ValidationError(f"Invalid range: [{p1}, {p2}]")
        p = np.arange(1, n + 1) / (n + 1.0)
        if p1 == 0.0 and p2 == 1.0:
            return p
        return (1 - p) * p1 + p * p2


_DEFAULT_QUANTILE = Quantile()


@dataclass(frozen=True)
class Median:
    """
    Median of a sample: the middle order statistic, or the mean of the
    two middle values when the count is even. NaN when empty.

    Integer input is averaged exactly before rounding to a float.
    """
    nan_policy: NaNPolicy = NaNPolicy.INCLUDE

    def __post_init__(self):
        if not isinstance(self.nan_policy, NaNPolicy):
            raise ValidationError(
                f"nan_policy: expected NaNPolicy, got {self.nan_policy!r}"
            )

    @classmethod
    def with_defaults(cls) -> Median:
        return _DEFAULT_MEDIAN

    def with_nan_policy(self, v: NaNPolicy) -> Median:
        return replace(self, nan_policy=v)

    def evaluate(self, values: ArrayLike) -> float:
        return self._compute(_prepare(values, self.nan_policy))

    def evaluate_range(self, values: ArrayLike, from_index: int, to_index: int) -> float:
        x = check_numeric(values, 'values')
        check_1d(x, 'values')
        check_from_to_index(from_index, to_index, x.shape[0])
        return self._compute(_prepare(x[from_index:to_index], self.nan_policy))

    @staticmethod
    def _compute(x: NDArray[Any]) -> float:
        n = x.shape[0]
        if n == 0:
            return math.nan
        if n == 1:
            return float(x[0])
        m = n >> 1
        if n & 1:
            return float(np.partition(x, m)[m])
        xs = np.partition(x, [m - 1, m])
        return _mean(xs[m - 1], xs[m])


_DEFAULT_MEDIAN = Median()
