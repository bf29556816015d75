"""
Descriptive statistics solution types.

Contains the parameter payload and user-facing solution wrapper.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import NDArray

from pymoments.core.result import Result

if TYPE_CHECKING:
    from pymoments.descriptive.design import DescriptiveDesign


@dataclass(frozen=True)
class DescriptiveParams:
    """
    Parameter payload for descriptive statistics.

    Per-column arrays of shape (p,). A field is None when the statistic
    was not requested.
    """
    count: int
    min: NDArray[np.floating[Any]] | None = None
    max: NDArray[np.floating[Any]] | None = None
    sum: NDArray[np.floating[Any]] | None = None
    mean: NDArray[np.floating[Any]] | None = None
    sum_of_squares: NDArray[np.floating[Any]] | None = None
    variance: NDArray[np.floating[Any]] | None = None
    sd: NDArray[np.floating[Any]] | None = None
    skewness: NDArray[np.floating[Any]] | None = None
    kurtosis: NDArray[np.floating[Any]] | None = None
    product: NDArray[np.floating[Any]] | None = None
    sum_of_logs: NDArray[np.floating[Any]] | None = None
    geometric_mean: NDArray[np.floating[Any]] | None = None

    # Exact integer results (integer data only): Python ints, one per column
    exact_sum: tuple[int, ...] | None = None
    exact_sum_of_squares: tuple[int, ...] | None = None


# Field order used by summary() and __repr__
_FIELDS = (
    ('min', 'min'),
    ('max', 'max'),
    ('sum', 'sum'),
    ('mean', 'mean'),
    ('sum_of_squares', 'sumsq'),
    ('variance', 'var'),
    ('sd', 'sd'),
    ('skewness', 'skew'),
    ('kurtosis', 'kurt'),
    ('product', 'prod'),
    ('sum_of_logs', 'sumlog'),
    ('geometric_mean', 'gmean'),
)


@dataclass
class DescriptiveSolution:
    """
    User-facing descriptive statistics results.

    Wraps Result[DescriptiveParams] and provides convenient accessors.
    """
    _result: Result[DescriptiveParams]
    _design: 'DescriptiveDesign'

    @property
    def count(self) -> int:
        """Number of observations per column."""
        return self._result.params.count

    @property
    def min(self) -> NDArray[np.floating[Any]] | None:
        return self._result.params.min

    @property
    def max(self) -> NDArray[np.floating[Any]] | None:
        return self._result.params.max

    @property
    def sum(self) -> NDArray[np.floating[Any]] | None:
        return self._result.params.sum

    @property
    def mean(self) -> NDArray[np.floating[Any]] | None:
        """Per-column means, shape (p,)."""
        return self._result.params.mean

    @property
    def sum_of_squares(self) -> NDArray[np.floating[Any]] | None:
        return self._result.params.sum_of_squares

    @property
    def variance(self) -> NDArray[np.floating[Any]] | None:
        """Per-column variance (n - 1 unless biased), shape (p,)."""
        return self._result.params.variance

    @property
    def sd(self) -> NDArray[np.floating[Any]] | None:
        """Per-column standard deviation, shape (p,)."""
        return self._result.params.sd

    @property
    def skewness(self) -> NDArray[np.floating[Any]] | None:
        """Per-column skewness, shape (p,). NaN for constant columns."""
        return self._result.params.skewness

    @property
    def kurtosis(self) -> NDArray[np.floating[Any]] | None:
        """Per-column excess kurtosis, shape (p,). NaN for constant columns."""
        return self._result.params.kurtosis

    @property
    def product(self) -> NDArray[np.floating[Any]] | None:
        return self._result.params.product

    @property
    def sum_of_logs(self) -> NDArray[np.floating[Any]] | None:
        return self._result.params.sum_of_logs

    @property
    def geometric_mean(self) -> NDArray[np.floating[Any]] | None:
        """Per-column geometric mean, shape (p,). NaN if a column has negative values."""
        return self._result.params.geometric_mean

    @property
    def exact_sum(self) -> tuple[int, ...] | None:
        """Exact per-column sums for integer data, else None."""
        return self._result.params.exact_sum

    @property
    def exact_sum_of_squares(self) -> tuple[int, ...] | None:
        """Exact per-column sums of squares for integer data, else None."""
        return self._result.params.exact_sum_of_squares

    # --- Metadata ---

    @property
    def columns(self) -> tuple[str, ...] | None:
        """Column names from the design."""
        return self._design.columns

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def summary(self) -> str:
        """Per-column table of the computed statistics."""
        params = self._result.params
        p = self._design.p
        cols = self.columns or tuple(f"V{i+1}" for i in range(p))
        rows = [(label, getattr(params, f)) for f, label in _FIELDS
                if getattr(params, f) is not None]

        lines = [f"Descriptive Statistics (n={params.count}):"]
        if not rows:
            return lines[0]

        col_widths = []
        for j in range(p):
            width = max(
                len(cols[j]),
                max(len(f"{values[j]:.6f}") for _, values in rows)
            )
            col_widths.append(width)

        label_width = max(len(label) for label, _ in rows)

        header = " " * (label_width + 2)
        header += "  ".join(c.rjust(w) for c, w in zip(cols, col_widths))
        lines.append(header)

        for label, values in rows:
            row = label.ljust(label_width) + "  "
            row += "  ".join(
                f"{values[j]:.6f}".rjust(w) for j, w in enumerate(col_widths)
            )
            lines.append(row)

        for w in self.warnings:
            lines.append(f"Warning: {w}")

        return "\n".join(lines)

    def __repr__(self) -> str:
        params = self._result.params
        computed = [label for f, label in _FIELDS if getattr(params, f) is not None]
        stats_str = ", ".join(computed) if computed else "none"
        return (
            f"DescriptiveSolution(n={self._design.n}, p={self._design.p}, "
            f"computed=[{stats_str}])"
        )
