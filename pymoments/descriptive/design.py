"""
DescriptiveDesign: data wrapper for the describe() pipeline.

Wraps a data matrix and records whether the exact integer accumulators
or the floating-point accumulators apply.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray

from pymoments.core.exceptions import ValidationError, DimensionError
from pymoments.core.validation import check_numeric, check_long_array


@dataclass(frozen=True)
class DescriptiveDesign:
    """
    Design for descriptive statistics.

    Wraps a data matrix (n observations x p variables). Integer data is
    held as int64 and routed to the exact accumulators; any other numeric
    data is held as float64. Immutable after construction.

    Construction:
        DescriptiveDesign.from_array(data)
    """
    _data: NDArray[Any]
    _n: int
    _p: int
    _columns: tuple[str, ...] | None
    _exact: bool

    @classmethod
    def from_array(cls, data) -> DescriptiveDesign:
        """
        Build DescriptiveDesign from array-like data.

        Parameters
        ----------
        data : array-like
            1D or 2D data matrix. Objects with ``.values`` and ``.columns``
            (e.g. a pandas DataFrame) keep their column names. 1D input is
            reshaped to (n, 1).
        """
        if hasattr(data, 'values') and not isinstance(data, np.ndarray):
            columns = tuple(str(c) for c in data.columns) if hasattr(data, 'columns') else None
            data = data.values
        else:
            columns = None

        data_array = check_numeric(data, 'data')

        if data_array.ndim == 1:
            data_array = data_array.reshape(-1, 1)

        return cls._build(data_array, columns=columns)

    @classmethod
    def _build(
        cls,
        data: NDArray,
        columns: tuple[str, ...] | None = None,
    ) -> DescriptiveDesign:
        """Internal builder with validation."""
        if data.ndim != 2:
            raise DimensionError(
                f"Data must be 2D (observations x variables), got {data.ndim}D"
            )

        n, p = data.shape

        if n < 1:
            raise ValidationError(f"Need at least 1 observation, got {n}")

        if p < 1:
            raise ValidationError(f"Need at least 1 variable, got {p}")

        if columns is not None and len(columns) != p:
            raise ValidationError(
                f"columns: got {len(columns)} names for {p} variables"
            )

        exact = bool(np.issubdtype(data.dtype, np.integer))
        if exact:
            data = check_long_array(data, 'data')
        else:
            data = data.astype(np.float64, copy=False)

        return cls(_data=data, _n=n, _p=p, _columns=columns, _exact=exact)

    @property
    def data(self) -> NDArray[Any]:
        """Data matrix (n x p), int64 or float64."""
        return self._data

    @property
    def n(self) -> int:
        """Number of observations."""
        return self._n

    @property
    def p(self) -> int:
        """Number of variables."""
        return self._p

    @property
    def columns(self) -> tuple[str, ...] | None:
        """Column names, or None if not available."""
        return self._columns

    @property
    def exact(self) -> bool:
        """Whether the data are integers handled by the exact accumulators."""
        return self._exact

    def column(self, j: int) -> NDArray[Any]:
        """Contiguous copy of column j."""
        return np.ascontiguousarray(self._data[:, j])

    def __repr__(self) -> str:
        kind = "int64" if self._exact else "float64"
        return f"DescriptiveDesign(n={self._n}, p={self._p}, dtype={kind})"
