"""
Solver dispatch for descriptive statistics.

Provides describe() as the one-call entry point over the streaming
accumulators.
"""

from __future__ import annotations

import warnings
from typing import Iterable, Literal
import numpy as np
from numpy.typing import ArrayLike

from pymoments.core.exceptions import ValidationError
from pymoments.descriptive.design import DescriptiveDesign
from pymoments.descriptive.solution import DescriptiveSolution
from pymoments.descriptive.statistics import Statistic, parse_statistics
from pymoments.descriptive.backends.cpu import CPUDescriptiveBackend


BackendChoice = Literal['auto', 'cpu']

# PRODUCT, SUM_OF_LOGS and GEOMETRIC_MEAN are opt-in
DEFAULT_STATISTICS = frozenset(Statistic) - {
    Statistic.PRODUCT, Statistic.SUM_OF_LOGS, Statistic.GEOMETRIC_MEAN,
}


def _ensure_design(data: ArrayLike | DescriptiveDesign) -> DescriptiveDesign:
    """Convert raw array to DescriptiveDesign if needed."""
    if isinstance(data, DescriptiveDesign):
        return data
    return DescriptiveDesign.from_array(data)


def _get_backend(backend: BackendChoice):
    """Select backend based on preference."""
    if backend in ('auto', 'cpu'):
        return CPUDescriptiveBackend()

    raise ValidationError(f"Unknown backend: {backend!r}")


def describe(
    data: ArrayLike | DescriptiveDesign,
    *,
    statistics: Iterable[Statistic | str] | None = None,
    biased: bool = False,
    partitions: int = 1,
    backend: BackendChoice = 'auto',
) -> DescriptiveSolution:
    """
    Compute descriptive statistics for every column.

    Parameters
    ----------
    data : array-like or DescriptiveDesign
        1D or 2D data matrix (columns are variables). Integer data uses
        the exact integer accumulators.
    statistics : iterable of Statistic or str, optional
        Statistics to compute. Default: every statistic except PRODUCT,
        SUM_OF_LOGS and GEOMETRIC_MEAN.
    biased : bool
        If True, variance, sd, skewness and kurtosis are not bias corrected.
    partitions : int
        Number of contiguous row blocks computed separately and merged.
        Values above the number of rows are clamped with a warning.
    backend : str
        'auto' or 'cpu'.

    Returns
    -------
    DescriptiveSolution with the requested statistics populated.
    """
    design = _ensure_design(data)
    stats = DEFAULT_STATISTICS if statistics is None else parse_statistics(statistics)

    if isinstance(partitions, bool) or not isinstance(partitions, (int, np.integer)):
        raise ValidationError(
            f"partitions: expected an integer, got {type(partitions).__name__}"
        )
    if partitions < 1:
        raise ValidationError(f"partitions must be >= 1, got {partitions}")
    if partitions > design.n:
        warnings.warn(
            f"partitions={partitions} exceeds the number of rows ({design.n}); "
            f"using {design.n}",
            UserWarning,
            stacklevel=2,
        )
        partitions = design.n
    partitions = int(partitions)

    be = _get_backend(backend)

    result = be.solve(
        design,
        statistics=stats,
        biased=bool(biased),
        partitions=partitions,
    )

    return DescriptiveSolution(_result=result, _design=design)
