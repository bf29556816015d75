"""
CPU backend for descriptive statistics.

Computes every column with a partitioned fold: the rows are split into
contiguous blocks, one combined accumulator is built per block, and the
partial accumulators are merged left to right with ``combine``. With a
single partition this is the plain two-pass computation.
"""

from __future__ import annotations

from functools import reduce
import numpy as np
from numpy.typing import NDArray

from pymoments.core.result import Result
from pymoments.core.compute.timing import Timer
from pymoments.descriptive.design import DescriptiveDesign
from pymoments.descriptive.solution import DescriptiveParams
from pymoments.descriptive.statistics import (
    Statistic, StatisticsConfiguration, DoubleStatistics, LongStatistics,
)
from pymoments.descriptive._moments import zero_variance


# DescriptiveParams field for each statistic
_PARAM_FIELDS = {
    Statistic.MIN: 'min',
    Statistic.MAX: 'max',
    Statistic.SUM: 'sum',
    Statistic.MEAN: 'mean',
    Statistic.SUM_OF_SQUARES: 'sum_of_squares',
    Statistic.VARIANCE: 'variance',
    Statistic.STANDARD_DEVIATION: 'sd',
    Statistic.SKEWNESS: 'skewness',
    Statistic.KURTOSIS: 'kurtosis',
    Statistic.PRODUCT: 'product',
    Statistic.SUM_OF_LOGS: 'sum_of_logs',
    Statistic.GEOMETRIC_MEAN: 'geometric_mean',
}


def partition_edges(n: int, partitions: int) -> NDArray[np.intp]:
    """Boundaries of ``partitions`` contiguous, near-equal blocks of n rows."""
    return np.linspace(0, n, partitions + 1).astype(np.intp)


def _is_constant(column: NDArray) -> bool:
    x = column.astype(np.float64, copy=False)
    with np.errstate(over='ignore', invalid='ignore'):
        m = float(np.mean(x))
        m2 = float(np.mean((x - m) * (x - m)))
    return zero_variance(m, m2)


class CPUDescriptiveBackend:
    """CPU partitioned-fold backend for descriptive statistics."""

    @property
    def name(self) -> str:
        return 'cpu_fold'

    def solve(
        self,
        design: DescriptiveDesign,
        *,
        statistics: frozenset[Statistic],
        biased: bool = False,
        partitions: int = 1,
    ) -> Result[DescriptiveParams]:
        """
        Compute the requested statistics for every column.

        Parameters
        ----------
        design : DescriptiveDesign
        statistics : frozenset of Statistic
            Which statistics to compute.
        biased : bool
            Disable the bias correction of variance, sd, skewness, kurtosis.
        partitions : int
            Number of row blocks folded with combine(). Must be in [1, n].
        """
        timer = Timer()
        timer.start()

        warnings_list: list[str] = []
        n, p = design.n, design.p
        stats_cls = LongStatistics if design.exact else DoubleStatistics
        config = StatisticsConfiguration.with_defaults().with_biased(biased)
        edges = partition_edges(n, partitions)

        totals = []
        for j in range(p):
            col = design.column(j)

            with timer.section('partition'):
                partials = [
                    stats_cls.of_range(statistics, col, int(a), int(b))
                    for a, b in zip(edges[:-1], edges[1:])
                ]

            with timer.section('combine'):
                total = reduce(lambda acc, s: acc.combine(s), partials[1:], partials[0])
                total.set_configuration(config)

            totals.append(total)

        values: dict[str, NDArray[np.floating]] = {}
        exact_sum = None
        exact_sum_sq = None
        with timer.section('read'):
            for stat in statistics:
                values[_PARAM_FIELDS[stat]] = np.array(
                    [t.get_as_double(stat) for t in totals], dtype=np.float64
                )
            if design.exact:
                if Statistic.SUM in statistics:
                    exact_sum = tuple(t.get_as_big_integer(Statistic.SUM) for t in totals)
                if Statistic.SUM_OF_SQUARES in statistics:
                    exact_sum_sq = tuple(
                        t.get_as_big_integer(Statistic.SUM_OF_SQUARES) for t in totals
                    )

        if n >= 2 and statistics & {Statistic.SKEWNESS, Statistic.KURTOSIS}:
            for j in range(p):
                if _is_constant(design.data[:, j]):
                    warnings_list.append(f"column {j}: data are essentially constant")

        timer.stop()

        params = DescriptiveParams(
            count=n,
            exact_sum=exact_sum,
            exact_sum_of_squares=exact_sum_sq,
            **values,
        )

        return Result(
            params=params,
            info={
                'statistics': sorted(s.value for s in statistics),
                'partitions': partitions,
                'biased': biased,
                'exact': design.exact,
            },
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )
