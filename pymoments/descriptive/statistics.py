"""
Combined accumulators computing several statistics in one pass.

DoubleStatistics and LongStatistics hold only the state needed for the
requested statistics. The moment accumulators form a chain, so a single
accumulator of the highest requested order serves every lower moment:
asking for KURTOSIS also makes MEAN, VARIANCE, STANDARD_DEVIATION and
SKEWNESS available. GEOMETRIC_MEAN and SUM_OF_LOGS share one sum of
logarithms.

    stats = DoubleStatistics.of(['mean', 'variance'], x)
    stats.combine(DoubleStatistics.of(['mean', 'variance'], y))
    stats.get_as_double('variance')
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Iterable

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pymoments.core.exceptions import ValidationError
from pymoments.core.validation import (
    check_from_to_index, check_long, check_long_array, check_1d,
)
from pymoments.descriptive._moments import (
    MOMENT_TYPES,
    FirstMoment,
    compute_variance,
    compute_skewness,
    compute_kurtosis,
)
from pymoments.descriptive._wide import Int128, UInt192
from pymoments.descriptive import integer
from pymoments.descriptive.moments import (
    Min, Max, Sum, SumOfSquares, Product, SumOfLogs, as_values, compute_geometric_mean,
)


class Statistic(Enum):
    """A statistic computed by the combined accumulators."""
    MIN = 'min'
    MAX = 'max'
    SUM = 'sum'
    MEAN = 'mean'
    SUM_OF_SQUARES = 'sum_of_squares'
    VARIANCE = 'variance'
    STANDARD_DEVIATION = 'standard_deviation'
    SKEWNESS = 'skewness'
    KURTOSIS = 'kurtosis'
    PRODUCT = 'product'
    SUM_OF_LOGS = 'sum_of_logs'
    GEOMETRIC_MEAN = 'geometric_mean'

    @classmethod
    def parse(cls, value: Statistic | str) -> Statistic:
        """
        Resolve a Statistic from a member or its name.

        Names are case-insensitive and may use the member name
        ('STANDARD_DEVIATION') or the value ('standard_deviation').

        Raises:
            ValidationError: If the name is unknown
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            for member in cls:
                if member.value == key:
                    return member
        raise ValidationError(
            f"Unknown statistic: {value!r}. "
            f"Expected one of {[m.value for m in cls]}"
        )


# Order of the moment accumulator needed for each moment statistic
_MOMENT_ORDER = {
    Statistic.MEAN: 1,
    Statistic.VARIANCE: 2,
    Statistic.STANDARD_DEVIATION: 2,
    Statistic.SKEWNESS: 3,
    Statistic.KURTOSIS: 4,
}

# Statistics derived from the sum of logarithms
_LOG_STATISTICS = frozenset({Statistic.SUM_OF_LOGS, Statistic.GEOMETRIC_MEAN})
_FLOAT_ONLY_STATISTICS = _LOG_STATISTICS | {Statistic.PRODUCT}


@dataclass(frozen=True)
class StatisticsConfiguration:
    """
    Immutable configuration for the combined accumulators.

    Attributes:
        biased: If True, variance, standard deviation, skewness and
            kurtosis are computed without bias correction
    """
    biased: bool = False

    @classmethod
    def with_defaults(cls) -> StatisticsConfiguration:
        return _DEFAULT_CONFIGURATION

    def with_biased(self, v: bool) -> StatisticsConfiguration:
        return replace(self, biased=bool(v))


_DEFAULT_CONFIGURATION = StatisticsConfiguration()


def parse_statistics(statistics: Iterable[Statistic | str]) -> frozenset[Statistic]:
    """
    Resolve a collection of statistics.

    Raises:
        ValidationError: If the collection is empty or a name is unknown
    """
    if isinstance(statistics, (str, Statistic)):
        statistics = [statistics]
    result = frozenset(Statistic.parse(s) for s in statistics)
    if not result:
        raise ValidationError("No configured statistics")
    return result


def _moment_order(stats: frozenset[Statistic]) -> int:
    return max((_MOMENT_ORDER[s] for s in stats if s in _MOMENT_ORDER), default=0)


def _supports_moment(moment: FirstMoment | None, statistic: Statistic) -> bool:
    if moment is None:
        return False
    return isinstance(moment, MOMENT_TYPES[_MOMENT_ORDER[statistic]])


def _check_compatible(a: Any, b: Any) -> None:
    # Every component held by a must also be held by b
    if a is not None and b is None:
        raise ValidationError("Incompatible statistics")


def _check_moment_compatible(a: FirstMoment | None, b: FirstMoment | None) -> None:
    if a is not None and (b is None or not isinstance(b, type(a))):
        raise ValidationError("Incompatible statistics")


def _unsupported(statistic: Statistic) -> ValidationError:
    return ValidationError(f"Unsupported statistic: {statistic.name}")


def _read_moment(
    moment: FirstMoment,
    statistic: Statistic,
    config: StatisticsConfiguration,
) -> float:
    if statistic is Statistic.MEAN:
        return moment.get_first_moment()
    if statistic is Statistic.VARIANCE:
        return compute_variance(moment, config.biased)
    if statistic is Statistic.STANDARD_DEVIATION:
        return math.sqrt(compute_variance(moment, config.biased))
    if statistic is Statistic.SKEWNESS:
        return compute_skewness(moment, config.biased)
    return compute_kurtosis(moment, config.biased)


def _read_logs(sum_of_logs: SumOfLogs, statistic: Statistic, n: int) -> float:
    if statistic is Statistic.SUM_OF_LOGS:
        return sum_of_logs.get_as_double()
    return compute_geometric_mean(sum_of_logs.get_as_double(), n)


class DoubleStatistics:
    """
    Several statistics of floating-point values computed together.

    Construction:
        DoubleStatistics.create(statistics)
        DoubleStatistics.of(statistics, values)
        DoubleStatistics.of_range(statistics, values, from_index, to_index)

    ``statistics`` is a collection of Statistic members or names.
    """

    def __init__(
        self,
        count: int,
        min_: Min | None,
        max_: Max | None,
        sum_: Sum | None,
        sum_of_squares: SumOfSquares | None,
        moment: FirstMoment | None,
        config: StatisticsConfiguration,
        product: Product | None = None,
        sum_of_logs: SumOfLogs | None = None,
    ):
        self._count = count
        self._min = min_
        self._max = max_
        self._sum = sum_
        self._sum_of_squares = sum_of_squares
        self._moment = moment
        self._config = config
        self._product = product
        self._sum_of_logs = sum_of_logs

    @classmethod
    def create(cls, statistics: Iterable[Statistic | str]) -> DoubleStatistics:
        return cls._build(parse_statistics(statistics), np.zeros(0))

    @classmethod
    def of(cls, statistics: Iterable[Statistic | str], values: ArrayLike) -> DoubleStatistics:
        return cls._build(parse_statistics(statistics), as_values(values))

    @classmethod
    def of_range(
        cls,
        statistics: Iterable[Statistic | str],
        values: ArrayLike,
        from_index: int,
        to_index: int,
    ) -> DoubleStatistics:
        stats = parse_statistics(statistics)
        x = as_values(values)
        check_from_to_index(from_index, to_index, x.shape[0])
        return cls._build(stats, x[from_index:to_index])

    @classmethod
    def _build(cls, stats: frozenset[Statistic], x: NDArray[np.floating[Any]]) -> DoubleStatistics:
        order = _moment_order(stats)
        return cls(
            count=x.shape[0],
            min_=Min._build(x) if Statistic.MIN in stats else None,
            max_=Max._build(x) if Statistic.MAX in stats else None,
            sum_=Sum._build(x) if Statistic.SUM in stats else None,
            sum_of_squares=SumOfSquares._build(x) if Statistic.SUM_OF_SQUARES in stats else None,
            moment=MOMENT_TYPES[order].of_range(x, 0, x.shape[0]) if order else None,
            config=_DEFAULT_CONFIGURATION,
            product=Product._build(x) if Statistic.PRODUCT in stats else None,
            sum_of_logs=SumOfLogs._build(x) if stats & _LOG_STATISTICS else None,
        )

    def accept(self, value: float) -> None:
        value = float(value)
        self._count += 1
        for s in (self._min, self._max, self._sum, self._sum_of_squares,
                  self._product, self._sum_of_logs):
            if s is not None:
                s.accept(value)
        if self._moment is not None:
            self._moment.accept(value)

    def combine(self, other: DoubleStatistics) -> DoubleStatistics:
        """
        Merge ``other`` into this instance and return it.

        ``other`` must support at least the statistics of this instance.

        Raises:
            ValidationError: If ``other`` is not compatible
        """
        _check_compatible(self._min, other._min)
        _check_compatible(self._max, other._max)
        _check_compatible(self._sum, other._sum)
        _check_compatible(self._sum_of_squares, other._sum_of_squares)
        _check_compatible(self._product, other._product)
        _check_compatible(self._sum_of_logs, other._sum_of_logs)
        _check_moment_compatible(self._moment, other._moment)

        self._count += other._count
        if self._min is not None:
            self._min.combine(other._min)
        if self._max is not None:
            self._max.combine(other._max)
        if self._sum is not None:
            self._sum.combine(other._sum)
        if self._sum_of_squares is not None:
            self._sum_of_squares.combine(other._sum_of_squares)
        if self._product is not None:
            self._product.combine(other._product)
        if self._sum_of_logs is not None:
            self._sum_of_logs.combine(other._sum_of_logs)
        if self._moment is not None:
            self._moment.combine(other._moment)
        return self

    def get_count(self) -> int:
        return self._count

    def is_supported(self, statistic: Statistic | str) -> bool:
        statistic = Statistic.parse(statistic)
        if statistic is Statistic.MIN:
            return self._min is not None
        if statistic is Statistic.MAX:
            return self._max is not None
        if statistic is Statistic.SUM:
            return self._sum is not None
        if statistic is Statistic.SUM_OF_SQUARES:
            return self._sum_of_squares is not None
        if statistic is Statistic.PRODUCT:
            return self._product is not None
        if statistic in _LOG_STATISTICS:
            return self._sum_of_logs is not None
        return _supports_moment(self._moment, statistic)

    def get_as_double(self, statistic: Statistic | str) -> float:
        """
        Read one statistic.

        Raises:
            ValidationError: If the statistic is not supported
        """
        statistic = Statistic.parse(statistic)
        if not self.is_supported(statistic):
            raise _unsupported(statistic)
        if statistic is Statistic.MIN:
            return self._min.get_as_double()
        if statistic is Statistic.MAX:
            return self._max.get_as_double()
        if statistic is Statistic.SUM:
            return self._sum.get_as_double()
        if statistic is Statistic.SUM_OF_SQUARES:
            return self._sum_of_squares.get_as_double()
        if statistic is Statistic.PRODUCT:
            return self._product.get_as_double()
        if statistic in _LOG_STATISTICS:
            return _read_logs(self._sum_of_logs, statistic, self._count)
        return _read_moment(self._moment, statistic, self._config)

    def set_configuration(self, config: StatisticsConfiguration) -> DoubleStatistics:
        """Set the configuration used by subsequent reads and return this instance."""
        if not isinstance(config, StatisticsConfiguration):
            raise ValidationError(
                f"config: expected StatisticsConfiguration, got {type(config).__name__}"
            )
        self._config = config
        return self

    @property
    def configuration(self) -> StatisticsConfiguration:
        return self._config

    def __repr__(self) -> str:
        supported = [s.value for s in Statistic if self.is_supported(s)]
        return f"DoubleStatistics(count={self._count}, statistics={supported})"


class LongStatistics:
    """
    Several statistics of long values computed together.

    Sums, sums of squares, the mean and the variance are derived from
    exact integer accumulators. Skewness and kurtosis use the
    floating-point moment chain; the product and the logarithms are
    accumulated in floating point.
    """

    def __init__(
        self,
        count: int,
        min_: integer.LongMin | None,
        max_: integer.LongMax | None,
        sum_: Int128 | None,
        sum_sq: UInt192 | None,
        moment: FirstMoment | None,
        config: StatisticsConfiguration,
        product: Product | None = None,
        sum_of_logs: SumOfLogs | None = None,
    ):
        self._count = count
        self._min = min_
        self._max = max_
        self._sum = sum_
        self._sum_sq = sum_sq
        self._moment = moment
        self._config = config
        self._product = product
        self._sum_of_logs = sum_of_logs

    @classmethod
    def create(cls, statistics: Iterable[Statistic | str]) -> LongStatistics:
        return cls._build(parse_statistics(statistics), [])

    @classmethod
    def of(cls, statistics: Iterable[Statistic | str], values: ArrayLike) -> LongStatistics:
        return cls._build(parse_statistics(statistics), integer.as_long_values(values))

    @classmethod
    def of_range(
        cls,
        statistics: Iterable[Statistic | str],
        values: ArrayLike,
        from_index: int,
        to_index: int,
    ) -> LongStatistics:
        stats = parse_statistics(statistics)
        x = check_long_array(values, 'values')
        check_1d(x, 'values')
        check_from_to_index(from_index, to_index, x.shape[0])
        return cls._build(stats, x[from_index:to_index].tolist())

    @classmethod
    def _build(cls, stats: frozenset[Statistic], x: list[int]) -> LongStatistics:
        need_sum = bool(stats & {
            Statistic.SUM, Statistic.MEAN, Statistic.VARIANCE, Statistic.STANDARD_DEVIATION,
        })
        need_sum_sq = bool(stats & {
            Statistic.SUM_OF_SQUARES, Statistic.VARIANCE, Statistic.STANDARD_DEVIATION,
        })
        s = Int128.create() if need_sum else None
        ss = UInt192.create() if need_sum_sq else None
        if s is not None or ss is not None:
            for v in x:
                if s is not None:
                    s.add_long(v)
                if ss is not None:
                    ss.add_square_long(v)

        # Only the third and fourth moments, the product and the logarithms
        # are computed in floating point
        order = _moment_order(stats)
        moment = product = sum_of_logs = None
        if order >= 3 or stats & _FLOAT_ONLY_STATISTICS:
            xf = np.asarray(x, dtype=np.float64)
            if order >= 3:
                moment = MOMENT_TYPES[order].of_range(xf, 0, xf.shape[0])
            if Statistic.PRODUCT in stats:
                product = Product._build(xf)
            if stats & _LOG_STATISTICS:
                sum_of_logs = SumOfLogs._build(xf)

        return cls(
            count=len(x),
            min_=integer.LongMin._build(x) if Statistic.MIN in stats else None,
            max_=integer.LongMax._build(x) if Statistic.MAX in stats else None,
            sum_=s,
            sum_sq=ss,
            moment=moment,
            config=_DEFAULT_CONFIGURATION,
            product=product,
            sum_of_logs=sum_of_logs,
        )

    def accept(self, value: int) -> None:
        value = check_long(value, 'value')
        self._count += 1
        if self._min is not None:
            self._min.accept(value)
        if self._max is not None:
            self._max.accept(value)
        if self._sum is not None:
            self._sum.add_long(value)
        if self._sum_sq is not None:
            self._sum_sq.add_square_long(value)
        if self._product is not None:
            self._product.accept(value)
        if self._sum_of_logs is not None:
            self._sum_of_logs.accept(value)
        if self._moment is not None:
            self._moment.accept(float(value))

    def combine(self, other: LongStatistics) -> LongStatistics:
        """
        Merge ``other`` into this instance and return it.

        Raises:
            ValidationError: If ``other`` is not compatible
        """
        _check_compatible(self._min, other._min)
        _check_compatible(self._max, other._max)
        _check_compatible(self._sum, other._sum)
        _check_compatible(self._sum_sq, other._sum_sq)
        _check_compatible(self._product, other._product)
        _check_compatible(self._sum_of_logs, other._sum_of_logs)
        _check_moment_compatible(self._moment, other._moment)

        self._count += other._count
        if self._min is not None:
            self._min.combine(other._min)
        if self._max is not None:
            self._max.combine(other._max)
        if self._sum is not None:
            self._sum.add(other._sum)
        if self._sum_sq is not None:
            self._sum_sq.add(other._sum_sq)
        if self._product is not None:
            self._product.combine(other._product)
        if self._sum_of_logs is not None:
            self._sum_of_logs.combine(other._sum_of_logs)
        if self._moment is not None:
            self._moment.combine(other._moment)
        return self

    def _exact_moment(self, statistic: Statistic) -> bool:
        # Mean and variance come from the exact sums when they are held
        if statistic is Statistic.MEAN:
            return self._sum is not None
        if statistic in (Statistic.VARIANCE, Statistic.STANDARD_DEVIATION):
            return self._sum is not None and self._sum_sq is not None
        return False

    def get_count(self) -> int:
        return self._count

    def is_supported(self, statistic: Statistic | str) -> bool:
        statistic = Statistic.parse(statistic)
        if statistic is Statistic.MIN:
            return self._min is not None
        if statistic is Statistic.MAX:
            return self._max is not None
        if statistic is Statistic.SUM:
            return self._sum is not None
        if statistic is Statistic.SUM_OF_SQUARES:
            return self._sum_sq is not None
        if statistic is Statistic.PRODUCT:
            return self._product is not None
        if statistic in _LOG_STATISTICS:
            return self._sum_of_logs is not None
        if self._exact_moment(statistic):
            return True
        return _supports_moment(self._moment, statistic)

    def get_as_double(self, statistic: Statistic | str) -> float:
        """
        Read one statistic as a float.

        Raises:
            ValidationError: If the statistic is not supported
        """
        statistic = Statistic.parse(statistic)
        if not self.is_supported(statistic):
            raise _unsupported(statistic)
        if statistic is Statistic.MIN:
            return self._min.get_as_double()
        if statistic is Statistic.MAX:
            return self._max.get_as_double()
        if statistic is Statistic.SUM:
            return self._sum.to_double()
        if statistic is Statistic.SUM_OF_SQUARES:
            return self._sum_sq.to_double()
        if statistic is Statistic.PRODUCT:
            return self._product.get_as_double()
        if statistic in _LOG_STATISTICS:
            return _read_logs(self._sum_of_logs, statistic, self._count)
        if not self._exact_moment(statistic):
            return _read_moment(self._moment, statistic, self._config)
        if statistic is Statistic.MEAN:
            return integer.compute_mean(self._sum, self._count)
        if statistic is Statistic.VARIANCE:
            return integer.compute_variance(
                self._sum_sq, self._sum, self._count, self._config.biased
            )
        return math.sqrt(integer.compute_variance(
            self._sum_sq, self._sum, self._count, self._config.biased
        ))

    def get_as_big_integer(self, statistic: Statistic | str) -> int:
        """
        Read an integer-valued statistic exactly.

        Only MIN, MAX, SUM and SUM_OF_SQUARES are integer valued.

        Raises:
            ValidationError: If the statistic is not supported or not integer valued
        """
        statistic = Statistic.parse(statistic)
        if not self.is_supported(statistic):
            raise _unsupported(statistic)
        if statistic is Statistic.MIN:
            return self._min.get_as_long()
        if statistic is Statistic.MAX:
            return self._max.get_as_long()
        if statistic is Statistic.SUM:
            return self._sum.to_big_integer()
        if statistic is Statistic.SUM_OF_SQUARES:
            return self._sum_sq.to_big_integer()
        raise ValidationError(f"Statistic is not integer valued: {statistic.name}")

    def get_as_long(self, statistic: Statistic | str) -> int:
        """
        Read an integer-valued statistic as a long.

        Raises:
            ValidationError: If the statistic is not supported or not integer valued
            ArithmeticOverflowError: If the exact value is outside the long range
        """
        statistic = Statistic.parse(statistic)
        if not self.is_supported(statistic):
            raise _unsupported(statistic)
        if statistic is Statistic.SUM:
            return self._sum.to_long_exact()
        if statistic is Statistic.SUM_OF_SQUARES:
            return self._sum_sq.to_long_exact()
        return self.get_as_big_integer(statistic)

    def set_configuration(self, config: StatisticsConfiguration) -> LongStatistics:
        """Set the configuration used by subsequent reads and return this instance."""
        if not isinstance(config, StatisticsConfiguration):
            raise ValidationError(
                f"config: expected StatisticsConfiguration, got {type(config).__name__}"
            )
        self._config = config
        return self

    @property
    def configuration(self) -> StatisticsConfiguration:
        return self._config

    def __repr__(self) -> str:
        supported = [s.value for s in Statistic if self.is_supported(s)]
        return f"LongStatistics(count={self._count}, statistics={supported})"
