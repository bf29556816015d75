"""
Tests for DoubleStatistics and LongStatistics.
"""

import math

import numpy as np
import pytest

from pymoments.core.compute.tolerances import HIGHER_MOMENT, MERGE
from pymoments.core.exceptions import ArithmeticOverflowError, ValidationError
from pymoments.core.validation import LONG_MAX
from pymoments.descriptive import (
    DoubleStatistics, GeometricMean, Kurtosis, LongStatistics, LongVariance, Mean,
    Product, Skewness, Statistic, StatisticsConfiguration, SumOfLogs, Variance,
)

# Statistics other than the product and logarithms
ALL = [
    s for s in Statistic
    if s not in (Statistic.PRODUCT, Statistic.SUM_OF_LOGS, Statistic.GEOMETRIC_MEAN)
]


# ═══════════════════════════════════════════════════════════════════════
# Statistic / StatisticsConfiguration
# ═══════════════════════════════════════════════════════════════════════


class TestStatistic:

    @pytest.mark.parametrize("name", ["mean", "MEAN", " Mean "])
    def test_parse_case_insensitive(self, name):
        assert Statistic.parse(name) is Statistic.MEAN

    def test_parse_member(self):
        assert Statistic.parse(Statistic.KURTOSIS) is Statistic.KURTOSIS

    def test_parse_member_name(self):
        assert Statistic.parse("STANDARD_DEVIATION") is Statistic.STANDARD_DEVIATION

    def test_parse_unknown(self):
        with pytest.raises(ValidationError, match="Unknown statistic"):
            Statistic.parse("median")


class TestStatisticsConfiguration:

    def test_defaults(self):
        assert StatisticsConfiguration.with_defaults().biased is False

    def test_with_biased_returns_copy(self):
        base = StatisticsConfiguration.with_defaults()
        biased = base.with_biased(True)
        assert biased.biased is True
        assert base.biased is False

    def test_frozen(self):
        with pytest.raises(AttributeError):
            StatisticsConfiguration().biased = True


# ═══════════════════════════════════════════════════════════════════════
# DoubleStatistics
# ═══════════════════════════════════════════════════════════════════════


class TestDoubleStatistics:

    def test_matches_individual_statistics(self, skewed_data):
        stats = DoubleStatistics.of(ALL, skewed_data)
        assert stats.get_count() == 500
        assert stats.get_as_double(Statistic.MEAN) == Mean.of(skewed_data).get_as_double()
        assert stats.get_as_double('variance') == Variance.of(skewed_data).get_as_double()
        assert stats.get_as_double('skewness') == Skewness.of(skewed_data).get_as_double()
        assert stats.get_as_double('kurtosis') == Kurtosis.of(skewed_data).get_as_double()
        assert stats.get_as_double('min') == skewed_data.min()
        assert stats.get_as_double('max') == skewed_data.max()

    def test_one_to_ten(self):
        stats = DoubleStatistics.of(['sum', 'sum_of_squares', 'mean', 'variance'], range(1, 11))
        assert stats.get_as_double('sum') == 55.0
        assert stats.get_as_double('sum_of_squares') == 385.0
        assert stats.get_as_double('mean') == 5.5
        assert stats.get_as_double('variance') == pytest.approx(55 / 6, rel=1e-15)

    def test_higher_moment_supports_lower(self):
        stats = DoubleStatistics.create(['kurtosis'])
        for s in (Statistic.MEAN, Statistic.VARIANCE, Statistic.STANDARD_DEVIATION,
                  Statistic.SKEWNESS, Statistic.KURTOSIS):
            assert stats.is_supported(s)
        assert not stats.is_supported(Statistic.SUM)
        assert not stats.is_supported(Statistic.MIN)

    def test_mean_only_does_not_support_variance(self):
        stats = DoubleStatistics.create(['mean'])
        assert stats.is_supported('mean')
        assert not stats.is_supported('variance')
        with pytest.raises(ValidationError, match="Unsupported statistic"):
            stats.get_as_double('variance')

    def test_empty_statistics_rejected(self):
        with pytest.raises(ValidationError, match="No configured statistics"):
            DoubleStatistics.create([])

    def test_single_name_accepted(self):
        assert DoubleStatistics.of('mean', [1.0, 3.0]).get_as_double('mean') == 2.0

    def test_empty(self):
        stats = DoubleStatistics.create(ALL)
        assert stats.get_count() == 0
        assert math.isnan(stats.get_as_double('mean'))
        assert stats.get_as_double('sum') == 0.0
        assert stats.get_as_double('min') == math.inf
        assert stats.get_as_double('max') == -math.inf

    def test_accept_matches_of(self, normal_data):
        stats = DoubleStatistics.create(ALL)
        for v in normal_data:
            stats.accept(v)
        bulk = DoubleStatistics.of(ALL, normal_data)
        assert stats.get_count() == bulk.get_count()
        for s in ALL:
            tol = HIGHER_MOMENT if s in (Statistic.SKEWNESS, Statistic.KURTOSIS) else MERGE
            np.testing.assert_allclose(
                stats.get_as_double(s), bulk.get_as_double(s), rtol=tol.rtol, atol=tol.atol
            )

    def test_configuration_applies_to_reads(self):
        stats = DoubleStatistics.of(['variance'], range(1, 11))
        assert stats.configuration.biased is False
        stats.set_configuration(StatisticsConfiguration().with_biased(True))
        assert stats.get_as_double('variance') == pytest.approx(8.25, rel=1e-15)

    def test_set_configuration_type_checked(self):
        with pytest.raises(ValidationError):
            DoubleStatistics.create(['mean']).set_configuration(True)

    def test_repr(self):
        r = repr(DoubleStatistics.of(['min', 'max'], [1.0]))
        assert r == "DoubleStatistics(count=1, statistics=['min', 'max'])"


class TestDoubleStatisticsCombine:

    def test_partitions_match_single_pass(self, normal_data):
        acc = DoubleStatistics.of_range(ALL, normal_data, 0, 300)
        acc.combine(DoubleStatistics.of_range(ALL, normal_data, 300, 1000))
        bulk = DoubleStatistics.of(ALL, normal_data)
        assert acc.get_count() == 1000
        for s in ALL:
            tol = HIGHER_MOMENT if s in (Statistic.SKEWNESS, Statistic.KURTOSIS) else MERGE
            np.testing.assert_allclose(
                acc.get_as_double(s), bulk.get_as_double(s), rtol=tol.rtol, atol=tol.atol
            )

    def test_superset_accepted(self):
        acc = DoubleStatistics.of(['mean'], [1.0, 2.0])
        acc.combine(DoubleStatistics.of(['kurtosis', 'min'], [3.0, 4.0]))
        assert acc.get_count() == 4
        assert acc.get_as_double('mean') == 2.5

    def test_subset_rejected(self):
        acc = DoubleStatistics.of(['variance', 'min'], [1.0, 2.0])
        with pytest.raises(ValidationError, match="Incompatible statistics"):
            acc.combine(DoubleStatistics.of(['variance'], [3.0]))

    def test_lower_moment_rejected(self):
        acc = DoubleStatistics.of(['skewness'], [1.0, 2.0])
        with pytest.raises(ValidationError, match="Incompatible statistics"):
            acc.combine(DoubleStatistics.of(['variance'], [3.0]))

    def test_combine_empty(self):
        acc = DoubleStatistics.of(ALL, [1.0, 2.0, 4.0])
        acc.combine(DoubleStatistics.create(ALL))
        assert acc.get_count() == 3
        assert acc.get_as_double('sum') == 7.0


# ═══════════════════════════════════════════════════════════════════════
# LongStatistics
# ═══════════════════════════════════════════════════════════════════════


class TestLongStatistics:

    def test_mean_alone(self):
        stats = LongStatistics.of(['mean'], [1, 2, 3])
        assert stats.is_supported('mean')
        assert not stats.is_supported('variance')
        assert stats.get_as_double('mean') == 2.0

    @pytest.mark.parametrize("name", [
        'mean', 'variance', 'standard_deviation', 'skewness', 'kurtosis',
    ])
    def test_each_moment_readable(self, name):
        stats = LongStatistics.of([name], [2, 4, 5, 4, 5])
        assert stats.is_supported(name)
        expected = DoubleStatistics.of([name], [2.0, 4.0, 5.0, 4.0, 5.0]).get_as_double(name)
        np.testing.assert_allclose(stats.get_as_double(name), expected, rtol=1e-12)

    def test_variance_supports_mean_and_sd(self):
        stats = LongStatistics.create(['variance'])
        assert stats.is_supported('mean')
        assert stats.is_supported('standard_deviation')
        assert not stats.is_supported('skewness')

    def test_repr(self):
        r = repr(LongStatistics.of(['variance', 'min'], [1, 2]))
        assert r == ("LongStatistics(count=2, statistics="
                     "['min', 'mean', 'variance', 'standard_deviation'])")

    def test_exact_values(self):
        values = [LONG_MAX, LONG_MAX, 1]
        stats = LongStatistics.of(ALL, values)
        assert stats.get_as_big_integer('sum') == 2 * LONG_MAX + 1
        assert stats.get_as_big_integer('sum_of_squares') == 2 * LONG_MAX * LONG_MAX + 1
        assert stats.get_as_big_integer('min') == 1
        assert stats.get_as_long('max') == LONG_MAX

    def test_get_as_long_overflow(self):
        stats = LongStatistics.of(['sum'], [LONG_MAX, 1])
        with pytest.raises(ArithmeticOverflowError):
            stats.get_as_long('sum')

    def test_non_integer_statistic(self):
        stats = LongStatistics.of(['mean'], [1, 2])
        with pytest.raises(ValidationError, match="not integer valued"):
            stats.get_as_big_integer('mean')

    def test_unsupported(self):
        stats = LongStatistics.of(['min'], [1, 2])
        with pytest.raises(ValidationError, match="Unsupported statistic"):
            stats.get_as_long('sum')

    def test_variance_matches_long_variance(self, long_data):
        stats = LongStatistics.of(['variance', 'standard_deviation'], long_data)
        expected = LongVariance.of(long_data).get_as_double()
        assert stats.get_as_double('variance') == expected
        assert stats.get_as_double('standard_deviation') == math.sqrt(expected)

    def test_mean_is_correctly_rounded(self, long_data):
        stats = LongStatistics.of(['mean'], long_data)
        assert stats.get_as_double('mean') == sum(int(v) for v in long_data) / len(long_data)

    def test_higher_moments(self):
        stats = LongStatistics.of(['skewness', 'kurtosis'], [2, 4, 5, 4, 5])
        np.testing.assert_allclose(stats.get_as_double('skewness'), -1.3608276348795434, rtol=1e-12)
        np.testing.assert_allclose(stats.get_as_double('kurtosis'), 2.0, rtol=1e-12)

    def test_skewness_alone_does_not_support_sum(self):
        stats = LongStatistics.create(['skewness'])
        assert stats.is_supported('mean')
        assert not stats.is_supported('sum')

    def test_biased_configuration(self):
        stats = LongStatistics.of(['variance'], [1, 2, 3, 4])
        stats.set_configuration(StatisticsConfiguration(biased=True))
        assert stats.get_as_double('variance') == 1.25

    def test_accept_and_combine_are_exact(self, long_data):
        acc = LongStatistics.create(['sum', 'variance'])
        for v in long_data[:100]:
            acc.accept(v)
        acc.combine(LongStatistics.of_range(['sum', 'variance'], long_data, 100, 400))
        bulk = LongStatistics.of(['sum', 'variance'], long_data)
        assert acc.get_count() == 400
        assert acc.get_as_big_integer('sum') == bulk.get_as_big_integer('sum')
        assert acc.get_as_double('variance') == bulk.get_as_double('variance')

    def test_accept_rejects_out_of_range(self):
        with pytest.raises(ValidationError):
            LongStatistics.create(['sum']).accept(LONG_MAX + 1)

    def test_combine_subset_rejected(self):
        acc = LongStatistics.of(['sum_of_squares'], [1])
        with pytest.raises(ValidationError, match="Incompatible statistics"):
            acc.combine(LongStatistics.of(['sum'], [2]))

    def test_float_data_rejected(self):
        with pytest.raises(ValidationError):
            LongStatistics.of(['sum'], [0.5])


# ═══════════════════════════════════════════════════════════════════════
# Product and logarithms
# ═══════════════════════════════════════════════════════════════════════

LOG_STATISTICS = ['product', 'sum_of_logs', 'geometric_mean']


class TestProductAndLogs:

    def test_double_matches_individual(self, skewed_data):
        stats = DoubleStatistics.of(LOG_STATISTICS, skewed_data)
        assert stats.get_as_double('product') == Product.of(skewed_data).get_as_double()
        assert stats.get_as_double('sum_of_logs') == SumOfLogs.of(skewed_data).get_as_double()
        assert (stats.get_as_double('geometric_mean')
                == GeometricMean.of(skewed_data).get_as_double())

    def test_geometric_mean_shares_sum_of_logs(self):
        stats = DoubleStatistics.create(['geometric_mean'])
        assert stats.is_supported('sum_of_logs')
        assert not stats.is_supported('product')
        assert not stats.is_supported('mean')

    def test_long_values(self):
        stats = LongStatistics.of(LOG_STATISTICS, [1, 2, 4, 8])
        assert stats.get_as_double('product') == 64.0
        assert stats.get_as_double('sum_of_logs') == pytest.approx(6 * math.log(2), rel=1e-15)
        assert stats.get_as_double('geometric_mean') == pytest.approx(2 ** 1.5, rel=1e-15)
        with pytest.raises(ValidationError, match="not integer valued"):
            stats.get_as_big_integer('product')

    def test_long_accept_and_combine(self):
        acc = LongStatistics.create(LOG_STATISTICS)
        acc.accept(3)
        acc.combine(LongStatistics.of(LOG_STATISTICS, [3, 3]))
        assert acc.get_count() == 3
        assert acc.get_as_double('product') == 27.0
        assert acc.get_as_double('geometric_mean') == pytest.approx(3.0, rel=1e-15)

    @pytest.mark.parametrize("cls", [DoubleStatistics, LongStatistics])
    def test_empty(self, cls):
        stats = cls.create(LOG_STATISTICS)
        assert stats.get_as_double('product') == 1.0
        assert stats.get_as_double('sum_of_logs') == 0.0
        assert math.isnan(stats.get_as_double('geometric_mean'))

    def test_negative_values(self):
        stats = DoubleStatistics.of(LOG_STATISTICS, [2.0, -2.0])
        assert stats.get_as_double('product') == -4.0
        assert math.isnan(stats.get_as_double('sum_of_logs'))
        assert math.isnan(stats.get_as_double('geometric_mean'))

    def test_combine_requires_logs(self):
        acc = DoubleStatistics.of(['geometric_mean'], [1.0])
        with pytest.raises(ValidationError, match="Incompatible statistics"):
            acc.combine(DoubleStatistics.of(['product'], [2.0]))

    def test_repr_lists_logs(self):
        r = repr(LongStatistics.of(['geometric_mean'], [1]))
        assert r == "LongStatistics(count=1, statistics=['sum_of_logs', 'geometric_mean'])"
