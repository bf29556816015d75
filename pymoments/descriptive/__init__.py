"""
Descriptive statistics module.

Streaming accumulators that support a parallel fold (build per partition,
merge with combine), exact integer variants, and a one-call describe().

Public API:
    Mean, Variance, StandardDeviation, Skewness, Kurtosis,
    Sum, SumOfSquares, Min, Max              - float accumulators
    Product, SumOfLogs, GeometricMean        - product and logarithm accumulators
    LongSum, LongMean, LongSumOfSquares, LongVariance,
    LongStandardDeviation, LongMin, LongMax  - exact integer accumulators
    DoubleStatistics, LongStatistics         - several statistics at once
    Quantile, Median                         - order statistics (not mergeable)
    Int128, UInt192                          - wide integer accumulators
    describe(data)                           - all statistics per column
"""

from pymoments.descriptive._wide import Int128, UInt128, UInt192
from pymoments.descriptive.moments import (
    Mean,
    Variance,
    StandardDeviation,
    Skewness,
    Kurtosis,
    Sum,
    SumOfSquares,
    Min,
    Max,
    Product,
    SumOfLogs,
    GeometricMean,
)
from pymoments.descriptive.integer import (
    LongSum,
    LongMean,
    LongSumOfSquares,
    LongVariance,
    LongStandardDeviation,
    LongMin,
    LongMax,
)
from pymoments.descriptive.statistics import (
    Statistic,
    StatisticsConfiguration,
    DoubleStatistics,
    LongStatistics,
)
from pymoments.descriptive.quantile import (
    Quantile,
    Median,
    EstimationMethod,
    NaNPolicy,
)
from pymoments.descriptive.design import DescriptiveDesign
from pymoments.descriptive.solution import DescriptiveParams, DescriptiveSolution
from pymoments.descriptive.solvers import describe

__all__ = [
    "describe",
    "Mean",
    "Variance",
    "StandardDeviation",
    "Skewness",
    "Kurtosis",
    "Sum",
    "SumOfSquares",
    "Min",
    "Max",
    "Product",
    "SumOfLogs",
    "GeometricMean",
    "LongSum",
    "LongMean",
    "LongSumOfSquares",
    "LongVariance",
    "LongStandardDeviation",
    "LongMin",
    "LongMax",
    "Statistic",
    "StatisticsConfiguration",
    "DoubleStatistics",
    "LongStatistics",
    "Quantile",
    "Median",
    "EstimationMethod",
    "NaNPolicy",
    "Int128",
    "UInt128",
    "UInt192",
    "DescriptiveDesign",
    "DescriptiveParams",
    "DescriptiveSolution",
]
