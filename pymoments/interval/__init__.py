"""
Confidence intervals.

Public API:
    Interval                     - immutable (lower_bound, upper_bound)
    BinomialConfidenceInterval   - intervals for a binomial proportion
    NormalConfidenceInterval     - intervals for a normal mean or variance
"""

from pymoments.interval._common import Interval
from pymoments.interval.binomial import BinomialConfidenceInterval
from pymoments.interval.normal import NormalConfidenceInterval

__all__ = [
    "Interval",
    "BinomialConfidenceInterval",
    "NormalConfidenceInterval",
]
