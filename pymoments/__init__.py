"""
PyMoments: streaming descriptive statistics for Python.

Mergeable accumulators for moments, sums and extrema, with exact 64-bit
integer variants, plus rank transformations and confidence intervals.

Submodules:
    descriptive: Streaming accumulators and describe()
    interval: Binomial and normal confidence intervals
    ranking: Natural ranking with NaN and ties strategies
"""

__version__ = "0.1.0"

from pymoments import descriptive
from pymoments import interval
from pymoments import ranking
from pymoments.descriptive import describe

__all__ = [
    "__version__",
    "descriptive",
    "interval",
    "ranking",
    "describe",
]
