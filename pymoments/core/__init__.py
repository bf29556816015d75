"""
Core infrastructure for PyMoments.

This module provides shared abstractions and utilities used by all
domain-specific submodules (descriptive, interval, ranking).

Key components:
    protocols: StatisticAccumulator, Backend protocols
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Timing and tolerance tiers
"""

from pymoments.core.protocols import StatisticAccumulator, Backend
from pymoments.core.result import Result
from pymoments.core.exceptions import (
    PyMomentsError,
    ValidationError,
    DimensionError,
    IndexBoundsError,
    NumericalError,
    ArithmeticOverflowError,
)

__all__ = [
    # Protocols
    "StatisticAccumulator",
    "Backend",
    # Result
    "Result",
    # Exceptions
    "PyMomentsError",
    "ValidationError",
    "DimensionError",
    "IndexBoundsError",
    "NumericalError",
    "ArithmeticOverflowError",
]
