"""
Shared types and validation for confidence intervals.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np

from pymoments.core.exceptions import ValidationError


@dataclass(frozen=True)
class Interval:
    """
    A closed interval [lower_bound, upper_bound].

    Attributes:
        lower_bound: Lower limit of the interval
        upper_bound: Upper limit of the interval
    """
    lower_bound: float
    upper_bound: float

    def contains(self, value: float) -> bool:
        """True if lower_bound <= value <= upper_bound."""
        return self.lower_bound <= value <= self.upper_bound

    @property
    def width(self) -> float:
        return self.upper_bound - self.lower_bound

    def __iter__(self):
        # Allows: lower, upper = interval
        yield self.lower_bound
        yield self.upper_bound


def check_count(value: Any, name: str) -> int:
    """
    Verify an integer count argument and return it as a Python int.

    Raises:
        ValidationError: If value is not an integer
    """
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, (int, np.integer)):
        raise ValidationError(
            f"{name}: expected an integer, got {type(value).__name__}"
        )
    return int(value)


def clip(p: float) -> float:
    """Clip a probability to [0, 1]."""
    return min(1.0, max(0.0, p))
