"""
Shared compute infrastructure for PyMoments.

IMPORTANT: This is NOT where domain-specific backends live. Those go in
{domain}/backends/. This module contains shared NUMERIC infrastructure.

Submodules:
    timing: Execution timing utilities
    tolerances: Tolerance tiers for comparing accumulation strategies
"""

from pymoments.core.compute.timing import Timer, timed
from pymoments.core.compute.tolerances import (
    ToleranceTier,
    EXACT,
    STREAMING,
    MERGE,
    HIGHER_MOMENT,
    select_tolerance,
)

__all__ = [
    # Timing
    "Timer",
    "timed",
    # Tolerances
    "ToleranceTier",
    "EXACT",
    "STREAMING",
    "MERGE",
    "HIGHER_MOMENT",
    "select_tolerance",
]
