"""
Tolerance tiers for numerical validation.

Defines precision expectations for the different ways a statistic can be
computed from the same data:
- Exact: integer accumulators, identical bit-for-bit
- Streaming: accept() one value at a time vs. a two-pass bulk build
- Merge: combine() of partitions vs. a single pass over all data
- Higher moments: skewness/kurtosis, whose central sums cancel more

Used by the test suite to compare accumulation strategies.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


EXACT = ToleranceTier(
    rtol=0.0,
    atol=0.0,
    name='exact',
    description='Integer accumulators: exact sums, one final rounding',
)

# A handful of ULPs for the mean and second moment
STREAMING = ToleranceTier(
    rtol=1e-13,
    atol=1e-14,
    name='streaming',
    description='Updating (accept) vs. two-pass (of) mean and variance',
)

MERGE = ToleranceTier(
    rtol=1e-13,
    atol=1e-14,
    name='merge',
    description='Pairwise combine of partitions vs. a single pass',
)

HIGHER_MOMENT = ToleranceTier(
    rtol=1e-10,
    atol=1e-12,
    name='higher_moment',
    description='Skewness and kurtosis across accumulation strategies',
)


def select_tolerance(statistic_name: str, exact: bool = False) -> ToleranceTier:
    """Select the tolerance tier for a statistic name (e.g. 'kurtosis')."""
    if exact:
        return EXACT
    if statistic_name in ('skewness', 'kurtosis'):
        return HIGHER_MOMENT
    return STREAMING
