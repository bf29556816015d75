"""
Core protocols for PyMoments.

These define structural interfaces that accumulators and backends must
satisfy. We use Protocol (structural typing) rather than ABC (nominal
typing) so the double and integer accumulators need no shared base class.

Design Principles:
    - Minimal contracts: prescribe only what's truly universal
    - Type-safe: use generics to preserve type information through pipelines
"""

from typing import Protocol, TypeVar, Any, runtime_checkable

# Type variables for generic payloads
P = TypeVar('P')  # Parameter payload type
D = TypeVar('D')  # Design type
S = TypeVar('S', bound='StatisticAccumulator')


@runtime_checkable
class StatisticAccumulator(Protocol):
    """
    Protocol for a streaming statistic that supports a parallel fold.

    An accumulator consumes values one at a time with ``accept`` and can
    absorb another accumulator of the same type with ``combine``. The merge
    must be associative and commutative (up to floating-point rounding) so
    that partition boundaries and merge order do not change the result.

    Instances are not synchronized. Each partition accumulator must be
    confined to one thread until the merge, and ``combine`` must run with
    exclusive access to both operands.
    """

    def accept(self, value: Any) -> None:
        """Update the state with one value."""
        ...

    def combine(self: S, other: S) -> S:
        """Merge the state of ``other`` into this instance and return it."""
        ...

    def get_as_double(self) -> float:
        """Read the statistic as a float."""
        ...


@runtime_checkable
class Backend(Protocol[D, P]):
    """
    Protocol for computational backends.

    Each backend knows how to take a domain-specific design and produce
    a domain-specific parameter payload.

    Backends are stateless; all configuration is passed via the design
    or as keyword arguments to solve(). This makes them easy to test.

    Type Parameters:
        D: The design type this backend accepts
        P: The parameter payload type this backend produces
    """

    @property
    def name(self) -> str:
        """
        Backend identifier.

        Convention: '{device}_{algorithm}'
        Examples: 'cpu_fold'
        """
        ...

    def solve(self, design: D, **kwargs: Any) -> 'Result[P]':
        """
        Execute the statistical computation.

        Args:
            design: Domain-specific data container

        Returns:
            Result envelope containing parameter payload and metadata

        Raises:
            ValidationError: If design is invalid for this backend
        """
        ...
