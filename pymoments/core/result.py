"""
Result envelope returned by the solver entry points.

A backend fills in a domain payload (``params``) and the envelope carries
the bookkeeping shared by every solver: what was computed and how
(``info``), where the time went (``timing``), and the non-fatal
diagnostics collected on the way (``warnings``).

The envelope is frozen. Accumulators are mutable while data streams in;
once a solver has read them into a payload the result no longer changes.
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')  # Payload type


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable output of a backend ``solve`` call.

    Attributes:
        params: Payload, e.g. DescriptiveParams with per-column arrays
        info: Run metadata (statistics requested, partitions, bias, exact)
        timing: Seconds per solver section plus 'total_seconds', or None
        backend_name: Backend identifier such as 'cpu_fold'
        warnings: Diagnostics that did not stop the computation

    Examples:
        >>> Result(
        ...     params=DescriptiveParams(count=10, mean=np.array([5.5])),
        ...     info={'partitions': 2, 'exact': False},
        ...     timing={'total_seconds': 1e-4, 'combine': 2e-5},
        ...     backend_name='cpu_fold',
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def has_warning(self, substring: str) -> bool:
        """True if any warning message contains ``substring``."""
        return any(substring in w for w in self.warnings)
