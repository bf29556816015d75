"""
Natural ranking of data.

Ranks are the positions of the values in ascending order, starting at 1.
Two strategies control the cases the ordering leaves open: how NaN values
are placed and how ties share their block of ranks.

    >>> NaturalRanking()([20, 17, 30, 42.3, 17, 50])
    array([3. , 1.5, 4. , 5. , 1.5, 6. ])
"""

from __future__ import annotations

from enum import Enum
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pymoments.core.exceptions import ValidationError
from pymoments.core.validation import check_array, check_1d


class NaNStrategy(Enum):
    """
    Handling of NaN values.

    MINIMAL: NaN is ranked as negative infinity (smallest values).
    MAXIMAL: NaN is ranked as positive infinity (largest values).
    REMOVED: NaN values are removed; the output is shorter than the input.
    FIXED: NaN values are left in place; the other values are ranked.
    FAILED: NaN values raise ValidationError.
    """
    MINIMAL = 'minimal'
    MAXIMAL = 'maximal'
    REMOVED = 'removed'
    FIXED = 'fixed'
    FAILED = 'failed'


class TiesStrategy(Enum):
    """
    Ranks assigned to a block of equal values.

    For the block [2, 2] in [1, 2, 2, 3]:

    SEQUENTIAL: ranks in order of occurrence (2, 3).
    MINIMUM: the lowest rank of the block (2, 2).
    MAXIMUM: the highest rank of the block (3, 3).
    AVERAGE: the mean rank of the block (2.5, 2.5).
    RANDOM: a random permutation of the block's ranks.
    """
    SEQUENTIAL = 'sequential'
    MINIMUM = 'minimum'
    MAXIMUM = 'maximum'
    AVERAGE = 'average'
    RANDOM = 'random'


class NaturalRanking:
    """
    Rank transformation in natural (ascending) order.

    Parameters
    ----------
    nan_strategy : NaNStrategy
        Default FAILED.
    ties_strategy : TiesStrategy
        Default AVERAGE.
    seed : int or None
        Seed of the generator used by TiesStrategy.RANDOM. Successive
        calls on the same instance continue the random stream.
    """

    def __init__(
        self,
        nan_strategy: NaNStrategy = NaNStrategy.FAILED,
        ties_strategy: TiesStrategy = TiesStrategy.AVERAGE,
        seed: int | None = None,
    ):
        if not isinstance(nan_strategy, NaNStrategy):
            raise ValidationError(
                f"nan_strategy: expected NaNStrategy, got {nan_strategy!r}"
            )
        if not isinstance(ties_strategy, TiesStrategy):
            raise ValidationError(
                f"ties_strategy: expected TiesStrategy, got {ties_strategy!r}"
            )
        self._nan_strategy = nan_strategy
        self._ties_strategy = ties_strategy
        self._rng = np.random.default_rng(seed)

    @property
    def nan_strategy(self) -> NaNStrategy:
        return self._nan_strategy

    @property
    def ties_strategy(self) -> TiesStrategy:
        return self._ties_strategy

    def apply(self, data: ArrayLike) -> NDArray[np.floating[Any]]:
        """
        Rank the data.

        Args:
            data: 1D array-like of values

        Returns:
            Float array of ranks. Its length equals the input length unless
            NaNStrategy.REMOVED dropped values.

        Raises:
            ValidationError: If data contains NaN under NaNStrategy.FAILED
            DimensionError: If data is not 1D
        """
        x = check_array(data, 'data')
        check_1d(x, 'data')
        x = x.astype(np.float64, copy=True)

        nan_mask = np.isnan(x)
        if nan_mask.any():
            strategy = self._nan_strategy
            if strategy is NaNStrategy.FAILED:
                raise ValidationError(f"Invalid data: {x[nan_mask][0]}")
            if strategy is NaNStrategy.MINIMAL:
                x[nan_mask] = -np.inf
                nan_mask[:] = False
            elif strategy is NaNStrategy.MAXIMAL:
                x[nan_mask] = np.inf
                nan_mask[:] = False
            elif strategy is NaNStrategy.REMOVED:
                x = x[~nan_mask]
                nan_mask = np.zeros(x.shape[0], dtype=bool)

        idx = np.flatnonzero(~nan_mask)
        if idx.shape[0] == 0:
            # Empty, or all NaN left in place
            return x

        ranks = np.full(x.shape[0], np.nan)
        ranks[idx] = self._rank(x[idx])
        return ranks

    __call__ = apply

    def _rank(self, v: NDArray[np.float64]) -> NDArray[np.float64]:
        """Ranks of non-NaN values."""
        m = v.shape[0]
        order = np.argsort(v, kind='stable')
        sv = v[order]

        # Tie groups over the sorted values
        new_group = np.empty(m, dtype=bool)
        new_group[0] = True
        new_group[1:] = sv[1:] != sv[:-1]
        starts = np.flatnonzero(new_group)
        lengths = np.diff(np.append(starts, m))
        group_id = np.cumsum(new_group) - 1
        g_start = starts[group_id]
        g_len = lengths[group_id]

        ties = self._ties_strategy
        if ties is TiesStrategy.SEQUENTIAL:
            r = np.arange(1, m + 1, dtype=np.float64)
        elif ties is TiesStrategy.MINIMUM:
            r = (g_start + 1).astype(np.float64)
        elif ties is TiesStrategy.MAXIMUM:
            r = (g_start + g_len).astype(np.float64)
        elif ties is TiesStrategy.AVERAGE:
            r = g_start + (g_len + 1) / 2.0
        else:
            r = np.arange(1, m + 1, dtype=np.float64)
            for s, n in zip(starts[lengths > 1], lengths[lengths > 1]):
                r[s:s + n] = s + 1 + self._rng.permutation(n)

        ranks = np.empty(m, dtype=np.float64)
        ranks[order] = r
        return ranks

    def __repr__(self) -> str:
        return (
            f"NaturalRanking(nan_strategy={self._nan_strategy.name}, "
            f"ties_strategy={self._ties_strategy.name})"
        )
