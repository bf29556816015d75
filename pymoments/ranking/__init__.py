"""
Rank transformations.

Public API:
    NaturalRanking  - ranks in ascending order
    NaNStrategy     - placement of NaN values
    TiesStrategy    - ranks shared by equal values
"""

from pymoments.ranking.natural import NaturalRanking, NaNStrategy, TiesStrategy

__all__ = [
    "NaturalRanking",
    "NaNStrategy",
    "TiesStrategy",
]
