"""
Lag-1 autocorrelation of price changes.

Measures whether one period's price change predicts the next one's: positive
values suggest momentum, negative values mean reversion.
"""

from typing import List, Sequence
import numpy as np
from pricecorr.analytics.correlation import correlate


def first_differences(prices: Sequence[float]) -> List[float]:
    """Period-over-period changes, prices[i] - prices[i - 1]; one fewer than prices."""
    arr = np.asarray(prices, dtype=float)
    if arr.size < 2:
        return []
    return np.diff(arr).tolist()


def lag_one_autocorrelation(prices: Sequence[float]) -> float:
    """
    Correlation between consecutive price changes.

    The first differences are split into current = diffs[:-1] and
    next = diffs[1:], paired positionally, and correlated.

    Postconditions:
        - Returns 0.0 when there are fewer than two differences
        - Returns 0.0 when the differences are constant

    Args:
        prices: Time-ordered prices of one symbol

    Returns:
        Lag-1 autocorrelation in [-1, 1]
    """
    diffs = first_differences(prices)
    if len(diffs) <= 1:
        return 0.0
    return correlate(diffs[:-1], diffs[1:])
