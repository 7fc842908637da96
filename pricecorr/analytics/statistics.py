"""
Descriptive statistics over price sequences.

Every function here is pure and total: an empty sequence yields 0.0 rather
than NaN or an exception, so callers can render "no data" without
special-casing it.
"""

from typing import Sequence
import numpy as np
from pricecorr.entities import SeriesStatistics


def mean(values: Sequence[float]) -> float:
    """
    Arithmetic mean of a sequence.

    Postconditions:
        - Returns 0.0 for an empty sequence

    Args:
        values: Numeric sequence

    Returns:
        Mean as a Python float
    """
    arr = np.asarray(values, dtype=float)
    if arr.size == 0:
        return 0.0
    return float(arr.mean())


def std_dev(values: Sequence[float]) -> float:
    """
    Population standard deviation (divides by N, not N - 1).

    Computed as the square root of the mean squared deviation from the mean.

    Postconditions:
        - Returns 0.0 for an empty sequence
        - Returns 0.0 for a single value

    Args:
        values: Numeric sequence

    Returns:
        Standard deviation as a Python float
    """
    arr = np.asarray(values, dtype=float)
    if arr.size == 0:
        return 0.0
    squared_deviations = (arr - mean(arr)) ** 2
    return float(np.sqrt(mean(squared_deviations)))


def describe(values: Sequence[float]) -> SeriesStatistics:
    """Mean and population standard deviation of a price sequence."""
    return SeriesStatistics(mean=mean(values), std_dev=std_dev(values))
