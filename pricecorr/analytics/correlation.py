"""
Pearson correlation coefficient.

The contract is permissive: malformed or degenerate input (mismatched
lengths, empty or constant sequences, non-finite values) yields 0.0 instead
of raising, and the result is always clamped to [-1, 1].
"""

from typing import Sequence
import numpy as np
from pricecorr.analytics.statistics import mean


def correlate(xs: Sequence[float], ys: Sequence[float]) -> float:
    """
    Compute the Pearson correlation between two equal-length sequences.

    Preconditions:
        - len(xs) == len(ys) (otherwise 0.0 is returned)

    Postconditions:
        - Result lies in [-1, 1]
        - correlate(xs, ys) == correlate(ys, xs)
        - Returns 0.0 when either sequence has zero variance

    Args:
        xs: First numeric sequence
        ys: Second numeric sequence

    Returns:
        Correlation coefficient as a Python float
    """
    x = np.asarray(xs, dtype=float)
    y = np.asarray(ys, dtype=float)

    if x.size != y.size or x.size == 0:
        return 0.0
    if not (np.isfinite(x).all() and np.isfinite(y).all()):
        return 0.0
    # Constant input: the float mean may not reproduce the value exactly
    if np.ptp(x) == 0 or np.ptp(y) == 0:
        return 0.0

    # Pearson r is scale-invariant; scaling to [-1, 1] keeps the sums finite
    x = x / np.abs(x).max()
    y = y / np.abs(y).max()

    dx = x - mean(x)
    dy = y - mean(y)

    covariance = float(np.dot(dx, dy))
    variance_x = float(np.dot(dx, dx))
    variance_y = float(np.dot(dy, dy))

    if variance_x == 0 or variance_y == 0:
        return 0.0

    r = covariance / np.sqrt(variance_x * variance_y)
    if not np.isfinite(r):
        return 0.0

    # Floating-point error can push |r| slightly past 1
    return float(min(1.0, max(-1.0, r)))
