"""
Color legend for correlation values.

Maps a coefficient in [-1, 1] to one of five bands, from strong negative
(dark red) to strong positive (dark green).
"""

from typing import List, Tuple


# (lower bound, inclusive?, label, color), checked top to bottom
_BANDS = [
    (0.7, True, "Strong positive", "#2e7d32"),
    (0.3, True, "Moderate positive", "#689f38"),
    (-0.3, False, "Weak", "#9e9e9e"),
    (-0.7, False, "Moderate negative", "#ef6c00"),
]
_FLOOR_BAND = ("Strong negative", "#c62828")

CORRELATION_LEGEND: List[Tuple[str, str]] = [
    (label, color) for _, _, label, color in _BANDS
] + [_FLOOR_BAND]


def _band(value: float) -> Tuple[str, str]:
    for bound, inclusive, label, color in _BANDS:
        if value > bound or (inclusive and value == bound):
            return label, color
    return _FLOOR_BAND


def color_for_correlation(value: float) -> str:
    """
    Hex color for a correlation coefficient.

    Bands: >= 0.7 dark green, >= 0.3 green, > -0.3 grey,
    > -0.7 orange, otherwise dark red.
    """
    return _band(value)[1]


def describe_correlation(value: float) -> str:
    """Human-readable strength label for a correlation coefficient."""
    return _band(value)[0]
