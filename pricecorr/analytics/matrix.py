"""
Correlation matrix construction over many symbols.

Each distinct pair is aligned on minute buckets and correlated once; the
value is mirrored into both cells so the result is symmetric by construction.
"""

from typing import Dict, Mapping, Sequence
from pricecorr.entities import CorrelationMatrix, PriceSample, SeriesStatistics, prices_of
from pricecorr.analytics.alignment import align_series
from pricecorr.analytics.correlation import correlate
from pricecorr.analytics.statistics import describe


def pair_correlation(
    series_a: Sequence[PriceSample],
    series_b: Sequence[PriceSample]
) -> float:
    """Correlate two series over their shared minute buckets; 0.0 if none are shared."""
    aligned = align_series(series_a, series_b)
    if not aligned:
        return 0.0
    return correlate(
        [pair.value1 for pair in aligned],
        [pair.value2 for pair in aligned]
    )


def build_matrix(
    series_by_symbol: Mapping[str, Sequence[PriceSample]]
) -> CorrelationMatrix:
    """
    Build the full symmetric correlation matrix.

    Symbols keep the iteration order of series_by_symbol, so callers that
    need reproducible ordering should pass an ordered mapping.

    Preconditions:
        - Each series is ordered by timestamp

    Postconditions:
        - matrix[a][a] == 1.0 for every symbol
        - matrix[a][b] == matrix[b][a] for every pair
        - Cells involving an empty series (other than its diagonal) are 0.0
        - Never raises on degenerate data

    Args:
        series_by_symbol: Mapping of symbol -> time-ordered samples

    Returns:
        CorrelationMatrix over all symbols
    """
    symbols = list(series_by_symbol.keys())
    values = {symbol: {} for symbol in symbols}

    for i, symbol1 in enumerate(symbols):
        # A symbol is perfectly correlated with itself; never computed
        values[symbol1][symbol1] = 1.0

        for symbol2 in symbols[i + 1:]:
            correlation = pair_correlation(
                series_by_symbol[symbol1],
                series_by_symbol[symbol2]
            )
            values[symbol1][symbol2] = correlation
            values[symbol2][symbol1] = correlation

    return CorrelationMatrix(symbols, values)


def symbol_statistics(
    series_by_symbol: Mapping[str, Sequence[PriceSample]]
) -> Dict[str, SeriesStatistics]:
    """Mean and standard deviation of each symbol's prices."""
    return {
        symbol: describe(prices_of(series))
        for symbol, series in series_by_symbol.items()
    }
