"""
Single-stock summary: latest move, descriptive statistics and momentum.
"""

from dataclasses import dataclass, asdict
from typing import Optional, Sequence
from pricecorr.entities import PriceSample, prices_of
from pricecorr.analytics.statistics import describe
from pricecorr.analytics.autocorrelation import lag_one_autocorrelation


@dataclass(frozen=True)
class StockSummary:
    """
    Summary of one symbol over a time window.

    Attributes:
        symbol: Ticker symbol
        current_price: Latest price (0.0 without data)
        previous_price: Price before the latest one
        change: current_price - previous_price
        change_percent: change as a percentage of previous_price
        mean: Mean price over the window
        std_dev: Population standard deviation of price
        autocorrelation: Lag-1 autocorrelation of price changes
        n_observations: Number of samples in the window
    """
    symbol: str
    current_price: float
    previous_price: float
    change: float
    change_percent: float
    mean: float
    std_dev: float
    autocorrelation: float
    n_observations: int

    def to_dict(self) -> dict:
        return asdict(self)

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"StockSummary({self.symbol}, price={self.current_price:.2f}, "
            f"change={self.change_percent:+.2f}%, autocorr={self.autocorrelation:.3f})"
        )


def summarize_stock(
    series: Sequence[PriceSample],
    symbol: Optional[str] = None
) -> StockSummary:
    """
    Summarize a time-ordered price series.

    Preconditions:
        - series is ordered by timestamp ascending

    Postconditions:
        - An empty series yields an all-zero summary
        - change_percent is 0.0 when previous_price is 0

    Args:
        series: Samples of one symbol, oldest first
        symbol: Symbol to report (defaults to the samples' symbol)

    Returns:
        StockSummary
    """
    if symbol is None:
        symbol = series[0].symbol if series else ""

    prices = prices_of(series)
    current_price = prices[-1] if prices else 0.0
    previous_price = prices[-2] if len(prices) >= 2 else current_price

    change = current_price - previous_price
    change_percent = change / previous_price * 100 if previous_price != 0 else 0.0

    stats = describe(prices)

    return StockSummary(
        symbol=symbol,
        current_price=current_price,
        previous_price=previous_price,
        change=change,
        change_percent=change_percent,
        mean=stats.mean,
        std_dev=stats.std_dev,
        autocorrelation=lag_one_autocorrelation(prices),
        n_observations=len(prices)
    )
