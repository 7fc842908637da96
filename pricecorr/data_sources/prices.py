"""
Intraday price download.

This module downloads one-minute bars from yfinance and turns them into
PriceSample lists. When a download fails, it can fall back to generated mock
prices so the heatmap still has something to show.
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Union
import numpy as np
import pandas as pd
import yfinance as yf
from pricecorr.entities import PriceSample, to_utc_timestamp
from pricecorr.errors import DataError


logger = logging.getLogger(__name__)

DEFAULT_TICKERS = ["AAPL", "MSFT", "GOOGL", "AMZN", "META"]

# (label, minutes) windows offered for the heatmap and single-stock views
CORRELATION_TIME_RANGES = [
    ("1 hour", 60),
    ("4 hours", 240),
    ("1 day", 1440),
    ("1 week", 10080),
]
STOCK_TIME_RANGES = [
    ("5 minutes", 5),
    ("15 minutes", 15),
    ("30 minutes", 30),
    ("1 hour", 60),
    ("4 hours", 240),
    ("1 day", 1440),
]

# Mock prices: uniform base in this range plus a sine wave over the minute index
MOCK_BASE_RANGE = (100.0, 150.0)
MOCK_WAVE_AMPLITUDE = 5.0
MOCK_WAVE_PERIOD = 5.0

NowLike = Optional[Union[str, datetime, pd.Timestamp]]


def normalize_symbol(symbol: str) -> str:
    """Strip and upper-case a ticker symbol."""
    normalized = symbol.strip().upper()
    if not normalized:
        raise ValueError("symbol cannot be empty")
    return normalized


def _window_end(now: NowLike) -> pd.Timestamp:
    """Return the end of the fetch window as a tz-aware UTC timestamp."""
    if now is None:
        return pd.Timestamp.now(tz="UTC")
    return to_utc_timestamp(now).tz_localize("UTC")


def history_to_samples(symbol: str, history: pd.DataFrame) -> List[PriceSample]:
    """
    Convert a yfinance history frame to time-ordered samples.

    Rows with a missing or non-finite Close are dropped.
    """
    if history.empty or "Close" not in history.columns:
        return []

    closes = history["Close"].dropna().sort_index()
    closes = closes[np.isfinite(closes)]
    return [
        PriceSample(symbol=symbol, price=price, timestamp=timestamp)
        for timestamp, price in closes.items()
    ]


def download_price_samples(
    symbol: str,
    minutes: int,
    now: NowLike = None
) -> List[PriceSample]:
    """
    Download one-minute closes for the last `minutes` minutes.

    Args:
        symbol: Ticker symbol
        minutes: Length of the window in minutes
        now: End of the window (defaults to the current time)

    Returns:
        Samples ordered by timestamp ascending

    Raises:
        DataError: If the download fails or returns no data
    """
    end = _window_end(now)
    start = end - pd.Timedelta(minutes=minutes)

    logger.info(f"Fetching {symbol} 1m bars ({start.isoformat()} to {end.isoformat()})")

    try:
        history = yf.Ticker(symbol).history(
            start=start.to_pydatetime(),
            end=end.to_pydatetime(),
            interval="1m"
        )
    except Exception as e:
        raise DataError(f"Failed to download price data for {symbol}: {e}") from e

    samples = history_to_samples(symbol, history)
    if not samples:
        raise DataError(f"No data returned for {symbol}")

    return samples


def generate_mock_samples(
    symbol: str,
    minutes: int,
    now: NowLike = None,
    seed: Optional[int] = None
) -> List[PriceSample]:
    """
    Generate one mock sample per minute, oldest first.

    Covers now - minutes through now inclusive, so minutes + 1 samples are
    returned. Each price is a random base in MOCK_BASE_RANGE plus a sine wave,
    rounded to cents.

    Args:
        symbol: Ticker symbol
        minutes: Length of the window in minutes
        now: End of the window (defaults to the current time)
        seed: Optional seed for reproducible prices

    Returns:
        List of PriceSample
    """
    end = _window_end(now)
    rng = np.random.default_rng(seed)

    samples = []
    for i in range(minutes, -1, -1):
        base_price = rng.uniform(*MOCK_BASE_RANGE)
        price = base_price + np.sin(i / MOCK_WAVE_PERIOD) * MOCK_WAVE_AMPLITUDE
        samples.append(PriceSample(
            symbol=symbol,
            price=round(float(price), 2),
            timestamp=end - pd.Timedelta(minutes=i)
        ))

    return samples


def fetch_price_samples(
    symbol: str,
    minutes: int = 30,
    use_mock_fallback: bool = True,
    now: NowLike = None
) -> List[PriceSample]:
    """
    Fetch recent prices for one symbol.

    Preconditions:
        - minutes > 0

    Postconditions:
        - Samples are ordered by timestamp ascending
        - With use_mock_fallback, a failed download yields mock samples

    Args:
        symbol: Ticker symbol (case-insensitive)
        minutes: Length of the window in minutes
        use_mock_fallback: Return mock data instead of raising on failure
        now: End of the window (defaults to the current time)

    Returns:
        List of PriceSample

    Raises:
        ValueError: If minutes is not positive or symbol is empty
        DataError: If the download fails and use_mock_fallback is False
    """
    if minutes <= 0:
        raise ValueError(f"minutes must be positive, got {minutes}")

    symbol = normalize_symbol(symbol)

    try:
        return download_price_samples(symbol, minutes, now=now)
    except DataError as e:
        if not use_mock_fallback:
            raise
        logger.warning(f"Using mock data for {symbol}: {e}")
        return generate_mock_samples(symbol, minutes, now=now)


def fetch_all_prices(
    symbols: Sequence[str],
    minutes: int = 60,
    use_mock_fallback: bool = True,
    now: NowLike = None
) -> Dict[str, List[PriceSample]]:
    """
    Fetch recent prices for several symbols.

    A symbol whose fetch fails maps to an empty list, which the correlation
    engine renders as zero correlation.

    Args:
        symbols: Ticker symbols
        minutes: Length of the window in minutes
        use_mock_fallback: Passed through to fetch_price_samples
        now: End of the window (defaults to the current time)

    Returns:
        Mapping of normalized symbol -> samples, in the order of symbols
    """
    results = {}
    for symbol in symbols:
        symbol = normalize_symbol(symbol)
        try:
            results[symbol] = fetch_price_samples(
                symbol, minutes, use_mock_fallback=use_mock_fallback, now=now
            )
        except DataError as e:
            logger.error(f"Error fetching data for {symbol}: {e}")
            results[symbol] = []

    return results
