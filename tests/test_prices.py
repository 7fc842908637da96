"""
Tests for intraday price downloads.

Tests cover:
- Converting yfinance history to samples
- Mock data generation
- Mock fallback on download failure
- Mocked yfinance calls for one and several tickers
"""

import logging
import pytest
import pandas as pd
import numpy as np
from unittest.mock import Mock, patch
from pricecorr.data_sources.prices import (
    fetch_all_prices, fetch_price_samples, download_price_samples,
    generate_mock_samples, history_to_samples, normalize_symbol,
    MOCK_BASE_RANGE, MOCK_WAVE_AMPLITUDE
)
from pricecorr.entities import prices_of
from pricecorr.errors import DataError


NOW = pd.Timestamp("2024-01-02 15:00:00", tz="UTC")


def make_history(closes, start="2024-01-02 09:30:00", tz="US/Eastern"):
    """Build a yfinance-like minute history frame."""
    index = pd.date_range(start, periods=len(closes), freq="min", tz=tz)
    return pd.DataFrame({
        "Open": closes,
        "High": closes,
        "Low": closes,
        "Close": closes,
        "Volume": [1000] * len(closes)
    }, index=index)


class TestHistoryToSamples:
    """Tests for history_to_samples function."""

    def test_converts_close_column(self):
        """Test that Close prices become UTC samples."""
        samples = history_to_samples("AAPL", make_history([100.0, 101.0, 102.0]))

        assert prices_of(samples) == [100.0, 101.0, 102.0]
        assert samples[0].symbol == "AAPL"
        assert samples[0].timestamp == pd.Timestamp("2024-01-02 14:30:00")

    def test_drops_missing_closes(self):
        """Test that NaN closes are skipped."""
        samples = history_to_samples("AAPL", make_history([100.0, np.nan, 102.0]))
        assert prices_of(samples) == [100.0, 102.0]

    def test_drops_infinite_closes(self):
        """Test that infinite closes are skipped."""
        samples = history_to_samples("AAPL", make_history([100.0, np.inf, 101.0, -np.inf]))
        assert prices_of(samples) == [100.0, 101.0]

    def test_sorts_by_time(self):
        """Test that rows are ordered by timestamp."""
        history = make_history([100.0, 101.0, 102.0]).iloc[::-1]
        samples = history_to_samples("AAPL", history)
        assert prices_of(samples) == [100.0, 101.0, 102.0]

    def test_empty_history(self):
        """Test that an empty frame yields no samples."""
        assert history_to_samples("AAPL", pd.DataFrame()) == []


class TestGenerateMockSamples:
    """Tests for generate_mock_samples function."""

    def test_one_sample_per_minute(self):
        """Test count, spacing and order of mock samples."""
        samples = generate_mock_samples("AAPL", 30, now=NOW, seed=1)

        assert len(samples) == 31
        assert samples[-1].timestamp == pd.Timestamp("2024-01-02 15:00:00")
        assert samples[0].timestamp == pd.Timestamp("2024-01-02 14:30:00")
        steps = {b.timestamp - a.timestamp for a, b in zip(samples, samples[1:])}
        assert steps == {pd.Timedelta(minutes=1)}

    def test_prices_in_expected_band(self):
        """Test that prices stay within base range plus wave amplitude."""
        samples = generate_mock_samples("AAPL", 120, now=NOW, seed=2)
        low = MOCK_BASE_RANGE[0] - MOCK_WAVE_AMPLITUDE
        high = MOCK_BASE_RANGE[1] + MOCK_WAVE_AMPLITUDE
        assert all(low <= s.price <= high for s in samples)
        assert all(round(s.price, 2) == s.price for s in samples)

    def test_seed_is_reproducible(self):
        """Test that the same seed gives the same prices."""
        a = generate_mock_samples("AAPL", 10, now=NOW, seed=5)
        b = generate_mock_samples("AAPL", 10, now=NOW, seed=5)
        assert prices_of(a) == prices_of(b)


class TestFetchPriceSamples:
    """Tests for fetch_price_samples function."""

    @patch('pricecorr.data_sources.prices.yf.Ticker')
    def test_downloads_minute_bars(self, mock_ticker_class):
        """Test that yfinance is asked for 1m bars over the window."""
        mock_ticker = Mock()
        mock_ticker.history.return_value = make_history([100.0, 101.0])
        mock_ticker_class.return_value = mock_ticker

        samples = fetch_price_samples("aapl", minutes=30, now=NOW)

        mock_ticker_class.assert_called_once_with("AAPL")
        kwargs = mock_ticker.history.call_args.kwargs
        assert kwargs["interval"] == "1m"
        assert kwargs["end"] - kwargs["start"] == pd.Timedelta(minutes=30)
        assert prices_of(samples) == [100.0, 101.0]

    @patch('pricecorr.data_sources.prices.yf.Ticker')
    def test_empty_data_falls_back_to_mock(self, mock_ticker_class, caplog):
        """Test that empty downloads are replaced with mock data."""
        mock_ticker = Mock()
        mock_ticker.history.return_value = pd.DataFrame()
        mock_ticker_class.return_value = mock_ticker

        with caplog.at_level(logging.WARNING):
            samples = fetch_price_samples("AAPL", minutes=15, now=NOW)

        assert len(samples) == 16
        assert "Using mock data for AAPL" in caplog.text

    @patch('pricecorr.data_sources.prices.yf.Ticker')
    def test_download_error_falls_back_to_mock(self, mock_ticker_class):
        """Test that network errors are replaced with mock data."""
        mock_ticker_class.return_value.history.side_effect = ConnectionError("timeout")

        samples = fetch_price_samples("AAPL", minutes=5, now=NOW)

        assert len(samples) == 6

    @patch('pricecorr.data_sources.prices.yf.Ticker')
    def test_no_fallback_raises(self, mock_ticker_class):
        """Test that DataError propagates when fallback is disabled."""
        mock_ticker_class.return_value.history.side_effect = ConnectionError("timeout")

        with pytest.raises(DataError, match="Failed to download"):
            fetch_price_samples("AAPL", minutes=5, use_mock_fallback=False, now=NOW)

    @patch('pricecorr.data_sources.prices.yf.Ticker')
    def test_empty_data_no_fallback_raises(self, mock_ticker_class):
        """Test that empty data raises DataError without fallback."""
        mock_ticker_class.return_value.history.return_value = pd.DataFrame()

        with pytest.raises(DataError, match="No data returned"):
            download_price_samples("AAPL", 5, now=NOW)

    def test_invalid_minutes_raises(self):
        """Test that a non-positive window is rejected."""
        with pytest.raises(ValueError, match="minutes must be positive"):
            fetch_price_samples("AAPL", minutes=0)

    def test_empty_symbol_raises(self):
        """Test that a blank symbol is rejected."""
        with pytest.raises(ValueError, match="symbol cannot be empty"):
            normalize_symbol("   ")


class TestFetchAllPrices:
    """Tests for fetch_all_prices function."""

    @patch('pricecorr.data_sources.prices.yf.Ticker')
    def test_multiple_tickers(self, mock_ticker_class):
        """Test fetching several tickers keeps their order."""
        histories = {
            "MSFT": make_history([200.0, 201.0]),
            "AAPL": make_history([100.0, 101.0, 102.0]),
        }

        def ticker_side_effect(ticker_str):
            mock_ticker = Mock()
            mock_ticker.history.return_value = histories[ticker_str]
            return mock_ticker

        mock_ticker_class.side_effect = ticker_side_effect

        result = fetch_all_prices(["msft", "AAPL"], minutes=60, now=NOW)

        assert list(result.keys()) == ["MSFT", "AAPL"]
        assert prices_of(result["MSFT"]) == [200.0, 201.0]
        assert len(result["AAPL"]) == 3

    @patch('pricecorr.data_sources.prices.yf.Ticker')
    def test_failed_ticker_maps_to_empty(self, mock_ticker_class, caplog):
        """Test that a failed ticker yields an empty series without fallback."""
        def ticker_side_effect(ticker_str):
            mock_ticker = Mock()
            if ticker_str == "BAD":
                mock_ticker.history.return_value = pd.DataFrame()
            else:
                mock_ticker.history.return_value = make_history([1.0, 2.0])
            return mock_ticker

        mock_ticker_class.side_effect = ticker_side_effect

        with caplog.at_level(logging.ERROR):
            result = fetch_all_prices(["AAPL", "BAD"], use_mock_fallback=False, now=NOW)

        assert result["BAD"] == []
        assert len(result["AAPL"]) == 2
        assert "Error fetching data for BAD" in caplog.text

    @patch('pricecorr.data_sources.prices.yf.Ticker')
    def test_infinite_closes_degrade_gracefully(self, mock_ticker_class):
        """Test that infinite closes are dropped, and an all-infinite ticker maps to empty."""
        histories = {
            "AAPL": make_history([100.0, np.inf, 101.0]),
            "BAD": make_history([np.inf, np.inf]),
        }

        def ticker_side_effect(ticker_str):
            mock_ticker = Mock()
            mock_ticker.history.return_value = histories[ticker_str]
            return mock_ticker

        mock_ticker_class.side_effect = ticker_side_effect

        result = fetch_all_prices(["AAPL", "BAD"], use_mock_fallback=False, now=NOW)

        assert prices_of(result["AAPL"]) == [100.0, 101.0]
        assert result["BAD"] == []

    @patch('pricecorr.data_sources.prices.yf.Ticker')
    def test_all_infinite_closes_fall_back_to_mock(self, mock_ticker_class):
        """Test that a history with no usable closes is replaced with mock data."""
        mock_ticker_class.return_value.history.return_value = make_history([np.inf, np.inf])

        samples = fetch_price_samples("AAPL", minutes=5, now=NOW)

        assert len(samples) == 6
