"""
FastAPI web interface for the correlation heatmap.

This module serves the correlation matrix and single-stock summaries as JSON.
Implements input validation on tickers and time windows.
"""

import logging
import re
from typing import List
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, field_validator
from pricecorr.analytics.matrix import build_matrix, symbol_statistics
from pricecorr.analytics.stock_summary import summarize_stock
from pricecorr.data_sources.prices import (
    CORRELATION_TIME_RANGES, DEFAULT_TICKERS, STOCK_TIME_RANGES,
    fetch_all_prices, fetch_price_samples
)
from pricecorr.reporting.colors import CORRELATION_LEGEND, color_for_correlation
from pricecorr.errors import DataError


logger = logging.getLogger(__name__)

app = FastAPI(title="Price Correlation Heatmap")

# Security: CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://localhost:8000"],
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

MAX_TICKERS = 50
TICKER_PATTERN = re.compile(r"^[A-Z0-9.\-]+$")


# Input validation models
class CorrelationRequest(BaseModel):
    tickers: List[str]
    minutes: int = 60

    @field_validator("tickers")
    @classmethod
    def validate_tickers(cls, v):
        if not v:
            raise ValueError("At least one ticker is required")
        if len(v) > MAX_TICKERS:  # Limit max tickers per request
            raise ValueError(f"Too many tickers (max {MAX_TICKERS})")
        validated = []
        for ticker in v:
            ticker = validate_ticker(ticker)
            if ticker not in validated:
                validated.append(ticker)
        return validated

    @field_validator("minutes")
    @classmethod
    def validate_minutes(cls, v):
        allowed = [value for _, value in CORRELATION_TIME_RANGES]
        if v not in allowed:
            raise ValueError(f"minutes must be one of {allowed}")
        return v


def validate_ticker(ticker: str) -> str:
    """Clean and validate a single ticker symbol."""
    ticker = ticker.strip().upper()
    if not ticker or len(ticker) > 10:
        raise ValueError(f"Invalid ticker: {ticker}")
    # Allow alphanumeric, dots (BRK.A), and hyphens (BF-B)
    if not TICKER_PATTERN.match(ticker):
        raise ValueError(f"Invalid ticker format: {ticker}")
    return ticker


@app.get("/api/time-ranges")
def time_ranges():
    """Time windows offered by each view."""
    return {
        "correlation": [{"label": label, "value": value} for label, value in CORRELATION_TIME_RANGES],
        "stock": [{"label": label, "value": value} for label, value in STOCK_TIME_RANGES],
    }


@app.get("/api/correlation")
def correlation(tickers: str = ",".join(DEFAULT_TICKERS), minutes: int = 60, mock: bool = True):
    """Correlation matrix, per-ticker statistics and cell colors."""
    try:
        request = CorrelationRequest(tickers=tickers.split(","), minutes=minutes)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    stock_data = fetch_all_prices(request.tickers, request.minutes, use_mock_fallback=mock)

    # Tickers without data are reported rather than shown as all-zero rows
    valid_data = {ticker: series for ticker, series in stock_data.items() if series}
    missing = [ticker for ticker in stock_data if ticker not in valid_data]
    if missing:
        logger.warning(f"No data available for {', '.join(missing)}")

    matrix = build_matrix(valid_data)
    statistics = symbol_statistics(valid_data)

    return {
        "tickers": matrix.symbols,
        "minutes": request.minutes,
        "matrix": matrix.to_dict(),
        "statistics": {ticker: stats.to_dict() for ticker, stats in statistics.items()},
        "colors": {
            row: {col: color_for_correlation(value) for col, value in cells.items()}
            for row, cells in matrix.to_dict().items()
        },
        "legend": [{"label": label, "color": color} for label, color in CORRELATION_LEGEND],
        "missing": missing,
    }


@app.get("/api/stocks/{ticker}")
def stock(ticker: str, minutes: int = 30, mock: bool = True):
    """Single-stock summary with its price series."""
    allowed = [value for _, value in STOCK_TIME_RANGES]
    if minutes not in allowed:
        raise HTTPException(status_code=400, detail=f"minutes must be one of {allowed}")

    try:
        ticker = validate_ticker(ticker)
        samples = fetch_price_samples(ticker, minutes, use_mock_fallback=mock)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except DataError as e:
        raise HTTPException(status_code=502, detail=str(e))

    summary = summarize_stock(samples, symbol=ticker)

    result = summary.to_dict()
    result["minutes"] = minutes
    result["prices"] = [sample.to_dict() for sample in samples]
    return result


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
