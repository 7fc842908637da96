"""
Intraday Price Correlation Heatmap

A research tool for measuring how closely the intraday prices of a set of
tickers move together, with per-ticker descriptive statistics.
"""

__version__ = "0.1.0"
