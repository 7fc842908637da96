"""
Command-line interface for the correlation tool.

This module provides CLI commands for computing a correlation matrix across
several tickers and for summarizing a single ticker.
"""

import argparse
import logging
import sys
import warnings
from typing import Dict, List

# Suppress yfinance warnings about intraday data (expected behavior)
warnings.filterwarnings("ignore", message=".*1m data not available.*")
warnings.filterwarnings("ignore", message=".*possibly delisted.*")

from pricecorr.entities import PriceSample
from pricecorr.analytics.matrix import build_matrix, symbol_statistics
from pricecorr.analytics.stock_summary import summarize_stock
from pricecorr.data_sources.prices import DEFAULT_TICKERS, fetch_all_prices, fetch_price_samples
from pricecorr.reporting.charts import plot_price_series
from pricecorr.reporting.colors import describe_correlation
from pricecorr.reporting.report import Report
from pricecorr.errors import PriceCorrError


def parse_tickers(value: str) -> List[str]:
    """Split a comma-separated ticker list, dropping blanks and duplicates."""
    tickers = [t.strip().upper() for t in value.split(",") if t.strip()]
    return list(dict.fromkeys(tickers))


def drop_empty_series(stock_data: Dict[str, List[PriceSample]]) -> Dict[str, List[PriceSample]]:
    """Keep only the tickers that returned data, warning about the rest."""
    valid = {ticker: series for ticker, series in stock_data.items() if series}
    missing = [ticker for ticker in stock_data if ticker not in valid]
    if missing:
        print(f"  Warning: no data for {', '.join(missing)}")
    return valid


def format_matrix(matrix) -> str:
    """Render a CorrelationMatrix as a fixed-width text table."""
    width = max([len(s) for s in matrix.symbols] + [6]) + 2
    lines = [" " * width + "".join(s.rjust(width) for s in matrix.symbols)]
    for row_symbol in matrix.symbols:
        cells = "".join(
            f"{matrix.get(row_symbol, col_symbol):.2f}".rjust(width)
            for col_symbol in matrix.symbols
        )
        lines.append(row_symbol.ljust(width) + cells)
    return "\n".join(lines)


def correlation_command(args):
    """Compute and print the correlation matrix for several tickers."""
    tickers = parse_tickers(args.tickers)
    if not tickers:
        print("✗ Error: no tickers given", file=sys.stderr)
        sys.exit(1)

    print(f"Computing correlations for {', '.join(tickers)} over the last {args.minutes} minutes...")

    try:
        print("  Downloading price data...")
        stock_data = fetch_all_prices(
            tickers, args.minutes, use_mock_fallback=not args.no_mock
        )
        stock_data = drop_empty_series(stock_data)

        if not stock_data:
            print("\n✗ Error: no data available for the selected tickers", file=sys.stderr)
            sys.exit(1)

        matrix = build_matrix(stock_data)
        statistics = symbol_statistics(stock_data)

        print("\nCorrelation matrix:")
        print(format_matrix(matrix))

        print("\nTicker statistics:")
        for ticker, stats in statistics.items():
            print(f"  {ticker}: avg ${stats.mean:.2f}, std dev ${stats.std_dev:.2f}")

        pairs = sorted(matrix.pairs(), key=lambda p: abs(p[2]), reverse=True)
        if pairs:
            symbol1, symbol2, value = pairs[0]
            print(f"\nStrongest pair: {symbol1}-{symbol2} ({value:.3f}, {describe_correlation(value).lower()})")

        if args.report:
            print("\n  Generating report...")
            report_path = Report(args.output_dir).generate_report(stock_data, args.minutes)
            print(f"  Report saved to: {report_path}")

    except (PriceCorrError, ValueError) as e:
        print(f"\n✗ Error: {e}", file=sys.stderr)
        sys.exit(1)


def stock_command(args):
    """Summarize a single ticker."""
    ticker = args.ticker.strip().upper()

    print(f"Summarizing {ticker} over the last {args.minutes} minutes...")

    try:
        samples = fetch_price_samples(
            ticker, args.minutes, use_mock_fallback=not args.no_mock
        )
        summary = summarize_stock(samples, symbol=ticker)

        print(f"\n  Price: ${summary.current_price:.2f} "
              f"({summary.change:+.2f}, {summary.change_percent:+.2f}%)")
        print(f"  Average price: ${summary.mean:.2f}")
        print(f"  Standard deviation: ${summary.std_dev:.2f} from mean")
        print(f"  Price autocorrelation (1-lag): {summary.autocorrelation:.4f}")
        print(f"  Samples: {summary.n_observations}")

        if args.chart:
            plot_price_series(samples, args.chart, ticker)
            print(f"\n  Chart saved to: {args.chart}")

    except (PriceCorrError, ValueError) as e:
        print(f"\n✗ Error: {e}", file=sys.stderr)
        sys.exit(1)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        description="Intraday Price Correlation",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Correlation command
    corr_parser = subparsers.add_parser("correlation", help="Correlation matrix across tickers")
    corr_parser.add_argument(
        "tickers", nargs="?", default=",".join(DEFAULT_TICKERS),
        help="Comma-separated tickers (default: AAPL,MSFT,GOOGL,AMZN,META)"
    )
    corr_parser.add_argument("--minutes", type=int, default=60, help="Time window in minutes (default: 60)")
    corr_parser.add_argument("--report", action="store_true", help="Write a markdown report")
    corr_parser.add_argument("--output-dir", default="reports", help="Report directory (default: reports)")
    corr_parser.add_argument("--no-mock", action="store_true", help="Do not fall back to mock data")

    # Stock command
    stock_parser = subparsers.add_parser("stock", help="Summarize a single ticker")
    stock_parser.add_argument("ticker", help="Ticker symbol")
    stock_parser.add_argument("--minutes", type=int, default=30, help="Time window in minutes (default: 30)")
    stock_parser.add_argument("--chart", help="Save a price chart to this path")
    stock_parser.add_argument("--no-mock", action="store_true", help="Do not fall back to mock data")

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    if args.command == "correlation":
        correlation_command(args)
    elif args.command == "stock":
        stock_command(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
