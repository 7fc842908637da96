"""
Chart generation for reports.

This module creates matplotlib charts for the correlation heatmap and for a
single symbol's intraday prices.
"""

from pathlib import Path
from typing import Sequence
import matplotlib

# Charts are only ever written to files
matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
from pricecorr.entities import CorrelationMatrix, PriceSample, prices_of
from pricecorr.analytics.statistics import mean


def plot_correlation_heatmap(
    matrix: CorrelationMatrix,
    save_path: str
) -> None:
    """
    Plot the correlation matrix as an annotated heatmap.

    Args:
        matrix: CorrelationMatrix to plot
        save_path: Path to save chart
    """
    frame = matrix.to_frame()
    size = max(4, len(matrix) + 2)
    fig, ax = plt.subplots(figsize=(size, size))

    image = ax.imshow(frame.values, cmap="RdYlGn", vmin=-1, vmax=1)
    fig.colorbar(image, ax=ax, fraction=0.046, pad=0.04, label="Correlation")

    ticks = np.arange(len(matrix))
    ax.set_xticks(ticks)
    ax.set_yticks(ticks)
    ax.set_xticklabels(matrix.symbols, rotation=45, ha="right")
    ax.set_yticklabels(matrix.symbols)

    for i, row_symbol in enumerate(matrix.symbols):
        for j, col_symbol in enumerate(matrix.symbols):
            value = matrix.get(row_symbol, col_symbol)
            ax.text(
                j, i, f"{value:.2f}",
                ha="center", va="center",
                color="white" if abs(value) >= 0.7 else "black",
                fontsize=9
            )

    ax.set_title("Price Correlation Matrix")

    plt.tight_layout()
    plt.savefig(save_path, dpi=150, bbox_inches="tight")
    plt.close()


def plot_price_series(
    samples: Sequence[PriceSample],
    save_path: str,
    symbol: str
) -> None:
    """
    Plot intraday prices with a dashed line at their mean.

    Args:
        samples: Time-ordered samples of one symbol
        save_path: Path to save chart
        symbol: Ticker symbol for the title
    """
    fig, ax = plt.subplots(figsize=(10, 6))

    timestamps = [sample.timestamp for sample in samples]
    prices = prices_of(samples)

    ax.plot(timestamps, prices, label="Price", linewidth=2, color="blue")
    if prices:
        ax.axhline(
            y=mean(prices), color="red", linestyle="--", alpha=0.7,
            label=f"Average (${mean(prices):.2f})"
        )

    ax.set_xlabel("Time (UTC)")
    ax.set_ylabel("Price")
    ax.set_title(f"{symbol} - Last {len(samples)} samples")
    ax.legend()
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig(save_path, dpi=150, bbox_inches="tight")
    plt.close()


def create_report_assets_dir(report_dir: Path) -> Path:
    """
    Create assets directory for report charts.

    Args:
        report_dir: Report directory path

    Returns:
        Path to assets directory
    """
    assets_dir = report_dir / "assets"
    assets_dir.mkdir(parents=True, exist_ok=True)
    return assets_dir
