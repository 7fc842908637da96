"""
Markdown report generation.

This module generates a markdown report with the correlation matrix,
per-symbol statistics, the strongest pairs and a heatmap chart.
"""

from datetime import datetime
from pathlib import Path
from typing import List, Mapping, Optional, Sequence
from pricecorr.entities import CorrelationMatrix, PriceSample, SeriesStatistics, prices_of
from pricecorr.analytics.matrix import build_matrix, symbol_statistics
from pricecorr.analytics.autocorrelation import lag_one_autocorrelation
from pricecorr.reporting.colors import describe_correlation
from pricecorr.reporting.charts import plot_correlation_heatmap, create_report_assets_dir


class Report:
    """
    Generates markdown correlation reports.

    This class assembles the correlation matrix and per-symbol statistics of
    a set of price series into a markdown report with a heatmap chart.
    """

    def __init__(self, output_dir: str = "reports"):
        """
        Initialize report generator.

        Args:
            output_dir: Directory to save reports
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def generate_report(
        self,
        series_by_symbol: Mapping[str, Sequence[PriceSample]],
        minutes: int,
        top_pairs: int = 5
    ) -> str:
        """
        Generate complete markdown report.

        Args:
            series_by_symbol: Mapping of symbol -> time-ordered samples;
                symbols with no samples are left out
            minutes: Length of the time window the samples cover
            top_pairs: Number of strongest pairs to list

        Returns:
            Path to generated report file
        """
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        report_path = self.output_dir / f"correlation_{timestamp}.md"

        assets_dir = create_report_assets_dir(self.output_dir)

        series_by_symbol = {
            symbol: series for symbol, series in series_by_symbol.items() if series
        }
        matrix = build_matrix(series_by_symbol)
        statistics = symbol_statistics(series_by_symbol)

        content = self._generate_header(matrix.symbols, minutes)
        content += self._generate_matrix_section(matrix, assets_dir)
        content += self._generate_pairs_section(matrix, top_pairs)
        content += self._generate_statistics_section(series_by_symbol, statistics)
        content += self._generate_footer()

        with open(report_path, "w") as f:
            f.write(content)

        return str(report_path)

    def _generate_header(self, symbols: List[str], minutes: int) -> str:
        """Generate report header."""
        generated = datetime.now().strftime("%Y-%m-%d %H:%M:%S")

        return f"""# Price Correlation Report

**Tickers:** {", ".join(symbols) if symbols else "none"}
**Window:** last {minutes} minutes
**Generated:** {generated}

---

"""

    def _generate_matrix_section(
        self,
        matrix: CorrelationMatrix,
        assets_dir: Path
    ) -> str:
        """Generate correlation matrix section."""
        section = "## Correlation Matrix\n\n"

        if len(matrix) == 0:
            section += "*No tickers to compare.*\n\n---\n\n"
            return section

        section += "| |" + "".join(f" {symbol} |" for symbol in matrix.symbols) + "\n"
        section += "|---|" + "---|" * len(matrix) + "\n"
        for row_symbol in matrix.symbols:
            section += f"| **{row_symbol}** |"
            section += "".join(
                f" {matrix.get(row_symbol, col_symbol):.2f} |" for col_symbol in matrix.symbols
            )
            section += "\n"
        section += "\n"

        try:
            chart_path = assets_dir / "correlation_heatmap.png"
            plot_correlation_heatmap(matrix, str(chart_path))
            section += "![Correlation Heatmap](assets/correlation_heatmap.png)\n\n"
        except (OSError, ValueError):
            pass

        section += "---\n\n"
        return section

    def _generate_pairs_section(self, matrix: CorrelationMatrix, top_pairs: int) -> str:
        """Generate strongest pairs section."""
        section = "## Strongest Pairs\n\n"

        pairs = sorted(matrix.pairs(), key=lambda p: abs(p[2]), reverse=True)[:top_pairs]
        if not pairs:
            section += "*At least two tickers are needed to form a pair.*\n\n---\n\n"
            return section

        section += "| Pair | Correlation | Strength |\n"
        section += "|------|-------------|----------|\n"
        for symbol1, symbol2, value in pairs:
            section += f"| {symbol1}-{symbol2} | {value:.3f} | {describe_correlation(value)} |\n"

        section += "\n---\n\n"
        return section

    def _generate_statistics_section(
        self,
        series_by_symbol: Mapping[str, Sequence[PriceSample]],
        statistics: Mapping[str, SeriesStatistics]
    ) -> str:
        """Generate per-symbol statistics section."""
        section = "## Ticker Statistics\n\n"
        section += "| Ticker | Samples | Average | Std Dev | Lag-1 Autocorr |\n"
        section += "|--------|---------|---------|---------|----------------|\n"

        for symbol, stats in statistics.items():
            series = series_by_symbol[symbol]
            autocorr = lag_one_autocorrelation(prices_of(series))
            section += (
                f"| {symbol} | {len(series)} | {stats.mean:.2f} | "
                f"{stats.std_dev:.2f} | {autocorr:.3f} |\n"
            )

        section += "\n---\n\n"
        return section

    def _generate_footer(self) -> str:
        """Generate report footer."""
        return """
## Methodology Notes

- Prices of two tickers are paired when they fall in the same one-minute bucket
- Correlation is the Pearson coefficient of the paired prices
- Tickers without data are left out of the report
- A ticker with constant prices shows 0.00 against every other ticker
- Standard deviation is the population standard deviation (divides by N)
- Lag-1 autocorrelation correlates each price change with the next one

---

*Report generated by pricecorr*
"""
