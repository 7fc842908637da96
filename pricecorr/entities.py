"""
Core entity classes (ADTs) for the pricecorr package.

These classes represent the data structures passed between the data source,
the correlation engine and the presentation layer. Samples and statistics are
immutable; the correlation matrix enforces its symmetry invariant on
construction.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterator, List, Optional, Sequence, Tuple, Union
import pandas as pd


TimestampLike = Union[str, datetime, pd.Timestamp]


def to_utc_timestamp(value: TimestampLike) -> pd.Timestamp:
    """
    Normalize an instant to a timezone-naive UTC pd.Timestamp.

    Timezone-aware instants are converted to UTC; naive instants are taken
    to already be in UTC.

    Raises:
        ValueError: If value cannot be parsed or is missing
    """
    timestamp = pd.Timestamp(value)
    if pd.isna(timestamp):
        raise ValueError(f"invalid timestamp: {value!r}")
    if timestamp.tzinfo is not None:
        timestamp = timestamp.tz_convert("UTC").tz_localize(None)
    return timestamp


@dataclass(frozen=True)
class PriceSample:
    """
    A single observed price of one symbol.

    Attributes:
        symbol: Ticker symbol (e.g., "AAPL")
        price: Observed price
        timestamp: Observation instant (naive UTC)

    Representation Invariants:
        - symbol is non-empty
        - price is a finite float
        - timestamp is a timezone-naive pd.Timestamp in UTC
    """
    symbol: str
    price: float
    timestamp: pd.Timestamp

    def __post_init__(self):
        """Validate and normalize fields."""
        if not self.symbol:
            raise ValueError("symbol cannot be empty")

        price = float(self.price)
        if not math.isfinite(price):
            raise ValueError(f"price must be finite, got {self.price}")

        object.__setattr__(self, "price", price)
        object.__setattr__(self, "timestamp", to_utc_timestamp(self.timestamp))

    def to_dict(self) -> dict:
        """Return a JSON-serializable representation."""
        return {
            "ticker": self.symbol,
            "price": self.price,
            "timestamp": self.timestamp.isoformat() + "Z",
        }


def prices_of(series: Sequence[PriceSample]) -> List[float]:
    """Extract the prices of a series, in order."""
    return [sample.price for sample in series]


@dataclass(frozen=True)
class AlignedPair:
    """Prices of two series that fall in the same one-minute bucket."""
    value1: float
    value2: float


@dataclass(frozen=True)
class SeriesStatistics:
    """
    Descriptive statistics of one price series.

    Attributes:
        mean: Arithmetic mean of prices
        std_dev: Population standard deviation of prices
    """
    mean: float
    std_dev: float

    def to_dict(self) -> dict:
        return {"mean": self.mean, "std_dev": self.std_dev}


class CorrelationMatrix:
    """
    A square, symmetric matrix of pairwise correlation coefficients.

    Rows and columns are keyed by symbol, in the order the symbols were
    supplied. The diagonal is always 1.0.

    Representation Invariants:
        - every symbol has a full row and column
        - matrix[a][b] == matrix[b][a] for all symbols a, b
        - matrix[a][a] == 1.0
        - every coefficient lies in [-1, 1]
    """

    def __init__(self, symbols: List[str], values: Dict[str, Dict[str, float]]):
        """
        Initialize a CorrelationMatrix.

        Args:
            symbols: Ordered symbols (row and column labels)
            values: Nested mapping values[a][b] for every pair of symbols

        Raises:
            ValueError: If a cell is missing or an invariant does not hold
        """
        self._symbols = list(dict.fromkeys(symbols))
        try:
            self._values = {
                a: {b: float(values[a][b]) for b in self._symbols}
                for a in self._symbols
            }
        except KeyError as e:
            raise ValueError(f"missing correlation cell for {e}") from e

        self._check_invariants()

    def _check_invariants(self):
        """Check representation invariants."""
        for a in self._symbols:
            if self._values[a][a] != 1.0:
                raise ValueError(f"diagonal cell for {a} must be 1.0")
            for b in self._symbols:
                value = self._values[a][b]
                if not -1.0 <= value <= 1.0:
                    raise ValueError(f"correlation {a}/{b} out of range: {value}")
                if value != self._values[b][a]:
                    raise ValueError(f"matrix is not symmetric at {a}/{b}")

    @property
    def symbols(self) -> List[str]:
        """Return the ordered symbols (read-only copy)."""
        return list(self._symbols)

    def get(self, symbol1: str, symbol2: str, default: float = 0.0) -> float:
        """Return the coefficient for a pair, or default if either is unknown."""
        return self._values.get(symbol1, {}).get(symbol2, default)

    def pairs(self) -> List[Tuple[str, str, float]]:
        """Return each distinct off-diagonal pair once, in symbol order."""
        result = []
        for i, a in enumerate(self._symbols):
            for b in self._symbols[i + 1:]:
                result.append((a, b, self._values[a][b]))
        return result

    def to_dict(self, decimals: Optional[int] = None) -> Dict[str, Dict[str, float]]:
        """Return the matrix as a nested dict, optionally rounded."""
        if decimals is None:
            return {a: dict(row) for a, row in self._values.items()}
        return {
            a: {b: round(value, decimals) for b, value in row.items()}
            for a, row in self._values.items()
        }

    def to_frame(self) -> pd.DataFrame:
        """Return the matrix as a DataFrame with symbols on both axes."""
        frame = pd.DataFrame.from_dict(self._values, orient="index")
        return frame.reindex(index=self._symbols, columns=self._symbols)

    def __getitem__(self, symbol: str) -> Dict[str, float]:
        return dict(self._values[symbol])

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._symbols)

    def __len__(self) -> int:
        return len(self._symbols)

    def __repr__(self) -> str:
        return f"CorrelationMatrix({', '.join(self._symbols)})"
