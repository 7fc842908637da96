"""
Timestamp alignment of two price series.

Each symbol is fetched independently, so two series rarely share exact
timestamps. Samples are joined on one-minute buckets instead: a timestamp is
floored to the minute and two samples align iff their buckets are equal.
"""

from typing import Dict, List, Sequence
import pandas as pd
from pricecorr.entities import AlignedPair, PriceSample, TimestampLike, to_utc_timestamp


def time_bucket(timestamp: TimestampLike) -> pd.Timestamp:
    """
    Floor a timestamp to whole-minute resolution.

    Seconds and sub-second components are zeroed. Timezone-aware instants are
    normalized to naive UTC first, so equal instants share a bucket whatever
    offset they were reported in.
    """
    return to_utc_timestamp(timestamp).floor("min")


def bucket_prices(series: Sequence[PriceSample]) -> Dict[pd.Timestamp, float]:
    """
    Map each minute bucket of a series to its price.

    Postconditions:
        - Keys are in order of first occurrence in series
        - When several samples share a bucket, the last one's price is kept

    Args:
        series: Time-ordered samples of one symbol

    Returns:
        Ordered mapping of bucket -> price
    """
    buckets = {}
    for sample in series:
        buckets[time_bucket(sample.timestamp)] = sample.price
    return buckets


def align_series(
    series_a: Sequence[PriceSample],
    series_b: Sequence[PriceSample]
) -> List[AlignedPair]:
    """
    Pair up the prices of two series that share a minute bucket.

    Preconditions:
        - Each series is ordered by timestamp (it is not re-sorted)

    Postconditions:
        - One AlignedPair per bucket present in both series
        - Pairs follow the bucket order of series_a
        - Returns [] if either series is empty or no bucket is shared

    Args:
        series_a: Samples of the first symbol
        series_b: Samples of the second symbol

    Returns:
        List of AlignedPair(value1=price in A, value2=price in B)
    """
    if not series_a or not series_b:
        return []

    buckets_a = bucket_prices(series_a)
    buckets_b = bucket_prices(series_b)

    return [
        AlignedPair(value1=price_a, value2=buckets_b[bucket])
        for bucket, price_a in buckets_a.items()
        if bucket in buckets_b
    ]
