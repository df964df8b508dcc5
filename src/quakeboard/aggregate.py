"""Summary statistics, bucketed distributions and time series over a catalog.

Every function here is a pure function of the event sequence it is given: no
I/O, no module state, and the input is never modified. Results can therefore be
memoized by the caller for as long as the catalog lives.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence, Tuple

import pandas as pd

from quakeboard.catalog import EmptyDatasetError, SeismicEvent

MS_PER_DAY = 1000 * 60 * 60 * 24
STRONG_MAGNITUDE = 5.0
SUMMARY_THRESHOLDS = (5.0, 6.0)

MAGNITUDE_BANDS = ['M 2.5-3.9', 'M 4.0-4.9', 'M 5.0-5.9', 'M 6.0-6.9', 'M 7.0+']
DEPTH_BANDS = ['0-10 km', '10-20 km', '20-30 km', '30+ km']

TimeSeries = List[Tuple[str, int]]


@dataclass(frozen=True)
class SummaryStats:
    count: int
    min_magnitude: float
    max_magnitude: float
    mean_magnitude: float
    min_depth_km: float
    max_depth_km: float
    mean_depth_km: float
    threshold_counts: Dict[float, int]
    shallow_count: int
    intermediate_count: int
    deep_count: int
    start_date: str
    end_date: str
    duration_days: int
    daily_rate: float


def _frame(events: Iterable[SeismicEvent]) -> pd.DataFrame:
    events = list(events)
    return pd.DataFrame(
        {
            'magnitude': pd.Series([e.magnitude for e in events], dtype='float64'),
            'depth_km': pd.Series([e.depth_km for e in events], dtype='float64'),
            'timestamp_ms': pd.Series([e.timestamp_ms for e in events], dtype='int64'),
        }
    )


def _utc(timestamps: pd.Series) -> pd.Series:
    return pd.to_datetime(timestamps, unit='ms', utc=True)


def _counts_by(labels: pd.Series) -> TimeSeries:
    counts = labels.value_counts().sort_index()
    return [(str(label), int(count)) for label, count in counts.items()]


# -----------------------------------------------------------------------------------------------
# Summary


def compute_summary(
    events: Sequence[SeismicEvent],
    thresholds: Tuple[float, ...] = SUMMARY_THRESHOLDS,
) -> SummaryStats:
    df = _frame(events)
    if df.empty:
        raise EmptyDatasetError('Cannot summarise an empty catalog')
    mags = df['magnitude']
    depths = df['depth_km']
    times = df['timestamp_ms']

    min_time, max_time = int(times.min()), int(times.max())
    day_span = (max_time - min_time) / MS_PER_DAY
    start, end = _utc(pd.Series([min_time, max_time]))

    return SummaryStats(
        count=int(df.shape[0]),
        min_magnitude=float(mags.min()),
        max_magnitude=float(mags.max()),
        mean_magnitude=float(mags.mean()),
        min_depth_km=float(depths.min()),
        max_depth_km=float(depths.max()),
        mean_depth_km=float(depths.mean()),
        threshold_counts={threshold: int(mags[mags >= threshold].shape[0]) for threshold in thresholds},
        shallow_count=int(depths[depths <= 10].shape[0]),
        intermediate_count=int(depths[(depths > 10) & (depths <= 30)].shape[0]),
        deep_count=int(depths[depths > 30].shape[0]),
        start_date=start.strftime('%Y-%m-%d'),
        end_date=end.strftime('%Y-%m-%d'),
        duration_days=int(math.floor(day_span + 0.5)),
        # a catalog spanning less than a day is rated over one day
        daily_rate=df.shape[0] / max(day_span, 1.0),
    )


# -----------------------------------------------------------------------------------------------
# Distributions


def bucket_by_magnitude(events: Sequence[SeismicEvent]) -> Dict[str, int]:
    mags = _frame(events)['magnitude']
    # anything under 4.0 lands in the lowest band, including sub-2.5 readings
    bins = [
        (MAGNITUDE_BANDS[0], mags[mags < 4.0].shape[0]),
        (MAGNITUDE_BANDS[1], mags[(mags >= 4.0) & (mags < 5.0)].shape[0]),
        (MAGNITUDE_BANDS[2], mags[(mags >= 5.0) & (mags < 6.0)].shape[0]),
        (MAGNITUDE_BANDS[3], mags[(mags >= 6.0) & (mags < 7.0)].shape[0]),
        (MAGNITUDE_BANDS[4], mags[mags >= 7.0].shape[0]),
    ]
    return {label: int(count) for label, count in bins}


def bucket_by_depth(events: Sequence[SeismicEvent]) -> Dict[str, int]:
    depths = _frame(events)['depth_km']
    bins = [
        (DEPTH_BANDS[0], depths[depths <= 10].shape[0]),
        (DEPTH_BANDS[1], depths[(depths > 10) & (depths <= 20)].shape[0]),
        (DEPTH_BANDS[2], depths[(depths > 20) & (depths <= 30)].shape[0]),
        (DEPTH_BANDS[3], depths[depths > 30].shape[0]),
    ]
    return {label: int(count) for label, count in bins}


# -----------------------------------------------------------------------------------------------
# Series


def daily_counts(events: Sequence[SeismicEvent]) -> TimeSeries:
    """Events per UTC calendar day, ascending. Days without events are omitted."""
    df = _frame(events)
    if df.empty:
        return []
    return _counts_by(_utc(df['timestamp_ms']).dt.strftime('%Y-%m-%d'))


def monthly_counts(events: Sequence[SeismicEvent]) -> TimeSeries:
    df = _frame(events)
    if df.empty:
        return []
    return _counts_by(_utc(df['timestamp_ms']).dt.strftime('%Y-%m'))


def cumulative_series(events: Sequence[SeismicEvent]) -> List[Tuple[int, int]]:
    df = _frame(events)
    ordered = df.sort_values('timestamp_ms', kind='mergesort')
    return [(int(ts), rank) for rank, ts in enumerate(ordered['timestamp_ms'], start=1)]


def magnitude_depth_pairs(events: Sequence[SeismicEvent]) -> List[Tuple[float, float]]:
    return [(e.depth_km, e.magnitude) for e in events]


def top_events(events: Sequence[SeismicEvent], min_magnitude: float = STRONG_MAGNITUDE) -> List[SeismicEvent]:
    """Events at or above `min_magnitude`, strongest first; ties keep catalog order."""
    selected = [e for e in events if e.magnitude >= min_magnitude]
    return sorted(selected, key=lambda e: e.magnitude, reverse=True)
