from datetime import datetime, timezone

import pytest

from quakeboard import aggregate
from quakeboard.catalog import EmptyDatasetError, SeismicEvent


def _ms(*args) -> int:
    return int(datetime(*args, tzinfo=timezone.utc).timestamp() * 1000)


def _quake(magnitude, depth=10.0, when=None, place='Sagaing region'):
    return SeismicEvent(
        magnitude=magnitude,
        depth_km=depth,
        timestamp_ms=when if when is not None else _ms(2025, 3, 28, 6, 20),
        latitude=21.9,
        longitude=96.0,
        place=place,
    )


@pytest.fixture
def mixed_events():
    return [
        _quake(2.1, 0.0, _ms(2025, 3, 28, 6, 20)),
        _quake(4.0, 10.0, _ms(2025, 3, 28, 23, 59)),
        _quake(5.0, 10.5, _ms(2025, 3, 29, 0, 1)),
        _quake(7.7, 20.0, _ms(2025, 3, 28, 6, 20)),
        _quake(6.0, 30.0, _ms(2025, 4, 2, 12, 0)),
        _quake(3.9, 30.1, _ms(2025, 4, 30, 18, 0)),
        _quake(6.99, 120.0, _ms(2025, 5, 1, 0, 0)),
    ]


def test_three_event_distributions():
    events = [_quake(5.2, 12), _quake(6.8, 8), _quake(4.1, 35)]

    assert aggregate.bucket_by_magnitude(events) == {
        'M 2.5-3.9': 0,
        'M 4.0-4.9': 1,
        'M 5.0-5.9': 1,
        'M 6.0-6.9': 1,
        'M 7.0+': 0,
    }
    assert aggregate.bucket_by_depth(events) == {
        '0-10 km': 1,
        '10-20 km': 1,
        '20-30 km': 0,
        '30+ km': 1,
    }


def test_bucket_order_matches_band_labels(mixed_events):
    assert list(aggregate.bucket_by_magnitude(mixed_events)) == aggregate.MAGNITUDE_BANDS
    assert list(aggregate.bucket_by_depth(mixed_events)) == aggregate.DEPTH_BANDS


def test_buckets_partition_every_event(mixed_events):
    assert sum(aggregate.bucket_by_magnitude(mixed_events).values()) == len(mixed_events)
    assert sum(aggregate.bucket_by_depth(mixed_events).values()) == len(mixed_events)


def test_magnitude_band_edges(mixed_events):
    bands = aggregate.bucket_by_magnitude(mixed_events)
    # 2.1 and 3.9 share the lowest band; 4.0, 5.0 and 6.0 open their own bands
    assert bands == {'M 2.5-3.9': 2, 'M 4.0-4.9': 1, 'M 5.0-5.9': 1, 'M 6.0-6.9': 2, 'M 7.0+': 1}


def test_depth_band_upper_edges_are_inclusive(mixed_events):
    bands = aggregate.bucket_by_depth(mixed_events)
    assert bands == {'0-10 km': 2, '10-20 km': 2, '20-30 km': 1, '30+ km': 2}


def test_summary_single_event():
    event = _quake(6.4, 17.5)
    summary = aggregate.compute_summary([event])

    assert summary.count == 1
    assert summary.min_magnitude == summary.max_magnitude == 6.4
    assert summary.mean_magnitude == pytest.approx(6.4)
    assert summary.mean_depth_km == pytest.approx(17.5)
    assert summary.daily_rate == pytest.approx(1.0)
    assert summary.duration_days == 0
    assert summary.start_date == summary.end_date == '2025-03-28'


def test_summary_statistics(mixed_events):
    summary = aggregate.compute_summary(mixed_events)

    assert summary.count == len(mixed_events)
    assert summary.max_magnitude == max(e.magnitude for e in mixed_events)
    assert summary.min_magnitude == 2.1
    assert summary.mean_magnitude == pytest.approx(sum(e.magnitude for e in mixed_events) / len(mixed_events))
    assert summary.min_depth_km == 0.0
    assert summary.max_depth_km == 120.0
    assert summary.threshold_counts == {5.0: 4, 6.0: 3}
    assert (summary.shallow_count, summary.intermediate_count, summary.deep_count) == (2, 3, 2)
    assert summary.start_date == '2025-03-28'
    assert summary.end_date == '2025-05-01'


def test_daily_rate_uses_fractional_day_span():
    start = _ms(2025, 1, 1)
    events = [_quake(4.5, when=start + day * aggregate.MS_PER_DAY) for day in range(5)]
    events.append(_quake(4.5, when=start + 4 * aggregate.MS_PER_DAY))
    summary = aggregate.compute_summary(events)

    assert summary.duration_days == 4
    assert summary.daily_rate == pytest.approx(6 / 4)


def test_daily_rate_clamps_spans_under_a_day():
    events = [_quake(4.5, when=_ms(2025, 1, 1, 0)), _quake(4.6, when=_ms(2025, 1, 1, 12))]
    assert aggregate.compute_summary(events).daily_rate == pytest.approx(2.0)


def test_empty_catalog():
    with pytest.raises(EmptyDatasetError):
        aggregate.compute_summary([])
    assert aggregate.bucket_by_magnitude([]) == dict.fromkeys(aggregate.MAGNITUDE_BANDS, 0)
    assert aggregate.bucket_by_depth([]) == dict.fromkeys(aggregate.DEPTH_BANDS, 0)
    assert aggregate.daily_counts([]) == []
    assert aggregate.monthly_counts([]) == []
    assert aggregate.cumulative_series([]) == []
    assert aggregate.magnitude_depth_pairs([]) == []
    assert aggregate.top_events([], 5.0) == []


def test_daily_counts_group_by_utc_date(mixed_events):
    daily = aggregate.daily_counts(mixed_events)

    assert daily == [
        ('2025-03-28', 3),
        ('2025-03-29', 1),
        ('2025-04-02', 1),
        ('2025-04-30', 1),
        ('2025-05-01', 1),
    ]
    labels = [label for label, _ in daily]
    assert labels == sorted(set(labels))
    assert sum(count for _, count in daily) == len(mixed_events)


def test_monthly_counts_cross_year_boundary():
    events = [
        _quake(4.2, when=_ms(2025, 1, 3)),
        _quake(4.8, when=_ms(2024, 12, 31, 23, 30)),
        _quake(5.1, when=_ms(2025, 1, 31, 23, 59)),
        _quake(4.4, when=_ms(2025, 3, 1)),
    ]
    assert aggregate.monthly_counts(events) == [('2024-12', 1), ('2025-01', 2), ('2025-03', 1)]


def test_cumulative_series_is_ordered_and_complete(mixed_events):
    series = aggregate.cumulative_series(mixed_events)

    timestamps = [ts for ts, _ in series]
    assert timestamps == sorted(timestamps)
    assert [rank for _, rank in series] == list(range(1, len(mixed_events) + 1))
    assert series[-1][1] == len(mixed_events)


def test_magnitude_depth_pairs_preserve_order(mixed_events):
    pairs = aggregate.magnitude_depth_pairs(mixed_events)
    assert pairs == [(e.depth_km, e.magnitude) for e in mixed_events]


def test_top_events_descending_with_stable_ties():
    first = _quake(5.5, place='first')
    strongest = _quake(6.0, place='strongest')
    weak = _quake(4.9, place='weak')
    second = _quake(5.5, place='second')
    exact = _quake(5.0, place='exact')
    events = [first, strongest, weak, second, exact]

    top = aggregate.top_events(events, 5.0)

    assert [e.place for e in top] == ['strongest', 'first', 'second', 'exact']
    assert all(e.magnitude >= 5.0 for e in top)
    assert len(top) <= len(events)


def test_operations_are_idempotent(mixed_events):
    snapshot = list(mixed_events)
    for operation in (
        aggregate.compute_summary,
        aggregate.bucket_by_magnitude,
        aggregate.bucket_by_depth,
        aggregate.daily_counts,
        aggregate.monthly_counts,
        aggregate.cumulative_series,
        aggregate.magnitude_depth_pairs,
        aggregate.top_events,
    ):
        assert operation(mixed_events) == operation(mixed_events)
    assert mixed_events == snapshot
