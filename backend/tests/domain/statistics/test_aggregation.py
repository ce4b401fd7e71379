from datetime import datetime, timedelta

from flashstudy.core.enums import StatsRange
from flashstudy.domain.statistics.aggregation import (
    SessionSample,
    resolve_range,
    summarize_sessions,
    window_start,
)


def test_resolve_known_ranges():
    assert resolve_range("7d") is StatsRange.last_7_days
    assert resolve_range("30D") is StatsRange.last_30_days
    assert resolve_range(" 90d ") is StatsRange.last_90_days
    assert resolve_range("all") is StatsRange.all


def test_unknown_range_falls_back_to_default():
    assert resolve_range("14d") is StatsRange.last_7_days
    assert resolve_range("") is StatsRange.last_7_days
    assert resolve_range(None) is StatsRange.last_7_days
    assert resolve_range("bogus", StatsRange.all) is StatsRange.all


def test_window_start():
    now = datetime(2026, 5, 10, 8, 0, 0)

    assert window_start(StatsRange.last_30_days, now) == now - timedelta(days=30)
    assert window_start(StatsRange.all, now) is None


def test_no_sessions_gives_zeros():
    totals = summarize_sessions([])

    assert totals.total_sessions == 0
    assert totals.total_study_time == 0
    assert totals.average_score == 0


def test_totals_and_rounded_average():
    totals = summarize_sessions([
        SessionSample(total_duration=100, percentage=75),
        SessionSample(total_duration=50, percentage=50),
        SessionSample(total_duration=30, percentage=100),
    ])

    assert totals.total_sessions == 3
    assert totals.total_study_time == 3  # 180s
    assert totals.average_score == 75


def test_unscored_sessions_count_but_do_not_drag_the_average():
    totals = summarize_sessions([
        SessionSample(total_duration=61, percentage=None),
        SessionSample(total_duration=60, percentage=81),
        SessionSample(total_duration=None, percentage=80),
    ])

    assert totals.total_sessions == 3
    assert totals.total_study_time == 2
    assert totals.average_score == 81  # 80.5 rounds up
