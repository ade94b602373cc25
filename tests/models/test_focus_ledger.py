"""Unit tests for the stats ledger."""

from __future__ import annotations

from datetime import date, datetime, timedelta

from slothodoro.models.focus.ledger import StatsLedger, local_day
from slothodoro.models.state import HistoryEntry, PersistentState, Stats

DAY_ONE = datetime(2026, 10, 19, 9, 30).astimezone()
DAY_TWO = DAY_ONE + timedelta(days=1)


def test_record_focus_updates_counters():
    state = PersistentState()
    ledger = StatsLedger()

    result = ledger.record_focus(state, at=DAY_ONE)

    assert state.stats.focus_sessions == 1
    assert state.stats.focus_minutes == 25
    assert result.focus_minutes == 25
    assert result.break_minutes == 5
    assert result.total_focus_sessions == 1
    assert result.streak_today == 1
    assert state.last_result == result
    assert state.history == [HistoryEntry(at=DAY_ONE, focus_minutes=25)]


def test_minutes_follow_current_setting():
    state = PersistentState()
    state.settings.focus_minutes = 50
    StatsLedger().record_focus(state, at=DAY_ONE)

    assert state.stats.focus_minutes == 50
    assert state.history[-1].focus_minutes == 50


def test_streak_counts_within_a_day():
    state = PersistentState()
    ledger = StatsLedger()

    first = ledger.record_focus(state, at=DAY_ONE)
    second = ledger.record_focus(state, at=DAY_ONE + timedelta(hours=1))

    assert first.streak_today == 1
    assert second.streak_today == 2
    assert state.stats.streak_date == "2026-10-19"


def test_streak_restarts_on_a_new_day():
    state = PersistentState()
    ledger = StatsLedger()
    ledger.record_focus(state, at=DAY_ONE)
    ledger.record_focus(state, at=DAY_ONE)

    result = ledger.record_focus(state, at=DAY_TWO)

    assert result.streak_today == 1
    assert state.stats.streak_date == "2026-10-20"
    assert state.stats.focus_sessions == 3


def test_streak_resets_after_gap():
    stats = Stats(streak_date="2026-10-01", streak_count=7)

    StatsLedger.bump_streak(stats, date(2026, 10, 19))

    assert stats.streak_count == 1


def test_displayed_streak_is_zero_for_another_day():
    stats = Stats(streak_date="2026-10-19", streak_count=3)

    assert StatsLedger.displayed_streak(stats, date(2026, 10, 19)) == 3
    assert StatsLedger.displayed_streak(stats, date(2026, 10, 20)) == 0


def test_history_is_capped_dropping_oldest():
    state = PersistentState()
    ledger = StatsLedger()
    start = DAY_ONE - timedelta(days=30)
    state.history = [
        HistoryEntry(at=start + timedelta(minutes=i), focus_minutes=25)
        for i in range(500)
    ]

    ledger.record_focus(state, at=DAY_ONE)

    assert len(state.history) == 500
    assert state.history[0].at == start + timedelta(minutes=1)
    assert state.history[-1].at == DAY_ONE


def test_custom_history_limit():
    state = PersistentState()
    ledger = StatsLedger(history_limit=3)

    for i in range(5):
        ledger.record_focus(state, at=DAY_ONE + timedelta(minutes=i))

    assert len(state.history) == 3
    assert state.stats.focus_sessions == 5


def test_hourly_minutes_bins_by_local_hour():
    entries = [
        HistoryEntry(at=DAY_ONE.replace(hour=9), focus_minutes=25),
        HistoryEntry(at=DAY_ONE.replace(hour=9, minute=50), focus_minutes=25),
        HistoryEntry(at=DAY_ONE.replace(hour=14), focus_minutes=50),
    ]

    bins = StatsLedger.hourly_minutes(entries)

    assert len(bins) == 24
    assert bins[9] == 50
    assert bins[14] == 50
    assert sum(bins) == 100


def test_today_summary_filters_and_orders_newest_first():
    ledger = StatsLedger()
    yesterday = HistoryEntry(at=DAY_ONE - timedelta(days=1), focus_minutes=25)
    morning = HistoryEntry(at=DAY_ONE, focus_minutes=25)
    noon = HistoryEntry(at=DAY_ONE.replace(hour=12), focus_minutes=50)

    summary = ledger.today_summary([yesterday, morning, noon], local_day(DAY_ONE))

    assert summary.day == "2026-10-19"
    assert summary.sessions == 2
    assert summary.minutes == 75
    assert summary.recent == [noon, morning]
    assert summary.hourly_minutes[12] == 50


def test_today_summary_limits_recent():
    ledger = StatsLedger()
    history = [
        HistoryEntry(at=DAY_ONE + timedelta(minutes=i), focus_minutes=1)
        for i in range(15)
    ]

    summary = ledger.today_summary(history, local_day(DAY_ONE), limit=10)

    assert summary.sessions == 15
    assert len(summary.recent) == 10
    assert summary.recent[0] == history[-1]


def test_today_summary_empty_day():
    summary = StatsLedger().today_summary([], date(2026, 10, 19))

    assert summary.sessions == 0
    assert summary.minutes == 0
    assert summary.recent == []
    assert summary.hourly_minutes == [0] * 24
