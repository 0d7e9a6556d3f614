"""Tests for the statistics store and goal progress."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from focuscoach.models import DailyStats, Phase, ProductivitySettings
from focuscoach.services.statistics import StatisticsStore, goal_progress

TODAY = date(2026, 3, 2)


def _stats_with(day: date, pomodoros: int) -> DailyStats:
    stats = DailyStats(day=day)
    for _ in range(pomodoros):
        stats.record_phase(Phase.WORK, 25)
    return stats


class TestLazyDays:
    def test_unknown_day_is_zero_valued(self, statistics) -> None:
        stats = statistics.for_day(TODAY)
        assert stats == DailyStats(day=TODAY)

    def test_same_record_returned_on_repeat_access(self, statistics) -> None:
        assert statistics.for_day(TODAY) is statistics.for_day(TODAY)

    def test_loads_persisted_day(self, gateway) -> None:
        gateway.save_daily_stats(_stats_with(TODAY, 3))
        store = StatisticsStore(gateway)
        assert store.for_day(TODAY).completed_pomodoros == 3

    def test_works_without_gateway(self) -> None:
        store = StatisticsStore()
        store.record_phase(Phase.WORK, 25, day=TODAY)
        assert store.for_day(TODAY).completed_pomodoros == 1

    def test_today_follows_clock(self, statistics, scheduler) -> None:
        assert statistics.today().day == scheduler.now().date()


class TestWeeklyWindow:
    def test_seven_days_oldest_first(self, statistics) -> None:
        window = statistics.weekly_window(TODAY)

        assert len(window) == 7
        assert window[0].day == TODAY - timedelta(days=6)
        assert window[-1].day == TODAY
        assert all(s.completed_pomodoros == 0 for s in window)

    def test_mixes_persisted_and_missing_days(self, gateway) -> None:
        gateway.save_daily_stats(_stats_with(TODAY - timedelta(days=2), 4))
        gateway.save_daily_stats(_stats_with(TODAY - timedelta(days=9), 9))
        window = StatisticsStore(gateway).weekly_window(TODAY)

        assert [s.completed_pomodoros for s in window] == [0, 0, 0, 0, 4, 0, 0]


class TestGoalProgress:
    def test_daily_progress(self, statistics) -> None:
        for _ in range(7):
            statistics.record_phase(Phase.WORK, 25, day=TODAY)
        settings = ProductivitySettings(daily_goal=8)

        assert statistics.daily_goal_progress(settings, TODAY) == pytest.approx(0.875)

    def test_weekly_progress_sums_window(self, statistics) -> None:
        statistics.record_phase(Phase.WORK, 25, day=TODAY)
        statistics.record_phase(Phase.WORK, 25, day=TODAY - timedelta(days=6))
        statistics.record_phase(Phase.WORK, 25, day=TODAY - timedelta(days=7))
        settings = ProductivitySettings(weekly_goal=4)

        assert statistics.weekly_goal_progress(settings, TODAY) == pytest.approx(0.5)

    def test_zero_weekly_goal_is_zero_progress(self, statistics) -> None:
        for _ in range(12):
            statistics.record_phase(Phase.WORK, 25, day=TODAY)
        settings = ProductivitySettings(weekly_goal=0, daily_goal=0)

        assert statistics.weekly_goal_progress(settings, TODAY) == 0.0
        assert statistics.daily_goal_progress(settings, TODAY) == 0.0

    @pytest.mark.parametrize(
        "completed,goal,expected", [(0, 8, 0.0), (8, 8, 1.0), (10, 8, 1.25), (3, 0, 0.0)]
    )
    def test_goal_progress(self, completed, goal, expected) -> None:
        assert goal_progress(completed, goal) == pytest.approx(expected)


def test_record_distraction(statistics) -> None:
    statistics.record_distraction(TODAY)
    statistics.record_distraction(TODAY)
    assert statistics.for_day(TODAY).distractions == 2
