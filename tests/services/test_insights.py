"""Tests for the rule-based insight generator."""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from focuscoach.models import (
    DailyStats,
    InsightPriority,
    InsightType,
    Phase,
    ProductivitySettings,
    ProductivityTask,
    TaskPriority,
)
from focuscoach.services.insights import generate_insights

TODAY = date(2026, 3, 2)
MORNING = datetime(2026, 3, 2, 10, 0, 0).astimezone()
LATE = datetime(2026, 3, 2, 22, 30, 0).astimezone()


def _stats(day: date, pomodoros: int, minutes_each: int = 25) -> DailyStats:
    stats = DailyStats(day=day)
    for _ in range(pomodoros):
        stats.record_phase(Phase.WORK, minutes_each)
    return stats


def _window(*counts: int) -> list[DailyStats]:
    start = TODAY - timedelta(days=len(counts) - 1)
    return [_stats(start + timedelta(days=i), n) for i, n in enumerate(counts)]


def _titles(insights) -> list[str]:
    return [i.title for i in insights]


def _run(today, window=None, tasks=(), settings=None, now=MORNING):
    return generate_insights(
        today=today,
        weekly_window=window if window is not None else [today],
        open_tasks=list(tasks),
        settings=settings or ProductivitySettings(),
        now=now,
    )


class TestProductivity:
    def test_great_progress_above_weekly_mean(self) -> None:
        window = _window(0, 0, 0, 0, 0, 0, 2)
        insights = _run(window[-1], window)
        assert "Great Progress!" in _titles(insights)

    def test_no_great_progress_at_mean(self) -> None:
        window = _window(2, 2, 2, 2, 2, 2, 2)
        assert "Great Progress!" not in _titles(_run(window[-1], window))

    def test_mean_is_fractional(self) -> None:
        # mean is 10/7, so one pomodoro today is below it and two are above
        below = _window(3, 3, 3, 0, 0, 0, 1)
        above = _window(2, 2, 2, 2, 0, 0, 2)
        assert "Great Progress!" not in _titles(_run(below[-1], below))
        assert "Great Progress!" in _titles(_run(above[-1], above))

    def test_excellent_focus_over_two_hours(self) -> None:
        insights = _run(_stats(TODAY, 5))
        focus = [i for i in insights if i.title == "Excellent Focus"]

        assert len(focus) == 1
        assert focus[0].type is InsightType.FOCUS
        assert "125 minutes" in focus[0].message

    def test_exactly_two_hours_is_not_excellent(self) -> None:
        assert "Excellent Focus" not in _titles(_run(_stats(TODAY, 4, 30)))


class TestTasks:
    def test_overdue_count(self) -> None:
        tasks = [
            ProductivityTask(title="late", due_date=MORNING - timedelta(days=1)),
            ProductivityTask(title="later", due_date=MORNING - timedelta(hours=1)),
            ProductivityTask(title="fine", due_date=MORNING + timedelta(days=1)),
        ]
        overdue = [i for i in _run(_stats(TODAY, 1), tasks=tasks) if i.title == "Overdue Tasks"]

        assert overdue[0].message == "You have 2 overdue tasks."
        assert overdue[0].priority is InsightPriority.HIGH

    def test_single_overdue_task(self) -> None:
        tasks = [ProductivityTask(title="late", due_date=MORNING - timedelta(days=1))]
        overdue = [i for i in _run(_stats(TODAY, 1), tasks=tasks) if i.title == "Overdue Tasks"]
        assert overdue[0].message == "You have 1 overdue task."

    @pytest.mark.parametrize("count,expected", [(5, False), (6, True)])
    def test_too_many_high_priority(self, count, expected) -> None:
        tasks = [
            ProductivityTask(
                title=f"t{i}", priority=TaskPriority.URGENT if i % 2 else TaskPriority.HIGH
            )
            for i in range(count)
        ]
        tasks.append(ProductivityTask(title="low", priority=TaskPriority.LOW))
        titles = _titles(_run(_stats(TODAY, 1), tasks=tasks))
        assert ("Too Many High-Priority Tasks" in titles) is expected


class TestTimeManagement:
    def test_late_start(self) -> None:
        insights = _run(_stats(TODAY, 0), now=LATE)
        assert "Late Start" in _titles(insights)

    def test_no_late_start_before_ten(self) -> None:
        evening = datetime(2026, 3, 2, 21, 59, 0).astimezone()
        assert "Late Start" not in _titles(_run(_stats(TODAY, 0), now=evening))

    def test_no_late_start_after_work(self) -> None:
        assert "Late Start" not in _titles(_run(_stats(TODAY, 1), now=LATE))


class TestMotivation:
    def test_almost_there(self) -> None:
        settings = ProductivitySettings(daily_goal=8)
        insights = _run(_stats(TODAY, 7), settings=settings)
        almost = [i for i in insights if i.title == "Almost There!"]

        assert len(almost) == 1
        assert "1 pomodoro away" in almost[0].message
        assert "Daily Goal Achieved! 🎉" not in _titles(insights)

    def test_almost_there_plural(self) -> None:
        settings = ProductivitySettings(daily_goal=10)
        almost = [i for i in _run(_stats(TODAY, 8), settings=settings) if i.title == "Almost There!"]
        assert "2 pomodoros away" in almost[0].message

    def test_goal_achieved_is_not_actionable(self) -> None:
        settings = ProductivitySettings(daily_goal=3)
        insights = _run(_stats(TODAY, 3), settings=settings)
        achieved = [i for i in insights if i.title == "Daily Goal Achieved! 🎉"]

        assert achieved[0].actionable is False
        assert "Almost There!" not in _titles(insights)

    def test_below_threshold_says_nothing(self) -> None:
        settings = ProductivitySettings(daily_goal=8)
        titles = _titles(_run(_stats(TODAY, 6), settings=settings))
        assert "Almost There!" not in titles
        assert "Daily Goal Achieved! 🎉" not in titles

    def test_zero_goal_skips_motivation(self) -> None:
        settings = ProductivitySettings(daily_goal=0)
        insights = _run(_stats(TODAY, 3), settings=settings)
        assert all(i.type is not InsightType.MOTIVATION for i in insights)


def test_rule_order() -> None:
    window = _window(0, 0, 0, 0, 0, 0, 8)
    tasks = [
        ProductivityTask(title="late", due_date=MORNING - timedelta(days=1)),
        *[ProductivityTask(title=f"h{i}", priority=TaskPriority.HIGH) for i in range(6)],
    ]
    insights = _run(window[-1], window, tasks, ProductivitySettings(daily_goal=8))

    assert _titles(insights) == [
        "Great Progress!",
        "Excellent Focus",
        "Overdue Tasks",
        "Too Many High-Priority Tasks",
        "Daily Goal Achieved! 🎉",
    ]


def test_insights_are_stamped_with_evaluation_time() -> None:
    insights = _run(_stats(TODAY, 8), settings=ProductivitySettings(daily_goal=8))
    assert insights
    assert all(i.created_at == MORNING for i in insights)
