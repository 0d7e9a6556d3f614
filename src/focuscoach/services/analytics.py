"""Weekly productivity summary."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date

from focuscoach.models import (
    DailyStats,
    FocusSession,
    Phase,
    ProductivityInsight,
    ProductivitySettings,
    ProductivityTask,
    TaskCategory,
)

from .statistics import goal_progress


@dataclass
class WeeklyProductivitySummary:
    """Aggregates for a seven-day statistics window."""

    week_start: date
    week_end: date
    total_pomodoros: int
    total_focus_time: int  # minutes
    completed_tasks: int
    average_productivity: float  # 1-5 rating, 0.0 when nothing was rated
    top_category: TaskCategory | None
    longest_streak: int  # consecutive days with at least one pomodoro
    goal_achievement: float
    insights: list[ProductivityInsight] = field(default_factory=list)


def longest_streak(window: Sequence[DailyStats]) -> int:
    """Longest run of consecutive days with at least one pomodoro."""
    longest = 0
    current_run = 0
    previous: date | None = None
    for stats in sorted(window, key=lambda s: s.day):
        if stats.completed_pomodoros == 0:
            current_run = 0
        elif previous is not None and (stats.day - previous).days == 1 and current_run:
            current_run += 1
        else:
            current_run = 1
        longest = max(longest, current_run)
        previous = stats.day
    return longest


def weekly_summary(
    window: Sequence[DailyStats],
    tasks: Sequence[ProductivityTask],
    sessions: Sequence[FocusSession],
    settings: ProductivitySettings,
    insights: Sequence[ProductivityInsight] = (),
) -> WeeklyProductivitySummary:
    """
    Summarize the week covered by ``window``.

    Args:
        window: Daily statistics, one per day (see ``StatisticsStore.weekly_window``)
        tasks: All tasks, open and completed
        sessions: Focus session history
        settings: Current settings (weekly goal)
        insights: Insights to attach to the summary

    Returns:
        WeeklyProductivitySummary for the window
    """
    days = sorted(s.day for s in window)
    if not days:
        raise ValueError("weekly_summary() needs at least one day of statistics")
    week_start, week_end = days[0], days[-1]

    def in_week(day: date) -> bool:
        return week_start <= day <= week_end

    total_pomodoros = sum(s.completed_pomodoros for s in window)
    completed_tasks = sum(
        1
        for t in tasks
        if t.is_completed and t.completed_at is not None and in_week(t.completed_at.date())
    )

    week_sessions = [s for s in sessions if in_week(s.start_time.date())]
    ratings = [s.productivity for s in week_sessions if s.productivity is not None]
    average_productivity = sum(ratings) / len(ratings) if ratings else 0.0

    categories = {t.id: t.category for t in tasks}
    category_counts = Counter(
        categories[s.task_id]
        for s in week_sessions
        if s.session_type is Phase.WORK and s.was_completed and s.task_id in categories
    )
    top_category = category_counts.most_common(1)[0][0] if category_counts else None

    return WeeklyProductivitySummary(
        week_start=week_start,
        week_end=week_end,
        total_pomodoros=total_pomodoros,
        total_focus_time=sum(s.total_focus_time for s in window),
        completed_tasks=completed_tasks,
        average_productivity=average_productivity,
        top_category=top_category,
        longest_streak=longest_streak(window),
        goal_achievement=goal_progress(total_pomodoros, settings.weekly_goal),
        insights=list(insights),
    )
