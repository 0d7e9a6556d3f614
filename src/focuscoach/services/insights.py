"""Rule-based productivity insights.

Each rule looks at today's statistics, the trailing week and the open
tasks independently. Output order is the rule order below; there is no
ranking by priority.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from focuscoach.models import (
    DailyStats,
    InsightPriority,
    InsightType,
    ProductivityInsight,
    ProductivitySettings,
    ProductivityTask,
)

from .statistics import goal_progress

EXCELLENT_FOCUS_MINUTES = 120
HIGH_PRIORITY_LIMIT = 5
LATE_START_HOUR = 22
ALMOST_THERE_PROGRESS = 0.8


def _productivity_rules(
    today: DailyStats, weekly_window: Sequence[DailyStats], now: datetime
) -> list[ProductivityInsight]:
    insights = []
    average = (
        sum(s.completed_pomodoros for s in weekly_window) / len(weekly_window)
        if weekly_window
        else 0
    )
    if today.completed_pomodoros > average:
        insights.append(
            ProductivityInsight(
                title="Great Progress!",
                message="You've completed more pomodoros today than your weekly average.",
                suggestion="Keep up the momentum and tackle your high-priority tasks.",
                type=InsightType.PRODUCTIVITY,
                priority=InsightPriority.MEDIUM,
                actionable=True,
                created_at=now,
            )
        )

    if today.total_focus_time > EXCELLENT_FOCUS_MINUTES:
        insights.append(
            ProductivityInsight(
                title="Excellent Focus",
                message=f"You've achieved {today.total_focus_time} minutes of focused work today.",
                suggestion="Consider taking a longer break to recharge.",
                type=InsightType.FOCUS,
                priority=InsightPriority.LOW,
                actionable=True,
                created_at=now,
            )
        )
    return insights


def _task_rules(
    open_tasks: Sequence[ProductivityTask], now: datetime
) -> list[ProductivityInsight]:
    insights = []
    overdue = sum(1 for t in open_tasks if t.is_overdue(now))
    high_priority = sum(1 for t in open_tasks if t.is_high_priority)

    if overdue > 0:
        plural = "" if overdue == 1 else "s"
        insights.append(
            ProductivityInsight(
                title="Overdue Tasks",
                message=f"You have {overdue} overdue task{plural}.",
                suggestion="Consider rescheduling or breaking them into smaller tasks.",
                type=InsightType.TIME_MANAGEMENT,
                priority=InsightPriority.HIGH,
                actionable=True,
                created_at=now,
            )
        )

    if high_priority > HIGH_PRIORITY_LIMIT:
        insights.append(
            ProductivityInsight(
                title="Too Many High-Priority Tasks",
                message=f"You have {high_priority} high-priority tasks.",
                suggestion="Try to limit high-priority tasks to 3-5 per day for better focus.",
                type=InsightType.TIME_MANAGEMENT,
                priority=InsightPriority.MEDIUM,
                actionable=True,
                created_at=now,
            )
        )
    return insights


def _time_management_rules(today: DailyStats, now: datetime) -> list[ProductivityInsight]:
    if now.hour >= LATE_START_HOUR and today.completed_pomodoros == 0:
        return [
            ProductivityInsight(
                title="Late Start",
                message="It's getting late and you haven't started any focus sessions.",
                suggestion="Try starting your productive work earlier tomorrow.",
                type=InsightType.TIME_MANAGEMENT,
                priority=InsightPriority.MEDIUM,
                actionable=True,
                created_at=now,
            )
        ]
    return []


def _motivation_rules(
    today: DailyStats, settings: ProductivitySettings, now: datetime
) -> list[ProductivityInsight]:
    goal = settings.daily_goal
    if goal <= 0:
        return []

    completed = today.completed_pomodoros
    if completed >= goal:
        return [
            ProductivityInsight(
                title="Daily Goal Achieved! 🎉",
                message="Congratulations! You've reached your daily pomodoro goal.",
                suggestion="Great work! Consider setting a new challenge or taking a well-deserved break.",
                type=InsightType.MOTIVATION,
                priority=InsightPriority.LOW,
                actionable=False,
                created_at=now,
            )
        ]
    if goal_progress(completed, goal) >= ALMOST_THERE_PROGRESS:
        remaining = goal - completed
        plural = "" if remaining == 1 else "s"
        return [
            ProductivityInsight(
                title="Almost There!",
                message=f"You're {remaining} pomodoro{plural} away from your daily goal.",
                suggestion="Push through for one or two more sessions to hit your target!",
                type=InsightType.MOTIVATION,
                priority=InsightPriority.MEDIUM,
                actionable=True,
                created_at=now,
            )
        ]
    return []


def generate_insights(
    today: DailyStats,
    weekly_window: Sequence[DailyStats],
    open_tasks: Sequence[ProductivityTask],
    settings: ProductivitySettings,
    now: datetime,
) -> list[ProductivityInsight]:
    """Evaluate every rule and return the insights in rule order.

    Args:
        today: Today's statistics
        weekly_window: Trailing seven days (may include today)
        open_tasks: Tasks not yet completed
        settings: Current settings (daily goal)
        now: Evaluation time; its local hour drives the late-start rule

    Returns:
        Freshly built list of insights
    """
    return [
        *_productivity_rules(today, weekly_window, now),
        *_task_rules(open_tasks, now),
        *_time_management_rules(today, now),
        *_motivation_rules(today, settings, now),
    ]
