"""Per-day statistics store with a trailing weekly window."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, datetime, timedelta

from focuscoach.models import DailyStats, Phase, ProductivitySettings

from .persistence import PersistenceGateway

logger = logging.getLogger(__name__)

WINDOW_DAYS = 7


def goal_progress(completed: int, goal: int) -> float:
    """Completed count divided by goal; a zero goal gives 0.0."""
    if goal <= 0:
        return 0.0
    return completed / goal


class StatisticsStore:
    """Holds one ``DailyStats`` per date.

    Records are loaded lazily from the gateway the first time a day is
    accessed and zero-valued when nothing was persisted. Days are never
    removed from the store.
    """

    def __init__(
        self,
        gateway: PersistenceGateway | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.gateway = gateway
        self.clock = clock or (lambda: datetime.now().astimezone())
        self._days: dict[date, DailyStats] = {}

    def current_day(self) -> date:
        return self.clock().date()

    def for_day(self, day: date) -> DailyStats:
        """Return the stats for ``day``, creating a default on first access."""
        stats = self._days.get(day)
        if stats is None:
            if self.gateway is not None:
                stats = self.gateway.load_daily_stats(day)
            else:
                stats = DailyStats(day=day)
            self._days[day] = stats
        return stats

    def today(self) -> DailyStats:
        return self.for_day(self.current_day())

    def record_phase(
        self,
        phase: Phase,
        focus_minutes: int = 0,
        task_id: str | None = None,
        day: date | None = None,
    ) -> DailyStats:
        """Account for a completed phase on ``day`` (default: today)."""
        stats = self.for_day(day or self.current_day())
        stats.record_phase(phase, focus_minutes, task_id)
        logger.debug(
            "Recorded %s for %s: %d pomodoros, %d focus minutes",
            phase.value,
            stats.day,
            stats.completed_pomodoros,
            stats.total_focus_time,
        )
        return stats

    def record_distraction(self, day: date | None = None) -> DailyStats:
        stats = self.for_day(day or self.current_day())
        stats.distractions += 1
        return stats

    def weekly_window(self, today: date | None = None) -> list[DailyStats]:
        """Today and the six preceding days, oldest first.

        Missing days are zero-valued records, never gaps.
        """
        end = today or self.current_day()
        start = end - timedelta(days=WINDOW_DAYS - 1)
        return [self.for_day(start + timedelta(days=i)) for i in range(WINDOW_DAYS)]

    def daily_goal_progress(
        self, settings: ProductivitySettings, today: date | None = None
    ) -> float:
        stats = self.for_day(today or self.current_day())
        return goal_progress(stats.completed_pomodoros, settings.daily_goal)

    def weekly_goal_progress(
        self, settings: ProductivitySettings, today: date | None = None
    ) -> float:
        total = sum(s.completed_pomodoros for s in self.weekly_window(today))
        return goal_progress(total, settings.weekly_goal)
