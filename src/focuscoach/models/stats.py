"""Per-day Pomodoro statistics."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field, computed_field

from .session import Phase


class DailyStats(BaseModel):
    """Aggregate counters for one calendar day.

    ``completed_pomodoros`` always equals ``session_type_counts["work"]``;
    both are only ever incremented together by ``record_phase``.
    """

    day: date
    completed_pomodoros: int = 0
    total_focus_time: int = 0  # minutes
    session_type_counts: dict[str, int] = Field(default_factory=dict)
    tasks_worked_on: list[str] = Field(default_factory=list)
    distractions: int = 0

    @computed_field
    @property
    def average_session_length(self) -> float:
        if self.completed_pomodoros == 0:
            return 0.0
        return self.total_focus_time / self.completed_pomodoros

    def increment_session_type(self, phase: Phase) -> None:
        key = phase.value
        self.session_type_counts[key] = self.session_type_counts.get(key, 0) + 1

    def session_type_count(self, phase: Phase) -> int:
        return self.session_type_counts.get(phase.value, 0)

    def add_task(self, task_id: str) -> None:
        """Remember ``task_id`` as worked on today (set semantics)."""
        if task_id not in self.tasks_worked_on:
            self.tasks_worked_on.append(task_id)

    def record_phase(
        self, phase: Phase, focus_minutes: int = 0, task_id: str | None = None
    ) -> None:
        """Account for one completed phase.

        Work phases credit a pomodoro and focus minutes; breaks only bump
        their session type count.
        """
        if phase is Phase.WORK:
            self.completed_pomodoros += 1
            self.total_focus_time += max(0, focus_minutes)
            if task_id:
                self.add_task(task_id)
        self.increment_session_type(phase)
