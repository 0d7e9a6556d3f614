"""Pomodoro phases and focus session records."""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator


class Phase(str, Enum):
    """Segment of the Pomodoro cycle.

    The value doubles as the key used in ``DailyStats.session_type_counts``.
    """

    WORK = "work"
    SHORT_BREAK = "short break"
    LONG_BREAK = "long break"

    @property
    def is_break(self) -> bool:
        return self is not Phase.WORK


class FocusSession(BaseModel):
    """One timed run of a single phase.

    Attributes:
        id: Unique identifier
        task_id: Optional linked productivity task
        session_type: Phase this run belongs to
        planned_duration: Configured phase length in minutes
        actual_duration: Elapsed minutes, set when the session is finalized
        start_time: When the run started
        end_time: When the run was finalized (None while active)
        was_completed: True only when the phase ran to completion or was skipped
        distractions: Distractions recorded during the run
        notes: Free-form notes
        productivity: Optional 1-5 self rating
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    task_id: str | None = None
    session_type: Phase
    planned_duration: int
    actual_duration: int | None = None
    start_time: datetime
    end_time: datetime | None = None
    was_completed: bool = False
    distractions: int = 0
    notes: str | None = None
    productivity: int | None = None

    @field_validator("productivity")
    @classmethod
    def validate_productivity(cls, v: int | None) -> int | None:
        """Productivity rating must be between 1 and 5."""
        if v is not None and not 1 <= v <= 5:
            raise ValueError("productivity must be between 1 and 5")
        return v

    @property
    def is_active(self) -> bool:
        return self.end_time is None

    def duration_minutes(self, now: datetime | None = None) -> int:
        """Wall-clock minutes between start and end (or now while active)."""
        end = self.end_time or now or datetime.now(self.start_time.tzinfo)
        return int((end - self.start_time).total_seconds() // 60)
