"""User-facing Pomodoro settings."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .session import Phase


class ProductivitySettings(BaseModel):
    """Durations and goals that drive the Pomodoro cycle.

    The record is immutable; build a new one with ``model_copy(update=...)``
    and hand it to ``update_settings``.

    Attributes:
        work_duration: Work phase length in minutes
        short_break_duration: Short break length in minutes
        long_break_duration: Long break length in minutes
        long_break_interval: Work sessions completed before a long break
        daily_goal: Pomodoros per day (0 disables the goal)
        weekly_goal: Pomodoros per week (0 disables the goal)
        auto_start_breaks: Start breaks automatically after a work phase
        auto_start_work: Start work automatically after a break
    """

    model_config = ConfigDict(frozen=True)

    work_duration: int = Field(default=25)
    short_break_duration: int = Field(default=5)
    long_break_duration: int = Field(default=15)
    long_break_interval: int = Field(default=4)
    daily_goal: int = Field(default=8)
    weekly_goal: int = Field(default=40)
    auto_start_breaks: bool = Field(default=False)
    auto_start_work: bool = Field(default=False)
    enable_notifications: bool = Field(default=True)
    enable_sounds: bool = Field(default=True)
    enable_focus_mode: bool = Field(default=False)
    preferred_work_start_hour: int = Field(default=9)
    preferred_work_end_hour: int = Field(default=17)

    @field_validator("work_duration", "short_break_duration", "long_break_duration")
    @classmethod
    def validate_duration(cls, v: int) -> int:
        """Durations must be positive minutes."""
        if v <= 0:
            raise ValueError("durations must be > 0 minutes")
        return v

    @field_validator("long_break_interval")
    @classmethod
    def validate_interval(cls, v: int) -> int:
        if v < 1:
            raise ValueError("long_break_interval must be >= 1")
        return v

    @field_validator("daily_goal", "weekly_goal")
    @classmethod
    def validate_goal(cls, v: int) -> int:
        if v < 0:
            raise ValueError("goals cannot be negative")
        return v

    @field_validator("preferred_work_start_hour", "preferred_work_end_hour")
    @classmethod
    def validate_hour(cls, v: int) -> int:
        if not 0 <= v <= 23:
            raise ValueError("hour must be between 0 and 23")
        return v

    def duration_for(self, phase: Phase) -> int:
        """Configured length of ``phase`` in minutes."""
        if phase is Phase.WORK:
            return self.work_duration
        if phase is Phase.SHORT_BREAK:
            return self.short_break_duration
        return self.long_break_duration
