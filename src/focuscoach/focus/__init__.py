"""Focus mode - Pomodoro session state machine."""

from .cycling import next_phase
from .scheduler import AsyncioScheduler, ScheduledCall, Scheduler
from .timer import (
    AUTO_START_DELAY,
    TICK_INTERVAL,
    PomodoroTimer,
    TimerEvent,
    TimerSnapshot,
    TimerStatus,
)

__all__ = [
    "AUTO_START_DELAY",
    "AsyncioScheduler",
    "PomodoroTimer",
    "ScheduledCall",
    "Scheduler",
    "TICK_INTERVAL",
    "TimerEvent",
    "TimerSnapshot",
    "TimerStatus",
    "next_phase",
]
