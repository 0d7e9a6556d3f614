"""Pomodoro session state machine.

The timer is IDLE, RUNNING or PAUSED within one phase (work, short break,
long break). A recurring tick, scheduled through the injected
``Scheduler``, decrements the remaining seconds while RUNNING; reaching
zero completes the phase, records statistics and advances the cycle.

Every run carries a generation token. ``pause``, ``reset``, ``reset_all``
and ``skip`` bump the token and cancel the scheduled call before they
return, and tick dispatch drops any callback with a stale token, so no
tick is ever observed after cancellation. Commands and ticks must run on
the same control loop.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from focuscoach.models import FocusSession, Phase, ProductivitySettings
from focuscoach.services.persistence import PersistenceGateway
from focuscoach.services.statistics import StatisticsStore

from .cycling import next_phase
from .scheduler import ScheduledCall, Scheduler

logger = logging.getLogger(__name__)

TICK_INTERVAL = 1.0  # seconds
AUTO_START_DELAY = 2.0  # seconds


class TimerStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


class TimerEvent(str, Enum):
    """Notifications sent to listeners (also the haptic/sound triggers)."""

    STARTED = "started"
    RESUMED = "resumed"
    TICK = "tick"
    PAUSED = "paused"
    RESET = "reset"
    PHASE_COMPLETED = "phase_completed"
    PHASE_CHANGED = "phase_changed"
    SETTINGS_CHANGED = "settings_changed"
    DISTRACTION = "distraction"


@dataclass(frozen=True)
class TimerSnapshot:
    """Observable timer state at one instant."""

    status: TimerStatus
    phase: Phase
    remaining: int
    planned_seconds: int
    completed_pomodoros: int
    current_session: FocusSession | None
    last_session: FocusSession | None

    @property
    def is_running(self) -> bool:
        return self.status is TimerStatus.RUNNING

    @property
    def progress(self) -> float:
        """Fraction of the current phase already elapsed."""
        if self.planned_seconds <= 0:
            return 0.0
        return (self.planned_seconds - self.remaining) / self.planned_seconds


TimerListener = Callable[[TimerEvent, TimerSnapshot], None]


class PomodoroTimer:
    """Owns the current phase, remaining time and active focus session."""

    def __init__(
        self,
        settings: ProductivitySettings,
        statistics: StatisticsStore,
        gateway: PersistenceGateway,
        scheduler: Scheduler,
        clock: Callable[[], datetime] | None = None,
        on_phase_complete: Callable[[FocusSession], None] | None = None,
        auto_start_delay: float = AUTO_START_DELAY,
        tick_interval: float = TICK_INTERVAL,
    ):
        self.settings = settings
        self.statistics = statistics
        self.gateway = gateway
        self.scheduler = scheduler
        self.clock = clock or (lambda: datetime.now().astimezone())
        self.on_phase_complete = on_phase_complete
        self.auto_start_delay = auto_start_delay
        self.tick_interval = tick_interval

        self.status = TimerStatus.IDLE
        self.phase = Phase.WORK
        self.planned_seconds = settings.duration_for(Phase.WORK) * 60
        self.remaining = self.planned_seconds
        # Cycle position continues from what was already done today
        self.completed_pomodoros = statistics.today().completed_pomodoros
        self.current_session: FocusSession | None = None
        self.last_session: FocusSession | None = None
        self.task_id: str | None = None

        self._generation = 0
        self._tick_handle: ScheduledCall | None = None
        self._auto_start_token = 0
        self._auto_start_handle: ScheduledCall | None = None
        self._run_started_remaining = self.remaining
        self._listeners: list[TimerListener] = []

    # -- observation -----------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self.status is TimerStatus.RUNNING

    def snapshot(self) -> TimerSnapshot:
        return TimerSnapshot(
            status=self.status,
            phase=self.phase,
            remaining=self.remaining,
            planned_seconds=self.planned_seconds,
            completed_pomodoros=self.completed_pomodoros,
            current_session=self.current_session,
            last_session=self.last_session,
        )

    def subscribe(self, listener: TimerListener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, event: TimerEvent) -> None:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(event, snapshot)
            except Exception:
                logger.exception("Timer listener failed on %s", event.value)

    # -- commands ----------------------------------------------------------------

    def start(self, task_id: str | None = None) -> bool:
        """Start (IDLE) or resume (PAUSED) the current phase.

        Args:
            task_id: Optional task to link to work sessions from now on

        Returns:
            False if the timer was already running
        """
        if self.status is TimerStatus.RUNNING:
            logger.debug("start() ignored: already running")
            return False

        self._cancel_auto_start()
        if task_id is not None:
            self.task_id = task_id

        resuming = self.status is TimerStatus.PAUSED
        self.current_session = self._open_session(self.clock())
        self._run_started_remaining = self.remaining
        self.status = TimerStatus.RUNNING
        self._schedule_tick()

        logger.info(
            "%s %s phase, %ds remaining",
            "Resumed" if resuming else "Started",
            self.phase.value,
            self.remaining,
        )
        self._emit(TimerEvent.RESUMED if resuming else TimerEvent.STARTED)
        return True

    def pause(self) -> bool:
        """Stop ticking and close the running session as interrupted.

        Returns:
            False if the timer was not running
        """
        if self.status is not TimerStatus.RUNNING:
            logger.debug("pause() ignored: timer is %s", self.status.value)
            return False

        self._cancel_tick()
        self._cancel_auto_start()

        if self.current_session is not None:
            elapsed = max(0, self._run_started_remaining - self.remaining)
            interrupted = self.current_session.model_copy(
                update={
                    "end_time": self.clock(),
                    "was_completed": False,
                    "actual_duration": elapsed // 60,
                }
            )
            self.current_session = None
            self.last_session = interrupted
            self.gateway.append_session(interrupted)

        self.status = TimerStatus.PAUSED
        logger.info("Paused %s phase with %ds remaining", self.phase.value, self.remaining)
        self._emit(TimerEvent.PAUSED)
        return True

    def reset(self) -> None:
        """Discard the active session and restore the full phase duration."""
        self._stop()
        logger.info("Reset %s phase", self.phase.value)
        self._emit(TimerEvent.RESET)

    def reset_all(self) -> None:
        """Reset, return to the work phase and restart the cycle count.

        Persisted daily statistics are left untouched.
        """
        self.phase = Phase.WORK
        self.completed_pomodoros = 0
        self.task_id = None
        self._stop()
        logger.info("Reset cycle to the first work phase")
        self._emit(TimerEvent.RESET)

    def skip(self) -> FocusSession:
        """Complete the current phase now and advance the cycle."""
        self._cancel_tick()
        self._cancel_auto_start()
        session = self._complete_phase()
        self._advance_phase(session.session_type)
        return session

    def update_settings(self, settings: ProductivitySettings) -> None:
        """Replace settings.

        While not running the remaining time is resized to the new duration
        of the current phase; a running phase keeps its length and the new
        durations apply from the next phase.
        """
        self.settings = settings
        if self.status is not TimerStatus.RUNNING:
            self._restore_full_duration()
        self._emit(TimerEvent.SETTINGS_CHANGED)

    def record_distraction(self) -> bool:
        """Count a distraction against the active session and today."""
        if self.current_session is None:
            logger.debug("record_distraction() ignored: no active session")
            return False
        self.current_session.distractions += 1
        stats = self.statistics.record_distraction()
        self.gateway.save_daily_stats(stats)
        self._emit(TimerEvent.DISTRACTION)
        return True

    # -- ticking -------------------------------------------------------------------

    def tick(self) -> None:
        """Advance the running phase by one second."""
        if self.status is not TimerStatus.RUNNING:
            return

        self.remaining = max(0, self.remaining - 1)
        if self.remaining == 0:
            self._cancel_tick()
            session = self._complete_phase()
            self._advance_phase(session.session_type)
            return

        self._schedule_tick()
        self._emit(TimerEvent.TICK)

    def _dispatch_tick(self, generation: int) -> None:
        if generation != self._generation:
            return
        self._tick_handle = None
        self.tick()

    def _schedule_tick(self) -> None:
        self._tick_handle = self.scheduler.call_later(
            self.tick_interval, self._dispatch_tick, self._generation
        )

    def _cancel_tick(self) -> None:
        self._generation += 1
        if self._tick_handle is not None:
            self._tick_handle.cancel()
            self._tick_handle = None

    def _cancel_auto_start(self) -> None:
        self._auto_start_token += 1
        if self._auto_start_handle is not None:
            self._auto_start_handle.cancel()
            self._auto_start_handle = None

    def _auto_start(self, token: int) -> None:
        if token != self._auto_start_token:
            return
        self._auto_start_handle = None
        logger.info("Auto-starting %s phase", self.phase.value)
        self.start()

    # -- phase bookkeeping -----------------------------------------------------------

    def _open_session(self, now: datetime) -> FocusSession:
        return FocusSession(
            task_id=self.task_id if self.phase is Phase.WORK else None,
            session_type=self.phase,
            planned_duration=self.planned_seconds // 60,
            start_time=now,
        )

    def _restore_full_duration(self) -> None:
        self.planned_seconds = self.settings.duration_for(self.phase) * 60
        self.remaining = self.planned_seconds

    def _stop(self) -> None:
        self._cancel_tick()
        self._cancel_auto_start()
        self.current_session = None
        self.status = TimerStatus.IDLE
        self._restore_full_duration()

    def _complete_phase(self) -> FocusSession:
        now = self.clock()
        elapsed_minutes = max(0, self.planned_seconds - self.remaining) // 60
        session = self.current_session or self._open_session(now)
        finalized = session.model_copy(
            update={
                "end_time": now,
                "was_completed": True,
                "actual_duration": elapsed_minutes,
            }
        )
        self.current_session = None
        self.last_session = finalized

        phase = finalized.session_type
        if phase is Phase.WORK:
            self.completed_pomodoros += 1
            stats = self.statistics.record_phase(
                phase, elapsed_minutes, finalized.task_id, day=now.date()
            )
        else:
            stats = self.statistics.record_phase(phase, day=now.date())

        self.gateway.save_daily_stats(stats)
        self.gateway.append_session(finalized)
        logger.info(
            "Completed %s phase (%d min), %d pomodoros this cycle",
            phase.value,
            elapsed_minutes,
            self.completed_pomodoros,
        )
        self._emit(TimerEvent.PHASE_COMPLETED)

        if self.on_phase_complete is not None:
            try:
                self.on_phase_complete(finalized)
            except Exception:
                logger.exception("Phase completion hook failed")
        return finalized

    def _advance_phase(self, completed: Phase) -> None:
        self.phase = next_phase(
            completed, self.completed_pomodoros, self.settings.long_break_interval
        )
        self.status = TimerStatus.IDLE
        self._restore_full_duration()
        self._emit(TimerEvent.PHASE_CHANGED)

        auto_start = (
            self.settings.auto_start_work
            if self.phase is Phase.WORK
            else self.settings.auto_start_breaks
        )
        if auto_start:
            self._cancel_auto_start()
            self._auto_start_handle = self.scheduler.call_later(
                self.auto_start_delay, self._auto_start, self._auto_start_token
            )
