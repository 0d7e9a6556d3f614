"""Presentation-facing productivity coach.

``ProductivityCoach`` is the single entry point a UI talks to: it forwards
timer commands, owns the task ledger, regenerates insights and exposes an
observable snapshot. ``build_coach`` wires every component explicitly;
nothing is looked up globally.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from focuscoach.adapters import create_blob_store
from focuscoach.config import ConfigService, EngineConfig
from focuscoach.focus import (
    AsyncioScheduler,
    PomodoroTimer,
    Scheduler,
    TimerEvent,
    TimerSnapshot,
    TimerStatus,
)
from focuscoach.models import (
    DailyStats,
    FocusSession,
    Phase,
    ProductivityInsight,
    ProductivitySettings,
    ProductivityTask,
    TaskCategory,
    TaskPriority,
)
from focuscoach.repositories.blob_store import BlobStore
from focuscoach.utils.logger import get_logger

from .analytics import WeeklyProductivitySummary, weekly_summary
from .insights import generate_insights
from .persistence import PersistenceGateway
from .statistics import StatisticsStore
from .task_ledger import TaskLedger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CoachSnapshot:
    """Everything the presentation layer displays."""

    timer: TimerSnapshot
    settings: ProductivitySettings
    insights: tuple[ProductivityInsight, ...]
    open_tasks: tuple[ProductivityTask, ...]
    completed_tasks: tuple[ProductivityTask, ...]
    today: DailyStats
    weekly_window: tuple[DailyStats, ...]
    daily_goal_progress: float
    weekly_goal_progress: float

    @property
    def phase(self) -> Phase:
        return self.timer.phase

    @property
    def remaining(self) -> int:
        return self.timer.remaining

    @property
    def status(self) -> TimerStatus:
        return self.timer.status

    @property
    def is_running(self) -> bool:
        return self.timer.is_running

    @property
    def completed_pomodoros_today(self) -> int:
        return self.today.completed_pomodoros


CoachListener = Callable[[CoachSnapshot], None]


class ProductivityCoach:
    """Coordinates timer, statistics, tasks and insights."""

    def __init__(
        self,
        gateway: PersistenceGateway,
        statistics: StatisticsStore,
        ledger: TaskLedger,
        timer: PomodoroTimer,
        clock: Callable[[], datetime] | None = None,
    ):
        self.gateway = gateway
        self.statistics = statistics
        self.ledger = ledger
        self.timer = timer
        self.clock = clock or (lambda: datetime.now().astimezone())
        self.insights: list[ProductivityInsight] = []
        self._listeners: list[CoachListener] = []

        self.timer.on_phase_complete = self._handle_phase_complete
        self.timer.subscribe(self._handle_timer_event)

    @property
    def settings(self) -> ProductivitySettings:
        return self.timer.settings

    # -- observation -------------------------------------------------------------

    def snapshot(self) -> CoachSnapshot:
        window = self.statistics.weekly_window()
        return CoachSnapshot(
            timer=self.timer.snapshot(),
            settings=self.settings,
            insights=tuple(self.insights),
            open_tasks=tuple(self.ledger.open_tasks),
            completed_tasks=tuple(self.ledger.completed_tasks),
            today=self.statistics.today(),
            weekly_window=tuple(window),
            daily_goal_progress=self.statistics.daily_goal_progress(self.settings),
            weekly_goal_progress=self.statistics.weekly_goal_progress(self.settings),
        )

    def subscribe(self, listener: CoachListener) -> Callable[[], None]:
        """Register ``listener`` for state changes; returns an unsubscriber."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Coach listener failed")

    def _handle_timer_event(self, event: TimerEvent, _snapshot: TimerSnapshot) -> None:
        # Phase completion is followed by PHASE_CHANGED; notify once, after it
        if event is not TimerEvent.PHASE_COMPLETED:
            self._notify()

    def _handle_phase_complete(self, session: FocusSession) -> None:
        if session.session_type is Phase.WORK and session.task_id:
            self.ledger.credit_pomodoro(session.task_id, session.actual_duration or 0)
        self.refresh_insights(notify=False)

    # -- timer commands ------------------------------------------------------------

    def start(self, task_id: str | None = None) -> bool:
        return self.timer.start(task_id)

    def pause(self) -> bool:
        return self.timer.pause()

    def reset(self) -> None:
        self.timer.reset()

    def reset_all(self) -> None:
        self.timer.reset_all()

    def skip(self) -> FocusSession:
        return self.timer.skip()

    def record_distraction(self) -> bool:
        return self.timer.record_distraction()

    def update_settings(self, settings: ProductivitySettings) -> None:
        """Persist and apply new settings."""
        self.gateway.save_settings(settings)
        self.timer.update_settings(settings)
        self.refresh_insights()

    # -- task commands ---------------------------------------------------------------

    def add_task(
        self,
        title: str,
        description: str | None = None,
        priority: TaskPriority = TaskPriority.MEDIUM,
        category: TaskCategory = TaskCategory.PERSONAL,
        due_date: datetime | None = None,
        **extra,
    ) -> ProductivityTask:
        task = self.ledger.add(title, description, priority, category, due_date, **extra)
        self.refresh_insights()
        return task

    def update_task(self, task: ProductivityTask) -> bool:
        updated = self.ledger.update(task)
        self.refresh_insights()
        return updated

    def delete_task(self, task_id: str) -> None:
        self.ledger.delete(task_id)
        self.refresh_insights()

    def toggle_task(self, task: ProductivityTask) -> ProductivityTask:
        toggled = self.ledger.toggle(task)
        self.refresh_insights()
        return toggled

    # -- insights & analytics --------------------------------------------------------

    def refresh_insights(self, notify: bool = True) -> list[ProductivityInsight]:
        """Recompute the insight list from scratch."""
        self.insights = generate_insights(
            today=self.statistics.today(),
            weekly_window=self.statistics.weekly_window(),
            open_tasks=self.ledger.open_tasks,
            settings=self.settings,
            now=self.clock(),
        )
        logger.debug("Generated %d insights", len(self.insights))
        if notify:
            self._notify()
        return self.insights

    def weekly_summary(self) -> WeeklyProductivitySummary:
        return weekly_summary(
            window=self.statistics.weekly_window(),
            tasks=self.ledger.all_tasks(),
            sessions=self.gateway.load_sessions(),
            settings=self.settings,
            insights=self.insights,
        )


def build_coach(
    config: EngineConfig | None = None,
    store: BlobStore | None = None,
    scheduler: Scheduler | None = None,
    clock: Callable[[], datetime] | None = None,
) -> ProductivityCoach:
    """
    Construct a fully wired coach.

    Args:
        config: Engine configuration; loaded from the config file (and the
            application logger initialised) when omitted
        store: Blob store to use instead of the configured backend
        scheduler: Tick scheduler (default: running asyncio loop)
        clock: Source of the current time (default: local aware now)

    Returns:
        ProductivityCoach with settings, tasks and today's statistics loaded
    """
    if config is None:
        config = ConfigService().config
        get_logger(config.log_level)

    store = store or create_blob_store(config)
    gateway = PersistenceGateway(store)
    statistics = StatisticsStore(gateway, clock)
    ledger = TaskLedger(gateway, clock)
    ledger.load()

    timer = PomodoroTimer(
        settings=gateway.load_settings(),
        statistics=statistics,
        gateway=gateway,
        scheduler=scheduler or AsyncioScheduler(),
        clock=clock,
        auto_start_delay=config.auto_start_delay,
    )
    coach = ProductivityCoach(gateway, statistics, ledger, timer, clock)
    coach.refresh_insights(notify=False)
    logger.info("Coach ready on %s storage", store.storage_type)
    return coach
