"""Shared test fixtures and configuration.

Provides a deterministic scheduler/clock pair so timer tests never sleep,
plus in-memory storage wiring.
"""

from __future__ import annotations

import heapq
import itertools
from datetime import datetime, timedelta

import pytest

from focuscoach.adapters import MemoryBlobStore
from focuscoach.config import EngineConfig
from focuscoach.focus import PomodoroTimer
from focuscoach.models import ProductivitySettings
from focuscoach.services.coach import build_coach
from focuscoach.services.persistence import PersistenceGateway
from focuscoach.services.statistics import StatisticsStore

START = datetime(2026, 3, 2, 9, 0, 0).astimezone()


# ---------------------------------------------------------------------------
# Manual scheduler
# ---------------------------------------------------------------------------


class _Call:
    def __init__(self, when: float, callback, args):
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler + clock driven explicitly by ``advance``."""

    def __init__(self, start: datetime = START):
        self.start = start
        self.elapsed = 0.0
        self._queue: list[tuple[float, int, _Call]] = []
        self._seq = itertools.count()

    def now(self) -> datetime:
        return self.start + timedelta(seconds=self.elapsed)

    def call_later(self, delay: float, callback, *args) -> _Call:
        call = _Call(self.elapsed + delay, callback, args)
        heapq.heappush(self._queue, (call.when, next(self._seq), call))
        return call

    @property
    def pending(self) -> list[_Call]:
        return [c for _, _, c in self._queue if not c.cancelled]

    def advance(self, seconds: float) -> None:
        """Move time forward, running every due callback in order."""
        target = self.elapsed + seconds
        while self._queue and self._queue[0][0] <= target:
            when, _, call = heapq.heappop(self._queue)
            self.elapsed = when
            if not call.cancelled:
                call.callback(*call.args)
        self.elapsed = target


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture()
def store() -> MemoryBlobStore:
    return MemoryBlobStore()


@pytest.fixture()
def gateway(store) -> PersistenceGateway:
    return PersistenceGateway(store)


@pytest.fixture()
def settings() -> ProductivitySettings:
    return ProductivitySettings(
        work_duration=25,
        short_break_duration=5,
        long_break_duration=15,
        long_break_interval=4,
    )


@pytest.fixture()
def statistics(gateway, scheduler) -> StatisticsStore:
    return StatisticsStore(gateway, scheduler.now)


@pytest.fixture()
def timer(settings, statistics, gateway, scheduler) -> PomodoroTimer:
    return PomodoroTimer(
        settings=settings,
        statistics=statistics,
        gateway=gateway,
        scheduler=scheduler,
        clock=scheduler.now,
    )


@pytest.fixture()
def coach(store, scheduler):
    config = EngineConfig(storage_backend="memory", data_dir="unused")
    return build_coach(config=config, store=store, scheduler=scheduler, clock=scheduler.now)
