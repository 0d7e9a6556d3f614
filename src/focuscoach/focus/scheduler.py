"""Scheduling port for the timer's 1-second tick and auto-start delay."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, Protocol


class ScheduledCall(Protocol):
    """Handle returned by ``Scheduler.call_later``."""

    def cancel(self) -> None: ...


class Scheduler(ABC):
    """Runs callbacks after a delay on the engine's single control loop."""

    @abstractmethod
    def call_later(
        self, delay: float, callback: Callable[..., Any], *args: Any
    ) -> ScheduledCall:
        """Schedule ``callback(*args)`` to run after ``delay`` seconds."""


class AsyncioScheduler(Scheduler):
    """Scheduler backed by an asyncio event loop.

    Commands must be issued from the loop's thread so that ticks and
    commands are serialized. Without an explicit loop, the running loop at
    call time is used.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    def call_later(
        self, delay: float, callback: Callable[..., Any], *args: Any
    ) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback, *args)
