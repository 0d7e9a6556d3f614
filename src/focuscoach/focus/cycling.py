"""Pomodoro cycle ordering."""

from __future__ import annotations

from focuscoach.models import Phase


def next_phase(completed: Phase, completed_pomodoros: int, long_break_interval: int) -> Phase:
    """Phase that follows ``completed``.

    Args:
        completed: Phase that just finished
        completed_pomodoros: Work phases completed so far, including ``completed``
        long_break_interval: Work phases per long break

    Returns:
        LONG_BREAK every ``long_break_interval`` work phases, SHORT_BREAK after
        other work phases, WORK after any break
    """
    if completed is Phase.WORK:
        if completed_pomodoros % long_break_interval == 0:
            return Phase.LONG_BREAK
        return Phase.SHORT_BREAK
    return Phase.WORK
