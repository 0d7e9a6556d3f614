"""Tests for DailyStats accumulation."""

from __future__ import annotations

from datetime import date

from focuscoach.models import DailyStats, Phase

DAY = date(2026, 3, 2)


def test_defaults_are_zero() -> None:
    stats = DailyStats(day=DAY)

    assert stats.completed_pomodoros == 0
    assert stats.total_focus_time == 0
    assert stats.session_type_counts == {}
    assert stats.tasks_worked_on == []
    assert stats.average_session_length == 0.0


def test_work_phase_credits_pomodoro_and_focus_time() -> None:
    stats = DailyStats(day=DAY)
    stats.record_phase(Phase.WORK, 25, "task-1")

    assert stats.completed_pomodoros == 1
    assert stats.total_focus_time == 25
    assert stats.session_type_counts == {"work": 1}
    assert stats.tasks_worked_on == ["task-1"]


def test_break_only_counts_type() -> None:
    stats = DailyStats(day=DAY)
    stats.record_phase(Phase.LONG_BREAK, 15)

    assert stats.completed_pomodoros == 0
    assert stats.total_focus_time == 0
    assert stats.session_type_count(Phase.LONG_BREAK) == 1


def test_tasks_worked_on_has_set_semantics() -> None:
    stats = DailyStats(day=DAY)
    stats.record_phase(Phase.WORK, 25, "a")
    stats.record_phase(Phase.WORK, 25, "b")
    stats.record_phase(Phase.WORK, 25, "a")

    assert stats.tasks_worked_on == ["a", "b"]


def test_average_session_length() -> None:
    stats = DailyStats(day=DAY)
    stats.record_phase(Phase.WORK, 25)
    stats.record_phase(Phase.WORK, 20)

    assert stats.average_session_length == 22.5


def test_average_is_serialized_and_ignored_on_load() -> None:
    stats = DailyStats(day=DAY)
    stats.record_phase(Phase.WORK, 30)

    raw = stats.model_dump_json()
    assert '"average_session_length":30.0' in raw

    loaded = DailyStats.model_validate_json(raw)
    assert loaded == stats
