"""Productivity task models."""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum, IntEnum

from pydantic import BaseModel, Field


class TaskPriority(IntEnum):
    """Task priority, ordered from least to most pressing."""

    LOW = 0
    MEDIUM = 1
    HIGH = 2
    URGENT = 3

    @property
    def label(self) -> str:
        return self.name.capitalize()


class TaskCategory(str, Enum):
    PERSONAL = "Personal"
    ACADEMIC = "Academic"
    WORK = "Work"
    HEALTH = "Health"
    FINANCE = "Finance"
    SOCIAL = "Social"
    CREATIVE = "Creative"


def _new_id() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now().astimezone()


class Subtask(BaseModel):
    """Checklist item belonging to a task."""

    id: str = Field(default_factory=_new_id)
    title: str
    is_completed: bool = False
    created_at: datetime = Field(default_factory=_now)


class ProductivityTask(BaseModel):
    """Task tracked by the ledger and consulted by the insight rules.

    Attributes:
        id: Unique identifier
        title: Short task title
        description: Optional detailed description
        is_completed: Completion flag
        priority: Task priority
        category: Task category
        due_date: Optional due date
        estimated_duration: Estimated minutes
        actual_duration: Minutes of focus credited so far
        pomodoros_completed: Work phases completed while linked to the task
        pomodoros_estimated: Optional estimate in pomodoros
        course: Optional course name (academic tasks)
        created_at: Creation timestamp
        completed_at: Set while the task is completed
        tags: Free-form tags
        subtasks: Ordered checklist
    """

    id: str = Field(default_factory=_new_id)
    title: str
    description: str | None = None
    is_completed: bool = False
    priority: TaskPriority = TaskPriority.MEDIUM
    category: TaskCategory = TaskCategory.PERSONAL
    due_date: datetime | None = None
    estimated_duration: int | None = None
    actual_duration: int | None = None
    pomodoros_completed: int = 0
    pomodoros_estimated: int | None = None
    course: str | None = None
    created_at: datetime = Field(default_factory=_now)
    completed_at: datetime | None = None
    tags: list[str] = Field(default_factory=list)
    subtasks: list[Subtask] = Field(default_factory=list)

    @property
    def is_high_priority(self) -> bool:
        return self.priority >= TaskPriority.HIGH

    @property
    def completion_rate(self) -> float:
        """Fraction of completed subtasks, or 1.0/0.0 when there are none."""
        if not self.subtasks:
            return 1.0 if self.is_completed else 0.0
        done = sum(1 for s in self.subtasks if s.is_completed)
        return done / len(self.subtasks)

    def is_overdue(self, now: datetime | None = None) -> bool:
        """True when the task is open and its due date has passed."""
        if self.due_date is None or self.is_completed:
            return False
        if now is None:
            now = datetime.now().astimezone()
        # Naive due dates are local wall-clock times
        if self.due_date.tzinfo is None and now.tzinfo is not None:
            now = now.astimezone().replace(tzinfo=None)
        elif self.due_date.tzinfo is not None and now.tzinfo is None:
            now = now.astimezone()
        return self.due_date < now
