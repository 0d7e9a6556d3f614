"""Task ledger: open and completed productivity tasks."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from focuscoach.models import ProductivityTask, Subtask, TaskCategory, TaskPriority

from .persistence import PersistenceGateway

logger = logging.getLogger(__name__)


class TaskLedger:
    """Mutable collection of tasks split into open and completed lists.

    A task id lives in exactly one of the two lists. Every mutation saves
    the union of both lists through the gateway.
    """

    def __init__(
        self,
        gateway: PersistenceGateway | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.gateway = gateway
        self.clock = clock or (lambda: datetime.now().astimezone())
        self._open: list[ProductivityTask] = []
        self._completed: list[ProductivityTask] = []

    @property
    def open_tasks(self) -> list[ProductivityTask]:
        return list(self._open)

    @property
    def completed_tasks(self) -> list[ProductivityTask]:
        return list(self._completed)

    def all_tasks(self) -> list[ProductivityTask]:
        return self._open + self._completed

    def load(self) -> None:
        """Replace the in-memory ledger with the persisted task list."""
        if self.gateway is None:
            return
        self._open = []
        self._completed = []
        seen: set[str] = set()
        for task in self.gateway.load_tasks():
            if task.id in seen:
                logger.warning("Duplicate task id %s in stored tasks, keeping first", task.id)
                continue
            seen.add(task.id)
            (self._completed if task.is_completed else self._open).append(task)

    def save(self) -> bool:
        if self.gateway is None:
            return True
        return self.gateway.save_tasks(self.all_tasks())

    def get(self, task_id: str) -> ProductivityTask | None:
        for task in self.all_tasks():
            if task.id == task_id:
                return task
        return None

    def add(
        self,
        title: str,
        description: str | None = None,
        priority: TaskPriority = TaskPriority.MEDIUM,
        category: TaskCategory = TaskCategory.PERSONAL,
        due_date: datetime | None = None,
        **extra,
    ) -> ProductivityTask:
        """Create a task and append it to the open list.

        Args:
            title: Task title
            description: Optional description
            priority: Task priority
            category: Task category
            due_date: Optional due date
            **extra: Any other ``ProductivityTask`` field (estimates, tags, ...)

        Returns:
            The created task
        """
        task = ProductivityTask(
            title=title,
            description=description,
            priority=priority,
            category=category,
            due_date=due_date,
            created_at=self.clock(),
            **extra,
        )
        self._open.append(task)
        self.save()
        logger.info("Added task %s (%s)", task.id, task.priority.label)
        return task

    def update(self, task: ProductivityTask) -> bool:
        """Replace the stored task with the same id.

        Moves the task between the open and completed lists when its
        completion flag changed. Unknown ids are ignored.

        Returns:
            True if a task was replaced
        """
        for source in (self._open, self._completed):
            for index, existing in enumerate(source):
                if existing.id != task.id:
                    continue
                if task.is_completed and source is self._open:
                    del source[index]
                    self._completed.append(task)
                elif not task.is_completed and source is self._completed:
                    del source[index]
                    if task.completed_at is not None:
                        task = task.model_copy(update={"completed_at": None})
                    self._open.append(task)
                else:
                    source[index] = task
                self.save()
                return True

        logger.debug("Ignoring update for unknown task %s", task.id)
        return False

    def toggle(self, task: ProductivityTask) -> ProductivityTask:
        """Flip completion, stamp or clear ``completed_at`` and update."""
        completed = not task.is_completed
        updated = task.model_copy(
            update={
                "is_completed": completed,
                "completed_at": self.clock() if completed else None,
            }
        )
        self.update(updated)
        return updated

    def delete(self, task_id: str) -> None:
        """Remove ``task_id`` from both lists. Absent ids are a no-op."""
        before = len(self._open) + len(self._completed)
        self._open = [t for t in self._open if t.id != task_id]
        self._completed = [t for t in self._completed if t.id != task_id]
        if len(self._open) + len(self._completed) != before:
            self.save()
            logger.info("Deleted task %s", task_id)

    # -- subtasks & focus credit ---------------------------------------------

    def add_subtask(self, task_id: str, title: str) -> Subtask | None:
        task = self.get(task_id)
        if task is None:
            return None
        subtask = Subtask(title=title, created_at=self.clock())
        self.update(task.model_copy(update={"subtasks": [*task.subtasks, subtask]}))
        return subtask

    def toggle_subtask(self, task_id: str, subtask_id: str) -> Subtask | None:
        task = self.get(task_id)
        if task is None:
            return None
        toggled: Subtask | None = None
        subtasks = []
        for sub in task.subtasks:
            if sub.id == subtask_id:
                sub = sub.model_copy(update={"is_completed": not sub.is_completed})
                toggled = sub
            subtasks.append(sub)
        if toggled is not None:
            self.update(task.model_copy(update={"subtasks": subtasks}))
        return toggled

    def credit_pomodoro(self, task_id: str, minutes: int) -> ProductivityTask | None:
        """Credit a completed work phase to ``task_id``."""
        task = self.get(task_id)
        if task is None:
            return None
        updated = task.model_copy(
            update={
                "pomodoros_completed": task.pomodoros_completed + 1,
                "actual_duration": (task.actual_duration or 0) + minutes,
            }
        )
        self.update(updated)
        return updated
