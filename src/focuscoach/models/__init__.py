"""Data models for focuscoach."""

from .insight import InsightPriority, InsightType, ProductivityInsight
from .session import FocusSession, Phase
from .settings import ProductivitySettings
from .stats import DailyStats
from .task import ProductivityTask, Subtask, TaskCategory, TaskPriority

__all__ = [
    "DailyStats",
    "FocusSession",
    "InsightPriority",
    "InsightType",
    "Phase",
    "ProductivityInsight",
    "ProductivitySettings",
    "ProductivityTask",
    "Subtask",
    "TaskCategory",
    "TaskPriority",
]
