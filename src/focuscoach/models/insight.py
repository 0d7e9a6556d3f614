"""Derived productivity insights."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class InsightType(str, Enum):
    PRODUCTIVITY = "productivity"
    TIME_MANAGEMENT = "timeManagement"
    FOCUS = "focus"
    MOTIVATION = "motivation"
    HEALTH = "health"


class InsightPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ProductivityInsight(BaseModel):
    """Human-readable observation computed from statistics and tasks.

    Insights are regenerated from scratch and never persisted.
    """

    title: str
    message: str
    suggestion: str
    type: InsightType
    priority: InsightPriority
    actionable: bool = True
    created_at: datetime
