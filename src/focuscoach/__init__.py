"""focuscoach - Pomodoro focus session scheduler with productivity insights."""

__version__ = "0.1.0"

from focuscoach.services.coach import CoachSnapshot, ProductivityCoach, build_coach

__all__ = ["CoachSnapshot", "ProductivityCoach", "build_coach", "__version__"]
