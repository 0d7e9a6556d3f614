"""Exception hierarchy for the focus coach engine."""

from __future__ import annotations


class FocusCoachError(Exception):
    """Base class for all focuscoach errors."""


class BlobStoreError(FocusCoachError):
    """Raised by blob store adapters when a read or write fails."""

    def __init__(self, key: str, message: str):
        self.key = key
        super().__init__(f"Blob store error for key '{key}': {message}")


class ConfigError(FocusCoachError):
    """Raised when the engine configuration cannot be loaded or saved."""
