"""Persistence gateway between engine records and the blob store.

Keys:
    productivity_settings        ProductivitySettings
    productivity_tasks           list[ProductivityTask] (open + completed)
    pomodoro_stats_YYYY-MM-DD    DailyStats for one calendar day
    focus_sessions               list[FocusSession], append-only

Loading never raises: a missing or unreadable record yields the type's
default. Saving never raises either: failures are logged and the caller's
in-memory state stays authoritative for the rest of the process.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import date

from pydantic import BaseModel, TypeAdapter, ValidationError

from focuscoach.exceptions import BlobStoreError
from focuscoach.models import DailyStats, FocusSession, ProductivitySettings, ProductivityTask
from focuscoach.repositories.blob_store import BlobStore

logger = logging.getLogger(__name__)

SETTINGS_KEY = "productivity_settings"
TASKS_KEY = "productivity_tasks"
SESSIONS_KEY = "focus_sessions"
DAILY_STATS_PREFIX = "pomodoro_stats_"

_TASK_LIST = TypeAdapter(list[ProductivityTask])
_SESSION_LIST = TypeAdapter(list[FocusSession])

_SAVE_ERRORS = (BlobStoreError, OSError, sqlite3.Error, ValueError, TypeError)


def daily_stats_key(day: date) -> str:
    """Blob key for the statistics of ``day``."""
    return f"{DAILY_STATS_PREFIX}{day.isoformat()}"


class PersistenceGateway:
    """Encodes records as JSON and stores them under deterministic keys."""

    def __init__(self, store: BlobStore):
        self.store = store
        # Session history as last read or written; None until first loaded
        self._sessions: list[FocusSession] | None = None

    # -- low level -------------------------------------------------------------

    def _read(self, key: str) -> str | None:
        try:
            return self.store.get(key)
        except BlobStoreError:
            logger.warning("Could not read '%s', using defaults", key, exc_info=True)
            return None

    def _write(self, key: str, payload: str | bytes) -> bool:
        if isinstance(payload, bytes):
            payload = payload.decode("utf-8")
        try:
            self.store.set(key, payload)
        except _SAVE_ERRORS:
            logger.exception("Failed to save '%s' to %s store", key, self.store.storage_type)
            return False
        return True

    def _save_model(self, key: str, record: BaseModel) -> bool:
        try:
            payload = record.model_dump_json()
        except _SAVE_ERRORS:
            logger.exception("Failed to encode '%s'", key)
            return False
        return self._write(key, payload)

    # -- settings --------------------------------------------------------------

    def save_settings(self, settings: ProductivitySettings) -> bool:
        return self._save_model(SETTINGS_KEY, settings)

    def load_settings(self) -> ProductivitySettings:
        raw = self._read(SETTINGS_KEY)
        if raw is None:
            return ProductivitySettings()
        try:
            return ProductivitySettings.model_validate_json(raw)
        except ValidationError:
            logger.warning("Corrupt settings record, using defaults")
            return ProductivitySettings()

    # -- tasks -----------------------------------------------------------------

    def save_tasks(self, tasks: list[ProductivityTask]) -> bool:
        try:
            payload = _TASK_LIST.dump_json(tasks)
        except _SAVE_ERRORS:
            logger.exception("Failed to encode '%s'", TASKS_KEY)
            return False
        return self._write(TASKS_KEY, payload)

    def load_tasks(self) -> list[ProductivityTask]:
        raw = self._read(TASKS_KEY)
        if raw is None:
            return []
        try:
            return _TASK_LIST.validate_json(raw)
        except ValidationError:
            logger.warning("Corrupt task list record, starting empty")
            return []

    # -- daily statistics --------------------------------------------------------

    def save_daily_stats(self, stats: DailyStats) -> bool:
        return self._save_model(daily_stats_key(stats.day), stats)

    def load_daily_stats(self, day: date) -> DailyStats:
        key = daily_stats_key(day)
        raw = self._read(key)
        if raw is None:
            return DailyStats(day=day)
        try:
            stats = DailyStats.model_validate_json(raw)
        except ValidationError:
            logger.warning("Corrupt statistics record '%s', using zero values", key)
            return DailyStats(day=day)
        if stats.day != day:
            logger.warning("Statistics record '%s' is dated %s", key, stats.day)
            stats.day = day
        return stats

    # -- session history ---------------------------------------------------------

    def _decode_sessions(self, raw: str | None) -> list[FocusSession]:
        if raw is None:
            return []
        try:
            return _SESSION_LIST.validate_json(raw)
        except ValidationError:
            logger.warning("Corrupt session history record, starting empty")
            return []

    def load_sessions(self) -> list[FocusSession]:
        if self._sessions is not None:
            return list(self._sessions)
        try:
            raw = self.store.get(SESSIONS_KEY)
        except BlobStoreError:
            logger.warning("Could not read '%s', using defaults", SESSIONS_KEY, exc_info=True)
            return []
        self._sessions = self._decode_sessions(raw)
        return list(self._sessions)

    def append_session(self, session: FocusSession) -> bool:
        """Append a finalized session to the history log.

        The history is read from the store once and then kept in memory, so
        later appends only re-encode it. If the stored history cannot be
        read, nothing is written and the stored log is left intact.
        """
        if self._sessions is None:
            try:
                raw = self.store.get(SESSIONS_KEY)
            except BlobStoreError:
                logger.exception("Could not read '%s', session not recorded", SESSIONS_KEY)
                return False
            self._sessions = self._decode_sessions(raw)

        sessions = [*self._sessions, session]
        try:
            payload = _SESSION_LIST.dump_json(sessions)
        except _SAVE_ERRORS:
            logger.exception("Failed to encode '%s'", SESSIONS_KEY)
            return False
        self._sessions = sessions
        return self._write(SESSIONS_KEY, payload)
