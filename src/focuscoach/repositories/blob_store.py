"""Blob store port.

The engine persists every record as an encoded string under a string key.
Adapters in ``focuscoach.adapters`` implement this interface for memory,
JSON files and SQLite, so the persistence gateway never knows which
backend it is talking to.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class BlobStore(ABC):
    """String-keyed blob store.

    Implementations raise ``BlobStoreError`` when the backend fails; a
    missing key is not an error and yields ``None`` from ``get``.
    """

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value for ``key`` or None if absent.

        Raises:
            BlobStoreError: If the backend cannot be read
        """

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value.

        Raises:
            BlobStoreError: If the backend cannot be written
        """

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key``. Deleting an absent key is a no-op."""

    @abstractmethod
    def keys(self) -> list[str]:
        """List stored keys in sorted order."""

    @property
    @abstractmethod
    def storage_type(self) -> str:
        """Backend identifier (for logging/debugging)."""

    def close(self) -> None:
        """Release backend resources. Default: nothing to release."""
