"""Blob store adapters and backend selection."""

from __future__ import annotations

from focuscoach.config import EngineConfig
from focuscoach.repositories.blob_store import BlobStore

from .json_files import JsonFileBlobStore
from .memory import MemoryBlobStore
from .sqlite import SqliteBlobStore

SQLITE_FILENAME = "focuscoach.db"


def create_blob_store(config: EngineConfig) -> BlobStore:
    """Build the blob store selected by ``config.storage_backend``."""
    if config.storage_backend == "memory":
        return MemoryBlobStore()
    if config.storage_backend == "json":
        return JsonFileBlobStore(config.data_path / "records")
    return SqliteBlobStore(config.data_path / SQLITE_FILENAME)


__all__ = [
    "JsonFileBlobStore",
    "MemoryBlobStore",
    "SqliteBlobStore",
    "create_blob_store",
]
