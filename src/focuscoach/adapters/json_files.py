"""Blob store keeping one JSON file per key."""

from __future__ import annotations

import contextlib
import os
import re
import tempfile
from pathlib import Path

from focuscoach.exceptions import BlobStoreError
from focuscoach.repositories.blob_store import BlobStore

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class JsonFileBlobStore(BlobStore):
    """Stores each key as ``<directory>/<key>.json``.

    Files are written atomically (temp file + rename) with owner-only
    permissions.
    """

    SUFFIX = ".json"

    def __init__(self, directory: Path):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise BlobStoreError(key, "key contains unsupported characters")
        return self.directory / f"{key}{self.SUFFIX}"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise BlobStoreError(key, str(e)) from e

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
        except OSError as e:
            raise BlobStoreError(key, str(e)) from e
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.chmod(tmp_name, 0o600)
            os.replace(tmp_name, path)
        except OSError as e:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
            raise BlobStoreError(key, str(e)) from e

    def delete(self, key: str) -> None:
        path = self._path(key)
        if path.exists():
            try:
                path.unlink()
            except OSError as e:
                raise BlobStoreError(key, str(e)) from e

    def keys(self) -> list[str]:
        return sorted(p.stem for p in self.directory.glob(f"*{self.SUFFIX}"))

    @property
    def storage_type(self) -> str:
        return "json"
