"""Storage ports for focuscoach."""

from .blob_store import BlobStore

__all__ = ["BlobStore"]
