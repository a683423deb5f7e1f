"""
Storage abstractions.

Integration points:
- MetadataStorage -> document store (MongoDB, PostgreSQL JSONB, ...)
"""

from taskboard.storage.base import (
    MetadataStorage,
    StorageProvider,
    StorageError,
    DuplicateKeyError,
    Collections,
    ensure_indexes,
)
from taskboard.storage.local import create_local_storage, InMemoryMetadataStorage

__all__ = [
    "MetadataStorage",
    "StorageProvider",
    "StorageError",
    "DuplicateKeyError",
    "Collections",
    "ensure_indexes",
    "create_local_storage",
    "InMemoryMetadataStorage",
]
