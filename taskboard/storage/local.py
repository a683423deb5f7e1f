"""
Local storage implementation for development and tests.

An in-memory document store that works without any external services.
"""

from __future__ import annotations

import copy
from datetime import datetime, timezone
from typing import Any

from taskboard.storage.base import (
    DuplicateKeyError,
    MetadataStorage,
    StorageProvider,
)


# =============================================================================
# In-memory backend
# =============================================================================


def _matches(doc: dict[str, Any], filters: dict[str, Any]) -> bool:
    for key, value in filters.items():
        stored = doc.get(key)
        if isinstance(stored, list) and not isinstance(value, list):
            if value not in stored:
                return False
        elif stored != value:
            return False
    return True


class InMemoryMetadataStorage(MetadataStorage):
    """In-memory document storage. Documents are copied in and out."""
    
    def __init__(self):
        self._data: dict[str, dict[str, dict[str, Any]]] = {}
        self._unique: dict[str, set[str]] = {}
    
    def _check_unique(self, collection: str, id: str, data: dict[str, Any]) -> None:
        for field in self._unique.get(collection, set()):
            value = data.get(field)
            if value is None:
                continue
            for other_id, doc in self._data.get(collection, {}).items():
                if other_id != id and doc.get(field) == value:
                    raise DuplicateKeyError(collection, field, value)
    
    async def save(self, collection: str, id: str, data: dict[str, Any]) -> None:
        self._check_unique(collection, id, data)
        if collection not in self._data:
            self._data[collection] = {}
        self._data[collection][id] = {
            **copy.deepcopy(data),
            "_id": id,
            "_updated_at": datetime.now(timezone.utc).isoformat(),
        }
    
    async def get(self, collection: str, id: str) -> dict[str, Any] | None:
        doc = self._data.get(collection, {}).get(id)
        return copy.deepcopy(doc) if doc is not None else None
    
    async def delete(self, collection: str, id: str) -> bool:
        if collection in self._data and id in self._data[collection]:
            del self._data[collection][id]
            return True
        return False
    
    async def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        if collection not in self._data:
            return []
        
        results = [
            doc for doc in self._data[collection].values()
            if not filters or _matches(doc, filters)
        ]
        
        end = offset + limit if limit is not None else None
        return copy.deepcopy(results[offset:end])
    
    async def update(self, collection: str, id: str, updates: dict[str, Any]) -> bool:
        if collection in self._data and id in self._data[collection]:
            merged = {**self._data[collection][id], **updates}
            self._check_unique(collection, id, merged)
            self._data[collection][id].update(copy.deepcopy(updates))
            self._data[collection][id]["_updated_at"] = datetime.now(timezone.utc).isoformat()
            return True
        return False
    
    async def create_index(self, collection: str, field: str, unique: bool = False) -> None:
        # Lookups are linear scans; only uniqueness needs tracking
        if unique:
            self._unique.setdefault(collection, set()).add(field)


# =============================================================================
# Factory
# =============================================================================


def create_local_storage() -> StorageProvider:
    """Create a StorageProvider with the in-memory implementation."""
    return StorageProvider(metadata=InMemoryMetadataStorage())
