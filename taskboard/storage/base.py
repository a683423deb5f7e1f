"""
Persistence boundary.

Services only see MetadataStorage: documents keyed by id inside named
collections, plus the queries the task board needs (foreign key and
membership filters) and unique indexes (user email).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel


# =============================================================================
# Errors
# =============================================================================


class StorageError(Exception):
    """Raised when the backing store fails."""
    pass


class DuplicateKeyError(StorageError):
    """Raised when a write violates a unique index."""
    
    def __init__(self, collection: str, field: str, value: Any):
        self.collection = collection
        self.field = field
        self.value = value
        super().__init__(f"Duplicate value for {collection}.{field}")


# =============================================================================
# Storage Interface
# =============================================================================


class MetadataStorage(ABC):
    """
    Document storage for structured data (users, projects, tickets...).
    
    Query filters match on equality. When the stored field is a list,
    a scalar filter value matches if the list contains it, so
    {"member_ids": user_id} finds every project user_id belongs to.
    """
    
    @abstractmethod
    async def save(self, collection: str, id: str, data: dict[str, Any]) -> None:
        """Insert or replace the document stored under id."""
        pass
    
    @abstractmethod
    async def get(self, collection: str, id: str) -> dict[str, Any] | None:
        """The document, or None when absent."""
        pass
    
    @abstractmethod
    async def delete(self, collection: str, id: str) -> bool:
        """Returns False when there was nothing to delete."""
        pass
    
    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        """Documents matching every filter, in insertion order."""
        pass
    
    @abstractmethod
    async def update(self, collection: str, id: str, updates: dict[str, Any]) -> bool:
        """Merge updates into an existing document. False when absent."""
        pass
    
    @abstractmethod
    async def create_index(self, collection: str, field: str, unique: bool = False) -> None:
        """Declare an index. Unique indexes reject duplicate values on write."""
        pass
    
    async def delete_many(self, collection: str, filters: dict[str, Any]) -> int:
        """Delete every document matching filters. Returns the count."""
        deleted = 0
        for doc in await self.query(collection, filters):
            if await self.delete(collection, doc["_id"]):
                deleted += 1
        return deleted


# =============================================================================
# Provider
# =============================================================================


class StorageProvider(BaseModel):
    """
    Holds the configured backend.
    
    Built once by the app lifespan and handed to every service.
    """
    
    model_config = {"arbitrary_types_allowed": True}
    
    metadata: MetadataStorage


# =============================================================================
# Collections
# =============================================================================


class Collections:
    """Collection names used by the services."""
    
    USERS = "users"
    PROJECTS = "projects"
    TICKETS = "tickets"
    COMMENTS = "comments"
    LABELS = "labels"


async def ensure_indexes(storage: StorageProvider) -> None:
    """Create the indexes the services rely on."""
    await storage.metadata.create_index(Collections.USERS, "email", unique=True)
    await storage.metadata.create_index(Collections.PROJECTS, "member_ids")
    await storage.metadata.create_index(Collections.TICKETS, "project_id")
    await storage.metadata.create_index(Collections.COMMENTS, "ticket_id")
    await storage.metadata.create_index(Collections.LABELS, "project_id")
