"""
Core data models for the task board.

Users, projects (with their membership list), tickets, comments and labels.
Every model is persisted as a plain document via MetadataStorage.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

from taskboard.auth.capabilities import ProjectRole
from taskboard.core.utils import generate_id, utc_now


# =============================================================================
# Base
# =============================================================================


class Document(BaseModel):
    """Stored with snake_case keys, serialized to clients in camelCase."""
    
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Enums
# =============================================================================


class ProjectStatus(str, Enum):
    """Lifecycle status of a project."""
    
    ACTIVE = "ACTIVE"
    DONE = "DONE"
    PAUSED = "PAUSED"


class TicketStatus(str, Enum):
    """Board column of a ticket. Any transition between values is allowed."""
    
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    IN_REVIEW = "IN_REVIEW"
    DONE = "DONE"


# =============================================================================
# Users
# =============================================================================


class User(Document):
    """A registered user, as stored."""
    
    id: str = Field(default_factory=lambda: generate_id("user"))
    first_name: str
    last_name: str
    phone: str
    email: str  # always lowercase
    password_hash: str
    
    # Password reset (only the hash of the token is kept)
    reset_token_hash: str | None = None
    reset_token_expires_at: datetime | None = None
    
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    
    def to_public(self) -> UserPublic:
        return UserPublic(
            id=self.id,
            first_name=self.first_name,
            last_name=self.last_name,
            phone=self.phone,
            email=self.email,
            created_at=self.created_at,
        )
    
    def to_summary(self) -> UserSummary:
        return UserSummary(
            id=self.id,
            first_name=self.first_name,
            last_name=self.last_name,
            email=self.email,
        )


class UserPublic(Document):
    """User data returned to its owner (no credentials)."""
    
    id: str
    first_name: str
    last_name: str
    phone: str
    email: str
    created_at: datetime


class UserSummary(Document):
    """User data visible to other users (search results)."""
    
    id: str
    first_name: str
    last_name: str
    email: str


# =============================================================================
# Projects
# =============================================================================


class Member(Document):
    """One entry of a project's membership list."""
    
    user_id: str
    role: ProjectRole = ProjectRole.MEMBER


class Project(Document):
    """
    A project - the tenant boundary.
    
    Exactly one member holds the owner role. Everything else
    (tickets, comments, labels) is scoped to a project.
    """
    
    id: str = Field(default_factory=lambda: generate_id("proj"))
    title: str
    description: str = ""
    status: ProjectStatus = ProjectStatus.ACTIVE
    created_by: str
    members: list[Member] = Field(default_factory=list)
    
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    
    @computed_field
    @property
    def member_ids(self) -> list[str]:
        # Persisted so the store can filter projects by membership
        return [m.user_id for m in self.members]
    
    @property
    def owner_id(self) -> str | None:
        for m in self.members:
            if m.role == ProjectRole.OWNER:
                return m.user_id
        return None
    
    def get_member(self, user_id: str) -> Member | None:
        for m in self.members:
            if m.user_id == user_id:
                return m
        return None
    
    def update(self, **kwargs) -> None:
        """Update fields and set updated_at."""
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)
        self.updated_at = utc_now()


# =============================================================================
# Tickets, comments, labels
# =============================================================================


class Ticket(Document):
    """A card on a project board."""
    
    id: str = Field(default_factory=lambda: generate_id("tkt"))
    project_id: str
    title: str
    description: str = ""
    status: TicketStatus = TicketStatus.TODO
    estimation_date: datetime
    assignees: list[str] = Field(default_factory=list)
    labels: list[str] = Field(default_factory=list)
    created_by: str
    
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    
    def update(self, **kwargs) -> None:
        """Update fields and set updated_at."""
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)
        self.updated_at = utc_now()


class Comment(Document):
    """A comment in a ticket's thread."""
    
    id: str = Field(default_factory=lambda: generate_id("cmt"))
    ticket_id: str
    project_id: str  # denormalized for project-wide cascade deletes
    author_id: str
    content: str
    
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class Label(Document):
    """A project-scoped tag that can be attached to tickets."""
    
    id: str = Field(default_factory=lambda: generate_id("lbl"))
    project_id: str
    name: str
    color: str = "#cccccc"
    
    created_at: datetime = Field(default_factory=utc_now)
