"""
Request payloads.

JSON bodies use camelCase (firstName, estimationDate); Python code uses
the snake_case field names. Patch models are partial: only the fields a
client actually sends are applied.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from taskboard.core.models import ProjectStatus, TicketStatus
from taskboard.core.utils import as_utc


class RequestModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )
    
    def patch(self) -> dict:
        """Fields explicitly supplied by the client (nulls ignored)."""
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None
        }


# =============================================================================
# Auth / users
# =============================================================================


class RegisterRequest(RequestModel):
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    phone: str = Field(min_length=1, max_length=40)
    email: EmailStr
    password: str = Field(min_length=1)


class LoginRequest(RequestModel):
    # Any string: a malformed email fails like an unknown one
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class ForgotPasswordRequest(RequestModel):
    email: EmailStr


class ResetPasswordRequest(RequestModel):
    token: str = Field(min_length=1)
    new_password: str = Field(min_length=1)


class ProfileUpdate(RequestModel):
    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    phone: str | None = Field(default=None, min_length=1, max_length=40)


# =============================================================================
# Projects
# =============================================================================


class ProjectCreate(RequestModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = ""
    status: ProjectStatus = ProjectStatus.ACTIVE


class ProjectUpdate(RequestModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    status: ProjectStatus | None = None


class MemberAdd(RequestModel):
    """Identify the user to add either by id or by email."""
    
    user_id: str | None = None
    email: EmailStr | None = None
    
    @model_validator(mode="after")
    def check_target(self) -> MemberAdd:
        if not self.user_id and not self.email:
            raise ValueError("userId or email is required")
        return self


# =============================================================================
# Tickets
# =============================================================================


class TicketCreate(RequestModel):
    project_id: str = Field(min_length=1)
    title: str = Field(min_length=1, max_length=200)
    estimation_date: datetime
    description: str = ""
    assignees: list[str] = Field(default_factory=list)
    labels: list[str] = Field(default_factory=list)
    
    @field_validator("estimation_date")
    @classmethod
    def estimation_in_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class TicketUpdate(RequestModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    status: TicketStatus | None = None
    estimation_date: datetime | None = None
    assignees: list[str] | None = None
    labels: list[str] | None = None
    
    @field_validator("estimation_date")
    @classmethod
    def estimation_in_utc(cls, value: datetime | None) -> datetime | None:
        return as_utc(value) if value is not None else None


# =============================================================================
# Comments and labels
# =============================================================================


class CommentCreate(RequestModel):
    ticket_id: str = Field(min_length=1)
    content: str = Field(min_length=1, max_length=5000)


class CommentUpdate(RequestModel):
    content: str = Field(min_length=1, max_length=5000)


class LabelCreate(RequestModel):
    name: str = Field(min_length=1, max_length=50)
    color: str = Field(default="#cccccc", pattern=r"^#[0-9a-fA-F]{6}$")
