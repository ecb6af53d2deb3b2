"""
Core data models for the task list service.

Users own tasks. Every task belongs to exactly one user, and every
lookup of a task goes through its owner.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, Field, StringConstraints, model_validator

from tasklist.core.utils import generate_id, utc_now


# =============================================================================
# Enums
# =============================================================================


class Priority(str, Enum):
    """How urgent a task is."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskStatus(str, Enum):
    """Completion filter accepted by the task list."""

    COMPLETED = "completed"
    PENDING = "pending"


Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]


# =============================================================================
# User
# =============================================================================


class User(BaseModel):
    """A registered user as stored. Never returned to clients as-is."""

    id: str = Field(default_factory=lambda: generate_id("user"))
    email: str
    password_hash: str
    first_name: str
    last_name: str
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class UserResponse(BaseModel):
    """User data returned to client (no password hash)."""

    id: str
    email: str
    first_name: str
    last_name: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_user(cls, user: User) -> UserResponse:
        return cls.model_validate(user.model_dump(exclude={"password_hash"}))


# =============================================================================
# Task
# =============================================================================


class Task(BaseModel):
    """A unit of work owned by one user."""

    id: str = Field(default_factory=lambda: generate_id("task"))
    user_id: str
    title: str
    description: str | None = None
    is_completed: bool = False
    due_date: date | None = None
    priority: Priority = Priority.MEDIUM
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class TaskCreate(BaseModel):
    """Fields accepted when creating a task."""

    title: Title
    description: str | None = None
    due_date: date | None = None
    priority: Priority = Priority.MEDIUM


class TaskReplace(BaseModel):
    """
    Full replacement of a task's editable fields.

    description and due_date may be omitted; they are cleared when absent.
    """

    title: Title
    description: str | None = None
    due_date: date | None = None
    priority: Priority
    is_completed: bool


class TaskPatch(BaseModel):
    """Partial update. Only the fields present in the request change."""

    title: Title | None = None
    description: str | None = None
    due_date: date | None = None
    priority: Priority | None = None
    is_completed: bool | None = None

    @model_validator(mode="after")
    def _reject_null_required_fields(self) -> TaskPatch:
        nulls = [
            name
            for name in ("title", "priority", "is_completed")
            if name in self.model_fields_set and getattr(self, name) is None
        ]
        if nulls:
            raise ValueError(f"{', '.join(nulls)} cannot be null")
        return self

    def changes(self) -> dict[str, Any]:
        """The supplied fields only."""
        return self.model_dump(exclude_unset=True)


# =============================================================================
# Filters
# =============================================================================


class TaskFilters(BaseModel):
    """Validated filters for listing a user's tasks."""

    is_completed: bool | None = None
    search: str | None = None
    priority: Priority | None = None
    due_date: date | None = None

    @classmethod
    def from_query(
        cls,
        status: str | None = None,
        search: str | None = None,
        priority: str | None = None,
        due_date: str | None = None,
    ) -> TaskFilters:
        """
        Build filters from raw query values.

        Unknown or malformed values are ignored rather than rejected.
        """
        filters = cls()

        if status == TaskStatus.COMPLETED.value:
            filters.is_completed = True
        elif status == TaskStatus.PENDING.value:
            filters.is_completed = False

        if search and search.strip():
            filters.search = search.strip()

        if priority in {p.value for p in Priority}:
            filters.priority = Priority(priority)

        if due_date:
            filters.due_date = _parse_date(due_date)

        return filters


def _parse_date(value: str) -> date | None:
    """Parse an ISO date or datetime; None if it doesn't look like one."""
    value = value.strip()
    try:
        return date.fromisoformat(value)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(value).date()
    except ValueError:
        return None
