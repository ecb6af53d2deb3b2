"""
Storage abstraction layer.

All persistence goes through these interfaces. Services receive a
StorageProvider at construction and never know which backend is behind it.

Implementations:
- local: in-memory dictionaries (development and tests)
- sql: SQLAlchemy (SQLite, PostgreSQL, MySQL, ...)

Every task operation takes the owner's id. A task id alone never
reaches a task.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel

from tasklist.core.models import Task, TaskFilters, User


# =============================================================================
# Storage Interfaces
# =============================================================================


class UserStore(ABC):
    """
    Storage for user credentials and profiles.

    Email uniqueness is enforced here.
    """

    @abstractmethod
    async def create(self, user: User) -> User:
        """Insert a user. Raises ConflictError if the email is taken."""
        pass

    @abstractmethod
    async def get_by_id(self, user_id: str) -> User | None:
        """Get a user by ID."""
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> User | None:
        """Get a user by exact email."""
        pass

    @abstractmethod
    async def update(self, user_id: str, changes: dict[str, Any]) -> User | None:
        """Apply field changes. Returns None if the user doesn't exist."""
        pass


class TaskStore(ABC):
    """Storage for tasks, always scoped to an owner."""

    @abstractmethod
    async def create(self, task: Task) -> Task:
        """Insert a task."""
        pass

    @abstractmethod
    async def get(self, owner_id: str, task_id: str) -> Task | None:
        """Get a task by ID if it belongs to owner_id."""
        pass

    @abstractmethod
    async def list(self, owner_id: str, filters: TaskFilters | None = None) -> list[Task]:
        """The owner's tasks matching filters, newest first."""
        pass

    @abstractmethod
    async def update(self, owner_id: str, task_id: str, changes: dict[str, Any]) -> Task | None:
        """Apply field changes to an owned task. None if not found."""
        pass

    @abstractmethod
    async def delete(self, owner_id: str, task_id: str) -> bool:
        """Delete an owned task. False if not found."""
        pass

    async def toggle(self, owner_id: str, task_id: str, changes: dict[str, Any]) -> Task | None:
        """
        Flip is_completed on an owned task, applying extra changes too.

        Backends may override this to flip in a single statement.
        """
        task = await self.get(owner_id, task_id)
        if task is None:
            return None
        return await self.update(owner_id, task_id, {**changes, "is_completed": not task.is_completed})


# =============================================================================
# Storage Provider (dependency injection container)
# =============================================================================


class StorageProvider(BaseModel):
    """
    Container for all storage backends.

    Initialize once at app startup with appropriate implementations.
    Services receive this and use the interfaces without knowing
    the underlying implementation.
    """

    model_config = {"arbitrary_types_allowed": True}

    users: UserStore
    tasks: TaskStore
    backend: Any = None

    async def initialize(self) -> None:
        """Prepare the backend (create tables, etc.)."""
        if self.backend is not None:
            await self.backend.initialize()

    async def close(self) -> None:
        """Release backend resources."""
        if self.backend is not None:
            await self.backend.close()
