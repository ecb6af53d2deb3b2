"""
In-memory storage implementations for development and tests.

These work without any external services. Data is lost on restart.
"""

from __future__ import annotations

from itertools import count
from typing import Any

from tasklist.core.errors import ConflictError
from tasklist.core.models import Task, TaskFilters, User
from tasklist.storage.base import StorageProvider, TaskStore, UserStore


# =============================================================================
# In-Memory User Storage
# =============================================================================


class InMemoryUserStore(UserStore):
    """Users keyed by id, with an email index."""

    def __init__(self):
        self._users: dict[str, User] = {}
        self._ids_by_email: dict[str, str] = {}  # email -> user_id

    async def create(self, user: User) -> User:
        if user.email in self._ids_by_email:
            raise ConflictError()
        self._users[user.id] = user.model_copy()
        self._ids_by_email[user.email] = user.id
        return user.model_copy()

    async def get_by_id(self, user_id: str) -> User | None:
        user = self._users.get(user_id)
        return user.model_copy() if user else None

    async def get_by_email(self, email: str) -> User | None:
        user_id = self._ids_by_email.get(email)
        return await self.get_by_id(user_id) if user_id else None

    async def update(self, user_id: str, changes: dict[str, Any]) -> User | None:
        user = self._users.get(user_id)
        if user is None:
            return None
        updated = user.model_copy(update=changes)
        self._users[user_id] = updated
        return updated.model_copy()


# =============================================================================
# In-Memory Task Storage
# =============================================================================


class InMemoryTaskStore(TaskStore):
    """Tasks keyed by id. Insertion order breaks created_at ties."""

    def __init__(self):
        self._tasks: dict[str, Task] = {}
        self._sequence: dict[str, int] = {}
        self._counter = count()

    def _owned(self, owner_id: str, task_id: str) -> Task | None:
        task = self._tasks.get(task_id)
        if task is None or task.user_id != owner_id:
            return None
        return task

    async def create(self, task: Task) -> Task:
        self._tasks[task.id] = task.model_copy()
        self._sequence[task.id] = next(self._counter)
        return task.model_copy()

    async def get(self, owner_id: str, task_id: str) -> Task | None:
        task = self._owned(owner_id, task_id)
        return task.model_copy() if task else None

    async def list(self, owner_id: str, filters: TaskFilters | None = None) -> list[Task]:
        filters = filters or TaskFilters()
        results = [
            task for task in self._tasks.values()
            if task.user_id == owner_id and _matches(task, filters)
        ]
        results.sort(key=lambda t: (t.created_at, self._sequence[t.id]), reverse=True)
        return [task.model_copy() for task in results]

    async def update(self, owner_id: str, task_id: str, changes: dict[str, Any]) -> Task | None:
        task = self._owned(owner_id, task_id)
        if task is None:
            return None
        updated = task.model_copy(update=changes)
        self._tasks[task_id] = updated
        return updated.model_copy()

    async def delete(self, owner_id: str, task_id: str) -> bool:
        if self._owned(owner_id, task_id) is None:
            return False
        del self._tasks[task_id]
        del self._sequence[task_id]
        return True


def _matches(task: Task, filters: TaskFilters) -> bool:
    if filters.is_completed is not None and task.is_completed != filters.is_completed:
        return False
    if filters.priority is not None and task.priority != filters.priority:
        return False
    if filters.due_date is not None and task.due_date != filters.due_date:
        return False
    if filters.search:
        needle = filters.search.lower()
        haystacks = (task.title, task.description or "")
        if not any(needle in text.lower() for text in haystacks):
            return False
    return True


# =============================================================================
# Factory
# =============================================================================


def create_local_storage() -> StorageProvider:
    """Create a StorageProvider with in-memory implementations."""
    return StorageProvider(
        users=InMemoryUserStore(),
        tasks=InMemoryTaskStore(),
    )
