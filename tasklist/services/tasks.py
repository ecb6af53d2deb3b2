"""
Task service - owner-scoped task management.

Every operation takes the caller's user id (from the authorization gate)
and passes it to the store with the task id. A task that exists under
another owner is reported exactly like one that doesn't exist.
"""

from __future__ import annotations

import logging

from tasklist.core.errors import NotFoundError
from tasklist.core.models import Task, TaskCreate, TaskFilters, TaskPatch, TaskReplace
from tasklist.core.utils import utc_now
from tasklist.storage.base import TaskStore

logger = logging.getLogger(__name__)


TASK_NOT_FOUND = "Task not found"


class TaskService:
    """
    CRUD, filtering and completion toggling for a user's tasks.

    Usage:
        service = TaskService(storage.tasks)
        task = await service.create(ctx.user_id, TaskCreate(title="Buy milk"))
        task, message = await service.toggle(ctx.user_id, task.id)
    """

    def __init__(self, tasks: TaskStore):
        self.tasks = tasks

    async def list(self, owner_id: str, filters: TaskFilters | None = None) -> list[Task]:
        """The owner's tasks, newest first."""
        return await self.tasks.list(owner_id, filters or TaskFilters())

    async def create(self, owner_id: str, data: TaskCreate) -> Task:
        now = utc_now()
        task = Task(
            user_id=owner_id,
            title=data.title,
            description=data.description,
            due_date=data.due_date,
            priority=data.priority,
            created_at=now,
            updated_at=now,
        )
        task = await self.tasks.create(task)
        logger.debug(f"User {owner_id} created task {task.id}")
        return task

    async def get(self, owner_id: str, task_id: str) -> Task:
        task = await self.tasks.get(owner_id, task_id)
        if task is None:
            raise NotFoundError(TASK_NOT_FOUND)
        return task

    async def replace(self, owner_id: str, task_id: str, data: TaskReplace) -> Task:
        """Overwrite every editable field; omitted optional fields are cleared."""
        changes = data.model_dump()
        changes["updated_at"] = utc_now()
        return await self._update(owner_id, task_id, changes)

    async def patch(self, owner_id: str, task_id: str, data: TaskPatch) -> Task:
        """Change only the supplied fields. An empty patch just bumps updated_at."""
        changes = data.changes()
        changes["updated_at"] = utc_now()
        return await self._update(owner_id, task_id, changes)

    async def delete(self, owner_id: str, task_id: str) -> None:
        if not await self.tasks.delete(owner_id, task_id):
            raise NotFoundError(TASK_NOT_FOUND)
        logger.debug(f"User {owner_id} deleted task {task_id}")

    async def toggle(self, owner_id: str, task_id: str) -> tuple[Task, str]:
        """
        Flip completion.

        Returns:
            The updated task and a message describing its new state
        """
        task = await self.tasks.toggle(owner_id, task_id, {"updated_at": utc_now()})
        if task is None:
            raise NotFoundError(TASK_NOT_FOUND)
        message = "Task completed" if task.is_completed else "Task marked as pending"
        return task, message

    async def _update(self, owner_id: str, task_id: str, changes: dict) -> Task:
        task = await self.tasks.update(owner_id, task_id, changes)
        if task is None:
            raise NotFoundError(TASK_NOT_FOUND)
        logger.debug(f"User {owner_id} updated task {task_id}: {sorted(changes)}")
        return task
