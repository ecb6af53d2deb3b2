"""Services - business rules between the routes and the stores."""

from tasklist.services.tasks import TaskService

__all__ = [
    "TaskService",
]
