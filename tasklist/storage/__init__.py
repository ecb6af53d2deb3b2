"""
Storage abstractions.

- UserStore → credentials and profiles
- TaskStore → owner-scoped tasks
- StorageProvider → the pair, injected into services at startup
"""

from tasklist.config import Settings
from tasklist.storage.base import (
    UserStore,
    TaskStore,
    StorageProvider,
)
from tasklist.storage.local import create_local_storage
from tasklist.storage.sql import create_sql_storage


def create_storage(settings: Settings) -> StorageProvider:
    """Pick the backend named by settings.database_url."""
    if settings.use_memory_storage:
        return create_local_storage()
    return create_sql_storage(settings.database_url, echo=settings.debug)


__all__ = [
    "UserStore",
    "TaskStore",
    "StorageProvider",
    "create_local_storage",
    "create_sql_storage",
    "create_storage",
]
