"""
Tests for TaskService: ownership, CRUD semantics, filters and toggling.
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from tasklist.core.errors import NotFoundError
from tasklist.core.models import Priority, TaskCreate, TaskFilters, TaskPatch, TaskReplace


OWNER = "user_a"
INTRUDER = "user_b"


@pytest.fixture
def clock(monkeypatch):
    """Deterministic, strictly increasing utc_now for the task service."""
    start = datetime(2025, 1, 1, tzinfo=timezone.utc)
    ticks = iter(start + timedelta(seconds=i) for i in range(1000))
    monkeypatch.setattr("tasklist.services.tasks.utc_now", lambda: next(ticks))


# =============================================================================
# Create / Get
# =============================================================================


class TestCreate:
    @pytest.mark.asyncio
    async def test_defaults(self, task_service):
        task = await task_service.create(OWNER, TaskCreate(title="Buy milk"))

        assert task.priority == Priority.MEDIUM
        assert task.is_completed is False
        assert task.user_id == OWNER
        assert task.created_at == task.updated_at

    @pytest.mark.asyncio
    async def test_get_own_task(self, task_service):
        task = await task_service.create(OWNER, TaskCreate(title="Buy milk", priority="high"))

        fetched = await task_service.get(OWNER, task.id)
        assert fetched == task

    @pytest.mark.asyncio
    async def test_get_unknown_id(self, task_service):
        with pytest.raises(NotFoundError) as exc_info:
            await task_service.get(OWNER, "task_missing")
        assert exc_info.value.message == "Task not found"


# =============================================================================
# Ownership
# =============================================================================


class TestOwnership:
    @pytest.mark.asyncio
    async def test_other_owner_cannot_reach_task(self, task_service):
        task = await task_service.create(OWNER, TaskCreate(title="Private"))
        full = TaskReplace(title="Hijacked", priority="low", is_completed=True)

        with pytest.raises(NotFoundError):
            await task_service.get(INTRUDER, task.id)
        with pytest.raises(NotFoundError):
            await task_service.patch(INTRUDER, task.id, TaskPatch(title="Hijacked"))
        with pytest.raises(NotFoundError):
            await task_service.replace(INTRUDER, task.id, full)
        with pytest.raises(NotFoundError):
            await task_service.toggle(INTRUDER, task.id)
        with pytest.raises(NotFoundError):
            await task_service.delete(INTRUDER, task.id)

        # Untouched
        assert await task_service.get(OWNER, task.id) == task

    @pytest.mark.asyncio
    async def test_not_found_message_is_ownership_blind(self, task_service):
        task = await task_service.create(OWNER, TaskCreate(title="Private"))

        with pytest.raises(NotFoundError) as foreign:
            await task_service.get(INTRUDER, task.id)
        with pytest.raises(NotFoundError) as missing:
            await task_service.get(INTRUDER, "task_missing")

        assert foreign.value.message == missing.value.message

    @pytest.mark.asyncio
    async def test_list_only_returns_own_tasks(self, task_service):
        await task_service.create(OWNER, TaskCreate(title="Mine"))
        await task_service.create(INTRUDER, TaskCreate(title="Theirs"))

        tasks = await task_service.list(OWNER)
        assert [t.title for t in tasks] == ["Mine"]


# =============================================================================
# Updates
# =============================================================================


class TestUpdates:
    @pytest.mark.asyncio
    async def test_replace_overwrites_everything(self, task_service, clock):
        task = await task_service.create(
            OWNER,
            TaskCreate(title="Old", description="notes", due_date=date(2025, 2, 1), priority="low"),
        )

        replaced = await task_service.replace(
            OWNER, task.id, TaskReplace(title="New", priority="high", is_completed=True)
        )

        assert replaced.title == "New"
        assert replaced.priority == Priority.HIGH
        assert replaced.is_completed is True
        # Omitted optional fields are cleared
        assert replaced.description is None
        assert replaced.due_date is None
        assert replaced.created_at == task.created_at
        assert replaced.updated_at > task.updated_at

    @pytest.mark.asyncio
    async def test_patch_changes_only_supplied_fields(self, task_service, clock):
        task = await task_service.create(
            OWNER, TaskCreate(title="Buy milk", description="2 liters", priority="low")
        )

        patched = await task_service.patch(OWNER, task.id, TaskPatch(priority="high"))

        assert patched.priority == Priority.HIGH
        assert patched.title == "Buy milk"
        assert patched.description == "2 liters"

    @pytest.mark.asyncio
    async def test_patch_can_clear_description(self, task_service):
        task = await task_service.create(OWNER, TaskCreate(title="Buy milk", description="2 liters"))

        patched = await task_service.patch(OWNER, task.id, TaskPatch(description=None))
        assert patched.description is None

    @pytest.mark.asyncio
    async def test_empty_patch_only_bumps_timestamp(self, task_service, clock):
        task = await task_service.create(
            OWNER, TaskCreate(title="Buy milk", description="2 liters", due_date=date(2025, 2, 1))
        )

        patched = await task_service.patch(OWNER, task.id, TaskPatch())

        assert patched.model_dump(exclude={"updated_at"}) == task.model_dump(exclude={"updated_at"})
        assert patched.updated_at > task.updated_at

    @pytest.mark.asyncio
    async def test_toggle_is_its_own_inverse(self, task_service, clock):
        task = await task_service.create(OWNER, TaskCreate(title="Buy milk"))

        once, message_once = await task_service.toggle(OWNER, task.id)
        twice, message_twice = await task_service.toggle(OWNER, task.id)

        assert once.is_completed is True
        assert message_once == "Task completed"
        assert twice.is_completed is False
        assert message_twice == "Task marked as pending"
        assert task.updated_at < once.updated_at < twice.updated_at

    @pytest.mark.asyncio
    async def test_delete_then_delete_again(self, task_service):
        task = await task_service.create(OWNER, TaskCreate(title="Buy milk"))

        await task_service.delete(OWNER, task.id)

        with pytest.raises(NotFoundError):
            await task_service.delete(OWNER, task.id)
        with pytest.raises(NotFoundError):
            await task_service.get(OWNER, task.id)


# =============================================================================
# Listing
# =============================================================================


class TestList:
    @pytest.mark.asyncio
    async def test_newest_first(self, task_service, clock):
        for title in ("first", "second", "third"):
            await task_service.create(OWNER, TaskCreate(title=title))

        tasks = await task_service.list(OWNER)
        assert [t.title for t in tasks] == ["third", "second", "first"]

    @pytest.mark.asyncio
    async def test_filters(self, task_service, clock):
        specs = [
            TaskCreate(title="Buy milk", priority="low", due_date=date(2025, 3, 1)),
            TaskCreate(title="Write report", description="Quarterly MILK numbers", priority="high"),
            TaskCreate(title="Call mom", priority="medium", due_date=date(2025, 3, 1)),
        ]
        created = [await task_service.create(OWNER, spec) for spec in specs]
        await task_service.toggle(OWNER, created[0].id)
        await task_service.toggle(OWNER, created[2].id)

        async def titles(**query):
            tasks = await task_service.list(OWNER, TaskFilters.from_query(**query))
            return [t.title for t in tasks]

        assert await titles(status="completed") == ["Call mom", "Buy milk"]
        assert await titles(status="pending") == ["Write report"]
        assert await titles(search="milk") == ["Write report", "Buy milk"]
        assert await titles(priority="high") == ["Write report"]
        assert await titles(due_date="2025-03-01") == ["Call mom", "Buy milk"]
        assert await titles(status="completed", priority="low") == ["Buy milk"]

        # Malformed filters are ignored, not errors
        assert await titles(status="done", priority="urgent", due_date="not-a-date") == [
            "Call mom",
            "Write report",
            "Buy milk",
        ]
