# =============================================================================
# Task API Routes
# =============================================================================
#
# All endpoints require a bearer token and only ever see the caller's tasks.
#
#   GET    /tasks              - List (filters: status, search, priority, due_date)
#   POST   /tasks              - Create
#   GET    /tasks/{id}         - Get one
#   PUT    /tasks/{id}         - Replace all fields
#   PATCH  /tasks/{id}         - Update some fields
#   PATCH  /tasks/{id}/toggle  - Flip completion
#   DELETE /tasks/{id}         - Delete
#
# =============================================================================

from fastapi import APIRouter, Depends, Request

from tasklist.auth import AuthContext, require_auth
from tasklist.core.models import Task, TaskCreate, TaskFilters, TaskPatch, TaskReplace
from tasklist.services.tasks import TaskService

router = APIRouter(prefix="/tasks", tags=["tasks"])


def get_task_service(request: Request) -> TaskService:
    return request.app.state.task_service


@router.get("", response_model=list[Task])
async def list_tasks(
    status: str | None = None,
    search: str | None = None,
    priority: str | None = None,
    due_date: str | None = None,
    ctx: AuthContext = Depends(require_auth),
    service: TaskService = Depends(get_task_service),
):
    """
    List the caller's tasks, newest first.

    Unknown filter values are ignored.
    """
    filters = TaskFilters.from_query(
        status=status,
        search=search,
        priority=priority,
        due_date=due_date,
    )
    return await service.list(ctx.user_id, filters)


@router.post("", status_code=201)
async def create_task(
    data: TaskCreate,
    ctx: AuthContext = Depends(require_auth),
    service: TaskService = Depends(get_task_service),
):
    task = await service.create(ctx.user_id, data)
    return {"message": "Task created successfully", "task": task}


@router.get("/{task_id}", response_model=Task)
async def get_task(
    task_id: str,
    ctx: AuthContext = Depends(require_auth),
    service: TaskService = Depends(get_task_service),
):
    return await service.get(ctx.user_id, task_id)


@router.put("/{task_id}")
async def replace_task(
    task_id: str,
    data: TaskReplace,
    ctx: AuthContext = Depends(require_auth),
    service: TaskService = Depends(get_task_service),
):
    task = await service.replace(ctx.user_id, task_id, data)
    return {"message": "Task updated successfully", "task": task}


@router.patch("/{task_id}")
async def patch_task(
    task_id: str,
    data: TaskPatch | None = None,
    ctx: AuthContext = Depends(require_auth),
    service: TaskService = Depends(get_task_service),
):
    task = await service.patch(ctx.user_id, task_id, data or TaskPatch())
    return {"message": "Task updated successfully", "task": task}


@router.patch("/{task_id}/toggle")
async def toggle_task(
    task_id: str,
    ctx: AuthContext = Depends(require_auth),
    service: TaskService = Depends(get_task_service),
):
    task, message = await service.toggle(ctx.user_id, task_id)
    return {"message": message, "task": task}


@router.delete("/{task_id}")
async def delete_task(
    task_id: str,
    ctx: AuthContext = Depends(require_auth),
    service: TaskService = Depends(get_task_service),
):
    await service.delete(ctx.user_id, task_id)
    return {"message": "Task deleted successfully"}
