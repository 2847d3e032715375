"""
Task endpoints — every route requires an authenticated user and only ever
touches that user's own tasks.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from app.api.v1.deps import get_current_user, get_task_repository
from app.core.result import unwrap
from app.models.task import Task
from app.models.user import User
from app.schemas.task import (DeleteResponse, TaskCreate, TaskRead, TaskStatsRead,
                              TaskUpdate)
from app.services.tasks import TaskFilter, TaskRepository, TaskStats

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("", response_model=list[TaskRead])
async def list_tasks(
    filter: TaskFilter = Query(default="all"),
    current_user: User = Depends(get_current_user),
    repo: TaskRepository = Depends(get_task_repository),
) -> list[Task]:
    """Newest first; ``filter`` is one of all / active / completed."""
    return await repo.list_filtered(current_user.id, filter)


@router.post("", response_model=TaskRead, status_code=201)
async def create_task(
    body: TaskCreate,
    current_user: User = Depends(get_current_user),
    repo: TaskRepository = Depends(get_task_repository),
) -> Task:
    return await repo.create(current_user.id, body.model_dump())


@router.get("/stats/summary", response_model=TaskStatsRead)
async def task_stats(
    current_user: User = Depends(get_current_user),
    repo: TaskRepository = Depends(get_task_repository),
) -> TaskStats:
    return await repo.stats(current_user.id)


@router.put("/{task_id}", response_model=TaskRead)
async def update_task(
    task_id: int,
    body: TaskUpdate,
    current_user: User = Depends(get_current_user),
    repo: TaskRepository = Depends(get_task_repository),
) -> Task:
    return unwrap(await repo.update(task_id, current_user.id, body.model_dump(exclude_unset=True)))


@router.patch("/{task_id}/toggle", response_model=TaskRead)
async def toggle_task(
    task_id: int,
    current_user: User = Depends(get_current_user),
    repo: TaskRepository = Depends(get_task_repository),
) -> Task:
    return unwrap(await repo.toggle(task_id, current_user.id))


@router.delete("/{task_id}", response_model=DeleteResponse)
async def delete_task(
    task_id: int,
    current_user: User = Depends(get_current_user),
    repo: TaskRepository = Depends(get_task_repository),
) -> DeleteResponse:
    unwrap(await repo.remove(task_id, current_user.id))
    return DeleteResponse(success=True, message="Task deleted successfully")
