"""
Task repository — a user's own to-do items.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from sqlalchemy import func, not_, select, update

from app.core.result import Ok, Result
from app.models.task import Task
from app.services.ownership import OwnedRepository

TaskFilter = Literal["all", "active", "completed"]


@dataclass(frozen=True)
class TaskStats:
    total: int
    completed: int
    active: int


class TaskRepository(OwnedRepository[Task]):
    model = Task
    owner_field = "user_id"
    resource_name = "Task"

    async def list_filtered(self, owner_id: int, status: TaskFilter = "all") -> list[Task]:
        if status == "active":
            return await self.list_for_owner(owner_id, Task.completed.is_(False))
        if status == "completed":
            return await self.list_for_owner(owner_id, Task.completed.is_(True))
        return await self.list_for_owner(owner_id)

    async def toggle(self, task_id: int, owner_id: int) -> Result[Task]:
        """Flip ``completed`` in place, scoped to the owner."""
        stmt = (
            update(Task)
            .where(Task.id == task_id, Task.user_id == owner_id)
            .values(completed=not_(Task.completed))
            .returning(Task.id)
            .execution_options(synchronize_session=False)
        )
        toggled_id = (await self.session.execute(stmt)).scalar_one_or_none()
        if toggled_id is None:
            return self._not_found()
        await self.session.commit()
        return Ok(await self._load(toggled_id))

    async def stats(self, owner_id: int) -> TaskStats:
        result = await self.session.execute(
            select(
                func.count(Task.id),
                func.count(Task.id).filter(Task.completed.is_(True)),
            ).where(Task.user_id == owner_id)
        )
        total, completed = result.one()
        return TaskStats(total=total, completed=completed, active=total - completed)
