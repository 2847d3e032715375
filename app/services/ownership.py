"""
Ownership-scoped CRUD shared by tasks and posts.

Update and delete look the row up by ``id`` *and* owner in a single
statement, so a caller who does not own the row gets exactly the same
``NOT_FOUND_OR_FORBIDDEN`` result as for an id that does not exist.
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar, Generic, TypeVar

from sqlalchemy import Select, delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ErrorKind
from app.core.result import Err, Ok, Result
from app.db.base import Base

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class OwnedRepository(Generic[ModelT]):
    model: ClassVar[type[Base]]
    owner_field: ClassVar[str]
    resource_name: ClassVar[str]

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @property
    def _owner_col(self) -> Any:
        return getattr(self.model, self.owner_field)

    def _not_found(self) -> Err:
        return Err(ErrorKind.NOT_FOUND_OR_FORBIDDEN, f"{self.resource_name} not found")

    def _select(self) -> Select[Any]:
        return select(self.model)

    def _newest_first(self, stmt: Select[Any]) -> Select[Any]:
        return stmt.order_by(self.model.created_at.desc(), self.model.id.desc())  # type: ignore[attr-defined]

    async def _load(self, entity_id: int) -> ModelT:
        """Fresh copy of a row that is known to exist."""
        result = await self.session.execute(
            self._select()
            .where(self.model.id == entity_id)  # type: ignore[attr-defined]
            .execution_options(populate_existing=True)
        )
        return result.unique().scalar_one()

    async def create(self, owner_id: int, fields: dict[str, Any]) -> ModelT:
        entity = self.model(**fields, **{self.owner_field: owner_id})
        self.session.add(entity)
        await self.session.commit()
        logger.info("Created %s %d for user %d", self.resource_name.lower(), entity.id, owner_id)  # type: ignore[attr-defined]
        return await self._load(entity.id)  # type: ignore[attr-defined]

    async def list_for_owner(self, owner_id: int, *criteria: Any) -> list[ModelT]:
        stmt = self._newest_first(self._select().where(self._owner_col == owner_id, *criteria))
        result = await self.session.execute(stmt)
        return list(result.unique().scalars().all())

    async def get_owned(self, entity_id: int, owner_id: int) -> Result[ModelT]:
        result = await self.session.execute(
            self._select().where(
                self.model.id == entity_id,  # type: ignore[attr-defined]
                self._owner_col == owner_id,
            )
        )
        entity = result.unique().scalar_one_or_none()
        return Ok(entity) if entity is not None else self._not_found()

    async def update(self, entity_id: int, owner_id: int, patch: dict[str, Any]) -> Result[ModelT]:
        """Apply exactly the keys in *patch*; anything absent is left untouched."""
        if not patch:
            return await self.get_owned(entity_id, owner_id)

        stmt = (
            update(self.model)
            .where(
                self.model.id == entity_id,  # type: ignore[attr-defined]
                self._owner_col == owner_id,
            )
            .values(**patch)
            .returning(self.model.id)  # type: ignore[attr-defined]
            .execution_options(synchronize_session=False)
        )
        updated_id = (await self.session.execute(stmt)).scalar_one_or_none()
        if updated_id is None:
            return self._not_found()
        await self.session.commit()
        logger.info("Updated %s %d (%s)", self.resource_name.lower(), entity_id, ", ".join(sorted(patch)))
        return Ok(await self._load(updated_id))

    async def remove(self, entity_id: int, owner_id: int) -> Result[int]:
        stmt = (
            delete(self.model)
            .where(
                self.model.id == entity_id,  # type: ignore[attr-defined]
                self._owner_col == owner_id,
            )
            .returning(self.model.id)  # type: ignore[attr-defined]
            .execution_options(synchronize_session=False)
        )
        deleted_id = (await self.session.execute(stmt)).scalar_one_or_none()
        if deleted_id is None:
            return self._not_found()
        await self.session.commit()
        logger.info("Deleted %s %d", self.resource_name.lower(), entity_id)
        return Ok(deleted_id)
