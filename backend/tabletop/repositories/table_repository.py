"""SQLAlchemy table repository"""

from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from tabletop.core.exceptions import EntityNotFoundError
from tabletop.models import Table
from tabletop.repositories.base import SqlAlchemyRepository, TableRepository
from tabletop.schemas.common import QueryOptions


def _game_system_missing(exc: IntegrityError) -> EntityNotFoundError:
    # game_system_id is the only foreign key a table write can break.
    return EntityNotFoundError("GameSystem")


class SqlAlchemyTableRepository(SqlAlchemyRepository, TableRepository):
    model = Table

    async def find_by_id(self, table_id: UUID) -> Optional[Table]:
        return await self._get(table_id)

    async def create(self, gm_id: UUID, values: Dict[str, Any]) -> Table:
        return await self._add(Table(gm_id=gm_id, **values), on_conflict=_game_system_missing)

    async def update(self, table_id: UUID, changes: Dict[str, Any]) -> Optional[Table]:
        return await self._update(table_id, changes, on_conflict=_game_system_missing)

    async def delete(self, table_id: UUID) -> bool:
        return await self._delete(Table.id == table_id) > 0

    async def find_by_user_id(self, gm_id: UUID, options: QueryOptions) -> List[Table]:
        return await self._all(select(Table).where(Table.gm_id == gm_id), options)
