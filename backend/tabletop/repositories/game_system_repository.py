"""SQLAlchemy game system repository"""

from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from tabletop.core.exceptions import ResourceAlreadyExistsError
from tabletop.models import GameSystem
from tabletop.repositories.base import GameSystemRepository, SqlAlchemyRepository
from tabletop.schemas.common import QueryOptions


def _name_conflict(exc: IntegrityError) -> ResourceAlreadyExistsError:
    return ResourceAlreadyExistsError("Game system with this name")


class SqlAlchemyGameSystemRepository(SqlAlchemyRepository, GameSystemRepository):
    model = GameSystem

    async def find_by_id(self, game_system_id: UUID) -> Optional[GameSystem]:
        return await self._get(game_system_id)

    async def find_by_name(self, name: str) -> Optional[GameSystem]:
        result = await self.db.execute(
            select(GameSystem).where(func.lower(GameSystem.name) == name.lower())
        )
        return result.scalars().first()

    async def search(self, name: Optional[str], options: QueryOptions) -> List[GameSystem]:
        stmt = select(GameSystem)
        if name:
            stmt = stmt.where(func.lower(GameSystem.name).like(f"%{name.lower()}%"))
        return await self._all(stmt, options)

    async def create(self, name: str) -> GameSystem:
        return await self._add(GameSystem(name=name), on_conflict=_name_conflict)

    async def update(self, game_system_id: UUID, changes: Dict[str, Any]) -> Optional[GameSystem]:
        return await self._update(game_system_id, changes, on_conflict=_name_conflict)

    async def delete(self, game_system_id: UUID) -> bool:
        return await self._delete(GameSystem.id == game_system_id) > 0
