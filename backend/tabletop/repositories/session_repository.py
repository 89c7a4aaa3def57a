"""SQLAlchemy game session repository"""

from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import select

from tabletop.models import GameSession, SessionStatus
from tabletop.repositories.base import SessionRepository, SqlAlchemyRepository
from tabletop.schemas.common import QueryOptions


class SqlAlchemySessionRepository(SqlAlchemyRepository, SessionRepository):
    model = GameSession

    async def find_by_id(self, session_id: UUID) -> Optional[GameSession]:
        return await self._get(session_id)

    async def create(self, values: Dict[str, Any]) -> GameSession:
        return await self._add(GameSession(**values))

    async def update(
        self,
        session_id: UUID,
        changes: Dict[str, Any],
        expected_status: Optional[SessionStatus] = None,
    ) -> Optional[GameSession]:
        conditions = []
        if expected_status is not None:
            conditions.append(GameSession.status == expected_status)
        return await self._update(session_id, changes, *conditions)

    async def delete(self, session_id: UUID) -> bool:
        return await self._delete(GameSession.id == session_id) > 0

    async def find_by_table_id(self, table_id: UUID, options: QueryOptions) -> List[GameSession]:
        return await self._all(select(GameSession).where(GameSession.table_id == table_id), options)
