"""SQLAlchemy session intent repository"""

from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from tabletop.core.exceptions import ResourceAlreadyExistsError
from tabletop.models import IntentStatus, SessionIntent
from tabletop.repositories.base import SessionIntentRepository, SqlAlchemyRepository
from tabletop.schemas.common import QueryOptions


def _intent_conflict(exc: IntegrityError) -> ResourceAlreadyExistsError:
    return ResourceAlreadyExistsError("Session intent")


class SqlAlchemySessionIntentRepository(SqlAlchemyRepository, SessionIntentRepository):
    model = SessionIntent

    async def find_by_id(self, intent_id: UUID) -> Optional[SessionIntent]:
        return await self._get(intent_id)

    async def find_by_user_and_session(self, user_id: UUID, session_id: UUID) -> Optional[SessionIntent]:
        result = await self.db.execute(
            select(SessionIntent).where(
                SessionIntent.user_id == user_id,
                SessionIntent.session_id == session_id,
            )
        )
        return result.scalar_one_or_none()

    async def find_by_session_id(self, session_id: UUID) -> List[SessionIntent]:
        return await self._all(select(SessionIntent).where(SessionIntent.session_id == session_id))

    async def find_by_user_id(self, user_id: UUID, options: QueryOptions) -> List[SessionIntent]:
        return await self._all(select(SessionIntent).where(SessionIntent.user_id == user_id), options)

    async def create(self, user_id: UUID, session_id: UUID, intent_status: IntentStatus) -> SessionIntent:
        intent = SessionIntent(user_id=user_id, session_id=session_id, intent_status=intent_status)
        return await self._add(intent, on_conflict=_intent_conflict)

    async def update(self, intent_id: UUID, changes: Dict[str, Any]) -> Optional[SessionIntent]:
        return await self._update(intent_id, changes)

    async def delete(self, intent_id: UUID) -> bool:
        return await self._delete(SessionIntent.id == intent_id) > 0
