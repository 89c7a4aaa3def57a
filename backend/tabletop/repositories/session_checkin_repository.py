"""SQLAlchemy session checkin repository"""

from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from tabletop.core.exceptions import EntityNotFoundError, ResourceAlreadyExistsError
from tabletop.models import SessionCheckin
from tabletop.repositories.base import SessionCheckinRepository, SqlAlchemyRepository
from tabletop.schemas.common import QueryOptions


def _checkin_conflict(exc: IntegrityError):
    detail = str(exc.orig).lower()
    if "foreign key" in detail:
        # The intent was deleted between the existence check and the insert.
        return EntityNotFoundError("SessionIntent")
    return ResourceAlreadyExistsError("Checkin for this session intent")


class SqlAlchemySessionCheckinRepository(SqlAlchemyRepository, SessionCheckinRepository):
    model = SessionCheckin

    async def find_by_id(self, checkin_id: UUID) -> Optional[SessionCheckin]:
        return await self._get(checkin_id)

    async def find_by_session_intent_id(self, session_intent_id: UUID) -> List[SessionCheckin]:
        return await self._all(
            select(SessionCheckin).where(SessionCheckin.session_intent_id == session_intent_id)
        )

    async def find_by_attendance(self, attendance: bool, options: QueryOptions) -> List[SessionCheckin]:
        return await self._all(select(SessionCheckin).where(SessionCheckin.attendance == attendance), options)

    async def create(self, values: Dict[str, Any]) -> SessionCheckin:
        return await self._add(SessionCheckin(**values), on_conflict=_checkin_conflict)

    async def update(self, checkin_id: UUID, changes: Dict[str, Any]) -> Optional[SessionCheckin]:
        return await self._update(checkin_id, changes)

    async def delete(self, checkin_id: UUID) -> bool:
        return await self._delete(SessionCheckin.id == checkin_id) > 0
