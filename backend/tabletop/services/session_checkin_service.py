"""Session checkin workflow - recorded attendance for an intent"""

import logging
from typing import List
from uuid import UUID

from tabletop.core.exceptions import (
    EntityNotFoundError,
    ForbiddenError,
    ResourceAlreadyExistsError,
    TableNotFoundError,
)
from tabletop.models import SessionCheckin, SessionIntent
from tabletop.repositories.base import (
    SessionCheckinRepository,
    SessionIntentRepository,
    SessionRepository,
    TableRepository,
)
from tabletop.schemas.common import QueryOptions, patch_values
from tabletop.schemas.session_checkin import SessionCheckinCreate, SessionCheckinUpdate
from tabletop.services.authorization import can_manage_checkin

logger = logging.getLogger(__name__)


class SessionCheckinService:
    """
    A checkin exists only while its intent does.

    Who may record it: the player owning the intent, or the GM of the table
    the session belongs to.
    """

    def __init__(
        self,
        checkins: SessionCheckinRepository,
        intents: SessionIntentRepository,
        sessions: SessionRepository,
        tables: TableRepository,
    ):
        self.checkins = checkins
        self.intents = intents
        self.sessions = sessions
        self.tables = tables

    async def create(self, actor_id: UUID, checkin_data: SessionCheckinCreate) -> SessionCheckin:
        intent = await self._authorize(actor_id, checkin_data.session_intent_id)

        if await self.checkins.find_by_session_intent_id(intent.id):
            raise ResourceAlreadyExistsError("Checkin for this session intent")

        checkin = await self.checkins.create(checkin_data.model_dump())
        logger.info(f"Checkin {checkin.id} recorded for intent {intent.id} by {actor_id}")
        return checkin

    async def get(self, checkin_id: UUID) -> SessionCheckin:
        checkin = await self.checkins.find_by_id(checkin_id)
        if not checkin:
            raise EntityNotFoundError("SessionCheckin", checkin_id)
        return checkin

    async def update(self, actor_id: UUID, checkin_id: UUID, checkin_data: SessionCheckinUpdate) -> SessionCheckin:
        checkin = await self.get(checkin_id)
        await self._authorize(actor_id, checkin.session_intent_id)

        updated = await self.checkins.update(checkin.id, patch_values(checkin_data))
        if updated is None:
            raise EntityNotFoundError("SessionCheckin", checkin_id)
        return updated

    async def delete(self, actor_id: UUID, checkin_id: UUID) -> None:
        checkin = await self.get(checkin_id)
        await self._authorize(actor_id, checkin.session_intent_id)

        if not await self.checkins.delete(checkin.id):
            raise EntityNotFoundError("SessionCheckin", checkin_id)
        logger.info(f"Checkin {checkin_id} deleted by {actor_id}")

    async def find_by_session_intent_id(self, session_intent_id: UUID) -> List[SessionCheckin]:
        return await self.checkins.find_by_session_intent_id(session_intent_id)

    async def find_by_attendance(self, attendance: bool, options: QueryOptions) -> List[SessionCheckin]:
        return await self.checkins.find_by_attendance(attendance, options)

    async def _authorize(self, actor_id: UUID, session_intent_id: UUID) -> SessionIntent:
        """Walk intent -> session -> table and apply the checkin rule"""
        intent = await self.intents.find_by_id(session_intent_id)
        if not intent:
            raise EntityNotFoundError("SessionIntent", session_intent_id)

        session = await self.sessions.find_by_id(intent.session_id)
        if not session:
            raise EntityNotFoundError("Session", intent.session_id)

        table = await self.tables.find_by_id(session.table_id)
        if not table:
            raise TableNotFoundError(session.table_id)

        if not can_manage_checkin(intent, table, actor_id):
            raise ForbiddenError("Only the player or the game master can manage this checkin")
        return intent
