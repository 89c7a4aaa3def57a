"""Session intent workflow - a player's own attendance plan"""

import logging
from typing import List
from uuid import UUID

from tabletop.core.exceptions import (
    BusinessRuleViolationError,
    EntityNotFoundError,
    ForbiddenError,
)
from tabletop.models import IntentStatus, SessionIntent
from tabletop.repositories.base import SessionIntentRepository, SessionRepository
from tabletop.schemas.common import QueryOptions
from tabletop.services.session_service import TERMINAL_STATUSES

logger = logging.getLogger(__name__)


class SessionIntentService:
    """Any authenticated user may declare their own intent; nobody edits anyone else's"""

    def __init__(self, intents: SessionIntentRepository, sessions: SessionRepository):
        self.intents = intents
        self.sessions = sessions

    async def set_intent(
        self,
        actor_id: UUID,
        session_id: UUID,
        intent_status: IntentStatus = IntentStatus.UNSURE,
    ) -> SessionIntent:
        """
        Create or replace the actor's intent for a session

        Raises:
            EntityNotFoundError: Session does not exist
            BusinessRuleViolationError: Session already completed or cancelled
        """
        session = await self.sessions.find_by_id(session_id)
        if not session:
            raise EntityNotFoundError("Session", session_id)
        if session.status in TERMINAL_STATUSES:
            raise BusinessRuleViolationError("Session is closed for attendance changes")

        existing = await self.intents.find_by_user_and_session(actor_id, session_id)
        if existing:
            intent = await self.intents.update(existing.id, {"intent_status": intent_status})
            if intent is None:
                raise EntityNotFoundError("SessionIntent", existing.id)
        else:
            intent = await self.intents.create(actor_id, session_id, intent_status)

        logger.info(f"User {actor_id} intent for session {session_id}: {intent_status.value}")
        return intent

    async def get(self, intent_id: UUID) -> SessionIntent:
        intent = await self.intents.find_by_id(intent_id)
        if not intent:
            raise EntityNotFoundError("SessionIntent", intent_id)
        return intent

    async def update(self, actor_id: UUID, intent_id: UUID, intent_status: IntentStatus) -> SessionIntent:
        intent = await self._get_own(actor_id, intent_id)
        updated = await self.intents.update(intent.id, {"intent_status": intent_status})
        if updated is None:
            raise EntityNotFoundError("SessionIntent", intent_id)
        return updated

    async def delete(self, actor_id: UUID, intent_id: UUID) -> None:
        intent = await self._get_own(actor_id, intent_id)
        if not await self.intents.delete(intent.id):
            raise EntityNotFoundError("SessionIntent", intent_id)

    async def list_for_session(self, session_id: UUID) -> List[SessionIntent]:
        if not await self.sessions.find_by_id(session_id):
            raise EntityNotFoundError("Session", session_id)
        return await self.intents.find_by_session_id(session_id)

    async def list_for_user(self, user_id: UUID, options: QueryOptions) -> List[SessionIntent]:
        return await self.intents.find_by_user_id(user_id, options)

    async def _get_own(self, actor_id: UUID, intent_id: UUID) -> SessionIntent:
        intent = await self.get(intent_id)
        if intent.user_id != actor_id:
            raise ForbiddenError("Intents can only be changed by their owner")
        return intent
