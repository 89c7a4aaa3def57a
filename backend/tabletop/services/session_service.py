"""
Game session lifecycle.

Scheduled -> InProgress -> Completed, and Scheduled | InProgress -> Cancelled.
Completed and Cancelled are terminal. Every mutation re-reads the owning table
and checks its GM; nothing about ownership is cached.
"""

import logging
from typing import Dict, FrozenSet, List, Tuple
from uuid import UUID

from tabletop.core.exceptions import (
    EntityNotFoundError,
    ForbiddenError,
    InvalidStatusTransitionError,
    TableNotFoundError,
)
from tabletop.models import GameSession, IntentStatus, SessionStatus, Table
from tabletop.repositories.base import (
    SessionCheckinRepository,
    SessionIntentRepository,
    SessionRepository,
    TableRepository,
)
from tabletop.schemas.common import QueryOptions, patch_values
from tabletop.schemas.session import CheckinEntry, CheckinResult, SessionCreate, SessionUpdate
from tabletop.services.authorization import can_mutate_session, is_table_owner

logger = logging.getLogger(__name__)

SESSION_TRANSITIONS: Dict[SessionStatus, FrozenSet[SessionStatus]] = {
    SessionStatus.SCHEDULED: frozenset({SessionStatus.IN_PROGRESS, SessionStatus.CANCELLED}),
    SessionStatus.IN_PROGRESS: frozenset({SessionStatus.COMPLETED, SessionStatus.CANCELLED}),
    SessionStatus.COMPLETED: frozenset(),
    SessionStatus.CANCELLED: frozenset(),
}

TERMINAL_STATUSES = frozenset({SessionStatus.COMPLETED, SessionStatus.CANCELLED})


def ensure_transition(current: SessionStatus, target: SessionStatus) -> None:
    """Same-status moves are no-ops; everything else must be in the table above"""
    if current == target:
        return
    if target not in SESSION_TRANSITIONS[current]:
        raise InvalidStatusTransitionError(current.value, target.value)


class SessionService:
    def __init__(
        self,
        sessions: SessionRepository,
        tables: TableRepository,
        intents: SessionIntentRepository,
        checkins: SessionCheckinRepository,
    ):
        self.sessions = sessions
        self.tables = tables
        self.intents = intents
        self.checkins = checkins

    async def create(self, actor_id: UUID, session_data: SessionCreate) -> GameSession:
        """
        Schedule a session on a table the actor runs

        Raises:
            TableNotFoundError: Table does not exist
            ForbiddenError: Actor is not the table's GM
        """
        table = await self.tables.find_by_id(session_data.table_id)
        if not table:
            raise TableNotFoundError(session_data.table_id)
        if not is_table_owner(table, actor_id):
            raise ForbiddenError("Only the game master can schedule sessions for this table")

        session = await self.sessions.create(session_data.model_dump())
        logger.info(f"Session {session.id} created on table {table.id} with status {session.status.value}")
        return session

    async def get(self, session_id: UUID) -> GameSession:
        session = await self.sessions.find_by_id(session_id)
        if not session:
            raise EntityNotFoundError("Session", session_id)
        return session

    async def list_for_table(self, table_id: UUID, actor_id: UUID, options: QueryOptions) -> List[GameSession]:
        """Sessions of a table; GM only"""
        table = await self.tables.find_by_id(table_id)
        if not table:
            raise TableNotFoundError(table_id)
        if not is_table_owner(table, actor_id):
            raise ForbiddenError()
        return await self.sessions.find_by_table_id(table_id, options)

    async def update(self, actor_id: UUID, session_id: UUID, session_data: SessionUpdate) -> GameSession:
        """
        Apply a patch; a status change must follow the lifecycle

        Raises:
            EntityNotFoundError: Session or its table is gone
            ForbiddenError: Actor is not the table's GM
            InvalidStatusTransitionError: Disallowed status change
        """
        session, _ = await self._load_for_mutation(actor_id, session_id)
        changes = patch_values(session_data)

        target = changes.get("status")
        if target is not None:
            ensure_transition(session.status, target)

        return await self._apply(session, changes)

    async def delete(self, actor_id: UUID, session_id: UUID) -> None:
        session, _ = await self._load_for_mutation(actor_id, session_id)
        if not await self.sessions.delete(session.id):
            raise EntityNotFoundError("Session", session_id)
        logger.info(f"Session {session_id} deleted by GM {actor_id}")

    async def start(self, actor_id: UUID, session_id: UUID) -> GameSession:
        return await self._move(actor_id, session_id, SessionStatus.IN_PROGRESS)

    async def cancel(self, actor_id: UUID, session_id: UUID) -> GameSession:
        return await self._move(actor_id, session_id, SessionStatus.CANCELLED)

    async def finalize(
        self,
        actor_id: UUID,
        session_id: UUID,
        entries: List[CheckinEntry],
    ) -> Tuple[GameSession, List[CheckinResult]]:
        """
        Record attendance for an in-progress session and complete it

        Players without an intent get an Unsure one so their checkin has an
        owner. An existing checkin for the intent is overwritten.

        Each write commits on its own. A run that fails partway leaves the
        session InProgress with the checkins written so far; calling finalize
        again overwrites them and completes the session.
        """
        session, _ = await self._load_for_mutation(actor_id, session_id)
        if session.status != SessionStatus.IN_PROGRESS:
            raise InvalidStatusTransitionError(session.status.value, SessionStatus.COMPLETED.value)

        results = []
        for entry in entries:
            intent = await self.intents.find_by_user_and_session(entry.user_id, session.id)
            if intent is None:
                intent = await self.intents.create(entry.user_id, session.id, IntentStatus.UNSURE)

            values = {"attendance": entry.attendance, "notes": entry.notes}
            existing = await self.checkins.find_by_session_intent_id(intent.id)
            if existing:
                checkin = await self.checkins.update(existing[0].id, values)
            else:
                checkin = await self.checkins.create({"session_intent_id": intent.id, **values})

            results.append(CheckinResult(
                user_id=entry.user_id,
                intent_status=intent.intent_status,
                attendance=checkin.attendance,
                checkin_id=checkin.id,
            ))

        completed = await self._apply(session, {"status": SessionStatus.COMPLETED})
        logger.info(f"Session {session_id} finalized with {len(results)} checkin(s)")
        return completed, results

    async def _move(self, actor_id: UUID, session_id: UUID, target: SessionStatus) -> GameSession:
        session, _ = await self._load_for_mutation(actor_id, session_id)
        ensure_transition(session.status, target)
        return await self._apply(session, {"status": target})

    async def _apply(self, session: GameSession, changes: dict) -> GameSession:
        """
        Persist changes, guarding status moves against concurrent writers

        The update only matches while the row still has the status the
        transition was validated against.
        """
        expected = session.status if "status" in changes else None
        previous = session.status
        updated = await self.sessions.update(session.id, changes, expected_status=expected)
        if updated is None:
            current = await self.sessions.find_by_id(session.id)
            if current is None:
                raise EntityNotFoundError("Session", session.id)
            raise InvalidStatusTransitionError(current.status.value, changes["status"].value)

        if updated.status != previous:
            logger.info(f"Session {session.id}: {previous.value} -> {updated.status.value}")
        return updated

    async def _load_for_mutation(self, actor_id: UUID, session_id: UUID) -> Tuple[GameSession, Table]:
        session = await self.get(session_id)
        table = await self.tables.find_by_id(session.table_id)
        if not table:
            raise TableNotFoundError(session.table_id)
        if not can_mutate_session(session, table, actor_id):
            raise ForbiddenError("Only the game master can manage this session")
        return session, table
