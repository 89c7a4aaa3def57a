"""
Repository contracts consumed by the services.

Services receive these interfaces in their constructors and never touch the
ORM session directly. The SQLAlchemy implementations live beside this module.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tabletop.core.exceptions import BaseAPIException, DatabaseError
from tabletop.core.utils import utc_now
from tabletop.models import (
    GameSession,
    GameSystem,
    IntentStatus,
    RefreshToken,
    SessionCheckin,
    SessionIntent,
    Table,
    TableMember,
    TableRequest,
    TableRequestStatus,
    User,
)
from tabletop.schemas.common import QueryOptions

logger = logging.getLogger(__name__)


class UserRepository(ABC):
    @abstractmethod
    async def find_by_id(self, user_id: UUID) -> Optional[User]: ...

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[User]: ...

    @abstractmethod
    async def find_by_username(self, username: str) -> Optional[User]: ...

    @abstractmethod
    async def create(self, username: str, email: str, password_hash: str) -> User: ...

    @abstractmethod
    async def update(self, user_id: UUID, changes: Dict[str, Any]) -> Optional[User]: ...

    @abstractmethod
    async def delete(self, user_id: UUID) -> bool: ...

    @abstractmethod
    async def search(self, query: Optional[str], options: QueryOptions) -> List[User]: ...


class RefreshTokenRepository(ABC):
    @abstractmethod
    async def create(self, user_id: UUID, token: str, expires_at: datetime) -> RefreshToken: ...

    @abstractmethod
    async def find_by_token(self, token: str) -> Optional[RefreshToken]: ...

    @abstractmethod
    async def delete_by_token(self, token: str) -> int:
        """Delete one token; the returned row count tells whether this call consumed it"""

    @abstractmethod
    async def delete_by_user(self, user_id: UUID) -> int: ...

    @abstractmethod
    async def count_by_user(self, user_id: UUID) -> int: ...


class GameSystemRepository(ABC):
    @abstractmethod
    async def find_by_id(self, game_system_id: UUID) -> Optional[GameSystem]: ...

    @abstractmethod
    async def find_by_name(self, name: str) -> Optional[GameSystem]: ...

    @abstractmethod
    async def search(self, name: Optional[str], options: QueryOptions) -> List[GameSystem]: ...

    @abstractmethod
    async def create(self, name: str) -> GameSystem: ...

    @abstractmethod
    async def update(self, game_system_id: UUID, changes: Dict[str, Any]) -> Optional[GameSystem]: ...

    @abstractmethod
    async def delete(self, game_system_id: UUID) -> bool: ...


class TableRepository(ABC):
    @abstractmethod
    async def find_by_id(self, table_id: UUID) -> Optional[Table]: ...

    @abstractmethod
    async def create(self, gm_id: UUID, values: Dict[str, Any]) -> Table: ...

    @abstractmethod
    async def update(self, table_id: UUID, changes: Dict[str, Any]) -> Optional[Table]: ...

    @abstractmethod
    async def delete(self, table_id: UUID) -> bool: ...

    @abstractmethod
    async def find_by_user_id(self, gm_id: UUID, options: QueryOptions) -> List[Table]: ...


class TableRequestRepository(ABC):
    @abstractmethod
    async def find_by_id(self, request_id: UUID) -> Optional[TableRequest]: ...

    @abstractmethod
    async def create(self, user_id: UUID, table_id: UUID, message: Optional[str]) -> TableRequest: ...

    @abstractmethod
    async def find_by_user_and_table(self, user_id: UUID, table_id: UUID) -> List[TableRequest]: ...

    @abstractmethod
    async def find_by_table_id(self, table_id: UUID, options: QueryOptions) -> List[TableRequest]: ...

    @abstractmethod
    async def find_by_user_id(self, user_id: UUID, options: QueryOptions) -> List[TableRequest]: ...

    @abstractmethod
    async def update_status(
        self,
        request_id: UUID,
        expected: TableRequestStatus,
        new_status: TableRequestStatus,
    ) -> Optional[TableRequest]:
        """Move expected -> new_status; None when the row was no longer in expected"""

    @abstractmethod
    async def delete(self, request_id: UUID, expected: Optional[TableRequestStatus] = None) -> bool: ...


class TableMemberRepository(ABC):
    @abstractmethod
    async def find_by_table_and_user(self, table_id: UUID, user_id: UUID) -> Optional[TableMember]: ...

    @abstractmethod
    async def find_by_table_id(self, table_id: UUID, options: QueryOptions) -> List[TableMember]: ...

    @abstractmethod
    async def find_by_user_id(self, user_id: UUID, options: QueryOptions) -> List[TableMember]: ...

    @abstractmethod
    async def create(self, table_id: UUID, user_id: UUID) -> TableMember: ...

    @abstractmethod
    async def delete(self, table_id: UUID, user_id: UUID) -> bool: ...


class SessionRepository(ABC):
    @abstractmethod
    async def find_by_id(self, session_id: UUID) -> Optional[GameSession]: ...

    @abstractmethod
    async def create(self, values: Dict[str, Any]) -> GameSession: ...

    @abstractmethod
    async def update(
        self,
        session_id: UUID,
        changes: Dict[str, Any],
        expected_status=None,
    ) -> Optional[GameSession]:
        """Apply changes; None when the row is gone or no longer in expected_status"""

    @abstractmethod
    async def delete(self, session_id: UUID) -> bool: ...

    @abstractmethod
    async def find_by_table_id(self, table_id: UUID, options: QueryOptions) -> List[GameSession]: ...


class SessionIntentRepository(ABC):
    @abstractmethod
    async def find_by_id(self, intent_id: UUID) -> Optional[SessionIntent]: ...

    @abstractmethod
    async def find_by_user_and_session(self, user_id: UUID, session_id: UUID) -> Optional[SessionIntent]: ...

    @abstractmethod
    async def find_by_session_id(self, session_id: UUID) -> List[SessionIntent]: ...

    @abstractmethod
    async def find_by_user_id(self, user_id: UUID, options: QueryOptions) -> List[SessionIntent]: ...

    @abstractmethod
    async def create(self, user_id: UUID, session_id: UUID, intent_status: IntentStatus) -> SessionIntent: ...

    @abstractmethod
    async def update(self, intent_id: UUID, changes: Dict[str, Any]) -> Optional[SessionIntent]: ...

    @abstractmethod
    async def delete(self, intent_id: UUID) -> bool: ...


class SessionCheckinRepository(ABC):
    @abstractmethod
    async def find_by_id(self, checkin_id: UUID) -> Optional[SessionCheckin]: ...

    @abstractmethod
    async def find_by_session_intent_id(self, session_intent_id: UUID) -> List[SessionCheckin]: ...

    @abstractmethod
    async def find_by_attendance(self, attendance: bool, options: QueryOptions) -> List[SessionCheckin]: ...

    @abstractmethod
    async def create(self, values: Dict[str, Any]) -> SessionCheckin: ...

    @abstractmethod
    async def update(self, checkin_id: UUID, changes: Dict[str, Any]) -> Optional[SessionCheckin]: ...

    @abstractmethod
    async def delete(self, checkin_id: UUID) -> bool: ...


ConflictMapper = Callable[[IntegrityError], BaseAPIException]


class SqlAlchemyRepository:
    """
    Shared plumbing for the SQLAlchemy implementations.

    Every write commits on its own so concurrent requests observe each other
    through the database; unique indexes turn check-then-act races into
    IntegrityError, which each repository maps to a domain conflict.
    """

    model = None

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get(self, entity_id: UUID):
        result = await self.db.execute(
            select(self.model)
            .where(self.model.id == entity_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def _all(self, stmt, options: Optional[QueryOptions] = None) -> list:
        if options is not None:
            order = self.model.created_at.desc() if options.descending else self.model.created_at.asc()
            stmt = stmt.order_by(order, self.model.id).limit(options.limit).offset(options.offset)
        else:
            stmt = stmt.order_by(self.model.created_at.asc(), self.model.id)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def _write(self, stmt=None, on_conflict: Optional[ConflictMapper] = None):
        """
        Execute an optional statement and commit

        Constraint violations surface either on execute (Core UPDATE/DELETE)
        or on flush at commit (ORM add); both are mapped the same way.
        """
        try:
            result = await self.db.execute(stmt) if stmt is not None else None
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            logger.warning(f"Constraint violation on {self.model.__tablename__}: {exc.orig}")
            if on_conflict is None:
                raise DatabaseError() from exc
            raise on_conflict(exc) from exc
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error(f"Database error on {self.model.__tablename__}: {exc}")
            raise DatabaseError() from exc
        return result

    async def _add(self, instance, on_conflict: Optional[ConflictMapper] = None):
        self.db.add(instance)
        await self._write(on_conflict=on_conflict)
        await self.db.refresh(instance)
        return instance

    async def _update(
        self,
        entity_id: UUID,
        changes: Dict[str, Any],
        *conditions,
        on_conflict: Optional[ConflictMapper] = None,
    ):
        """Conditional update; None when no row matched"""
        values = dict(changes)
        values["updated_at"] = utc_now()
        result = await self._write(
            update(self.model)
            .where(self.model.id == entity_id, *conditions)
            .values(**values)
            .execution_options(synchronize_session=False),
            on_conflict=on_conflict,
        )
        if result.rowcount == 0:
            return None
        return await self._get(entity_id)

    async def _delete(self, *conditions) -> int:
        result = await self._write(
            delete(self.model).where(*conditions).execution_options(synchronize_session=False)
        )
        return result.rowcount
