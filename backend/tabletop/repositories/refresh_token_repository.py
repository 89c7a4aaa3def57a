"""SQLAlchemy refresh token repository"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from tabletop.core.exceptions import RefreshTokenConflictError
from tabletop.models import RefreshToken
from tabletop.repositories.base import RefreshTokenRepository, SqlAlchemyRepository


def _token_conflict(exc: IntegrityError) -> RefreshTokenConflictError:
    # A concurrent issue for the same user won the unique user_id slot.
    return RefreshTokenConflictError()


class SqlAlchemyRefreshTokenRepository(SqlAlchemyRepository, RefreshTokenRepository):
    model = RefreshToken

    async def create(self, user_id: UUID, token: str, expires_at: datetime) -> RefreshToken:
        record = RefreshToken(user_id=user_id, token=token, expires_at=expires_at)
        return await self._add(record, on_conflict=_token_conflict)

    async def find_by_token(self, token: str) -> Optional[RefreshToken]:
        result = await self.db.execute(select(RefreshToken).where(RefreshToken.token == token))
        return result.scalar_one_or_none()

    async def delete_by_token(self, token: str) -> int:
        return await self._delete(RefreshToken.token == token)

    async def delete_by_user(self, user_id: UUID) -> int:
        return await self._delete(RefreshToken.user_id == user_id)

    async def count_by_user(self, user_id: UUID) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(RefreshToken).where(RefreshToken.user_id == user_id)
        )
        return result.scalar_one()
