"""SQLAlchemy user repository"""

from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError

from tabletop.core.exceptions import ResourceAlreadyExistsError
from tabletop.models import User
from tabletop.repositories.base import SqlAlchemyRepository, UserRepository
from tabletop.schemas.common import QueryOptions


def _user_conflict(exc: IntegrityError) -> ResourceAlreadyExistsError:
    detail = str(exc.orig).lower()
    if "email" in detail:
        return ResourceAlreadyExistsError("User with this email")
    if "username" in detail:
        return ResourceAlreadyExistsError("User with this username")
    return ResourceAlreadyExistsError("User")


class SqlAlchemyUserRepository(SqlAlchemyRepository, UserRepository):
    model = User

    async def find_by_id(self, user_id: UUID) -> Optional[User]:
        return await self._get(user_id)

    async def find_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    async def find_by_username(self, username: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.username == username.lower()))
        return result.scalar_one_or_none()

    async def create(self, username: str, email: str, password_hash: str) -> User:
        user = User(username=username, email=email, password_hash=password_hash)
        return await self._add(user, on_conflict=_user_conflict)

    async def update(self, user_id: UUID, changes: Dict[str, Any]) -> Optional[User]:
        return await self._update(user_id, changes, on_conflict=_user_conflict)

    async def delete(self, user_id: UUID) -> bool:
        return await self._delete(User.id == user_id) > 0

    async def search(self, query: Optional[str], options: QueryOptions) -> List[User]:
        stmt = select(User)
        if query:
            pattern = f"%{query.lower()}%"
            stmt = stmt.where(or_(User.username.like(pattern), User.email.like(pattern)))
        return await self._all(stmt, options)
