"""SQLAlchemy table member repository"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from tabletop.core.exceptions import ResourceAlreadyExistsError
from tabletop.models import TableMember
from tabletop.repositories.base import SqlAlchemyRepository, TableMemberRepository
from tabletop.schemas.common import QueryOptions


def _member_conflict(exc: IntegrityError) -> ResourceAlreadyExistsError:
    return ResourceAlreadyExistsError("Table member")


class SqlAlchemyTableMemberRepository(SqlAlchemyRepository, TableMemberRepository):
    model = TableMember

    async def find_by_table_and_user(self, table_id: UUID, user_id: UUID) -> Optional[TableMember]:
        result = await self.db.execute(
            select(TableMember).where(
                TableMember.table_id == table_id,
                TableMember.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def find_by_table_id(self, table_id: UUID, options: QueryOptions) -> List[TableMember]:
        return await self._all(select(TableMember).where(TableMember.table_id == table_id), options)

    async def find_by_user_id(self, user_id: UUID, options: QueryOptions) -> List[TableMember]:
        return await self._all(select(TableMember).where(TableMember.user_id == user_id), options)

    async def create(self, table_id: UUID, user_id: UUID) -> TableMember:
        return await self._add(TableMember(table_id=table_id, user_id=user_id), on_conflict=_member_conflict)

    async def delete(self, table_id: UUID, user_id: UUID) -> bool:
        return await self._delete(TableMember.table_id == table_id, TableMember.user_id == user_id) > 0
