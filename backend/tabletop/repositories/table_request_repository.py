"""SQLAlchemy table request repository"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from tabletop.core.exceptions import DuplicateTableRequestError
from tabletop.models import TableRequest, TableRequestStatus
from tabletop.repositories.base import SqlAlchemyRepository, TableRequestRepository
from tabletop.schemas.common import QueryOptions


def _pending_conflict(exc: IntegrityError) -> DuplicateTableRequestError:
    # The partial unique index only covers Pending rows.
    return DuplicateTableRequestError()


class SqlAlchemyTableRequestRepository(SqlAlchemyRepository, TableRequestRepository):
    model = TableRequest

    async def find_by_id(self, request_id: UUID) -> Optional[TableRequest]:
        return await self._get(request_id)

    async def create(self, user_id: UUID, table_id: UUID, message: Optional[str]) -> TableRequest:
        request = TableRequest(
            user_id=user_id,
            table_id=table_id,
            message=message,
            status=TableRequestStatus.PENDING,
        )
        return await self._add(request, on_conflict=_pending_conflict)

    async def find_by_user_and_table(self, user_id: UUID, table_id: UUID) -> List[TableRequest]:
        return await self._all(
            select(TableRequest).where(
                TableRequest.user_id == user_id,
                TableRequest.table_id == table_id,
            )
        )

    async def find_by_table_id(self, table_id: UUID, options: QueryOptions) -> List[TableRequest]:
        return await self._all(select(TableRequest).where(TableRequest.table_id == table_id), options)

    async def find_by_user_id(self, user_id: UUID, options: QueryOptions) -> List[TableRequest]:
        return await self._all(select(TableRequest).where(TableRequest.user_id == user_id), options)

    async def update_status(
        self,
        request_id: UUID,
        expected: TableRequestStatus,
        new_status: TableRequestStatus,
    ) -> Optional[TableRequest]:
        return await self._update(
            request_id,
            {"status": new_status},
            TableRequest.status == expected,
            on_conflict=_pending_conflict,
        )

    async def delete(self, request_id: UUID, expected: Optional[TableRequestStatus] = None) -> bool:
        conditions = [TableRequest.id == request_id]
        if expected is not None:
            conditions.append(TableRequest.status == expected)
        return await self._delete(*conditions) > 0
