"""
Table request workflow.

Pending -> Approved | Rejected. Both outcomes are terminal; a cancelled
request is removed. Approval also admits the requester as a table member.
Membership does not block a later request, so a player may ask again.

The duplicate-pending check below runs before the insert and can race with a
concurrent create. The partial unique index on (user_id, table_id) WHERE
status = 'Pending' is the real guard and turns the losing insert into the same
DuplicateTableRequestError.
"""

import logging
from typing import List, Optional
from uuid import UUID

from tabletop.core.exceptions import (
    BusinessRuleViolationError,
    DuplicateTableRequestError,
    EntityNotFoundError,
    ForbiddenError,
    RequestAlreadyProcessedError,
    ResourceAlreadyExistsError,
    TableNotFoundError,
)
from tabletop.models import Table, TableRequest, TableRequestStatus, TableStatus
from tabletop.repositories.base import TableMemberRepository, TableRepository, TableRequestRepository
from tabletop.schemas.common import QueryOptions
from tabletop.services.authorization import can_approve_request, can_cancel_request, is_table_owner

logger = logging.getLogger(__name__)


class TableRequestService:
    def __init__(
        self,
        table_requests: TableRequestRepository,
        tables: TableRepository,
        members: TableMemberRepository,
    ):
        self.table_requests = table_requests
        self.tables = tables
        self.members = members

    async def create(self, user_id: UUID, table_id: UUID, message: Optional[str] = None) -> TableRequest:
        """
        Ask to join a table

        Raises:
            TableNotFoundError: Table does not exist
            BusinessRuleViolationError: Requester is the GM, or table is inactive
            DuplicateTableRequestError: A pending request already exists
        """
        table = await self.tables.find_by_id(table_id)
        if not table:
            raise TableNotFoundError(table_id)

        if is_table_owner(table, user_id):
            raise BusinessRuleViolationError("Game master cannot request to join their own table")

        if table.status != TableStatus.ACTIVE:
            raise BusinessRuleViolationError("Table is not accepting new players")

        existing = await self.table_requests.find_by_user_and_table(user_id, table_id)
        if any(request.status == TableRequestStatus.PENDING for request in existing):
            raise DuplicateTableRequestError()

        request = await self.table_requests.create(user_id, table_id, message)
        logger.info(f"User {user_id} requested to join table {table_id} (request {request.id})")
        return request

    async def approve(self, request_id: UUID, actor_id: UUID) -> TableRequest:
        return await self._decide(request_id, actor_id, TableRequestStatus.APPROVED)

    async def reject(self, request_id: UUID, actor_id: UUID) -> TableRequest:
        return await self._decide(request_id, actor_id, TableRequestStatus.REJECTED)

    async def cancel(self, request_id: UUID, actor_id: UUID) -> None:
        """Withdraw a pending request; only its author may do so"""
        request = await self.get(request_id)

        if not can_cancel_request(request, actor_id):
            raise ForbiddenError("Only the requester can cancel this request")

        if request.status != TableRequestStatus.PENDING:
            raise RequestAlreadyProcessedError(request.status.value)

        if not await self.table_requests.delete(request.id, expected=TableRequestStatus.PENDING):
            current = await self.get(request_id)
            raise RequestAlreadyProcessedError(current.status.value)

        logger.info(f"User {actor_id} cancelled table request {request_id}")

    async def get(self, request_id: UUID) -> TableRequest:
        request = await self.table_requests.find_by_id(request_id)
        if not request:
            raise EntityNotFoundError("TableRequest", request_id)
        return request

    async def list_for_table(self, table_id: UUID, actor_id: UUID, options: QueryOptions) -> List[TableRequest]:
        """Requests received by a table; GM only"""
        table = await self._get_table(table_id)
        if not is_table_owner(table, actor_id):
            raise ForbiddenError()
        return await self.table_requests.find_by_table_id(table_id, options)

    async def list_sent(self, user_id: UUID, options: QueryOptions) -> List[TableRequest]:
        return await self.table_requests.find_by_user_id(user_id, options)

    async def _decide(self, request_id: UUID, actor_id: UUID, outcome: TableRequestStatus) -> TableRequest:
        request = await self.get(request_id)
        table = await self._get_table(request.table_id)

        if not can_approve_request(table, actor_id):
            raise ForbiddenError("Only the game master can process requests for this table")

        if request.status != TableRequestStatus.PENDING:
            raise RequestAlreadyProcessedError(request.status.value)

        updated = await self.table_requests.update_status(
            request.id,
            expected=TableRequestStatus.PENDING,
            new_status=outcome,
        )
        if updated is None:
            # Another decision landed between the read and the conditional update.
            current = await self.table_requests.find_by_id(request_id)
            if current is None:
                raise EntityNotFoundError("TableRequest", request_id)
            raise RequestAlreadyProcessedError(current.status.value)

        logger.info(f"Table request {request_id} {outcome.value.lower()} by GM {actor_id}")

        if outcome == TableRequestStatus.APPROVED:
            await self._enroll(updated.table_id, updated.user_id)
            # A lost enrollment race rolls back, which expires loaded rows
            return await self.get(request_id)
        return updated

    async def _enroll(self, table_id: UUID, user_id: UUID) -> None:
        """Add the member unless an earlier approval already did"""
        if await self.members.find_by_table_and_user(table_id, user_id) is not None:
            return
        try:
            await self.members.create(table_id, user_id)
        except ResourceAlreadyExistsError:
            logger.info(f"User {user_id} was enrolled in table {table_id} concurrently")
            return
        logger.info(f"User {user_id} joined table {table_id}")

    async def _get_table(self, table_id: UUID) -> Table:
        table = await self.tables.find_by_id(table_id)
        if not table:
            raise TableNotFoundError(table_id)
        return table
