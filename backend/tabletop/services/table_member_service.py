"""Table membership - who has been admitted to a table"""

import logging
from typing import List
from uuid import UUID

from tabletop.core.exceptions import EntityNotFoundError, ForbiddenError, TableNotFoundError
from tabletop.models import Table, TableMember
from tabletop.repositories.base import TableMemberRepository, TableRepository
from tabletop.schemas.common import QueryOptions
from tabletop.services.authorization import can_remove_member

logger = logging.getLogger(__name__)


class TableMemberService:
    """
    Members are added by approving a table request (see TableRequestService)
    and leave by being removed here. The GM is never a member row.
    """

    def __init__(self, members: TableMemberRepository, tables: TableRepository):
        self.members = members
        self.tables = tables

    async def list_for_table(self, table_id: UUID, options: QueryOptions) -> List[TableMember]:
        await self._get_table(table_id)
        return await self.members.find_by_table_id(table_id, options)

    async def list_joined(self, user_id: UUID, options: QueryOptions) -> List[TableMember]:
        return await self.members.find_by_user_id(user_id, options)

    async def remove(self, actor_id: UUID, table_id: UUID, user_id: UUID) -> None:
        """
        Drop a member; the GM may remove anyone, a member may leave

        Raises:
            TableNotFoundError: Table does not exist
            ForbiddenError: Actor is neither the GM nor the member
            EntityNotFoundError: User is not a member
        """
        table = await self._get_table(table_id)
        if not can_remove_member(table, actor_id, user_id):
            raise ForbiddenError("Only the game master or the member can end a membership")

        if not await self.members.delete(table_id, user_id):
            raise EntityNotFoundError("TableMember", user_id)
        logger.info(f"User {user_id} removed from table {table_id} by {actor_id}")

    async def _get_table(self, table_id: UUID) -> Table:
        table = await self.tables.find_by_id(table_id)
        if not table:
            raise TableNotFoundError(table_id)
        return table
