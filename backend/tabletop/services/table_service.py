"""Table service - GM-owned table management"""

import logging
from typing import List, Optional
from uuid import UUID

from tabletop.core.exceptions import EntityNotFoundError, TableNotFoundError, UserNotTableGameMasterError
from tabletop.models import Table
from tabletop.repositories.base import GameSystemRepository, TableRepository
from tabletop.schemas.common import QueryOptions, patch_values
from tabletop.schemas.table import TableCreate, TableUpdate
from tabletop.services.authorization import is_table_owner

logger = logging.getLogger(__name__)


class TableService:
    """Tables are created by their GM and only the GM may change them"""

    def __init__(self, tables: TableRepository, game_systems: GameSystemRepository):
        self.tables = tables
        self.game_systems = game_systems

    async def create(self, gm_id: UUID, table_data: TableCreate) -> Table:
        await self._check_game_system(table_data.game_system_id)
        table = await self.tables.create(gm_id, table_data.model_dump())
        logger.info(f"Created table {table.id} for GM {gm_id}")
        return table

    async def get(self, table_id: UUID) -> Table:
        table = await self.tables.find_by_id(table_id)
        if not table:
            raise TableNotFoundError(table_id)
        return table

    async def list_for_gm(self, gm_id: UUID, options: QueryOptions) -> List[Table]:
        return await self.tables.find_by_user_id(gm_id, options)

    async def update(self, actor_id: UUID, table_id: UUID, table_data: TableUpdate) -> Table:
        table = await self._get_owned(actor_id, table_id)
        changes = patch_values(table_data)
        await self._check_game_system(changes.get("game_system_id"))
        updated = await self.tables.update(table.id, changes)
        if not updated:
            raise TableNotFoundError(table_id)
        return updated

    async def delete(self, actor_id: UUID, table_id: UUID) -> None:
        table = await self._get_owned(actor_id, table_id)
        if not await self.tables.delete(table.id):
            raise TableNotFoundError(table_id)
        logger.info(f"Deleted table {table_id}")

    async def _get_owned(self, actor_id: UUID, table_id: UUID) -> Table:
        table = await self.get(table_id)
        if not is_table_owner(table, actor_id):
            raise UserNotTableGameMasterError()
        return table

    async def _check_game_system(self, game_system_id: Optional[UUID]) -> None:
        if game_system_id is not None and not await self.game_systems.find_by_id(game_system_id):
            raise EntityNotFoundError("GameSystem", game_system_id)
