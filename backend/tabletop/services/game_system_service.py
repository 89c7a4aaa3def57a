"""Game system catalog service"""

import logging
from typing import List, Optional
from uuid import UUID

from tabletop.core.exceptions import EntityNotFoundError, ResourceAlreadyExistsError
from tabletop.models import GameSystem
from tabletop.repositories.base import GameSystemRepository
from tabletop.schemas.common import QueryOptions, patch_values
from tabletop.schemas.game_system import GameSystemCreate, GameSystemUpdate

logger = logging.getLogger(__name__)


class GameSystemService:
    """
    Shared catalog of rules systems tables can point at.

    Names are unique regardless of case. The pre-check gives the friendly
    error; the unique column settles concurrent creates.
    """

    def __init__(self, game_systems: GameSystemRepository):
        self.game_systems = game_systems

    async def create(self, data: GameSystemCreate) -> GameSystem:
        await self._ensure_name_free(data.name)
        game_system = await self.game_systems.create(data.name)
        logger.info(f"Created game system {game_system.id} ({game_system.name})")
        return game_system

    async def get(self, game_system_id: UUID) -> GameSystem:
        game_system = await self.game_systems.find_by_id(game_system_id)
        if not game_system:
            raise EntityNotFoundError("GameSystem", game_system_id)
        return game_system

    async def get_by_name(self, name: str) -> GameSystem:
        game_system = await self.game_systems.find_by_name(name)
        if not game_system:
            raise EntityNotFoundError("GameSystem", name)
        return game_system

    async def list_game_systems(self, name: Optional[str], options: QueryOptions) -> List[GameSystem]:
        return await self.game_systems.search(name, options)

    async def update(self, game_system_id: UUID, data: GameSystemUpdate) -> GameSystem:
        changes = patch_values(data)
        if "name" in changes:
            await self._ensure_name_free(changes["name"], game_system_id)
        game_system = await self.game_systems.update(game_system_id, changes)
        if not game_system:
            raise EntityNotFoundError("GameSystem", game_system_id)
        return game_system

    async def delete(self, game_system_id: UUID) -> None:
        """Remove from the catalog; tables pointing at it keep a null game_system_id"""
        if not await self.game_systems.delete(game_system_id):
            raise EntityNotFoundError("GameSystem", game_system_id)
        logger.info(f"Deleted game system {game_system_id}")

    async def _ensure_name_free(self, name: str, own_id: Optional[UUID] = None) -> None:
        existing = await self.game_systems.find_by_name(name)
        if existing is not None and existing.id != own_id:
            raise ResourceAlreadyExistsError("Game system with this name")
