"""Game system catalog routes"""

from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional
from uuid import UUID

from tabletop.api.deps import get_current_user_id, get_query_options, get_services
from tabletop.schemas.common import QueryOptions
from tabletop.schemas.game_system import GameSystemCreate, GameSystemResponse, GameSystemUpdate
from tabletop.schemas.response import APIResponse
from tabletop.services.registry import Services

router = APIRouter()


@router.post("/", response_model=GameSystemResponse, status_code=status.HTTP_201_CREATED)
async def create_game_system(
    payload: GameSystemCreate,
    _: UUID = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    """
    Add a game system to the shared catalog

    Returns:
        The new entry; 409 if the name is taken (case-insensitive)
    """
    game_system = await services.game_systems.create(payload)
    return GameSystemResponse.model_validate(game_system)


@router.get("/", response_model=List[GameSystemResponse])
async def list_game_systems(
    name: Optional[str] = Query(None, max_length=80),
    _: UUID = Depends(get_current_user_id),
    options: QueryOptions = Depends(get_query_options),
    services: Services = Depends(get_services),
):
    game_systems = await services.game_systems.list_game_systems(name, options)
    return [GameSystemResponse.model_validate(game_system) for game_system in game_systems]


@router.get("/{game_system_id}", response_model=GameSystemResponse)
async def get_game_system(
    game_system_id: UUID,
    _: UUID = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    return GameSystemResponse.model_validate(await services.game_systems.get(game_system_id))


@router.patch("/{game_system_id}", response_model=GameSystemResponse)
async def update_game_system(
    game_system_id: UUID,
    payload: GameSystemUpdate,
    _: UUID = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    game_system = await services.game_systems.update(game_system_id, payload)
    return GameSystemResponse.model_validate(game_system)


@router.delete("/{game_system_id}", response_model=APIResponse)
async def delete_game_system(
    game_system_id: UUID,
    _: UUID = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    await services.game_systems.delete(game_system_id)
    return APIResponse(message=f"Game system {game_system_id} deleted successfully")
