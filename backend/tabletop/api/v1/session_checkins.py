"""Session checkin routes"""

from fastapi import APIRouter, Depends, Query, status
from typing import List
from uuid import UUID

from tabletop.api.deps import get_current_user_id, get_query_options, get_services
from tabletop.schemas.response import APIResponse
from tabletop.schemas.common import QueryOptions
from tabletop.schemas.session_checkin import (
    SessionCheckinCreate,
    SessionCheckinResponse,
    SessionCheckinUpdate,
)
from tabletop.services.registry import Services

router = APIRouter()


@router.post("/", response_model=SessionCheckinResponse, status_code=status.HTTP_201_CREATED)
async def create_checkin(
    payload: SessionCheckinCreate,
    user_id: UUID = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    """
    Record attendance for a session intent (the player or the GM)
    """
    checkin = await services.checkins.create(user_id, payload)
    return SessionCheckinResponse.model_validate(checkin)


@router.get("/", response_model=List[SessionCheckinResponse])
async def get_checkins_by_attendance(
    attendance: bool = Query(...),
    _: UUID = Depends(get_current_user_id),
    options: QueryOptions = Depends(get_query_options),
    services: Services = Depends(get_services),
):
    checkins = await services.checkins.find_by_attendance(attendance, options)
    return [SessionCheckinResponse.model_validate(checkin) for checkin in checkins]


@router.get("/{checkin_id}", response_model=SessionCheckinResponse)
async def get_checkin(
    checkin_id: UUID,
    _: UUID = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    return SessionCheckinResponse.model_validate(await services.checkins.get(checkin_id))


@router.patch("/{checkin_id}", response_model=SessionCheckinResponse)
async def update_checkin(
    checkin_id: UUID,
    payload: SessionCheckinUpdate,
    user_id: UUID = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    checkin = await services.checkins.update(user_id, checkin_id, payload)
    return SessionCheckinResponse.model_validate(checkin)


@router.delete("/{checkin_id}", response_model=APIResponse)
async def delete_checkin(
    checkin_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    await services.checkins.delete(user_id, checkin_id)
    return APIResponse(message=f"Checkin {checkin_id} deleted successfully")
