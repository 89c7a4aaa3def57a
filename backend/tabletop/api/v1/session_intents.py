"""Session intent routes"""

from fastapi import APIRouter, Depends
from typing import List
from uuid import UUID

from tabletop.api.deps import get_current_user_id, get_services
from tabletop.schemas.response import APIResponse
from tabletop.schemas.session_checkin import SessionCheckinResponse
from tabletop.schemas.session_intent import SessionIntentResponse, SessionIntentSet
from tabletop.services.registry import Services

router = APIRouter()


@router.get("/{intent_id}", response_model=SessionIntentResponse)
async def get_intent(
    intent_id: UUID,
    _: UUID = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    return SessionIntentResponse.model_validate(await services.intents.get(intent_id))


@router.patch("/{intent_id}", response_model=SessionIntentResponse)
async def update_intent(
    intent_id: UUID,
    payload: SessionIntentSet,
    user_id: UUID = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    intent = await services.intents.update(user_id, intent_id, payload.intent_status)
    return SessionIntentResponse.model_validate(intent)


@router.delete("/{intent_id}", response_model=APIResponse)
async def delete_intent(
    intent_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    await services.intents.delete(user_id, intent_id)
    return APIResponse(message=f"Intent {intent_id} deleted successfully")


@router.get("/{intent_id}/checkins", response_model=List[SessionCheckinResponse])
async def get_checkins_by_session_intent(
    intent_id: UUID,
    _: UUID = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    checkins = await services.checkins.find_by_session_intent_id(intent_id)
    return [SessionCheckinResponse.model_validate(checkin) for checkin in checkins]
