"""Game session routes, including intents scoped to a session"""

from fastapi import APIRouter, Depends, status
from typing import List
from uuid import UUID

from tabletop.api.deps import get_current_user_id, get_services
from tabletop.schemas.response import APIResponse
from tabletop.schemas.session import (
    SessionCreate,
    SessionFinalizationResponse,
    SessionFinalize,
    SessionResponse,
    SessionUpdate,
)
from tabletop.schemas.session_intent import SessionIntentResponse, SessionIntentSet
from tabletop.services.registry import Services

router = APIRouter()


@router.post("/", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def schedule_session(
    session_data: SessionCreate,
    user_id: UUID = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    """
    Schedule a session on a table run by the caller
    """
    session = await services.sessions.create(user_id, session_data)
    return SessionResponse.model_validate(session)


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: UUID,
    _: UUID = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    return SessionResponse.model_validate(await services.sessions.get(session_id))


@router.patch("/{session_id}", response_model=SessionResponse)
async def update_session(
    session_id: UUID,
    session_data: SessionUpdate,
    user_id: UUID = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    session = await services.sessions.update(user_id, session_id, session_data)
    return SessionResponse.model_validate(session)


@router.delete("/{session_id}", response_model=APIResponse)
async def delete_session(
    session_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    await services.sessions.delete(user_id, session_id)
    return APIResponse(message=f"Session {session_id} deleted successfully")


@router.post("/{session_id}/start", response_model=SessionResponse)
async def start_session(
    session_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    return SessionResponse.model_validate(await services.sessions.start(user_id, session_id))


@router.post("/{session_id}/cancel", response_model=SessionResponse)
async def cancel_session(
    session_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    return SessionResponse.model_validate(await services.sessions.cancel(user_id, session_id))


@router.post("/{session_id}/finalize", response_model=SessionFinalizationResponse)
async def finalize_session(
    session_id: UUID,
    payload: SessionFinalize,
    user_id: UUID = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    """
    Record attendance for an in-progress session and mark it completed
    """
    session, checkins = await services.sessions.finalize(user_id, session_id, payload.checkins)
    return SessionFinalizationResponse(
        session=SessionResponse.model_validate(session),
        checkins=checkins,
    )


@router.put("/{session_id}/intent", response_model=SessionIntentResponse)
async def set_my_intent(
    session_id: UUID,
    payload: SessionIntentSet,
    user_id: UUID = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    """
    Declare the caller's own attendance intent
    """
    intent = await services.intents.set_intent(user_id, session_id, payload.intent_status)
    return SessionIntentResponse.model_validate(intent)


@router.get("/{session_id}/intents", response_model=List[SessionIntentResponse])
async def get_session_intents(
    session_id: UUID,
    _: UUID = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    intents = await services.intents.list_for_session(session_id)
    return [SessionIntentResponse.model_validate(intent) for intent in intents]
