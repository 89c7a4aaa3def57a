"""User routes"""

from fastapi import APIRouter, Depends, Query
from typing import List, Optional
from uuid import UUID

from tabletop.api.deps import get_current_user_id, get_query_options, get_services
from tabletop.schemas.common import QueryOptions
from tabletop.schemas.session_intent import SessionIntentResponse
from tabletop.schemas.table import TableResponse
from tabletop.schemas.table_member import TableMemberResponse
from tabletop.schemas.table_request import TableRequestResponse
from tabletop.schemas.user import UserResponse, UserUpdate
from tabletop.services.registry import Services

router = APIRouter()


@router.get("/me", response_model=UserResponse)
async def get_my_profile(
    user_id: UUID = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    """
    Get current user profile

    Args:
        user_id: Authenticated user

    Returns:
        User profile
    """
    return UserResponse.model_validate(await services.users.get(user_id))


@router.patch("/me", response_model=UserResponse)
async def update_my_profile(
    user_data: UserUpdate,
    user_id: UUID = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    user = await services.users.update_profile(user_id, user_data)
    return UserResponse.model_validate(user)


@router.get("/me/tables", response_model=List[TableResponse])
async def get_my_tables(
    user_id: UUID = Depends(get_current_user_id),
    options: QueryOptions = Depends(get_query_options),
    services: Services = Depends(get_services),
):
    """Tables the current user runs as GM"""
    tables = await services.tables.list_for_gm(user_id, options)
    return [TableResponse.model_validate(table) for table in tables]


@router.get("/me/memberships", response_model=List[TableMemberResponse])
async def get_my_memberships(
    user_id: UUID = Depends(get_current_user_id),
    options: QueryOptions = Depends(get_query_options),
    services: Services = Depends(get_services),
):
    """Tables the current user has been admitted to as a player"""
    members = await services.members.list_joined(user_id, options)
    return [TableMemberResponse.model_validate(member) for member in members]


@router.get("/me/requests", response_model=List[TableRequestResponse])
async def get_sent_requests(
    user_id: UUID = Depends(get_current_user_id),
    options: QueryOptions = Depends(get_query_options),
    services: Services = Depends(get_services),
):
    requests = await services.table_requests.list_sent(user_id, options)
    return [TableRequestResponse.model_validate(request) for request in requests]


@router.get("/me/intents", response_model=List[SessionIntentResponse])
async def get_my_intents(
    user_id: UUID = Depends(get_current_user_id),
    options: QueryOptions = Depends(get_query_options),
    services: Services = Depends(get_services),
):
    intents = await services.intents.list_for_user(user_id, options)
    return [SessionIntentResponse.model_validate(intent) for intent in intents]


@router.get("/", response_model=List[UserResponse])
async def list_users(
    q: Optional[str] = Query(None, max_length=50),
    _: UUID = Depends(get_current_user_id),
    options: QueryOptions = Depends(get_query_options),
    services: Services = Depends(get_services),
):
    """
    List users, optionally filtered by a username/email fragment
    """
    users = await services.users.list_users(q, options)
    return [UserResponse.model_validate(user) for user in users]


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: UUID,
    _: UUID = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    return UserResponse.model_validate(await services.users.get(user_id))
