"""Table routes, including join requests and sessions scoped to a table"""

from fastapi import APIRouter, Depends, status
from typing import List
from uuid import UUID

from tabletop.api.deps import get_current_user_id, get_query_options, get_services
from tabletop.schemas.response import APIResponse
from tabletop.schemas.common import QueryOptions
from tabletop.schemas.session import SessionResponse
from tabletop.schemas.table import TableCreate, TableResponse, TableUpdate
from tabletop.schemas.table_member import TableMemberResponse
from tabletop.schemas.table_request import TableRequestCreate, TableRequestResponse
from tabletop.services.registry import Services

router = APIRouter()


@router.post("/", response_model=TableResponse, status_code=status.HTTP_201_CREATED)
async def create_table(
    table_data: TableCreate,
    user_id: UUID = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    """
    Create a table; the caller becomes its GM
    """
    table = await services.tables.create(user_id, table_data)
    return TableResponse.model_validate(table)


@router.get("/{table_id}", response_model=TableResponse)
async def get_table(
    table_id: UUID,
    _: UUID = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    return TableResponse.model_validate(await services.tables.get(table_id))


@router.patch("/{table_id}", response_model=TableResponse)
async def update_table(
    table_id: UUID,
    table_data: TableUpdate,
    user_id: UUID = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    table = await services.tables.update(user_id, table_id, table_data)
    return TableResponse.model_validate(table)


@router.delete("/{table_id}", response_model=APIResponse)
async def delete_table(
    table_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    await services.tables.delete(user_id, table_id)
    return APIResponse(message=f"Table {table_id} deleted successfully")


@router.post(
    "/{table_id}/requests",
    response_model=TableRequestResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_table_request(
    table_id: UUID,
    payload: TableRequestCreate,
    user_id: UUID = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    """
    Ask to join a table

    Returns:
        The pending request; 409 if one is already pending
    """
    request = await services.table_requests.create(user_id, table_id, payload.message)
    return TableRequestResponse.model_validate(request)


@router.get("/{table_id}/requests", response_model=List[TableRequestResponse])
async def get_received_requests(
    table_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    options: QueryOptions = Depends(get_query_options),
    services: Services = Depends(get_services),
):
    requests = await services.table_requests.list_for_table(table_id, user_id, options)
    return [TableRequestResponse.model_validate(request) for request in requests]


@router.get("/{table_id}/sessions", response_model=List[SessionResponse])
async def get_table_sessions(
    table_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    options: QueryOptions = Depends(get_query_options),
    services: Services = Depends(get_services),
):
    sessions = await services.sessions.list_for_table(table_id, user_id, options)
    return [SessionResponse.model_validate(session) for session in sessions]


@router.get("/{table_id}/members", response_model=List[TableMemberResponse])
async def get_table_members(
    table_id: UUID,
    _: UUID = Depends(get_current_user_id),
    options: QueryOptions = Depends(get_query_options),
    services: Services = Depends(get_services),
):
    members = await services.members.list_for_table(table_id, options)
    return [TableMemberResponse.model_validate(member) for member in members]


@router.delete("/{table_id}/members/{member_id}", response_model=APIResponse)
async def remove_table_member(
    table_id: UUID,
    member_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    """
    Remove a player from a table

    The GM may remove anyone; a player may remove themselves to leave.
    """
    await services.members.remove(user_id, table_id, member_id)
    return APIResponse(message=f"User {member_id} removed from table {table_id}")
