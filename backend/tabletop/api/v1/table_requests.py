"""Table request decision routes"""

from fastapi import APIRouter, Depends
from uuid import UUID

from tabletop.api.deps import get_current_user_id, get_services
from tabletop.schemas.response import APIResponse
from tabletop.schemas.table_request import TableRequestResponse
from tabletop.services.registry import Services

router = APIRouter()


@router.get("/{request_id}", response_model=TableRequestResponse)
async def get_request(
    request_id: UUID,
    _: UUID = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    return TableRequestResponse.model_validate(await services.table_requests.get(request_id))


@router.post("/{request_id}/accept", response_model=TableRequestResponse)
async def accept_request(
    request_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    """
    Approve a pending request (GM only)
    """
    request = await services.table_requests.approve(request_id, user_id)
    return TableRequestResponse.model_validate(request)


@router.post("/{request_id}/reject", response_model=TableRequestResponse)
async def reject_request(
    request_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    """
    Reject a pending request (GM only)
    """
    request = await services.table_requests.reject(request_id, user_id)
    return TableRequestResponse.model_validate(request)


@router.delete("/{request_id}", response_model=APIResponse)
async def cancel_request(
    request_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    """
    Withdraw a pending request (requester only)
    """
    await services.table_requests.cancel(request_id, user_id)
    return APIResponse(message=f"Request {request_id} cancelled successfully")
