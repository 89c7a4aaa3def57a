"""Authentication routes"""

from fastapi import APIRouter, Depends, status
from uuid import UUID

from tabletop.api.deps import get_current_user_id, get_services
from tabletop.schemas.response import APIResponse
from tabletop.schemas.user import (
    AccountDelete,
    PasswordChange,
    RefreshTokenRequest,
    TokenPair,
    UserCreate,
    UserLogin,
    UserResponse,
)
from tabletop.services.registry import Services

router = APIRouter()


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    services: Services = Depends(get_services),
):
    """
    Register a new account

    Args:
        user_data: Username, email and password

    Returns:
        Created user
    """
    user = await services.auth.register(user_data)
    return UserResponse.model_validate(user)


@router.post("/login", response_model=TokenPair, status_code=status.HTTP_200_OK)
async def login(
    credentials: UserLogin,
    services: Services = Depends(get_services),
):
    """
    Login endpoint - authenticate and return an access/refresh token pair

    Args:
        credentials: Email and password

    Returns:
        Token pair
    """
    return await services.auth.login(credentials.email, credentials.password)


@router.post("/refresh", response_model=TokenPair)
async def refresh_token(
    req: RefreshTokenRequest,
    services: Services = Depends(get_services),
):
    """
    Exchange a refresh token for a new pair; the old refresh token stops working
    """
    return await services.auth.refresh(req.refresh_token)


@router.post("/logout", response_model=APIResponse)
async def logout(
    user_id: UUID = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    """
    Revoke refresh tokens; the presented access token lives until it expires
    """
    await services.auth.logout(user_id)
    return APIResponse(message="Logged out successfully")


@router.post("/password", response_model=APIResponse)
async def change_password(
    payload: PasswordChange,
    user_id: UUID = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    await services.auth.update_password(user_id, payload.current_password, payload.new_password)
    return APIResponse(message="Password updated; please log in again")


@router.delete("/account", response_model=APIResponse)
async def delete_account(
    payload: AccountDelete,
    user_id: UUID = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    await services.auth.delete_account(user_id, payload.password)
    return APIResponse(message="Account deleted")
