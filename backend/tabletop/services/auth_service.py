"""Authentication service - login, registration, password and session lifecycle"""

import logging
from uuid import UUID

from tabletop.core.exceptions import (
    EntityNotFoundError,
    IncorrectPasswordError,
    InvalidCredentialsError,
)
from tabletop.core.security import PasswordHasher, TokenIssuer
from tabletop.models import User
from tabletop.repositories.base import UserRepository
from tabletop.schemas.user import TokenPair, UserCreate
from tabletop.services.token_service import TokenService

logger = logging.getLogger(__name__)


class AuthService:
    """
    Composes password hashing, access tokens and refresh tokens.

    Access tokens are stateless: logout and password changes revoke refresh
    tokens only, and an already issued access token stays valid until it
    expires.
    """

    def __init__(
        self,
        users: UserRepository,
        password_hasher: PasswordHasher,
        token_issuer: TokenIssuer,
        token_service: TokenService,
    ):
        self.users = users
        self.password_hasher = password_hasher
        self.token_issuer = token_issuer
        self.token_service = token_service

    async def authenticate(self, email: str, password: str) -> str:
        """
        Check credentials and mint an access token

        Unknown email and wrong password fail identically.

        Returns:
            str: Signed access token

        Raises:
            InvalidCredentialsError: On any credential mismatch
        """
        user = await self._check_credentials(email, password)
        return self.token_issuer.generate(user.id)

    async def login(self, email: str, password: str) -> TokenPair:
        """Authenticate and pair the access token with a fresh refresh token"""
        user = await self._check_credentials(email, password)
        access_token = self.token_issuer.generate(user.id)
        refresh_token = await self.token_service.issue(user.id)
        return self._pair(access_token, refresh_token)

    async def refresh(self, refresh_token: str) -> TokenPair:
        """Rotate a refresh token and mint a new access token for its owner"""
        new_refresh_token, user_id = await self.token_service.rotate(refresh_token)
        return self._pair(self.token_issuer.generate(user_id), new_refresh_token)

    async def register(self, user_data: UserCreate) -> User:
        """
        Create an account

        Raises:
            InvalidInputError: Password does not meet requirements
            ResourceAlreadyExistsError: Username or email taken
        """
        password_hash = await self.password_hasher.hash(user_data.password)
        user = await self.users.create(
            username=user_data.username,
            email=user_data.email,
            password_hash=password_hash,
        )
        logger.info(f"Registered user: {user.username} ({user.id})")
        return user

    async def update_password(self, user_id: UUID, current_password: str, new_password: str) -> None:
        """
        Replace the password after re-verifying the current one

        Every refresh token of the user is revoked so sessions opened with the
        old password cannot be extended.
        """
        user = await self._get_user(user_id)

        if not await self.password_hasher.verify(current_password, user.password_hash):
            logger.warning(f"Password change rejected for user {user_id}: current password mismatch")
            raise IncorrectPasswordError()

        new_hash = await self.password_hasher.hash(new_password)
        await self.users.update(user_id, {"password_hash": new_hash})
        await self.token_service.revoke_all(user_id)
        logger.info(f"Password changed for user {user_id}")

    async def logout(self, user_id: UUID) -> None:
        await self.token_service.revoke_all(user_id)
        logger.info(f"User logged out: {user_id}")

    async def delete_account(self, user_id: UUID, password: str) -> None:
        """Delete the account after password confirmation, revoking tokens first"""
        user = await self._get_user(user_id)

        if not await self.password_hasher.verify(password, user.password_hash):
            raise IncorrectPasswordError()

        await self.token_service.revoke_all(user_id)
        await self.users.delete(user_id)
        logger.info(f"Deleted account: {user_id}")

    async def _check_credentials(self, email: str, password: str) -> User:
        user = await self.users.find_by_email(email)
        if not user:
            logger.warning("Login failed: unknown email")
            raise InvalidCredentialsError()

        if not await self.password_hasher.verify(password, user.password_hash):
            logger.warning(f"Login failed: wrong password for user {user.id}")
            raise InvalidCredentialsError()

        logger.info(f"User authenticated: {user.id}")
        return user

    async def _get_user(self, user_id: UUID) -> User:
        user = await self.users.find_by_id(user_id)
        if not user:
            raise EntityNotFoundError("User", user_id)
        return user

    def _pair(self, access_token: str, refresh_token: str) -> TokenPair:
        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=int(self.token_issuer.ttl.total_seconds()),
        )
