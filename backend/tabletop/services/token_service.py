"""Refresh token issue, rotation and revocation service."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Optional, Tuple
from uuid import UUID

from tabletop.config import settings
from tabletop.core.exceptions import InvalidCredentialsError, RefreshTokenConflictError
from tabletop.core.security import generate_refresh_token
from tabletop.core.utils import naive_utc, utc_now
from tabletop.repositories.base import RefreshTokenRepository

logger = logging.getLogger(__name__)

ISSUE_ATTEMPTS = 2


class TokenService:
    """
    Single active refresh token per user, consumed on use.

    A token is active from ``issue`` until it is rotated or revoked; both
    delete the row, and deletion is the only consumption marker. Lookup
    misses, expiry and lost rotation races all surface as the same
    InvalidCredentialsError; the log keeps them apart.
    """

    def __init__(self, refresh_tokens: RefreshTokenRepository, ttl: Optional[timedelta] = None):
        self.refresh_tokens = refresh_tokens
        self.ttl = ttl or timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)

    async def issue(self, user_id: UUID) -> str:
        """
        Replace any refresh token of the user with a fresh one

        A concurrent issue for the same user can take the slot between the
        delete and the insert; the newest caller then replaces it once more.

        Args:
            user_id: Owner of the new token

        Returns:
            str: The raw token (stored as-is; hashing at rest is not applied)

        Raises:
            RefreshTokenConflictError: The slot kept being taken by other sign-ins
        """
        for attempt in range(1, ISSUE_ATTEMPTS + 1):
            await self.refresh_tokens.delete_by_user(user_id)
            token = generate_refresh_token()
            try:
                await self.refresh_tokens.create(
                    user_id=user_id,
                    token=token,
                    expires_at=utc_now() + self.ttl,
                )
            except RefreshTokenConflictError:
                logger.warning(f"Refresh token slot taken concurrently (user {user_id}, attempt {attempt})")
                if attempt == ISSUE_ATTEMPTS:
                    raise
            else:
                return token

    async def rotate(self, old_token: str) -> Tuple[str, UUID]:
        """
        Consume a refresh token and issue its replacement

        Returns:
            (new_token, user_id)

        Raises:
            InvalidCredentialsError: Unknown, expired or already consumed token
        """
        record = await self.refresh_tokens.find_by_token(old_token)
        if record is None:
            logger.warning("Refresh token rejected: not found")
            raise InvalidCredentialsError()

        user_id = record.user_id
        expires_at = naive_utc(record.expires_at)

        if expires_at < utc_now():
            await self.refresh_tokens.delete_by_token(old_token)
            logger.warning(f"Refresh token rejected: expired (user {user_id})")
            raise InvalidCredentialsError()

        # Whoever deletes the row owns the rotation.
        if await self.refresh_tokens.delete_by_token(old_token) == 0:
            logger.warning(f"Refresh token rejected: consumed concurrently (user {user_id})")
            raise InvalidCredentialsError()

        new_token = await self.issue(user_id)
        logger.info(f"Rotated refresh token for user {user_id}")
        return new_token, user_id

    async def revoke_all(self, user_id: UUID) -> int:
        """Delete every refresh token of the user"""
        revoked = await self.refresh_tokens.delete_by_user(user_id)
        if revoked:
            logger.info(f"Revoked {revoked} refresh token(s) for user {user_id}")
        return revoked
