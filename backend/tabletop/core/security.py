"""Security utilities - JWT access tokens, password hashing, refresh token material"""

import asyncio
import logging
import secrets
import string
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

import bcrypt
from jose import JWTError, jwt
from pydantic import BaseModel

from tabletop.config import settings
from tabletop.core.exceptions import (
    HashingFailedError,
    InvalidInputError,
    TokenEncodeFailedError,
    TokenInvalidError,
)

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes
MAX_PASSWORD_BYTES = 72
MIN_PASSWORD_LENGTH = 8


class PasswordHasher:
    """
    bcrypt hashing on a dedicated thread pool.

    Hashing is CPU bound; running it on its own executor keeps it off the
    event loop and off the default pool used for other blocking work.
    """

    def __init__(self, rounds: int = None, max_workers: int = None):
        self.rounds = rounds or settings.BCRYPT_ROUNDS
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers or settings.PASSWORD_HASH_WORKERS,
            thread_name_prefix="password-hasher",
        )

    @staticmethod
    def validate_password(password: str) -> None:
        """
        Check password strength before hashing

        Raises:
            InvalidInputError: Listing every rule the password breaks
        """
        problems = []
        if len(password) < MIN_PASSWORD_LENGTH:
            problems.append("min_length")
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            problems.append("max_length")
        if not any(c.isupper() for c in password):
            problems.append("uppercase_required")
        if not any(c.islower() for c in password):
            problems.append("lowercase_required")
        if not any(c.isdigit() for c in password):
            problems.append("numeric_required")
        if not any(c in string.punctuation for c in password):
            problems.append("special_required")

        if problems:
            raise InvalidInputError("Password does not meet requirements", details={"password": problems})

    def _hash_sync(self, password: str) -> str:
        return bcrypt.hashpw(
            password.encode('utf-8'),
            bcrypt.gensalt(rounds=self.rounds)
        ).decode('utf-8')

    @staticmethod
    def _verify_sync(password: str, hashed_password: str) -> bool:
        return bcrypt.checkpw(
            password.encode('utf-8'),
            hashed_password.encode('utf-8')
        )

    async def hash(self, password: str) -> str:
        """
        Validate and hash a password

        Args:
            password: Plain text password

        Returns:
            str: bcrypt hash (salted, so never the same twice)
        """
        self.validate_password(password)
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(self._executor, self._hash_sync, password)
        except (ValueError, TypeError) as exc:
            logger.error(f"Failed to generate password hash: {exc}")
            raise HashingFailedError() from exc

    async def verify(self, password: str, hashed_password: str) -> bool:
        """
        Verify a password against its hash

        Args:
            password: Plain text password
            hashed_password: Stored bcrypt hash

        Returns:
            bool: True if password matches
        """
        # hash() refuses these, so no stored hash can match one
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            return False

        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(
                self._executor, self._verify_sync, password, hashed_password
            )
        except (ValueError, TypeError) as exc:
            logger.error(f"Failed to verify password hash: {exc}")
            raise HashingFailedError() from exc

    def close(self) -> None:
        self._executor.shutdown(wait=True)


class TokenClaims(BaseModel):
    """Verified access token claims"""
    sub: UUID
    iat: int
    exp: int


class TokenIssuer:
    """Stateless JWT access tokens carrying only sub, iat and exp"""

    def __init__(
        self,
        secret_key: str = None,
        algorithm: str = None,
        ttl: Optional[timedelta] = None,
    ):
        self.secret_key = secret_key or settings.SECRET_KEY
        self.algorithm = algorithm or settings.ALGORITHM
        self.ttl = ttl or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    def generate(self, user_id: UUID, ttl: Optional[timedelta] = None) -> str:
        """
        Create a signed access token

        Args:
            user_id: Subject of the token
            ttl: Lifetime override, defaults to ACCESS_TOKEN_EXPIRE_MINUTES

        Returns:
            str: Encoded JWT
        """
        now = datetime.now(timezone.utc)
        claims = {
            "sub": str(user_id),
            "iat": now,
            "exp": now + (ttl if ttl is not None else self.ttl),
        }
        try:
            return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)
        except JWTError as exc:
            logger.error(f"Failed to encode access token: {exc}")
            raise TokenEncodeFailedError() from exc

    def decode(self, token: str) -> TokenClaims:
        """
        Verify signature and expiry of an access token

        Expired, forged and malformed tokens all raise the same error.

        Raises:
            TokenInvalidError: If the token cannot be trusted
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require_sub": True, "require_iat": True, "require_exp": True},
            )
        except JWTError as exc:
            logger.debug(f"Rejected access token: {exc}")
            raise TokenInvalidError() from None

        try:
            return TokenClaims(sub=payload["sub"], iat=payload["iat"], exp=payload["exp"])
        except (KeyError, ValueError):
            logger.debug("Rejected access token with malformed claims")
            raise TokenInvalidError() from None


def generate_refresh_token(nbytes: int = None) -> str:
    """
    Generate an opaque refresh token

    Returns:
        str: URL-safe random string (256 bits by default)
    """
    return secrets.token_urlsafe(nbytes or settings.REFRESH_TOKEN_BYTES)
