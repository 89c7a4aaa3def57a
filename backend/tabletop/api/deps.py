"""API dependencies - identity extraction, service wiring, list options"""

from typing import Optional
from uuid import UUID

from fastapi import Depends, Query
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from tabletop.config import settings
from tabletop.core.database import get_db
from tabletop.core.security import TokenClaims
from tabletop.schemas.common import QueryOptions
from tabletop.services.registry import Services, build_services, token_issuer

# HTTP Bearer token scheme
security = HTTPBearer()


def get_services(db: AsyncSession = Depends(get_db)) -> Services:
    """Services bound to the request's database session"""
    return build_services(db)


async def get_current_claims(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> TokenClaims:
    """
    The single point where a bearer token becomes an identity

    Raises:
        TokenInvalidError: If the token is forged, malformed or expired
    """
    return token_issuer.decode(credentials.credentials)


async def get_current_user_id(
    claims: TokenClaims = Depends(get_current_claims),
) -> UUID:
    return claims.sub


def get_query_options(
    limit: Optional[int] = Query(None, ge=1),
    offset: int = Query(0, ge=0),
    descending: bool = Query(True),
) -> QueryOptions:
    """Apply configured pagination defaults and cap the page size"""
    effective_limit = min(limit or settings.DEFAULT_PAGE_LIMIT, settings.MAX_PAGE_LIMIT)
    return QueryOptions(limit=effective_limit, offset=offset, descending=descending)
