"""User service - profile lookup and maintenance"""

import logging
from typing import List, Optional
from uuid import UUID

from tabletop.core.exceptions import EntityNotFoundError
from tabletop.models import User
from tabletop.repositories.base import UserRepository
from tabletop.schemas.common import QueryOptions, patch_values
from tabletop.schemas.user import UserUpdate

logger = logging.getLogger(__name__)


class UserService:
    """Service for user profiles"""

    def __init__(self, users: UserRepository):
        self.users = users

    async def get(self, user_id: UUID) -> User:
        user = await self.users.find_by_id(user_id)
        if not user:
            raise EntityNotFoundError("User", user_id)
        return user

    async def get_by_username(self, username: str) -> User:
        user = await self.users.find_by_username(username)
        if not user:
            raise EntityNotFoundError("User", username)
        return user

    async def list_users(self, query: Optional[str], options: QueryOptions) -> List[User]:
        """Plain username/email substring filter with pagination"""
        return await self.users.search(query, options)

    async def update_profile(self, user_id: UUID, user_data: UserUpdate) -> User:
        """
        Apply a profile patch

        Raises:
            EntityNotFoundError: User does not exist
            ResourceAlreadyExistsError: New username or email taken
        """
        changes = patch_values(user_data)
        user = await self.users.update(user_id, changes)
        if not user:
            raise EntityNotFoundError("User", user_id)
        logger.info(f"Updated profile of user {user_id}: {sorted(changes)}")
        return user
