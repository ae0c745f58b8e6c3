"""
Service layer for the users collaborator.
"""

from typing import List, Tuple
import logging

from ...exceptions import NotFoundError, BadRequestError
from ..permissions.services import UserRoleService, PermissionResolver
from .entities import User
from .repository import AsyncPGUserRepository

logger = logging.getLogger(__name__)


class UserService:
    """User lookup and deletion as the RBAC core sees them."""
    
    def __init__(
        self,
        user_repository: AsyncPGUserRepository,
        user_role_service: UserRoleService,
        permission_resolver: PermissionResolver
    ):
        self.repository = user_repository
        self.user_role_service = user_role_service
        self.permission_resolver = permission_resolver
    
    async def find_one(self, user_id: str) -> User:
        """Get user by ID or raise NotFoundError."""
        user = await self.repository.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found", resource="User", identifier=user_id)
        return user
    
    async def delete_user(self, user_id: str) -> None:
        """Delete a user after clearing its role assignments."""
        await self.find_one(user_id)
        
        if not await self.user_role_service.remove_user_roles(user_id):
            raise BadRequestError("Failed to delete user roles")
        
        await self.repository.delete(user_id)
        logger.info(f"Deleted user {user_id}")
    
    async def get_user_with_permissions(self, user_id: str) -> Tuple[User, List[str]]:
        """The user together with its effective permission codes."""
        user = await self.find_one(user_id)
        permissions = await self.permission_resolver.get_user_permissions(user_id)
        return user, permissions
