"""
Effective permission resolution.

Every call reads the user -> role -> grant -> permission join afresh;
nothing is cached, so grant changes are visible on the next request.
"""

from typing import Optional, List
import logging

from ..entities import UserRoleRepository

logger = logging.getLogger(__name__)


class PermissionResolver:
    """Computes the set of permission codes a user holds through roles."""
    
    def __init__(self, user_role_repository: UserRoleRepository, timeout: Optional[float] = None):
        """
        Args:
            user_role_repository: Source of the permission join
            timeout: Seconds allowed for the read; None waits indefinitely
        """
        self.user_role_repository = user_role_repository
        self.timeout = timeout
    
    async def get_user_permissions(self, user_id: str) -> List[str]:
        """Return the deduplicated permission codes of a user."""
        codes = await self.user_role_repository.list_permission_codes(user_id, timeout=self.timeout)
        permissions = list(dict.fromkeys(codes))
        logger.debug(f"Resolved {len(permissions)} permission(s) for user {user_id}")
        return permissions
    
    async def check_user_permission(self, user_id: str, permission_code: str) -> bool:
        """Whether the user holds ``permission_code``."""
        return permission_code in await self.get_user_permissions(user_id)
