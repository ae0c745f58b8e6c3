"""
Service layer for the user -> role graph.

``assign_many`` reconciles one attribution scope. Without ``assigned_by``
that scope is the user's unattributed assignments, not all of them.
``sync_user_roles`` ignores attribution and replaces everything.
"""

from typing import Optional, List
import logging

from ....exceptions import NotFoundError, ConflictError
from ..entities import UserRole, UserRoleRepository, UserLookup, TransactionManager
from .role_service import RoleService
from ._ids import unique_ids, normalize_attribution

logger = logging.getLogger(__name__)


class UserRoleService:
    """Assigns roles to users and keeps assignment sets in sync."""
    
    def __init__(
        self,
        repository: UserRoleRepository,
        role_service: RoleService,
        user_lookup: UserLookup,
        transaction_manager: TransactionManager
    ):
        self.repository = repository
        self.role_service = role_service
        self.user_lookup = user_lookup
        self.transaction_manager = transaction_manager
    
    async def _ensure_user_exists(self, user_id: str) -> None:
        user = await self.user_lookup.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found", resource="User", identifier=user_id)
    
    async def _ensure_roles_exist(self, role_ids: List[int]) -> None:
        """All-or-nothing existence check over distinct IDs."""
        if not role_ids:
            return
        
        found = await self.role_service.get_many_by_ids(role_ids)
        if len(found) != len(role_ids):
            found_ids = {role.id for role in found}
            missing = [rid for rid in role_ids if rid not in found_ids]
            raise NotFoundError(
                "One or more roles not found",
                resource="Role",
                details={"missing_ids": missing}
            )
    
    async def assign(
        self,
        user_id: str,
        role_id: int,
        assigned_by: Optional[str] = None
    ) -> UserRole:
        """Assign one role to a user."""
        assigned_by = normalize_attribution(assigned_by)
        await self._ensure_user_exists(user_id)
        await self.role_service.get(role_id)
        if assigned_by:
            await self._ensure_user_exists(assigned_by)
        
        existing = await self.repository.get(user_id, role_id)
        if existing:
            raise ConflictError(
                message="Role already assigned to this user",
                conflicting_field="role_id",
                conflicting_value=role_id
            )
        
        assignment = await self.repository.create(user_id, role_id, assigned_by)
        logger.info(f"Assigned role {role_id} to user {user_id} (by {assigned_by})")
        return assignment
    
    async def assign_many(
        self,
        user_id: str,
        role_ids: List[int],
        assigned_by: Optional[str] = None
    ) -> List[UserRole]:
        """Reconcile a user's assignments within one attribution scope.
        
        With ``assigned_by`` the scope is that assigner's assignments and
        the result is that scope. Without it the scope is the unattributed
        assignments and the result is every assignment of the user. Roles
        already held outside the scope are left as they are.
        """
        assigned_by = normalize_attribution(assigned_by)
        await self._ensure_user_exists(user_id)
        target_ids = unique_ids(role_ids)
        await self._ensure_roles_exist(target_ids)
        
        async with self.transaction_manager.transaction():
            all_assignments = await self.repository.list_by_user(user_id)
            scoped = await self.repository.list_by_user_and_assigner(user_id, assigned_by)
            
            target = set(target_ids)
            held_ids = {assignment.role_id for assignment in all_assignments}
            to_remove = [a.role_id for a in scoped if a.role_id not in target]
            to_add = [rid for rid in target_ids if rid not in held_ids]
            
            if to_remove:
                await self.repository.delete_many(user_id, to_remove)
            if to_add:
                await self.repository.create_many(user_id, to_add, assigned_by)
            
            logger.info(
                f"Reconciled roles of user {user_id} (by {assigned_by}): "
                f"+{len(to_add)} -{len(to_remove)}"
            )
            
            if assigned_by is not None:
                return await self.repository.list_by_user_and_assigner(user_id, assigned_by)
            return await self.repository.list_by_user(user_id)
    
    async def revoke(self, user_id: str, role_id: int) -> None:
        """Remove one assignment."""
        existing = await self.repository.get(user_id, role_id)
        if not existing:
            raise NotFoundError("Role assignment not found")
        
        await self.repository.delete(user_id, role_id)
        logger.info(f"Revoked role {role_id} from user {user_id}")
    
    async def remove_all_roles_from_user(self, user_id: str) -> int:
        """Remove every assignment of a user. Empty is fine."""
        removed = await self.repository.delete_by_user(user_id)
        logger.info(f"Removed all {removed} role(s) from user {user_id}")
        return removed
    
    async def remove_user_roles(self, user_id: str) -> bool:
        """Remove every assignment of a user, reporting success as a boolean.
        
        A user with no assignments counts as success.
        """
        existing = await self.repository.list_by_user(user_id)
        if not existing:
            return True
        
        removed = await self.repository.delete_by_user(user_id)
        logger.info(f"Removed {removed} role(s) from user {user_id}")
        return removed > 0
    
    async def sync_user_roles(
        self,
        user_id: str,
        role_ids: List[int],
        assigned_by: Optional[str] = None
    ) -> List[UserRole]:
        """Replace a user's assignments with exactly ``role_ids``, atomically."""
        assigned_by = normalize_attribution(assigned_by)
        await self._ensure_user_exists(user_id)
        target_ids = unique_ids(role_ids)
        
        async with self.transaction_manager.transaction():
            await self.repository.delete_by_user(user_id)
            
            if not target_ids:
                logger.info(f"Cleared roles of user {user_id}")
                return []
            
            await self._ensure_roles_exist(target_ids)
            await self.repository.create_many(user_id, target_ids, assigned_by)
            
            logger.info(f"Synced user {user_id} to {len(target_ids)} role(s) (by {assigned_by})")
            return await self.repository.list_by_user(user_id)
    
    async def list_by_user(self, user_id: str) -> List[UserRole]:
        await self._ensure_user_exists(user_id)
        return await self.repository.list_by_user(user_id)
    
    async def list_by_role(self, role_id: int) -> List[UserRole]:
        await self.role_service.get(role_id)
        return await self.repository.list_by_role(role_id)
