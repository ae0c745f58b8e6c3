"""
Service layer for the role -> permission graph.

Grants carry an optional attribution (``granted_by``). ``grant_many``
reconciles only the grants of one attribution scope, whereas
``sync_exact`` replaces the role's whole grant set. Both behaviours are
intentional and kept separate.
"""

from typing import Optional, List
import logging

from ....exceptions import NotFoundError, ConflictError
from ..entities import RolePermission, RolePermissionRepository, TransactionManager
from .permission_service import PermissionService
from .role_service import RoleService
from ._ids import unique_ids, normalize_attribution

logger = logging.getLogger(__name__)


class RolePermissionService:
    """Grants permissions to roles and keeps grant sets in sync."""
    
    def __init__(
        self,
        repository: RolePermissionRepository,
        role_service: RoleService,
        permission_service: PermissionService,
        transaction_manager: TransactionManager
    ):
        self.repository = repository
        self.role_service = role_service
        self.permission_service = permission_service
        self.transaction_manager = transaction_manager
    
    async def _ensure_permissions_exist(self, permission_ids: List[int]) -> None:
        """All-or-nothing existence check over distinct IDs."""
        if not permission_ids:
            return
        
        found = await self.permission_service.get_many_by_ids(permission_ids)
        if len(found) != len(permission_ids):
            found_ids = {permission.id for permission in found}
            missing = [pid for pid in permission_ids if pid not in found_ids]
            raise NotFoundError(
                "One or more permissions not found",
                resource="Permission",
                details={"missing_ids": missing}
            )
    
    async def grant(
        self,
        role_id: int,
        permission_id: int,
        granted_by: Optional[str] = None
    ) -> RolePermission:
        """Grant one permission to a role."""
        granted_by = normalize_attribution(granted_by)
        await self.role_service.get(role_id)
        await self.permission_service.get(permission_id)
        
        existing = await self.repository.get(role_id, permission_id)
        if existing:
            raise ConflictError(
                message="Permission already assigned to this role",
                conflicting_field="permission_id",
                conflicting_value=permission_id
            )
        
        grant = await self.repository.create(role_id, permission_id, granted_by)
        logger.info(f"Granted permission {permission_id} to role {role_id} (by {granted_by})")
        return grant
    
    async def grant_many(
        self,
        role_id: int,
        permission_ids: List[int],
        granted_by: Optional[str] = None
    ) -> List[RolePermission]:
        """Reconcile a role's grants within one attribution scope.
        
        With ``granted_by`` the scope is that granter's grants; without it
        the scope is every grant of the role. Grants in scope whose
        permission is absent from ``permission_ids`` are removed, and the
        missing ones are added under ``granted_by``. Permissions the role
        already holds outside the scope are left as they are.
        
        Returns the grants of the reconciled scope. A call that changes
        nothing returns the current scope.
        """
        granted_by = normalize_attribution(granted_by)
        await self.role_service.get(role_id)
        target_ids = unique_ids(permission_ids)
        await self._ensure_permissions_exist(target_ids)
        
        async with self.transaction_manager.transaction():
            all_grants = await self.repository.list_by_role(role_id)
            if granted_by is not None:
                scoped = await self.repository.list_by_role_and_granter(role_id, granted_by)
            else:
                scoped = all_grants
            
            target = set(target_ids)
            held_ids = {grant.permission_id for grant in all_grants}
            to_remove = [g.permission_id for g in scoped if g.permission_id not in target]
            to_add = [pid for pid in target_ids if pid not in held_ids]
            
            if to_remove:
                await self.repository.delete_many(role_id, to_remove)
            if to_add:
                await self.repository.create_many(role_id, to_add, granted_by)
            
            logger.info(
                f"Reconciled grants of role {role_id} (by {granted_by}): "
                f"+{len(to_add)} -{len(to_remove)}"
            )
            
            if granted_by is not None:
                return await self.repository.list_by_role_and_granter(role_id, granted_by)
            return await self.repository.list_by_role(role_id)
    
    async def revoke(self, role_id: int, permission_id: int) -> None:
        """Remove one grant."""
        existing = await self.repository.get(role_id, permission_id)
        if not existing:
            raise NotFoundError("Permission assignment not found")
        
        await self.repository.delete(role_id, permission_id)
        logger.info(f"Revoked permission {permission_id} from role {role_id}")
    
    async def revoke_all(self, role_id: int) -> int:
        """Remove every grant of a role. Empty is fine."""
        await self.role_service.get(role_id)
        removed = await self.repository.delete_by_role(role_id)
        logger.info(f"Revoked all {removed} permission(s) from role {role_id}")
        return removed
    
    async def sync_exact(
        self,
        role_id: int,
        permission_ids: List[int],
        granted_by: Optional[str] = None
    ) -> List[RolePermission]:
        """Replace a role's grant set with exactly ``permission_ids``.
        
        Attribution-blind: every previous grant is deleted. The delete and
        the inserts share one transaction, so an unknown ID leaves the
        previous grant set intact.
        """
        granted_by = normalize_attribution(granted_by)
        await self.role_service.get(role_id)
        target_ids = unique_ids(permission_ids)
        
        async with self.transaction_manager.transaction():
            await self.repository.delete_by_role(role_id)
            
            if not target_ids:
                logger.info(f"Cleared grants of role {role_id}")
                return []
            
            await self._ensure_permissions_exist(target_ids)
            await self.repository.create_many(role_id, target_ids, granted_by)
            
            logger.info(f"Synced role {role_id} to {len(target_ids)} permission(s) (by {granted_by})")
            return await self.repository.list_by_role(role_id)
    
    async def list_by_role(self, role_id: int) -> List[RolePermission]:
        await self.role_service.get(role_id)
        return await self.repository.list_by_role(role_id)
    
    async def list_by_permission(self, permission_id: int) -> List[RolePermission]:
        await self.permission_service.get(permission_id)
        return await self.repository.list_by_permission(permission_id)
