"""
Service layer for the permission catalog.
"""

from typing import Optional, List, Dict, Any, Tuple
import logging

from ....exceptions import NotFoundError, ConflictError
from ....models.pagination import PaginationParams
from ..entities import Permission, PermissionRepository, RolePermissionRepository

logger = logging.getLogger(__name__)


class PermissionService:
    """CRUD over permissions, keyed by unique code."""
    
    def __init__(
        self,
        permission_repository: PermissionRepository,
        role_permission_repository: RolePermissionRepository
    ):
        self.repository = permission_repository
        self.role_permission_repository = role_permission_repository
    
    async def create(self, code: str, description: Optional[str] = None) -> Permission:
        """Create a permission; the code must not be taken."""
        existing = await self.repository.get_by_code(code)
        if existing:
            raise ConflictError(
                message=f"Permission with code '{code}' already exists",
                conflicting_field="code",
                conflicting_value=code
            )
        
        permission = await self.repository.create(code, description)
        logger.info(f"Created permission: {permission.code} (ID: {permission.id})")
        return permission
    
    async def get(self, permission_id: int) -> Permission:
        """Get permission by ID or raise NotFoundError."""
        permission = await self.repository.get_by_id(permission_id)
        if not permission:
            raise NotFoundError(resource="Permission", identifier=permission_id)
        return permission
    
    async def get_by_code(self, code: str) -> Optional[Permission]:
        return await self.repository.get_by_code(code)
    
    async def get_many_by_ids(self, permission_ids: List[int]) -> List[Permission]:
        """Return the permissions that exist among ``permission_ids``.
        
        Callers needing all-or-nothing semantics compare the counts.
        """
        return await self.repository.get_by_ids(permission_ids)
    
    async def list(
        self,
        code_filter: Optional[str] = None,
        pagination: Optional[PaginationParams] = None
    ) -> Tuple[List[Permission], int]:
        """List permissions ordered by code."""
        if not pagination:
            pagination = PaginationParams(page=1, page_size=1000)
        
        return await self.repository.list(
            code_filter=code_filter,
            offset=pagination.offset,
            limit=pagination.limit
        )
    
    async def update(self, permission_id: int, updates: Dict[str, Any]) -> Permission:
        """Apply a partial update.
        
        A new code must not collide with a different permission.
        """
        existing = await self.get(permission_id)
        # code is NOT NULL; an explicit null means "leave unchanged"
        updates = {k: v for k, v in updates.items() if not (k == "code" and v is None)}
        
        new_code = updates.get("code")
        if new_code and new_code != existing.code:
            clash = await self.repository.get_by_code(new_code)
            if clash and clash.id != permission_id:
                raise ConflictError(
                    message=f"Permission with code '{new_code}' already exists",
                    conflicting_field="code",
                    conflicting_value=new_code
                )
        
        permission = await self.repository.update(permission_id, updates)
        if not permission:
            raise NotFoundError(resource="Permission", identifier=permission_id)
        
        logger.info(f"Updated permission: {permission.code} (ID: {permission.id})")
        return permission
    
    async def delete(self, permission_id: int) -> None:
        """Delete a permission together with its grants."""
        permission = await self.get(permission_id)
        await self.repository.delete(permission_id)
        logger.info(f"Deleted permission: {permission.code} (ID: {permission_id})")
    
    async def get_with_roles(self, permission_id: int) -> Permission:
        """Get a permission with the grants that reference it, roles loaded."""
        permission = await self.get(permission_id)
        permission.role_permissions = await self.role_permission_repository.list_by_permission(
            permission_id
        )
        return permission
