"""
Service layer for the role catalog.
"""

from typing import Optional, List, Dict, Any, Tuple
import logging

from ....exceptions import NotFoundError, ConflictError
from ....models.pagination import PaginationParams
from ..entities import (
    Role, RoleRepository, RolePermissionRepository, UserRoleRepository
)

logger = logging.getLogger(__name__)


class RoleService:
    """CRUD over roles, keyed by unique name."""
    
    def __init__(
        self,
        role_repository: RoleRepository,
        role_permission_repository: RolePermissionRepository,
        user_role_repository: UserRoleRepository
    ):
        self.repository = role_repository
        self.role_permission_repository = role_permission_repository
        self.user_role_repository = user_role_repository
    
    async def create(
        self,
        name: str,
        description: Optional[str] = None,
        is_default: bool = False
    ) -> Role:
        """Create a role; the name must not be taken."""
        existing = await self.repository.get_by_name(name)
        if existing:
            raise ConflictError(
                message=f"Role with name '{name}' already exists",
                conflicting_field="name",
                conflicting_value=name
            )
        
        role = await self.repository.create(name, description, is_default)
        logger.info(f"Created role: {role.name} (ID: {role.id})")
        return role
    
    async def get(self, role_id: int) -> Role:
        """Get role by ID or raise NotFoundError."""
        role = await self.repository.get_by_id(role_id)
        if not role:
            raise NotFoundError(resource="Role", identifier=role_id)
        return role
    
    async def get_by_name(self, name: str) -> Optional[Role]:
        return await self.repository.get_by_name(name)
    
    async def get_many_by_ids(self, role_ids: List[int]) -> List[Role]:
        return await self.repository.get_by_ids(role_ids)
    
    async def list(
        self,
        name_filter: Optional[str] = None,
        is_default: Optional[bool] = None,
        pagination: Optional[PaginationParams] = None
    ) -> Tuple[List[Role], int]:
        """List roles, newest first."""
        if not pagination:
            pagination = PaginationParams(page=1, page_size=20)
        
        return await self.repository.list(
            name_filter=name_filter,
            is_default=is_default,
            offset=pagination.offset,
            limit=pagination.limit
        )
    
    async def list_default_roles(self) -> List[Role]:
        """Roles flagged for automatic assignment. More than one is allowed."""
        return await self.repository.list_defaults()
    
    async def update(self, role_id: int, updates: Dict[str, Any]) -> Role:
        """Apply a partial update; a new name must not collide with another role."""
        existing = await self.get(role_id)
        updates = {
            k: v for k, v in updates.items()
            if not (k in ("name", "is_default") and v is None)
        }
        
        new_name = updates.get("name")
        if new_name and new_name != existing.name:
            clash = await self.repository.get_by_name(new_name)
            if clash and clash.id != role_id:
                raise ConflictError(
                    message=f"Role with name '{new_name}' already exists",
                    conflicting_field="name",
                    conflicting_value=new_name
                )
        
        role = await self.repository.update(role_id, updates)
        if not role:
            raise NotFoundError(resource="Role", identifier=role_id)
        
        logger.info(f"Updated role: {role.name} (ID: {role.id})")
        return role
    
    async def delete(self, role_id: int) -> None:
        """Delete a role; its grants and assignments cascade."""
        role = await self.get(role_id)
        await self.repository.delete(role_id)
        logger.info(f"Deleted role: {role.name} (ID: {role_id})")
    
    async def get_with_permissions(self, role_id: int) -> Role:
        """Get a role with its grants, permissions loaded."""
        role = await self.get(role_id)
        role.role_permissions = await self.role_permission_repository.list_by_role(role_id)
        return role
    
    async def get_with_users(self, role_id: int) -> Role:
        """Get a role with its assignments, users loaded."""
        role = await self.get(role_id)
        role.user_roles = await self.user_role_repository.list_by_role(role_id)
        return role
