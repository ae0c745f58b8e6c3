"""AsyncPG-based grant repository.

Stores the role -> permission edges in ``role_permissions``. The pair
``(role_id, permission_id)`` is the primary key, so a duplicate grant is
rejected by the store as well as by the service.
"""

from typing import List, Optional
import asyncpg
import logging

from ....database import DatabaseManager, affected_rows
from ....exceptions import ConflictError, DatabaseError, NotFoundError
from ..entities import Permission, Role, RolePermission


logger = logging.getLogger(__name__)

_GRANT_COLUMNS = "rp.role_id, rp.permission_id, rp.granted_by, rp.created_at"


class AsyncPGRolePermissionRepository:
    """AsyncPG implementation of RolePermissionRepository protocol."""
    
    def __init__(self, db: DatabaseManager, schema: str = "public"):
        self.db = db
        self.schema = schema
    
    @staticmethod
    def _build_grant_from_row(row: asyncpg.Record) -> RolePermission:
        """Build RolePermission entity from database row."""
        return RolePermission(
            role_id=row['role_id'],
            permission_id=row['permission_id'],
            granted_by=row['granted_by'],
            created_at=row['created_at']
        )
    
    def _build_grant_with_permission(self, row: asyncpg.Record) -> RolePermission:
        grant = self._build_grant_from_row(row)
        grant.permission = Permission(
            id=row['permission_id'],
            code=row['permission_code'],
            description=row['permission_description'],
            created_at=row['permission_created_at'],
            updated_at=row['permission_updated_at']
        )
        return grant
    
    def _build_grant_with_role(self, row: asyncpg.Record) -> RolePermission:
        grant = self._build_grant_from_row(row)
        grant.role = Role(
            id=row['role_id'],
            name=row['role_name'],
            description=row['role_description'],
            is_default=row['role_is_default'],
            created_at=row['role_created_at'],
            updated_at=row['role_updated_at']
        )
        return grant
    
    async def get(self, role_id: int, permission_id: int) -> Optional[RolePermission]:
        """Get a single grant."""
        try:
            query = f"""
                SELECT {_GRANT_COLUMNS}
                FROM {self.schema}.role_permissions rp
                WHERE rp.role_id = $1 AND rp.permission_id = $2
            """
            row = await self.db.fetchrow(query, role_id, permission_id)
            return self._build_grant_from_row(row) if row else None
            
        except Exception as e:
            logger.error(f"Failed to get grant role={role_id} permission={permission_id}: {e}")
            raise DatabaseError(f"Failed to retrieve role permission: {e}")
    
    async def list_by_role(self, role_id: int) -> List[RolePermission]:
        """List a role's grants with their permissions."""
        try:
            query = f"""
                SELECT {_GRANT_COLUMNS},
                       p.code AS permission_code,
                       p.description AS permission_description,
                       p.created_at AS permission_created_at,
                       p.updated_at AS permission_updated_at
                FROM {self.schema}.role_permissions rp
                JOIN {self.schema}.permissions p ON p.id = rp.permission_id
                WHERE rp.role_id = $1
                ORDER BY p.code
            """
            rows = await self.db.fetch(query, role_id)
            return [self._build_grant_with_permission(row) for row in rows]
            
        except Exception as e:
            logger.error(f"Failed to list grants for role {role_id}: {e}")
            raise DatabaseError(f"Failed to list role permissions: {e}")
    
    async def list_by_role_and_granter(
        self,
        role_id: int,
        granted_by: Optional[str]
    ) -> List[RolePermission]:
        """List a role's grants made by one granter, or the unattributed ones for None."""
        try:
            query = f"""
                SELECT {_GRANT_COLUMNS},
                       p.code AS permission_code,
                       p.description AS permission_description,
                       p.created_at AS permission_created_at,
                       p.updated_at AS permission_updated_at
                FROM {self.schema}.role_permissions rp
                JOIN {self.schema}.permissions p ON p.id = rp.permission_id
                WHERE rp.role_id = $1 AND rp.granted_by IS NOT DISTINCT FROM $2::text
                ORDER BY p.code
            """
            rows = await self.db.fetch(query, role_id, granted_by)
            return [self._build_grant_with_permission(row) for row in rows]
            
        except Exception as e:
            logger.error(f"Failed to list grants for role {role_id} by {granted_by}: {e}")
            raise DatabaseError(f"Failed to list role permissions: {e}")
    
    async def list_by_permission(self, permission_id: int) -> List[RolePermission]:
        """List a permission's grants with their roles."""
        try:
            query = f"""
                SELECT {_GRANT_COLUMNS},
                       r.name AS role_name,
                       r.description AS role_description,
                       r.is_default AS role_is_default,
                       r.created_at AS role_created_at,
                       r.updated_at AS role_updated_at
                FROM {self.schema}.role_permissions rp
                JOIN {self.schema}.roles r ON r.id = rp.role_id
                WHERE rp.permission_id = $1
                ORDER BY r.name
            """
            rows = await self.db.fetch(query, permission_id)
            return [self._build_grant_with_role(row) for row in rows]
            
        except Exception as e:
            logger.error(f"Failed to list grants for permission {permission_id}: {e}")
            raise DatabaseError(f"Failed to list role permissions: {e}")
    
    async def create(
        self,
        role_id: int,
        permission_id: int,
        granted_by: Optional[str] = None
    ) -> RolePermission:
        """Insert one grant."""
        try:
            query = f"""
                INSERT INTO {self.schema}.role_permissions AS rp (role_id, permission_id, granted_by)
                VALUES ($1, $2, $3)
                RETURNING {_GRANT_COLUMNS}
            """
            row = await self.db.fetchrow(query, role_id, permission_id, granted_by)
            return self._build_grant_from_row(row)
            
        except asyncpg.UniqueViolationError:
            raise ConflictError(
                "Permission already assigned to this role",
                conflicting_field="permission_id",
                conflicting_value=permission_id
            )
        except asyncpg.ForeignKeyViolationError:
            raise NotFoundError("Role or permission not found")
        except Exception as e:
            logger.error(f"Failed to grant permission {permission_id} to role {role_id}: {e}")
            raise DatabaseError(f"Failed to assign permission: {e}")
    
    async def create_many(
        self,
        role_id: int,
        permission_ids: List[int],
        granted_by: Optional[str] = None
    ) -> List[RolePermission]:
        """Insert one grant per permission ID in a single statement."""
        if not permission_ids:
            return []
        
        try:
            query = f"""
                INSERT INTO {self.schema}.role_permissions AS rp (role_id, permission_id, granted_by)
                SELECT $1, permission_id, $3
                FROM unnest($2::int[]) AS permission_id
                RETURNING {_GRANT_COLUMNS}
            """
            rows = await self.db.fetch(query, role_id, list(permission_ids), granted_by)
            return [self._build_grant_from_row(row) for row in rows]
            
        except asyncpg.UniqueViolationError:
            raise ConflictError("Permission already assigned to this role")
        except asyncpg.ForeignKeyViolationError:
            raise NotFoundError("Role or permission not found")
        except Exception as e:
            logger.error(f"Failed to grant permissions to role {role_id}: {e}")
            raise DatabaseError(f"Failed to assign permissions: {e}")
    
    async def delete(self, role_id: int, permission_id: int) -> bool:
        """Delete one grant."""
        try:
            status = await self.db.execute(
                f"DELETE FROM {self.schema}.role_permissions WHERE role_id = $1 AND permission_id = $2",
                role_id, permission_id
            )
            return affected_rows(status) > 0
            
        except Exception as e:
            logger.error(f"Failed to revoke permission {permission_id} from role {role_id}: {e}")
            raise DatabaseError(f"Failed to remove permission: {e}")
    
    async def delete_many(self, role_id: int, permission_ids: List[int]) -> int:
        """Delete the role's grants for the given permission IDs."""
        if not permission_ids:
            return 0
        
        try:
            status = await self.db.execute(
                f"""
                DELETE FROM {self.schema}.role_permissions
                WHERE role_id = $1 AND permission_id = ANY($2::int[])
                """,
                role_id, list(permission_ids)
            )
            return affected_rows(status)
            
        except Exception as e:
            logger.error(f"Failed to revoke permissions from role {role_id}: {e}")
            raise DatabaseError(f"Failed to remove permissions: {e}")
    
    async def delete_by_role(self, role_id: int) -> int:
        """Delete every grant of a role."""
        try:
            status = await self.db.execute(
                f"DELETE FROM {self.schema}.role_permissions WHERE role_id = $1",
                role_id
            )
            return affected_rows(status)
            
        except Exception as e:
            logger.error(f"Failed to clear grants of role {role_id}: {e}")
            raise DatabaseError(f"Failed to remove role permissions: {e}")
