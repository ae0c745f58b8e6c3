"""AsyncPG-based assignment repository.

Stores the user -> role edges in ``user_roles`` and serves the single
join that resolves a user's effective permission codes.
"""

import asyncio
from typing import List, Optional
import asyncpg
import logging

from ....database import DatabaseManager, affected_rows
from ....exceptions import ConflictError, DatabaseError, NotFoundError
from ...users.entities import User
from ..entities import Role, UserRole


logger = logging.getLogger(__name__)

_ASSIGNMENT_COLUMNS = "ur.user_id, ur.role_id, ur.assigned_by, ur.created_at"


class AsyncPGUserRoleRepository:
    """AsyncPG implementation of UserRoleRepository protocol."""
    
    def __init__(self, db: DatabaseManager, schema: str = "public"):
        self.db = db
        self.schema = schema
    
    @staticmethod
    def _build_assignment_from_row(row: asyncpg.Record) -> UserRole:
        """Build UserRole entity from database row."""
        return UserRole(
            user_id=row['user_id'],
            role_id=row['role_id'],
            assigned_by=row['assigned_by'],
            created_at=row['created_at']
        )
    
    def _build_assignment_with_role(self, row: asyncpg.Record) -> UserRole:
        assignment = self._build_assignment_from_row(row)
        assignment.role = Role(
            id=row['role_id'],
            name=row['role_name'],
            description=row['role_description'],
            is_default=row['role_is_default'],
            created_at=row['role_created_at'],
            updated_at=row['role_updated_at']
        )
        return assignment
    
    def _build_assignment_with_user(self, row: asyncpg.Record) -> UserRole:
        assignment = self._build_assignment_from_row(row)
        assignment.user = User(
            id=row['user_id'],
            username=row['user_username'],
            email=row['user_email'],
            full_name=row['user_full_name'],
            is_active=row['user_is_active'],
            created_at=row['user_created_at'],
            updated_at=row['user_updated_at']
        )
        return assignment
    
    def _role_join_query(self, where_clause: str) -> str:
        return f"""
            SELECT {_ASSIGNMENT_COLUMNS},
                   r.name AS role_name,
                   r.description AS role_description,
                   r.is_default AS role_is_default,
                   r.created_at AS role_created_at,
                   r.updated_at AS role_updated_at
            FROM {self.schema}.user_roles ur
            JOIN {self.schema}.roles r ON r.id = ur.role_id
            WHERE {where_clause}
            ORDER BY r.name
        """
    
    async def get(self, user_id: str, role_id: int) -> Optional[UserRole]:
        """Get a single assignment."""
        try:
            query = f"""
                SELECT {_ASSIGNMENT_COLUMNS}
                FROM {self.schema}.user_roles ur
                WHERE ur.user_id = $1 AND ur.role_id = $2
            """
            row = await self.db.fetchrow(query, user_id, role_id)
            return self._build_assignment_from_row(row) if row else None
            
        except Exception as e:
            logger.error(f"Failed to get assignment user={user_id} role={role_id}: {e}")
            raise DatabaseError(f"Failed to retrieve user role: {e}")
    
    async def list_by_user(self, user_id: str) -> List[UserRole]:
        """List a user's assignments with their roles."""
        try:
            rows = await self.db.fetch(self._role_join_query("ur.user_id = $1"), user_id)
            return [self._build_assignment_with_role(row) for row in rows]
            
        except Exception as e:
            logger.error(f"Failed to list roles of user {user_id}: {e}")
            raise DatabaseError(f"Failed to list user roles: {e}")
    
    async def list_by_user_and_assigner(
        self,
        user_id: str,
        assigned_by: Optional[str]
    ) -> List[UserRole]:
        """List a user's assignments made by one assigner, or the unattributed ones for None."""
        try:
            query = self._role_join_query(
                "ur.user_id = $1 AND ur.assigned_by IS NOT DISTINCT FROM $2::text"
            )
            rows = await self.db.fetch(query, user_id, assigned_by)
            return [self._build_assignment_with_role(row) for row in rows]
            
        except Exception as e:
            logger.error(f"Failed to list roles of user {user_id} by {assigned_by}: {e}")
            raise DatabaseError(f"Failed to list user roles: {e}")
    
    async def list_by_role(self, role_id: int) -> List[UserRole]:
        """List a role's assignments with their users."""
        try:
            query = f"""
                SELECT {_ASSIGNMENT_COLUMNS},
                       u.username AS user_username,
                       u.email AS user_email,
                       u.full_name AS user_full_name,
                       u.is_active AS user_is_active,
                       u.created_at AS user_created_at,
                       u.updated_at AS user_updated_at
                FROM {self.schema}.user_roles ur
                JOIN {self.schema}.users u ON u.id = ur.user_id
                WHERE ur.role_id = $1
                ORDER BY u.username
            """
            rows = await self.db.fetch(query, role_id)
            return [self._build_assignment_with_user(row) for row in rows]
            
        except Exception as e:
            logger.error(f"Failed to list users of role {role_id}: {e}")
            raise DatabaseError(f"Failed to list role users: {e}")
    
    async def create(
        self,
        user_id: str,
        role_id: int,
        assigned_by: Optional[str] = None
    ) -> UserRole:
        """Insert one assignment."""
        try:
            query = f"""
                INSERT INTO {self.schema}.user_roles AS ur (user_id, role_id, assigned_by)
                VALUES ($1, $2, $3)
                RETURNING {_ASSIGNMENT_COLUMNS}
            """
            row = await self.db.fetchrow(query, user_id, role_id, assigned_by)
            return self._build_assignment_from_row(row)
            
        except asyncpg.UniqueViolationError:
            raise ConflictError(
                "Role already assigned to this user",
                conflicting_field="role_id",
                conflicting_value=role_id
            )
        except asyncpg.ForeignKeyViolationError:
            raise NotFoundError("User or role not found")
        except Exception as e:
            logger.error(f"Failed to assign role {role_id} to user {user_id}: {e}")
            raise DatabaseError(f"Failed to assign role: {e}")
    
    async def create_many(
        self,
        user_id: str,
        role_ids: List[int],
        assigned_by: Optional[str] = None
    ) -> List[UserRole]:
        """Insert one assignment per role ID in a single statement."""
        if not role_ids:
            return []
        
        try:
            query = f"""
                INSERT INTO {self.schema}.user_roles AS ur (user_id, role_id, assigned_by)
                SELECT $1, role_id, $3
                FROM unnest($2::int[]) AS role_id
                RETURNING {_ASSIGNMENT_COLUMNS}
            """
            rows = await self.db.fetch(query, user_id, list(role_ids), assigned_by)
            return [self._build_assignment_from_row(row) for row in rows]
            
        except asyncpg.UniqueViolationError:
            raise ConflictError("Role already assigned to this user")
        except asyncpg.ForeignKeyViolationError:
            raise NotFoundError("User or role not found")
        except Exception as e:
            logger.error(f"Failed to assign roles to user {user_id}: {e}")
            raise DatabaseError(f"Failed to assign roles: {e}")
    
    async def delete(self, user_id: str, role_id: int) -> bool:
        """Delete one assignment."""
        try:
            status = await self.db.execute(
                f"DELETE FROM {self.schema}.user_roles WHERE user_id = $1 AND role_id = $2",
                user_id, role_id
            )
            return affected_rows(status) > 0
            
        except Exception as e:
            logger.error(f"Failed to revoke role {role_id} from user {user_id}: {e}")
            raise DatabaseError(f"Failed to remove role: {e}")
    
    async def delete_many(self, user_id: str, role_ids: List[int]) -> int:
        """Delete the user's assignments for the given role IDs."""
        if not role_ids:
            return 0
        
        try:
            status = await self.db.execute(
                f"""
                DELETE FROM {self.schema}.user_roles
                WHERE user_id = $1 AND role_id = ANY($2::int[])
                """,
                user_id, list(role_ids)
            )
            return affected_rows(status)
            
        except Exception as e:
            logger.error(f"Failed to revoke roles from user {user_id}: {e}")
            raise DatabaseError(f"Failed to remove roles: {e}")
    
    async def delete_by_user(self, user_id: str) -> int:
        """Delete every assignment of a user."""
        try:
            status = await self.db.execute(
                f"DELETE FROM {self.schema}.user_roles WHERE user_id = $1",
                user_id
            )
            return affected_rows(status)
            
        except Exception as e:
            logger.error(f"Failed to clear roles of user {user_id}: {e}")
            raise DatabaseError(f"Failed to remove user roles: {e}")
    
    async def list_permission_codes(
        self,
        user_id: str,
        timeout: Optional[float] = None
    ) -> List[str]:
        """Resolve the distinct permission codes granted to a user through roles."""
        try:
            query = f"""
                SELECT DISTINCT p.code
                FROM {self.schema}.user_roles ur
                JOIN {self.schema}.role_permissions rp ON rp.role_id = ur.role_id
                JOIN {self.schema}.permissions p ON p.id = rp.permission_id
                WHERE ur.user_id = $1
                ORDER BY p.code
            """
            rows = await self.db.fetch(query, user_id, timeout=timeout)
            return [row['code'] for row in rows]
            
        except asyncio.TimeoutError:
            logger.error(f"Permission resolution for user {user_id} timed out after {timeout}s")
            raise DatabaseError("Permission resolution timed out")
        except Exception as e:
            logger.error(f"Failed to resolve permissions for user {user_id}: {e}")
            raise DatabaseError(f"Failed to resolve user permissions: {e}")
