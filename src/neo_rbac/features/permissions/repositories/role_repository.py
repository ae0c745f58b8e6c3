"""AsyncPG-based role repository implementation."""

from typing import List, Optional, Dict, Any, Tuple
import asyncpg
import logging

from ....database import DatabaseManager, affected_rows, contains_pattern
from ....exceptions import ConflictError, DatabaseError
from ..entities import Role


logger = logging.getLogger(__name__)

_ROLE_COLUMNS = "id, name, description, is_default, created_at, updated_at"
_UPDATABLE_FIELDS = ("name", "description", "is_default")


class AsyncPGRoleRepository:
    """AsyncPG implementation of RoleRepository protocol."""
    
    def __init__(self, db: DatabaseManager, schema: str = "public"):
        self.db = db
        self.schema = schema
    
    @staticmethod
    def _build_role_from_row(row: asyncpg.Record) -> Role:
        """Build Role entity from database row."""
        return Role(
            id=row['id'],
            name=row['name'],
            description=row['description'],
            is_default=row['is_default'],
            created_at=row['created_at'],
            updated_at=row['updated_at']
        )
    
    async def get_by_id(self, role_id: int) -> Optional[Role]:
        """Get role by ID."""
        try:
            query = f"""
                SELECT {_ROLE_COLUMNS}
                FROM {self.schema}.roles
                WHERE id = $1
            """
            row = await self.db.fetchrow(query, role_id)
            return self._build_role_from_row(row) if row else None
            
        except Exception as e:
            logger.error(f"Failed to get role by id {role_id}: {e}")
            raise DatabaseError(f"Failed to retrieve role: {e}")
    
    async def get_by_name(self, name: str) -> Optional[Role]:
        """Get role by name."""
        try:
            query = f"""
                SELECT {_ROLE_COLUMNS}
                FROM {self.schema}.roles
                WHERE name = $1
            """
            row = await self.db.fetchrow(query, name)
            return self._build_role_from_row(row) if row else None
            
        except Exception as e:
            logger.error(f"Failed to get role by name {name}: {e}")
            raise DatabaseError(f"Failed to retrieve role: {e}")
    
    async def get_by_ids(self, role_ids: List[int]) -> List[Role]:
        """Get the roles among the given IDs that exist."""
        if not role_ids:
            return []
        
        try:
            query = f"""
                SELECT {_ROLE_COLUMNS}
                FROM {self.schema}.roles
                WHERE id = ANY($1::int[])
                ORDER BY name
            """
            rows = await self.db.fetch(query, list(role_ids))
            return [self._build_role_from_row(row) for row in rows]
            
        except Exception as e:
            logger.error(f"Failed to get roles by ids: {e}")
            raise DatabaseError(f"Failed to retrieve roles: {e}")
    
    async def list(
        self,
        name_filter: Optional[str] = None,
        is_default: Optional[bool] = None,
        offset: int = 0,
        limit: int = 20
    ) -> Tuple[List[Role], int]:
        """List roles newest first with optional filters."""
        try:
            conditions = []
            params: List[Any] = []
            
            if name_filter:
                params.append(contains_pattern(name_filter))
                conditions.append(f"name ILIKE ${len(params)} ESCAPE '\\'")
            
            if is_default is not None:
                params.append(is_default)
                conditions.append(f"is_default = ${len(params)}")
            
            where_clause = "WHERE " + " AND ".join(conditions) if conditions else ""
            
            total = await self.db.fetchval(
                f"SELECT COUNT(*) FROM {self.schema}.roles {where_clause}",
                *params
            )
            
            query = f"""
                SELECT {_ROLE_COLUMNS}
                FROM {self.schema}.roles
                {where_clause}
                ORDER BY created_at DESC, id DESC
                LIMIT ${len(params) + 1} OFFSET ${len(params) + 2}
            """
            rows = await self.db.fetch(query, *params, limit, offset)
            return [self._build_role_from_row(row) for row in rows], total
            
        except Exception as e:
            logger.error(f"Failed to list roles: {e}")
            raise DatabaseError(f"Failed to list roles: {e}")
    
    async def list_defaults(self) -> List[Role]:
        """List all roles flagged as default."""
        try:
            query = f"""
                SELECT {_ROLE_COLUMNS}
                FROM {self.schema}.roles
                WHERE is_default = true
                ORDER BY name
            """
            rows = await self.db.fetch(query)
            return [self._build_role_from_row(row) for row in rows]
            
        except Exception as e:
            logger.error(f"Failed to list default roles: {e}")
            raise DatabaseError(f"Failed to list default roles: {e}")
    
    async def create(
        self,
        name: str,
        description: Optional[str] = None,
        is_default: bool = False
    ) -> Role:
        """Insert a role."""
        try:
            query = f"""
                INSERT INTO {self.schema}.roles (name, description, is_default)
                VALUES ($1, $2, $3)
                RETURNING {_ROLE_COLUMNS}
            """
            row = await self.db.fetchrow(query, name, description, is_default)
            return self._build_role_from_row(row)
            
        except asyncpg.UniqueViolationError:
            raise ConflictError(
                "Role name already exists",
                conflicting_field="name",
                conflicting_value=name
            )
        except Exception as e:
            logger.error(f"Failed to create role {name}: {e}")
            raise DatabaseError(f"Failed to create role: {e}")
    
    async def update(self, role_id: int, updates: Dict[str, Any]) -> Optional[Role]:
        """Apply a partial update to a role."""
        fields = {k: v for k, v in updates.items() if k in _UPDATABLE_FIELDS}
        if not fields:
            return await self.get_by_id(role_id)
        
        try:
            assignments = [f"{name} = ${i}" for i, name in enumerate(fields, start=2)]
            assignments.append("updated_at = NOW()")
            
            query = f"""
                UPDATE {self.schema}.roles
                SET {", ".join(assignments)}
                WHERE id = $1
                RETURNING {_ROLE_COLUMNS}
            """
            row = await self.db.fetchrow(query, role_id, *fields.values())
            return self._build_role_from_row(row) if row else None
            
        except asyncpg.UniqueViolationError:
            raise ConflictError(
                "Role name already exists",
                conflicting_field="name",
                conflicting_value=fields.get("name")
            )
        except Exception as e:
            logger.error(f"Failed to update role {role_id}: {e}")
            raise DatabaseError(f"Failed to update role: {e}")
    
    async def delete(self, role_id: int) -> bool:
        """Delete a role; grants and assignments go with it."""
        try:
            status = await self.db.execute(
                f"DELETE FROM {self.schema}.roles WHERE id = $1",
                role_id
            )
            return affected_rows(status) > 0
            
        except Exception as e:
            logger.error(f"Failed to delete role {role_id}: {e}")
            raise DatabaseError(f"Failed to delete role: {e}")
