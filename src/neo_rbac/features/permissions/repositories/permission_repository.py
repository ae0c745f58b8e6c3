"""AsyncPG-based permission repository implementation.

Concrete implementation of the PermissionRepository protocol. Queries run
through the DatabaseManager so they join any transaction opened by the
calling service.
"""

from typing import List, Optional, Dict, Any, Tuple
import asyncpg
import logging

from ....database import DatabaseManager, affected_rows, contains_pattern
from ....exceptions import ConflictError, DatabaseError
from ..entities import Permission


logger = logging.getLogger(__name__)

_PERMISSION_COLUMNS = "id, code, description, created_at, updated_at"
_UPDATABLE_FIELDS = ("code", "description")


class AsyncPGPermissionRepository:
    """AsyncPG implementation of PermissionRepository protocol."""
    
    def __init__(self, db: DatabaseManager, schema: str = "public"):
        self.db = db
        self.schema = schema
    
    @staticmethod
    def _build_permission_from_row(row: asyncpg.Record) -> Permission:
        """Build Permission entity from database row."""
        return Permission(
            id=row['id'],
            code=row['code'],
            description=row['description'],
            created_at=row['created_at'],
            updated_at=row['updated_at']
        )
    
    async def get_by_id(self, permission_id: int) -> Optional[Permission]:
        """Get permission by ID."""
        try:
            query = f"""
                SELECT {_PERMISSION_COLUMNS}
                FROM {self.schema}.permissions
                WHERE id = $1
            """
            row = await self.db.fetchrow(query, permission_id)
            return self._build_permission_from_row(row) if row else None
            
        except Exception as e:
            logger.error(f"Failed to get permission by id {permission_id}: {e}")
            raise DatabaseError(f"Failed to retrieve permission: {e}")
    
    async def get_by_code(self, code: str) -> Optional[Permission]:
        """Get permission by code."""
        try:
            query = f"""
                SELECT {_PERMISSION_COLUMNS}
                FROM {self.schema}.permissions
                WHERE code = $1
            """
            row = await self.db.fetchrow(query, code)
            return self._build_permission_from_row(row) if row else None
            
        except Exception as e:
            logger.error(f"Failed to get permission by code {code}: {e}")
            raise DatabaseError(f"Failed to retrieve permission: {e}")
    
    async def get_by_ids(self, permission_ids: List[int]) -> List[Permission]:
        """Get the permissions among the given IDs that exist."""
        if not permission_ids:
            return []
        
        try:
            query = f"""
                SELECT {_PERMISSION_COLUMNS}
                FROM {self.schema}.permissions
                WHERE id = ANY($1::int[])
                ORDER BY code
            """
            rows = await self.db.fetch(query, list(permission_ids))
            return [self._build_permission_from_row(row) for row in rows]
            
        except Exception as e:
            logger.error(f"Failed to get permissions by ids: {e}")
            raise DatabaseError(f"Failed to retrieve permissions: {e}")
    
    async def list(
        self,
        code_filter: Optional[str] = None,
        offset: int = 0,
        limit: int = 1000
    ) -> Tuple[List[Permission], int]:
        """List permissions ordered by code with an optional case-insensitive filter."""
        try:
            conditions = []
            params: List[Any] = []
            
            if code_filter:
                params.append(contains_pattern(code_filter))
                conditions.append(f"code ILIKE ${len(params)} ESCAPE '\\'")
            
            where_clause = "WHERE " + " AND ".join(conditions) if conditions else ""
            
            total = await self.db.fetchval(
                f"SELECT COUNT(*) FROM {self.schema}.permissions {where_clause}",
                *params
            )
            
            query = f"""
                SELECT {_PERMISSION_COLUMNS}
                FROM {self.schema}.permissions
                {where_clause}
                ORDER BY code ASC
                LIMIT ${len(params) + 1} OFFSET ${len(params) + 2}
            """
            rows = await self.db.fetch(query, *params, limit, offset)
            return [self._build_permission_from_row(row) for row in rows], total
            
        except Exception as e:
            logger.error(f"Failed to list permissions: {e}")
            raise DatabaseError(f"Failed to list permissions: {e}")
    
    async def create(self, code: str, description: Optional[str] = None) -> Permission:
        """Insert a permission."""
        try:
            query = f"""
                INSERT INTO {self.schema}.permissions (code, description)
                VALUES ($1, $2)
                RETURNING {_PERMISSION_COLUMNS}
            """
            row = await self.db.fetchrow(query, code, description)
            return self._build_permission_from_row(row)
            
        except asyncpg.UniqueViolationError:
            raise ConflictError(
                "Permission code already exists",
                conflicting_field="code",
                conflicting_value=code
            )
        except Exception as e:
            logger.error(f"Failed to create permission {code}: {e}")
            raise DatabaseError(f"Failed to create permission: {e}")
    
    async def update(self, permission_id: int, updates: Dict[str, Any]) -> Optional[Permission]:
        """Apply a partial update to a permission."""
        fields = {k: v for k, v in updates.items() if k in _UPDATABLE_FIELDS}
        if not fields:
            return await self.get_by_id(permission_id)
        
        try:
            assignments = [f"{name} = ${i}" for i, name in enumerate(fields, start=2)]
            assignments.append("updated_at = NOW()")
            
            query = f"""
                UPDATE {self.schema}.permissions
                SET {", ".join(assignments)}
                WHERE id = $1
                RETURNING {_PERMISSION_COLUMNS}
            """
            row = await self.db.fetchrow(query, permission_id, *fields.values())
            return self._build_permission_from_row(row) if row else None
            
        except asyncpg.UniqueViolationError:
            raise ConflictError(
                "Permission code already exists",
                conflicting_field="code",
                conflicting_value=fields.get("code")
            )
        except Exception as e:
            logger.error(f"Failed to update permission {permission_id}: {e}")
            raise DatabaseError(f"Failed to update permission: {e}")
    
    async def delete(self, permission_id: int) -> bool:
        """Delete a permission; its grants go with it."""
        try:
            status = await self.db.execute(
                f"DELETE FROM {self.schema}.permissions WHERE id = $1",
                permission_id
            )
            return affected_rows(status) > 0
            
        except Exception as e:
            logger.error(f"Failed to delete permission {permission_id}: {e}")
            raise DatabaseError(f"Failed to delete permission: {e}")
