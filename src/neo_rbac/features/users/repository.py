"""AsyncPG-based user repository."""

from typing import Optional
import asyncpg
import logging

from ...database import DatabaseManager, affected_rows
from ...exceptions import DatabaseError
from .entities import User


logger = logging.getLogger(__name__)

_USER_COLUMNS = "id, username, email, full_name, is_active, created_at, updated_at"


class AsyncPGUserRepository:
    """User lookups and deletion over the ``users`` table."""
    
    def __init__(self, db: DatabaseManager, schema: str = "public"):
        self.db = db
        self.schema = schema
    
    @staticmethod
    def _build_user_from_row(row: asyncpg.Record) -> User:
        return User(
            id=row['id'],
            username=row['username'],
            email=row['email'],
            full_name=row['full_name'],
            is_active=row['is_active'],
            created_at=row['created_at'],
            updated_at=row['updated_at']
        )
    
    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID."""
        try:
            row = await self.db.fetchrow(
                f"SELECT {_USER_COLUMNS} FROM {self.schema}.users WHERE id = $1",
                user_id
            )
            return self._build_user_from_row(row) if row else None
            
        except Exception as e:
            logger.error(f"Failed to get user {user_id}: {e}")
            raise DatabaseError(f"Failed to retrieve user: {e}")
    
    async def delete(self, user_id: str) -> bool:
        """Hard delete a user."""
        try:
            status = await self.db.execute(
                f"DELETE FROM {self.schema}.users WHERE id = $1",
                user_id
            )
            return affected_rows(status) > 0
            
        except Exception as e:
            logger.error(f"Failed to delete user {user_id}: {e}")
            raise DatabaseError(f"Failed to delete user: {e}")
