"""
Database connection management using asyncpg.

Repositories never hold connections themselves. They go through the
manager, which hands out the connection of the ambient transaction when
one is open in the current task, so several repository calls made inside
``transaction()`` commit or roll back together.
"""
import os
from contextvars import ContextVar
from typing import Optional, Any, List
from contextlib import asynccontextmanager
import asyncpg
from asyncpg import Pool, Connection, Record
import logging

logger = logging.getLogger(__name__)

# Connection bound to the transaction open in the current task, if any
_current_connection: ContextVar[Optional[Connection]] = ContextVar(
    "neo_rbac_current_connection", default=None
)


class DatabaseManager:
    """Manages the connection pool and task-scoped transactions."""
    
    def __init__(self, database_url: Optional[str] = None, **pool_config):
        """Initialize DatabaseManager.
        
        Args:
            database_url: Database URL (defaults to DATABASE_URL env var)
            **pool_config: Additional pool configuration options
        """
        self.pool: Optional[Pool] = None
        self.dsn = database_url or os.getenv("DATABASE_URL", "")
        if "+asyncpg" in self.dsn:
            self.dsn = self.dsn.replace("+asyncpg", "")
        
        self.pool_config = {
            "min_size": 5,
            "max_size": 20,
            "max_inactive_connection_lifetime": 300,
            "command_timeout": 60,
            **pool_config
        }
        
    async def create_pool(self) -> Pool:
        """Create and return a connection pool."""
        if self.pool is None:
            logger.info(f"Creating database pool with size {self.pool_config['max_size']}")
            
            server_settings = {
                'application_name': os.getenv("APP_NAME", "neo-rbac"),
            }
            
            self.pool = await asyncpg.create_pool(
                self.dsn,
                server_settings=server_settings,
                **self.pool_config
            )
            logger.info("Database pool created successfully")
        return self.pool
    
    async def close_pool(self):
        """Close the connection pool."""
        if self.pool:
            await self.pool.close()
            self.pool = None
            logger.info("Database pool closed")
    
    @asynccontextmanager
    async def acquire(self):
        """Acquire a connection, reusing the ambient transaction's one."""
        current = _current_connection.get()
        if current is not None:
            yield current
            return
        
        if not self.pool:
            await self.create_pool()
        
        async with self.pool.acquire() as connection:
            yield connection
    
    @asynccontextmanager
    async def transaction(self):
        """Open a transaction shared by every repository call in this task.
        
        Nested calls become savepoints on the same connection.
        """
        current = _current_connection.get()
        if current is not None:
            async with current.transaction():
                yield current
            return
        
        if not self.pool:
            await self.create_pool()
        
        async with self.pool.acquire() as connection:
            token = _current_connection.set(connection)
            try:
                async with connection.transaction():
                    yield connection
            finally:
                _current_connection.reset(token)
    
    async def execute(self, query: str, *args, timeout: float = None) -> str:
        """Execute a query without returning results."""
        async with self.acquire() as connection:
            return await connection.execute(query, *args, timeout=timeout)
    
    async def fetch(self, query: str, *args, timeout: float = None) -> List[Record]:
        """Fetch multiple rows."""
        async with self.acquire() as connection:
            return await connection.fetch(query, *args, timeout=timeout)
    
    async def fetchrow(self, query: str, *args, timeout: float = None) -> Optional[Record]:
        """Fetch a single row."""
        async with self.acquire() as connection:
            return await connection.fetchrow(query, *args, timeout=timeout)
    
    async def fetchval(self, query: str, *args, column: int = 0, timeout: float = None) -> Any:
        """Fetch a single value."""
        async with self.acquire() as connection:
            return await connection.fetchval(query, *args, column=column, timeout=timeout)
    
    async def health_check(self) -> bool:
        """Check database health."""
        try:
            async with self.acquire() as connection:
                result = await connection.fetchval("SELECT 1")
                return result == 1
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return False


def affected_rows(status: str) -> int:
    """Parse the row count out of an asyncpg command status like 'DELETE 3'."""
    try:
        return int(status.split()[-1])
    except (AttributeError, IndexError, ValueError):
        return 0


def contains_pattern(text: str) -> str:
    """ILIKE pattern matching ``text`` anywhere, with LIKE wildcards escaped.
    
    Use together with ``ESCAPE '\\'`` in the query.
    """
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"
