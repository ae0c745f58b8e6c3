"""
Idempotent DDL bootstrap for the RBAC tables.

Run at startup when ``AUTO_CREATE_SCHEMA`` is enabled. Every statement is
``IF NOT EXISTS`` so repeated runs are harmless.
"""
import logging
from typing import List

from .connection import DatabaseManager

logger = logging.getLogger(__name__)


def schema_statements(schema: str = "public") -> List[str]:
    """Return the DDL statements for the given schema."""
    return [
        f"CREATE SCHEMA IF NOT EXISTS {schema}",
        f"""
        CREATE TABLE IF NOT EXISTS {schema}.users (
            id TEXT PRIMARY KEY,
            username VARCHAR(64) NOT NULL UNIQUE,
            email VARCHAR(128) UNIQUE,
            full_name VARCHAR(128),
            is_active BOOLEAN NOT NULL DEFAULT TRUE,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
        """,
        f"""
        CREATE TABLE IF NOT EXISTS {schema}.permissions (
            id SERIAL PRIMARY KEY,
            code VARCHAR(128) NOT NULL UNIQUE,
            description TEXT,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
        """,
        f"""
        CREATE TABLE IF NOT EXISTS {schema}.roles (
            id SERIAL PRIMARY KEY,
            name VARCHAR(64) NOT NULL UNIQUE,
            description TEXT,
            is_default BOOLEAN NOT NULL DEFAULT FALSE,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
        """,
        # granted_by / assigned_by are audit values, not foreign keys
        f"""
        CREATE TABLE IF NOT EXISTS {schema}.role_permissions (
            role_id INTEGER NOT NULL REFERENCES {schema}.roles(id) ON DELETE CASCADE,
            permission_id INTEGER NOT NULL REFERENCES {schema}.permissions(id) ON DELETE CASCADE,
            granted_by TEXT,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            PRIMARY KEY (role_id, permission_id)
        )
        """,
        f"""
        CREATE TABLE IF NOT EXISTS {schema}.user_roles (
            user_id TEXT NOT NULL REFERENCES {schema}.users(id) ON DELETE CASCADE,
            role_id INTEGER NOT NULL REFERENCES {schema}.roles(id) ON DELETE CASCADE,
            assigned_by TEXT,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            PRIMARY KEY (user_id, role_id)
        )
        """,
        f"CREATE INDEX IF NOT EXISTS idx_role_permissions_permission ON {schema}.role_permissions (permission_id)",
        f"CREATE INDEX IF NOT EXISTS idx_user_roles_role ON {schema}.user_roles (role_id)",
    ]


async def create_schema(db: DatabaseManager, schema: str = "public") -> None:
    """Create the RBAC tables if they do not exist."""
    logger.info(f"Ensuring RBAC schema '{schema}' exists")
    async with db.transaction() as connection:
        for statement in schema_statements(schema):
            await connection.execute(statement)
    logger.info(f"RBAC schema '{schema}' ready")
