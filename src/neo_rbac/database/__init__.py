"""Database access layer."""
from .connection import DatabaseManager, affected_rows, contains_pattern
from .schema import create_schema, schema_statements

__all__ = [
    "DatabaseManager",
    "affected_rows",
    "contains_pattern",
    "create_schema",
    "schema_statements",
]
