"""
Database Adapter Factory

Picks the adapter matching the scheme of the configured DATABASE_URL.
"""

from shortlink.db.interface import DatabaseAdapter
from shortlink.db.postgres_adapter import PostgreSQLAdapter
from shortlink.db.sqlite_adapter import SQLiteAdapter


def get_database_adapter(database_url: str) -> DatabaseAdapter:
    """
    Return the adapter for a database URL.

    Args:
        database_url: SQLAlchemy connection string

    Returns:
        DatabaseAdapter instance

    Raises:
        ValueError: If the URL names an unsupported backend
    """
    scheme = database_url.split("://", 1)[0].split("+", 1)[0].lower()
    if scheme == "sqlite":
        return SQLiteAdapter()
    if scheme in ("postgresql", "postgres"):
        return PostgreSQLAdapter()
    raise ValueError(f"Unsupported database backend: {scheme}")
