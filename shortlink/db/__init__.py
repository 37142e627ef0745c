"""
Database module with abstraction layer.

This module provides:
- DatabaseAdapter interface: Abstract base class for database implementations
- SQLiteAdapter / PostgreSQLAdapter: backend-specific implementations
- Session management: Database session creation and management

To add a new database backend:
1. Create a new adapter class inheriting from DatabaseAdapter
2. Implement all abstract methods
3. Register it in get_database_adapter() in factory.py
"""

from shortlink.db.interface import DatabaseAdapter
from shortlink.db.session import (
    async_session_maker,
    create_tables,
    db_adapter,
    drop_tables,
    engine,
    get_session,
)

__all__ = [
    "DatabaseAdapter",
    "async_session_maker",
    "create_tables",
    "db_adapter",
    "drop_tables",
    "engine",
    "get_session",
]
