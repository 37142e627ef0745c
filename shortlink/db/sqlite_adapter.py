"""
SQLite Backend

Default backend for local development, tests and single-instance installs.
The whole database lives in one file accessed through aiosqlite.

Writes are serialized by SQLite's file lock. When two requests insert the
same short code, the second insert blocks until the first commits and then
fails on the unique index of short_links.code, which the registry reports
as a taken code.
"""

from typing import Any

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool
from sqlalchemy.sql.elements import ColumnElement

from shortlink.db.interface import DatabaseAdapter


class SQLiteAdapter(DatabaseAdapter):
    """Adapter for sqlite+aiosqlite:// URLs."""

    def create_engine(self, database_url: str, **kwargs) -> AsyncEngine:
        """
        Build an aiosqlite engine.

        Every session gets its own connection (NullPool), and the driver's
        same-thread check is disabled because aiosqlite runs the connection
        in a worker thread.
        """
        options = {**self.get_engine_kwargs(), **kwargs}
        return create_async_engine(
            database_url,
            poolclass=self.get_pool_class(),
            connect_args=self.get_connect_args(),
            **options
        )

    def get_pool_class(self) -> type[NullPool]:
        return NullPool

    def get_connect_args(self) -> dict[str, Any]:
        return {"check_same_thread": False}

    def get_engine_kwargs(self) -> dict[str, Any]:
        return {"echo": False}

    def day_bucket(self, column: Any) -> ColumnElement:
        # Timestamps are stored as 'YYYY-MM-DD HH:MM:SS[.ffffff]' text
        return func.date(column)

    def get_dialect_name(self) -> str:
        return "sqlite"
