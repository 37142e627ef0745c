"""
Storage Backend Contract

Every supported database (SQLite for development and tests, PostgreSQL for
shared deployments) is wrapped in an adapter. The adapter owns engine
construction and the handful of SQL expressions that are spelled differently
per dialect, so that services and analytics queries stay backend-agnostic.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.pool import Pool
from sqlalchemy.sql.elements import ColumnElement


class DatabaseAdapter(ABC):
    """
    Base class for storage backends.

    Subclasses build the async engine for their URL scheme and provide the
    dialect-specific expressions the analytics queries need. New backends
    are picked up by adding a scheme branch to get_database_adapter().
    """

    @abstractmethod
    def create_engine(self, database_url: str, **kwargs) -> AsyncEngine:
        """
        Build the async engine for this backend.

        Args:
            database_url: SQLAlchemy URL including the async driver
            **kwargs: Overrides for the backend's default engine options

        Returns:
            AsyncEngine bound to the given database
        """
        pass

    @abstractmethod
    def get_pool_class(self) -> Optional[type[Pool]]:
        """Pool implementation to use, or None for SQLAlchemy's default."""
        pass

    @abstractmethod
    def get_connect_args(self) -> dict[str, Any]:
        """Driver-level arguments passed through to the DBAPI connect call."""
        pass

    @abstractmethod
    def get_engine_kwargs(self) -> dict[str, Any]:
        """Default keyword arguments for create_async_engine."""
        pass

    @abstractmethod
    def day_bucket(self, column: Any) -> ColumnElement:
        """
        Expression reducing a timestamp column to its calendar day.

        Must evaluate to a 'YYYY-MM-DD' string on every backend so that
        the visits-over-time series has the same labels everywhere.
        """
        pass

    @abstractmethod
    def get_dialect_name(self) -> str:
        """SQLAlchemy dialect name, e.g. 'sqlite' or 'postgresql'."""
        pass
