"""
Base strategy interface for driver-specific behavior.

The SQL emitted by commands is fixed to one dialect; strategies only cover
what differs between the drivers that execute it: how to build the
connection URL, how to toggle auto-commit on the raw DB-API connection, and
which placeholder marker the driver expects.
"""
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

import sqlalchemy as sa
from sqlcommand.sql import standardize_placeholders

if TYPE_CHECKING:
    from sqlcommand.options import DatabaseOptions

# Registry of dialect name -> strategy class
_STRATEGY_REGISTRY: dict[str, type['DatabaseStrategy']] = {}


def register_strategy(dialect: str):
    """Decorator to register a strategy class for a dialect.

    Usage:
        @register_strategy('mysql')
        class MySQLStrategy(DatabaseStrategy):
            ...
    """
    def decorator(cls: type['DatabaseStrategy']) -> type['DatabaseStrategy']:
        _STRATEGY_REGISTRY[dialect] = cls
        return cls
    return decorator


class DatabaseStrategy(ABC):
    """Driver hooks used by the connection facade.

    Instances are shared per dialect and must not keep per-connection state.
    """

    @property
    @abstractmethod
    def dialect_name(self) -> str:
        """Return the dialect identifier (e.g., 'mysql', 'sqlite')."""

    @abstractmethod
    def build_connection_url(self, options: 'DatabaseOptions') -> sa.URL:
        """Build the SQLAlchemy connection URL for this dialect.

        Args:
            options: DatabaseOptions containing connection parameters
        """

    @abstractmethod
    def get_engine_kwargs(self, options: 'DatabaseOptions') -> dict[str, Any]:
        """Return SQLAlchemy create_engine kwargs for this dialect."""

    @abstractmethod
    def configure_connection(self, raw_conn: Any) -> None:
        """Apply session settings to a freshly opened raw connection."""

    @abstractmethod
    def enable_autocommit(self, raw_conn: Any) -> None:
        """Commit after every statement on the driver connection."""

    @abstractmethod
    def disable_autocommit(self, raw_conn: Any) -> None:
        """Hold statements in a transaction until commit or rollback."""

    @abstractmethod
    def get_autocommit(self, raw_conn: Any) -> bool:
        """Return whether the raw connection is in auto-commit mode."""

    @classmethod
    @abstractmethod
    def get_required_options(cls) -> list[str]:
        """Return list of required option field names for this dialect."""

    @classmethod
    def validate_options(cls, options: 'DatabaseOptions') -> None:
        """Validate options for this dialect.

        Raises
            ValueError: If any required field is None or 0
        """
        for field in cls.get_required_options():
            if not getattr(options, field):
                raise ValueError(f'field {field} cannot be None or 0')

    def get_placeholder_style(self) -> str:
        """Return the placeholder marker the driver expects.
        """
        return '?'

    def standardize_sql(self, sql: str) -> str:
        """Convert `?` markers to this driver's placeholder style.
        """
        return standardize_placeholders(sql, self.get_placeholder_style())
