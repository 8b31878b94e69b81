"""
SQLite strategy backed by the standard library `sqlite3` module.

SQLite accepts the emitted MySQL column definitions (`INT(11)`,
`VARCHAR(64)`, `NOT NULL`) but not `AUTO_INCREMENT`, `ENGINE=` or
`DEFAULT CHARACTER SET`. It is used for local work and tests.
"""
import logging
import sqlite3
from decimal import Decimal
from typing import TYPE_CHECKING, Any

import sqlalchemy as sa
from sqlcommand.strategy.base import DatabaseStrategy, register_strategy

if TYPE_CHECKING:
    from sqlcommand.options import DatabaseOptions

logger = logging.getLogger(__name__)


@register_strategy('sqlite')
class SQLiteStrategy(DatabaseStrategy):
    """Runs the MySQL statements on a local sqlite3 database."""

    @property
    def dialect_name(self) -> str:
        """Return the dialect identifier for SQLite."""
        return 'sqlite'

    def build_connection_url(self, options: 'DatabaseOptions') -> sa.URL:
        """Build the SQLAlchemy connection URL for SQLite."""
        return sa.URL.create(drivername='sqlite', database=options.database)

    def get_engine_kwargs(self, options: 'DatabaseOptions') -> dict[str, Any]:
        """Return SQLAlchemy create_engine kwargs for SQLite."""
        connect_args: dict[str, Any] = {
            'detect_types': sqlite3.PARSE_DECLTYPES | sqlite3.PARSE_COLNAMES
        }
        if options.timeout:
            connect_args['timeout'] = options.timeout
        return {'connect_args': connect_args}

    def configure_connection(self, raw_conn: Any) -> None:
        """Configure connection settings for SQLite.
        """
        raw_conn.execute('PRAGMA foreign_keys = ON')
        self.register_type_adapters()
        self.enable_autocommit(raw_conn)
        logger.debug('Configured SQLite connection with foreign keys and auto-commit')

    def register_type_adapters(self) -> None:
        """Register adapters for values sqlite3 cannot bind natively.
        """
        sqlite3.register_adapter(Decimal, str)

    def enable_autocommit(self, raw_conn: Any) -> None:
        """sqlite3 commits each statement when no isolation level is set."""
        raw_conn.isolation_level = None

    def disable_autocommit(self, raw_conn: Any) -> None:
        """Statements run inside an implicit DEFERRED transaction until commit."""
        raw_conn.isolation_level = 'DEFERRED'

    def get_autocommit(self, raw_conn: Any) -> bool:
        return raw_conn.isolation_level is None

    @classmethod
    def get_required_options(cls) -> list[str]:
        """Return required options for SQLite connections."""
        return ['database']
