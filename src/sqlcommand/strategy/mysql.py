"""
MySQL strategy backed by PyMySQL.

PyMySQL uses the `format` paramstyle, so `?` markers are rewritten to `%s`
before execution. Auto-commit is toggled through the connection's
`autocommit()` method and is on by default for new connections.
"""
import logging
from typing import TYPE_CHECKING, Any

import sqlalchemy as sa
from sqlcommand.strategy.base import DatabaseStrategy, register_strategy

if TYPE_CHECKING:
    from sqlcommand.options import DatabaseOptions

logger = logging.getLogger(__name__)


@register_strategy('mysql')
class MySQLStrategy(DatabaseStrategy):
    """PyMySQL connection handling."""

    @property
    def dialect_name(self) -> str:
        """Return the dialect identifier for MySQL."""
        return 'mysql'

    def build_connection_url(self, options: 'DatabaseOptions') -> sa.URL:
        """Build the SQLAlchemy connection URL for MySQL via PyMySQL."""
        query = {}
        if options.charset:
            query['charset'] = options.charset
        return sa.URL.create(
            drivername='mysql+pymysql',
            username=options.username,
            password=options.password,
            host=options.hostname,
            port=options.port or None,
            database=options.database,
            query=query,
        )

    def get_engine_kwargs(self, options: 'DatabaseOptions') -> dict[str, Any]:
        """Return SQLAlchemy create_engine kwargs for MySQL."""
        connect_args: dict[str, Any] = {'program_name': options.appname}
        if options.timeout:
            connect_args['connect_timeout'] = options.timeout
        return {'connect_args': connect_args}

    def configure_connection(self, raw_conn: Any) -> None:
        """New MySQL connections start in auto-commit mode.
        """
        self.enable_autocommit(raw_conn)
        logger.debug('Configured MySQL connection with auto-commit')

    def enable_autocommit(self, raw_conn: Any) -> None:
        """PyMySQL commits after every statement."""
        raw_conn.autocommit(True)

    def disable_autocommit(self, raw_conn: Any) -> None:
        """Statements stay in the open transaction until commit."""
        raw_conn.autocommit(False)

    def get_autocommit(self, raw_conn: Any) -> bool:
        return bool(raw_conn.get_autocommit())

    @classmethod
    def get_required_options(cls) -> list[str]:
        """Return required options for MySQL connections."""
        return ['hostname', 'username', 'database']

    def get_placeholder_style(self) -> str:
        """Return PyMySQL's placeholder marker.
        """
        return '%s'
