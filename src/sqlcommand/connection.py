"""
Connection facade that executes commands.

This module provides:
1. The `connect()` function for opening a new connection
2. The `Connection` class that owns one driver connection and runs commands

SQLAlchemy is used only to build the engine and open the connection; commands
run on the raw DB-API connection underneath. Every entry point checks that
the connection is open and fails fast if it is not; there is no reconnect
and no retry.

    cn = connect(drivername='sqlite', database=':memory:')
    cn.execute_update(InsertRows('users', [RowData('id', 1)]))
    with cn.execute_query(SelectEntry('users', 'id', RowData('id', 1))) as rows:
        rows.fetchall()
"""
import datetime
import logging
from collections.abc import Callable, Iterable
from decimal import Decimal
from typing import Any, Self
from urllib.parse import ParseResult

import sqlalchemy as sa
from sqlalchemy.engine import Engine
from sqlalchemy.pool import NullPool
from sqlcommand.commands import CreateTable, DeleteRows, DropTable, InsertRows
from sqlcommand.commands import QueryCommand, SelectEntry, UpdateRows
from sqlcommand.commands import UpdatingCommand
from sqlcommand.cursor import RowCursor
from sqlcommand.exceptions import ConnectionFailure, DriverError, QueryError
from sqlcommand.exceptions import TransactionError
from sqlcommand.options import DatabaseOptions, use_iterdict_data_loader
from sqlcommand.prepared import PreparedStatement
from sqlcommand.schema import RowData, TableSchema
from sqlcommand.strategy import get_strategy
from sqlcommand.types import convert_entry

__all__ = [
    'Connection',
    'connect',
]

logger = logging.getLogger(__name__)


class Connection:
    """Owns one database connection and executes commands on it.

    Not safe for concurrent use; callers serialize access or hold one
    Connection per unit of work.

    Args:
        options: The DatabaseOptions to connect with
        engine_factory: Callable used to build the SQLAlchemy engine
    """

    def __init__(self, options: DatabaseOptions,
                 engine_factory: Callable[..., Engine] = sa.create_engine) -> None:
        self.options = options
        self.strategy = get_strategy(options.drivername)
        self.engine_factory = engine_factory
        self.engine: Engine | None = None
        self.sa_connection: sa.engine.Connection | None = None
        self.calls = 0
        self.time = 0

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type: type | None, exc_val: Exception | None,
                 exc_tb: Any | None) -> None:
        self.close()

    @property
    def dialect(self) -> str:
        """Return the dialect name ('mysql' or 'sqlite')."""
        return self.strategy.dialect_name

    @property
    def is_open(self) -> bool:
        """True while the underlying connection is open."""
        return self.sa_connection is not None and not self.sa_connection.closed

    @property
    def driver_connection(self) -> Any:
        """The driver's own connection object (pymysql or sqlite3)."""
        return self.sa_connection.connection.driver_connection

    def addcall(self, elapsed: float) -> None:
        """Track execution statistics
        """
        self.time += elapsed
        self.calls += 1

    def _create_engine(self) -> Engine:
        url = self.strategy.build_connection_url(self.options)
        engine_kwargs: dict[str, Any] = {'echo': False, 'poolclass': NullPool}
        engine_kwargs.update(self.strategy.get_engine_kwargs(self.options))
        engine = self.engine_factory(url, **engine_kwargs)
        logger.debug(f'Created new engine for {self.dialect}')
        return engine

    def open(self) -> None:
        """Open the connection.

        Raises ConnectionFailure if it is already open or cannot be opened.
        """
        if self.is_open:
            raise ConnectionFailure("Can't open connection while connection is open.")
        try:
            if self.engine is None:
                self.engine = self._create_engine()
            self.sa_connection = self.engine.connect()
            self.strategy.configure_connection(self.driver_connection)
        except DriverError as err:
            if self.sa_connection is not None:
                self.sa_connection.close()
            self.sa_connection = None
            raise ConnectionFailure('Failed to connect to database', err) from err
        logger.debug(f'Opened {self.dialect} connection to {self.options.database}')

    def close(self) -> None:
        """Close the connection. Closing a closed connection does nothing.
        """
        if self.is_open:
            self.sa_connection.close()
            logger.debug(f'Connection closed: {self.calls} queries in {self.time:.2f}s (avg: {self.time/max(1,self.calls):.3f}s per query)')
        self.sa_connection = None
        if self.engine is not None:
            self.engine.dispose()
            self.engine = None

    def _check_open(self) -> None:
        if not self.is_open:
            raise ConnectionFailure('Connection is closed')

    def prepare(self, text: str) -> PreparedStatement:
        """Prepare statement text on the open connection."""
        self._check_open()
        try:
            cursor = self.sa_connection.connection.cursor()
        except DriverError as err:
            raise QueryError(f'Failed to prepare the command "{text}"', err) from err
        return PreparedStatement(cursor, text, self.strategy, self)

    def execute_update(self, command: UpdatingCommand) -> bool:
        """Compile, bind and execute a mutating command.

        Returns True on success. Raises ConnectionFailure if the connection
        is closed, BindError if a value is rejected, QueryError if execution
        fails.
        """
        self._check_open()
        if not isinstance(command, UpdatingCommand):
            raise TypeError(f'execute_update expects an updating command, got {type(command).__name__}')

        statement = command.compile()
        with self.prepare(statement.text) as prepared:
            statement.bind(prepared)
            rowcount = prepared.execute_update()
        logger.debug(f'{type(command).__name__} affected {rowcount} rows')
        return True

    def execute_query(self, command: QueryCommand) -> RowCursor:
        """Compile, bind and execute a query command.

        The returned cursor owns the driver cursor; close it when done.
        """
        self._check_open()
        if not isinstance(command, QueryCommand):
            raise TypeError(f'execute_query expects a query command, got {type(command).__name__}')

        statement = command.compile()
        prepared = self.prepare(statement.text)
        try:
            statement.bind(prepared)
            cursor = prepared.execute_query()
        except Exception:
            prepared.close()
            raise
        return RowCursor(cursor, self.options.data_loader)

    def get_auto_commit(self) -> bool:
        """Return whether the connection commits after every statement."""
        self._check_open()
        try:
            return self.strategy.get_autocommit(self.driver_connection)
        except DriverError as err:
            raise TransactionError('Failed to get auto commit', err) from err

    def set_auto_commit(self, enabled: bool) -> None:
        """Turn auto-commit on or off."""
        self._check_open()
        try:
            if enabled:
                self.strategy.enable_autocommit(self.driver_connection)
            else:
                self.strategy.disable_autocommit(self.driver_connection)
        except DriverError as err:
            raise TransactionError(f'Failed to change auto commit to {enabled}', err) from err

    def commit(self) -> None:
        """Commit the current transaction."""
        self._check_open()
        try:
            self.driver_connection.commit()
        except DriverError as err:
            raise TransactionError('Failed to commit', err) from err

    def rollback(self) -> None:
        """Roll back the current transaction."""
        self._check_open()
        try:
            self.driver_connection.rollback()
        except DriverError as err:
            raise TransactionError('Failed to rollback', err) from err

    def create_table(self, schema: TableSchema, if_not_exists: bool = False) -> bool:
        return self.execute_update(CreateTable(schema, if_not_exists))

    def delete_table(self, table: str) -> bool:
        return self.execute_update(DropTable(table))

    def insert_row(self, table: str, rows: Iterable[RowData]) -> bool:
        """Insert one row given as column/value pairs."""
        return self.execute_update(InsertRows(table, tuple(rows)))

    def delete_rows(self, table: str, where: RowData | Iterable[RowData]) -> bool:
        """Delete the rows matching every pair in `where`."""
        return self.execute_update(DeleteRows(table, where))

    def update_entry(self, table: str, values: RowData | Iterable[RowData],
                     where: RowData | Iterable[RowData]) -> bool:
        """Set `values` on the rows matching every pair in `where`."""
        return self.execute_update(UpdateRows(table, values, where))

    def get_entry(self, table: str, column: str, where: RowData) -> Any:
        """Return `column` of the first row matching `where`, or None.
        """
        with self.execute_query(SelectEntry(table, column, where)) as rows:
            row = rows.fetchone()
        if row is None:
            return None
        return next(iter(row.values()))

    @use_iterdict_data_loader
    def get_entries(self, table: str, column: str, where: RowData) -> list[Any]:
        """Return `column` of every row matching `where`.
        """
        with self.execute_query(SelectEntry(table, column, where)) as rows:
            data = rows.load()
        return [next(iter(row.values())) for row in data]

    def get_typed_entry(self, table: str, column: str, where: RowData,
                        target: type) -> Any:
        """Return `get_entry` converted to `target`.

        Raises TypeConversionError if the value cannot be converted.
        """
        return convert_entry(self.get_entry(table, column, where), target)

    def get_string_entry(self, table: str, column: str, where: RowData) -> str | None:
        return self.get_typed_entry(table, column, where, str)

    def get_integer_entry(self, table: str, column: str, where: RowData) -> int | None:
        return self.get_typed_entry(table, column, where, int)

    def get_float_entry(self, table: str, column: str, where: RowData) -> float | None:
        return self.get_typed_entry(table, column, where, float)

    def get_decimal_entry(self, table: str, column: str, where: RowData) -> Decimal | None:
        return self.get_typed_entry(table, column, where, Decimal)

    def get_boolean_entry(self, table: str, column: str, where: RowData) -> bool | None:
        return self.get_typed_entry(table, column, where, bool)

    def get_bytes_entry(self, table: str, column: str, where: RowData) -> bytes | None:
        return self.get_typed_entry(table, column, where, bytes)

    def get_date_entry(self, table: str, column: str, where: RowData) -> datetime.date | None:
        return self.get_typed_entry(table, column, where, datetime.date)

    def get_datetime_entry(self, table: str, column: str,
                           where: RowData) -> datetime.datetime | None:
        return self.get_typed_entry(table, column, where, datetime.datetime)

    def get_url_entry(self, table: str, column: str, where: RowData) -> ParseResult | None:
        return self.get_typed_entry(table, column, where, ParseResult)


def connect(options: DatabaseOptions | dict[str, Any] | None = None,
            engine_factory: Callable[..., Engine] = sa.create_engine,
            **kw: Any) -> Connection:
    """Open a connection.

    Args:
        options: Can be:
                - DatabaseOptions object
                - Dictionary of options
                - None, with options given as keyword arguments
        engine_factory: Callable used to build the SQLAlchemy engine
        **kw: Additional keyword arguments to override options

    Returns
        An open Connection
    """
    if isinstance(options, DatabaseOptions):
        if kw:
            options = DatabaseOptions(**{**options.model_dump(), **kw})
    else:
        options = DatabaseOptions(**{**(options or {}), **kw})

    cn = Connection(options, engine_factory=engine_factory)
    cn.open()
    return cn
