"""
Exception classes raised by the command layer.

Every failure surfaces as a subclass of `DatabaseError`, which carries a
human-readable reason and, when available, the lower-level error that caused
it. Driver exceptions are grouped into tuples so callers and the connection
facade can catch them without importing each driver.
"""
import sqlite3

import pymysql
import sqlalchemy as sa


class DatabaseError(Exception):
    """Base class for all command layer errors.

    The originating exception, if any, is kept on `cause` and is also chained
    through `raise ... from`.
    """

    def __init__(self, reason: str, cause: BaseException | None = None) -> None:
        message = reason
        if cause is not None:
            message = f'{reason} ({type(cause).__name__}: {cause})'
        super().__init__(message)
        self.reason = reason
        self.cause = cause


class ConnectionFailure(DatabaseError):
    """Connection is closed, already open, or could not be established.
    """


class BindError(DatabaseError):
    """A prepared statement rejected a value at a given position.
    """


class QueryError(DatabaseError):
    """Error preparing or executing a statement.
    """


class TransactionError(DatabaseError):
    """Commit, rollback or auto-commit toggle failed.
    """


class TypeConversionError(DatabaseError):
    """A fetched value could not be converted to the requested Python type.
    """


DriverError = (
    pymysql.Error,
    sqlite3.Error,
    sa.exc.DBAPIError,
    )

DbConnectionError = (
    pymysql.OperationalError,
    pymysql.InterfaceError,
    sqlite3.OperationalError,
    sqlite3.InterfaceError,
    sa.exc.OperationalError,
    sa.exc.InterfaceError,
    ConnectionFailure,
    )
