import sqlite3

import pymysql
import pytest
from sqlcommand.exceptions import BindError, ConnectionFailure, DatabaseError
from sqlcommand.exceptions import DbConnectionError, DriverError, QueryError
from sqlcommand.exceptions import TransactionError, TypeConversionError


def test_message_includes_cause():
    cause = ValueError('bad value')

    err = BindError('Failed to bind', cause)

    assert str(err) == 'Failed to bind (ValueError: bad value)'
    assert err.reason == 'Failed to bind'
    assert err.cause is cause


def test_message_without_cause():
    err = QueryError('Failed to execute')

    assert str(err) == 'Failed to execute'
    assert err.cause is None


@pytest.mark.parametrize('error_class', [
    ConnectionFailure, BindError, QueryError, TransactionError, TypeConversionError,
])
def test_hierarchy(error_class):
    assert issubclass(error_class, DatabaseError)


def test_driver_error_groups():
    """Test driver exceptions are caught through the grouped tuples"""
    with pytest.raises(DriverError):
        raise pymysql.ProgrammingError('syntax')
    with pytest.raises(DriverError):
        raise sqlite3.IntegrityError('unique')
    with pytest.raises(DbConnectionError):
        raise pymysql.OperationalError(2003, "Can't connect")
    with pytest.raises(DbConnectionError):
        raise ConnectionFailure('Connection is closed')
