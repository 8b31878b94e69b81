"""
Typed entry accessors and bind dispatch against SQLite.
"""
import datetime
from decimal import Decimal
from urllib.parse import urlparse

import numpy as np
import pytest
from sqlcommand.exceptions import TypeConversionError
from sqlcommand.schema import RowData


@pytest.fixture
def carol(sqlite_conn):
    sqlite_conn.insert_row('people', [
        RowData('id', 3),
        RowData('name', 'Carol'),
        RowData('score', np.int16(7)),
        RowData('balance', Decimal('12.50')),
        RowData('joined', '2024-03-01 09:30:00'),
        RowData('avatar', b'\x89PNG'),
    ])
    return sqlite_conn


def test_string_entry(carol):
    assert carol.get_string_entry('people', 'name', RowData('id', 3)) == 'Carol'


def test_integer_entry(carol):
    assert carol.get_integer_entry('people', 'score', RowData('id', 3)) == 7


def test_float_entry(carol):
    assert carol.get_float_entry('people', 'score', RowData('id', 3)) == 7.0


def test_decimal_entry(carol):
    """Test Decimal values survive as exact text"""
    assert carol.get_decimal_entry('people', 'balance', RowData('id', 3)) == Decimal('12.50')


def test_boolean_entry(carol):
    assert carol.get_boolean_entry('people', 'score', RowData('id', 3)) is True


def test_bytes_entry(carol):
    assert carol.get_bytes_entry('people', 'avatar', RowData('id', 3)) == b'\x89PNG'


def test_date_entries(carol):
    where = RowData('id', 3)

    assert carol.get_date_entry('people', 'joined', where) == datetime.date(2024, 3, 1)
    assert carol.get_datetime_entry('people', 'joined', where) == datetime.datetime(2024, 3, 1, 9, 30)


def test_url_entry(sqlite_conn):
    url = urlparse('https://example.com/people/1')
    sqlite_conn.update_entry('people', RowData('name', url), RowData('id', 1))

    assert sqlite_conn.get_string_entry('people', 'name', RowData('id', 1)) == 'https://example.com/people/1'
    assert sqlite_conn.get_url_entry('people', 'name', RowData('id', 1)).netloc == 'example.com'


def test_null_entry(sqlite_conn):
    assert sqlite_conn.get_decimal_entry('people', 'balance', RowData('id', 1)) is None


def test_missing_row_entry(sqlite_conn):
    assert sqlite_conn.get_integer_entry('people', 'score', RowData('id', 404)) is None


def test_unconvertible_entry(sqlite_conn):
    with pytest.raises(TypeConversionError):
        sqlite_conn.get_integer_entry('people', 'name', RowData('id', 1))


def test_integer_column_is_not_bytes(sqlite_conn):
    with pytest.raises(TypeConversionError):
        sqlite_conn.get_bytes_entry('people', 'score', RowData('id', 1))


def test_float_column_as_boolean(sqlite_conn):
    sqlite_conn.update_entry('people', RowData('score', 0.0), RowData('id', 1))
    sqlite_conn.update_entry('people', RowData('score', 2.5), RowData('id', 2))

    assert sqlite_conn.get_boolean_entry('people', 'score', RowData('id', 1)) is False
    assert sqlite_conn.get_boolean_entry('people', 'score', RowData('id', 2)) is True


@pytest.mark.parametrize('value', [True, np.int8(5), np.int64(2**40), 2**40, 2.5, np.float32(1.5)])
def test_bound_value_kinds(sqlite_conn, value):
    """Test each bind primitive reaches the driver"""
    sqlite_conn.update_entry('people', RowData('score', value), RowData('id', 1))

    assert sqlite_conn.get_entry('people', 'score', RowData('id', 1)) == value


def test_match_on_numpy_value(sqlite_conn):
    assert sqlite_conn.get_entry('people', 'name', RowData('id', np.int32(2))) == 'Bob'


if __name__ == '__main__':
    pytest.main([__file__])
