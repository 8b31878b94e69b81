"""
Prepared statement handle over a DB-API cursor.

DB-API drivers take every parameter in one sequence at execute time, so the
handle collects bound values by position, checks each one against the bind
primitive it came through, and hands the full sequence to `cursor.execute`
when the statement runs. Every position must be bound before executing.
"""
import logging
import time
from decimal import Decimal
from typing import Any
from urllib.parse import ParseResult, SplitResult

import numpy as np
from sqlcommand.exceptions import BindError, QueryError
from sqlcommand.sql import count_placeholders
from sqlcommand.statement import INT32_MAX, INT32_MIN, INT64_MAX, INT64_MIN
from sqlcommand.types import TypeConverter

logger = logging.getLogger(__name__)

INT8_MIN, INT8_MAX = -2**7, 2**7 - 1
INT16_MIN, INT16_MAX = -2**15, 2**15 - 1

_UNBOUND = object()


def _check_integer(value: Any, low: int, high: int, name: str) -> int:
    if isinstance(value, bool | np.bool_) or not isinstance(value, int | np.integer):
        raise TypeError(f'{name} requires an integer, got {type(value).__name__}')
    value = int(value)
    if not low <= value <= high:
        raise OverflowError(f'{value} is out of range for {name}')
    return value


class PreparedStatement:
    """A statement prepared on an open DB-API connection.

    Args:
        cursor: DB-API cursor the statement executes on
        text: statement text with `?` markers
        strategy: driver strategy that translates the markers
        connwrapper: optional owner that tracks call statistics
    """

    def __init__(self, cursor: Any, text: str, strategy: Any,
                 connwrapper: Any = None) -> None:
        self.dbapi_cursor = cursor
        self.text = text
        self.sql = strategy.standardize_sql(text)
        self.connwrapper = connwrapper
        self.parameter_count = count_placeholders(text)
        self._params: list[Any] = [_UNBOUND] * self.parameter_count

    def __enter__(self) -> 'PreparedStatement':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _set(self, position: int, value: Any) -> None:
        if not 1 <= position <= self.parameter_count:
            raise BindError(
                f'Parameter index {position} out of range (1..{self.parameter_count}) '
                f'for "{self.text}"')
        self._params[position - 1] = value

    def bind_decimal(self, position: int, value: Decimal) -> None:
        if not isinstance(value, Decimal):
            raise TypeError(f'bind_decimal requires Decimal, got {type(value).__name__}')
        self._set(position, value)

    def bind_boolean(self, position: int, value: bool) -> None:
        if not isinstance(value, bool | np.bool_):
            raise TypeError(f'bind_boolean requires bool, got {type(value).__name__}')
        self._set(position, bool(value))

    def bind_int(self, position: int, value: int) -> None:
        self._set(position, _check_integer(value, INT32_MIN, INT32_MAX, 'bind_int'))

    def bind_byte(self, position: int, value: int) -> None:
        self._set(position, _check_integer(value, INT8_MIN, INT8_MAX, 'bind_byte'))

    def bind_url(self, position: int, value: ParseResult | SplitResult) -> None:
        if not isinstance(value, ParseResult | SplitResult):
            raise TypeError(f'bind_url requires a parsed URL, got {type(value).__name__}')
        self._set(position, value.geturl())

    def bind_long(self, position: int, value: int) -> None:
        self._set(position, _check_integer(value, INT64_MIN, INT64_MAX, 'bind_long'))

    def bind_double(self, position: int, value: float) -> None:
        if not isinstance(value, float | np.floating):
            raise TypeError(f'bind_double requires float, got {type(value).__name__}')
        self._set(position, float(value))

    def bind_short(self, position: int, value: int) -> None:
        self._set(position, _check_integer(value, INT16_MIN, INT16_MAX, 'bind_short'))

    def bind_string(self, position: int, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError(f'bind_string requires str, got {type(value).__name__}')
        self._set(position, str(value))

    def bind_object(self, position: int, value: Any) -> None:
        self._set(position, TypeConverter.convert_value(value))

    @property
    def params(self) -> tuple[Any, ...]:
        """Bound values in position order.

        Raises BindError if any position is still unbound.
        """
        missing = [i for i, value in enumerate(self._params, start=1) if value is _UNBOUND]
        if missing:
            raise BindError(f'No value bound for parameter(s) {missing} of "{self.text}"')
        return tuple(self._params)

    def _execute(self) -> None:
        params = self.params
        start = time.time()
        logger.debug(f'SQL:\n{self.sql}\nargs: {params}')
        try:
            self.dbapi_cursor.execute(self.sql, params)
        except Exception as err:
            logger.error(f'Error with query:\nSQL:\n{self.sql}\nargs: {params}')
            raise QueryError(f'Failed to execute the command "{self.text}"', err) from err
        finally:
            elapsed = time.time() - start
            if self.connwrapper is not None:
                self.connwrapper.addcall(elapsed)
            logger.debug(f'Query time: {elapsed:.4f}s')

    def execute_update(self) -> int:
        """Execute the statement and return the affected row count."""
        self._execute()
        return self.dbapi_cursor.rowcount

    def execute_query(self) -> Any:
        """Execute the statement and return the cursor holding its rows."""
        self._execute()
        return self.dbapi_cursor

    def close(self) -> None:
        self.dbapi_cursor.close()
