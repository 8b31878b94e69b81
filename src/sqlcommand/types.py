"""
Type conversion between Python values and driver values.

This module provides:
- TypeConverter: Convert bound Python values to driver-compatible values
- Entry converters: Convert fetched values to the type a typed accessor asks for
"""
import datetime
import logging
import math
from collections.abc import Callable
from decimal import Decimal, InvalidOperation
from typing import Any
from urllib.parse import ParseResult, urlparse

import dateutil.parser
import numpy as np
import pandas as pd
from sqlcommand.exceptions import TypeConversionError

logger = logging.getLogger(__name__)

TRUE_STRINGS: set[str] = {'1', 'true', 't', 'yes', 'y', 'on'}
FALSE_STRINGS: set[str] = {'0', 'false', 'f', 'no', 'n', 'off'}


class TypeConverter:
    """Normalize NumPy and pandas scalars before they reach the driver.
    """

    @staticmethod
    def convert_value(value: Any) -> Any:
        """Convert a single value to a driver-compatible format."""
        if value is None:
            return None

        if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
            return None

        if value is pd.NaT:
            return None

        if isinstance(value, np.datetime64):
            if np.isnat(value):
                return None
            return pd.Timestamp(value).to_pydatetime()

        if isinstance(value, np.floating) and np.isnan(value):
            return None

        if isinstance(value, np.generic):
            return value.item()

        return value


def _decode(value: bytes | bytearray | memoryview) -> str:
    return bytes(value).decode()


def to_string(value: Any) -> str:
    if isinstance(value, bytes | bytearray | memoryview):
        return _decode(value)
    return str(value)


def to_integer(value: Any) -> int:
    if isinstance(value, float | Decimal) and value != int(value):
        raise ValueError(f'{value!r} is not integral')
    if isinstance(value, str):
        return int(value.strip())
    return int(value)


def to_float(value: Any) -> float:
    return float(value)


def to_decimal(value: Any) -> Decimal:
    if isinstance(value, float):
        return Decimal(repr(value))
    try:
        return Decimal(value)
    except InvalidOperation as err:
        raise ValueError(f'{value!r} is not a decimal') from err


def to_boolean(value: Any) -> bool:
    if isinstance(value, bool | np.bool_):
        return bool(value)
    if isinstance(value, int | float | Decimal | np.number):
        return bool(value != 0)
    text = to_string(value).strip().lower()
    if text in TRUE_STRINGS:
        return True
    if text in FALSE_STRINGS:
        return False
    raise ValueError(f'{value!r} is not a boolean')


def to_bytes(value: Any) -> bytes:
    if isinstance(value, bytes | bytearray | memoryview):
        return bytes(value)
    if isinstance(value, str):
        return value.encode()
    raise TypeError(f'{type(value).__name__} is not binary data')


def to_date(value: Any) -> datetime.date:
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    return dateutil.parser.parse(to_string(value)).date()


def to_datetime(value: Any) -> datetime.datetime:
    if isinstance(value, datetime.datetime):
        return value
    if isinstance(value, datetime.date):
        return datetime.datetime.combine(value, datetime.time())
    return dateutil.parser.parse(to_string(value))


def to_url(value: Any) -> ParseResult:
    if isinstance(value, ParseResult):
        return value
    return urlparse(to_string(value))


ENTRY_CONVERTERS: dict[type, Callable[[Any], Any]] = {
    str: to_string,
    int: to_integer,
    float: to_float,
    Decimal: to_decimal,
    bool: to_boolean,
    bytes: to_bytes,
    datetime.date: to_date,
    datetime.datetime: to_datetime,
    ParseResult: to_url,
    }


def convert_entry(value: Any, target: type) -> Any:
    """Convert a fetched value to `target`.

    NULL stays None. Raises TypeConversionError when the value cannot be
    represented as `target` or no converter exists for it.
    """
    if value is None:
        return None
    converter = ENTRY_CONVERTERS.get(target)
    if converter is None:
        raise TypeConversionError(f'No converter for {target.__name__}')
    try:
        return converter(value)
    except (TypeError, ValueError, OverflowError, dateutil.parser.ParserError) as err:
        raise TypeConversionError(
            f'Cannot convert {type(value).__name__} value {value!r} to {target.__name__}', err) from err
