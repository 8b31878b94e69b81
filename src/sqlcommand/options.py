import sys
from collections.abc import Callable
from functools import wraps
from pathlib import Path
from typing import Any

import pandas as pd
from pydantic import BaseModel, ConfigDict, model_validator
from sqlcommand.strategy import get_available_dialects, get_strategy_class
from sqlcommand.strategy import is_supported_dialect

__all__ = [
    'DatabaseOptions',
    'pandas_numpy_data_loader',
    'iterdict_data_loader',
    'use_iterdict_data_loader',
]


def use_iterdict_data_loader(func):
    """Temporarily use default dict loader over user-specified loader"""

    @wraps(func)
    def inner(*args, **kwargs):
        cn = args[0]

        original_data_loader = cn.options.data_loader
        cn.options.data_loader = iterdict_data_loader

        try:
            return func(*args, **kwargs)
        finally:
            cn.options.data_loader = original_data_loader

    return inner


def iterdict_data_loader(data, columns, **kwargs) -> list[dict]:
    """Minimal data loader.
    """
    if not data:
        return []
    return list(data)


def pandas_numpy_data_loader(data, columns, **kwargs) -> pd.DataFrame:
    """Standard pandas DataFrame loader using NumPy.

    Always returns a DataFrame, never None, with columns preserved for empty results.
    """
    if not data:
        return pd.DataFrame(columns=list(columns))
    return pd.DataFrame.from_records(list(data), columns=list(columns))


def _scriptname() -> str | None:
    return Path(sys.argv[0]).stem if sys.argv and sys.argv[0] else None


class DatabaseOptions(BaseModel):
    """Options

    supported driver names: `mysql`, `sqlite`

    The emitted SQL is MySQL; `sqlite` runs the same statements against a
    local file or `:memory:` database.
    """
    model_config = ConfigDict(extra='forbid')

    drivername: str = 'mysql'
    hostname: str | None = None
    username: str | None = None
    password: str | None = None
    database: str | None = None
    port: int = 3306
    timeout: int = 0
    charset: str | None = 'utf8mb4'
    appname: str | None = None
    data_loader: Callable[..., Any] | None = None

    @model_validator(mode='after')
    def check_driver(self) -> 'DatabaseOptions':
        if not is_supported_dialect(self.drivername):
            available = get_available_dialects()
            raise ValueError(f'drivername must be one of: {available}')
        self.appname = self.appname or _scriptname() or 'python_console'
        strategy_cls = get_strategy_class(self.drivername)
        strategy_cls.validate_options(self)
        if self.data_loader is None:
            self.data_loader = pandas_numpy_data_loader
        return self
