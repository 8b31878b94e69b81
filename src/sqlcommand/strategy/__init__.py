"""
Driver strategies, looked up by dialect name.

    strategy = get_strategy('mysql')
    strategy.standardize_sql('DELETE FROM t WHERE a=?')  # 'DELETE FROM t WHERE a=%s'
"""
from functools import cache

from sqlcommand.strategy.base import _STRATEGY_REGISTRY, DatabaseStrategy
from sqlcommand.strategy.base import register_strategy
from sqlcommand.strategy.mysql import MySQLStrategy
from sqlcommand.strategy.sqlite import SQLiteStrategy

__all__ = [
    'DatabaseStrategy',
    'MySQLStrategy',
    'SQLiteStrategy',
    'register_strategy',
    'get_strategy',
    'get_strategy_class',
    'get_available_dialects',
    'is_supported_dialect',
]


def get_available_dialects() -> list[str]:
    return sorted(_STRATEGY_REGISTRY)


def is_supported_dialect(dialect: str) -> bool:
    return dialect in _STRATEGY_REGISTRY


def get_strategy_class(dialect: str) -> type[DatabaseStrategy]:
    """Return the strategy class registered for `dialect`.

    Raises ValueError for an unknown dialect.
    """
    try:
        return _STRATEGY_REGISTRY[dialect]
    except KeyError:
        raise ValueError(
            f'Unsupported dialect: {dialect}. Available: {get_available_dialects()}') from None


@cache
def get_strategy(dialect: str) -> DatabaseStrategy:
    """Shared strategy instance for `dialect`. Strategies hold no state.
    """
    return get_strategy_class(dialect)()
