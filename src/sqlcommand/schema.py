"""
Declarative descriptions of rows and tables.

`RowData` pairs a column name with a value and is used both for the values a
command writes and for the values a predicate matches. `TableSchema` and
`ColumnSpec` describe a full table definition for `CreateTable`.
"""
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class DataType(Enum):
    """Column data types, emitted by name in column definitions."""
    TINYINT = 'TINYINT'
    SMALLINT = 'SMALLINT'
    MEDIUMINT = 'MEDIUMINT'
    INT = 'INT'
    FLOAT = 'FLOAT'
    DOUBLE = 'DOUBLE'
    CHAR = 'CHAR'
    VARCHAR = 'VARCHAR'
    TINYBLOB = 'TINYBLOB'
    BLOB = 'BLOB'
    MEDIUMBLOB = 'MEDIUMBLOB'
    LONGBLOB = 'LONGBLOB'
    TINYTEXT = 'TINYTEXT'
    TEXT = 'TEXT'
    MEDIUMTEXT = 'MEDIUMTEXT'
    LONGTEXT = 'LONGTEXT'


class StorageEngine(Enum):
    """MySQL storage engines."""
    INNODB = 'InnoDB'
    MYISAM = 'MyISAM'
    MEMORY = 'Memory'
    CSV = 'CSV'
    ARCHIVE = 'Archive'
    BLACKHOLE = 'Blackhole'
    NDB = 'NDB'
    MERGE = 'Merge'
    FEDERATED = 'Federated'
    EXAMPLE = 'Example'


DEFAULT_ENGINE = StorageEngine.INNODB


@dataclass(frozen=True, slots=True)
class RowData:
    """A column name and the value bound for it."""
    column: str
    value: Any = None

    def __post_init__(self) -> None:
        if not isinstance(self.column, str) or not self.column:
            raise ValueError('column name must be a non-empty string')


@dataclass(frozen=True, slots=True)
class ColumnSpec:
    """One column of a table definition."""
    name: str
    max_length: int
    data_type: DataType
    nullable: bool = True
    auto_increment: bool = False

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError('column name must be a non-empty string')


@dataclass(frozen=True, slots=True)
class TableSchema:
    """A table definition.

    Column order is preserved and is the order the columns are emitted in.
    `engine` and `charset` are optional; the default engine is never emitted.
    """
    name: str
    columns: tuple[ColumnSpec, ...] = field(default_factory=tuple)
    engine: StorageEngine | None = None
    charset: str | None = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError('table name must be a non-empty string')
        object.__setattr__(self, 'columns', tuple(self.columns))
        if not self.columns:
            raise ValueError(f'table {self.name} must define at least one column')


def as_rows(rows: RowData | Iterable[RowData], what: str) -> tuple[RowData, ...]:
    """Normalize a single row or a sequence of rows into a non-empty tuple.
    """
    if isinstance(rows, RowData):
        return (rows,)
    rows = tuple(rows)
    if not rows:
        raise ValueError(f'{what} requires at least one row')
    for row in rows:
        if not isinstance(row, RowData):
            raise TypeError(f'{what} expects RowData, got {type(row).__name__}')
    return rows
