"""
Command objects that compile into parameterized statements.

Each command is a frozen dataclass with a single `compile()` that drives a
fresh `StatementBuilder`. Table and column names are placed literally into
the text; row values always go through placeholders.

    CreateTable   CREATE TABLE [IF NOT EXISTS ]t (c INT(11) NOT NULL, ...)
    DropTable     DROP TABLE t
    InsertRows    INSERT INTO t (a, b) VALUES (?, ?)
    DeleteRows    DELETE FROM t WHERE a=? AND b=?
    UpdateRows    UPDATE t SET a=?, b=? WHERE c=? AND d=?
    SelectEntry   SELECT a FROM t WHERE b=?

The set of commands is closed: `UpdatingCommand` and `QueryCommand` are
unions of the concrete classes and the connection facade accepts nothing
else.
"""
from dataclasses import dataclass, field

from sqlcommand.schema import DEFAULT_ENGINE, ColumnSpec, RowData, TableSchema
from sqlcommand.schema import as_rows
from sqlcommand.statement import CompiledStatement, StatementBuilder

__all__ = [
    'CreateTable',
    'DropTable',
    'InsertRows',
    'DeleteRows',
    'UpdateRows',
    'SelectEntry',
    'UpdatingCommand',
    'QueryCommand',
    'Command',
]


def _column_definition(builder: StatementBuilder, column: ColumnSpec) -> None:
    builder.append(f'{column.name} {column.data_type.value}({column.max_length})')
    if not column.nullable:
        builder.append(' NOT NULL')
    if column.auto_increment:
        builder.append(' AUTO_INCREMENT')


def _column_name(builder: StatementBuilder, row: RowData) -> None:
    builder.append(row.column)


def _value(builder: StatementBuilder, row: RowData) -> None:
    builder.append_placeholder(row.value)


def _assignment(builder: StatementBuilder, row: RowData) -> None:
    builder.append(f'{row.column}=').append_placeholder(row.value)


def _check_table_name(table: str) -> None:
    if not table:
        raise ValueError('table name must be a non-empty string')


@dataclass(frozen=True, slots=True)
class CreateTable:
    """Create a table from a schema, optionally only if it does not exist.
    """
    schema: TableSchema
    if_not_exists: bool = False

    def compile(self) -> CompiledStatement:
        builder = StatementBuilder('CREATE TABLE ')
        if self.if_not_exists:
            builder.append('IF NOT EXISTS ')
        builder.append(f'{self.schema.name} (')
        builder.append_separated(self.schema.columns, ', ', _column_definition)
        builder.append(')')

        engine = self.schema.engine
        if engine is not None and engine is not DEFAULT_ENGINE:
            builder.append(f' ENGINE={engine.value}')
        if self.schema.charset:
            builder.append(f' DEFAULT CHARACTER SET {self.schema.charset}')

        return builder.build()


@dataclass(frozen=True, slots=True)
class DropTable:
    """Drop a table."""
    table: str

    def __post_init__(self) -> None:
        _check_table_name(self.table)

    def compile(self) -> CompiledStatement:
        return StatementBuilder('DROP TABLE ').append(self.table).build()


@dataclass(frozen=True, slots=True)
class InsertRows:
    """Insert one row built from column/value pairs.

    Columns and placeholders are emitted in the order the pairs are given.
    """
    table: str
    rows: tuple[RowData, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        _check_table_name(self.table)
        object.__setattr__(self, 'rows', as_rows(self.rows, 'InsertRows'))

    def compile(self) -> CompiledStatement:
        builder = StatementBuilder('INSERT INTO ')
        builder.append(f'{self.table} (')
        builder.append_separated(self.rows, ', ', _column_name)
        builder.append(') VALUES (')
        builder.append_separated(self.rows, ', ', _value)
        builder.append(')')
        return builder.build()


@dataclass(frozen=True, slots=True)
class DeleteRows:
    """Delete the rows matching every column/value pair."""
    table: str
    where: tuple[RowData, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        _check_table_name(self.table)
        object.__setattr__(self, 'where', as_rows(self.where, 'DeleteRows'))

    def compile(self) -> CompiledStatement:
        builder = StatementBuilder('DELETE FROM ')
        builder.append(self.table).append(' WHERE ')
        builder.append_separated(self.where, ' AND ', _assignment)
        return builder.build()


@dataclass(frozen=True, slots=True)
class UpdateRows:
    """Set `values` on the rows matching every pair in `where`.

    Either side may be given as a single RowData; it is stored as a
    one-element tuple.
    """
    table: str
    values: RowData | tuple[RowData, ...]
    where: RowData | tuple[RowData, ...]

    def __post_init__(self) -> None:
        _check_table_name(self.table)
        object.__setattr__(self, 'values', as_rows(self.values, 'UpdateRows values'))
        object.__setattr__(self, 'where', as_rows(self.where, 'UpdateRows where'))

    def compile(self) -> CompiledStatement:
        builder = StatementBuilder('UPDATE ')
        builder.append(self.table).append(' SET ')
        builder.append_separated(self.values, ', ', _assignment)
        builder.append(' WHERE ')
        builder.append_separated(self.where, ' AND ', _assignment)
        return builder.build()


@dataclass(frozen=True, slots=True)
class SelectEntry:
    """Select one column of the rows where `where.column` equals `where.value`.
    """
    table: str
    column: str
    where: RowData

    def __post_init__(self) -> None:
        _check_table_name(self.table)
        if not self.column:
            raise ValueError('column name must be a non-empty string')
        if not isinstance(self.where, RowData):
            raise TypeError(f'SelectEntry expects RowData, got {type(self.where).__name__}')

    def compile(self) -> CompiledStatement:
        builder = StatementBuilder('SELECT ')
        builder.append(self.column).append(' FROM ').append(self.table)
        builder.append(' WHERE ').append(f'{self.where.column}=')
        builder.append_placeholder(self.where.value)
        return builder.build()


UpdatingCommand = CreateTable | DropTable | InsertRows | DeleteRows | UpdateRows
QueryCommand = SelectEntry
Command = UpdatingCommand | QueryCommand
