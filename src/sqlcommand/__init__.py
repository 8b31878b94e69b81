"""
Typed command builder over a relational database connection.

Commands compile into parameterized statements and run through a
`Connection`, either as methods or through the module functions:
- Module functions: sqlcommand.execute_update(cn, command)
- Connection methods: cn.execute_update(command)
"""
__version__ = '0.1.0'

from sqlcommand.commands import Command, CreateTable, DeleteRows, DropTable
from sqlcommand.commands import InsertRows, QueryCommand, SelectEntry
from sqlcommand.commands import UpdateRows, UpdatingCommand
from sqlcommand.connection import Connection, connect
from sqlcommand.cursor import RowCursor
from sqlcommand.exceptions import BindError, ConnectionFailure, DatabaseError
from sqlcommand.exceptions import QueryError, TransactionError
from sqlcommand.exceptions import TypeConversionError
from sqlcommand.options import DatabaseOptions
from sqlcommand.schema import ColumnSpec, DataType, RowData, StorageEngine
from sqlcommand.schema import TableSchema
from sqlcommand.statement import CompiledStatement, ScalarKind, StatementBuilder


def execute_update(cn: Connection, command: UpdatingCommand) -> bool:
    """Execute a mutating command and return True on success.
    """
    return cn.execute_update(command)


def execute_query(cn: Connection, command: QueryCommand) -> RowCursor:
    """Execute a query command and return a cursor over its rows.
    """
    return cn.execute_query(command)


__all__ = [
    'connect',
    'Connection',
    'DatabaseOptions',
    'execute_update',
    'execute_query',
    'Command',
    'UpdatingCommand',
    'QueryCommand',
    'CreateTable',
    'DropTable',
    'InsertRows',
    'DeleteRows',
    'UpdateRows',
    'SelectEntry',
    'RowData',
    'ColumnSpec',
    'TableSchema',
    'DataType',
    'StorageEngine',
    'StatementBuilder',
    'CompiledStatement',
    'ScalarKind',
    'RowCursor',
    'DatabaseError',
    'ConnectionFailure',
    'BindError',
    'QueryError',
    'TransactionError',
    'TypeConversionError',
]
