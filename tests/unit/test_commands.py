"""
Unit tests for command compilation.
"""
import pytest
from sqlcommand.commands import CreateTable, DeleteRows, DropTable, InsertRows
from sqlcommand.commands import QueryCommand, SelectEntry, UpdateRows
from sqlcommand.commands import UpdatingCommand
from sqlcommand.schema import ColumnSpec, DataType, RowData, StorageEngine
from sqlcommand.schema import TableSchema


def test_insert_rows(user_rows):
    """Insert compiles to a column list and one placeholder per value"""
    statement = InsertRows('users', user_rows).compile()

    assert statement.text == 'INSERT INTO users (id, name) VALUES (?, ?)'
    assert statement.args == (1, 'a')


def test_insert_single_column():
    statement = InsertRows('users', [RowData('id', 7)]).compile()

    assert statement.text == 'INSERT INTO users (id) VALUES (?)'
    assert statement.args == (7,)


def test_update_rows():
    """SET values bind before WHERE values"""
    statement = UpdateRows('users', [RowData('name', 'b')], [RowData('id', 1)]).compile()

    assert statement.text == 'UPDATE users SET name=? WHERE id=?'
    assert statement.args == ('b', 1)


def test_update_rows_multiple():
    command = UpdateRows('users',
                         [RowData('name', 'b'), RowData('age', 30)],
                         [RowData('id', 1), RowData('org', 'x')])
    statement = command.compile()

    assert statement.text == 'UPDATE users SET name=?, age=? WHERE id=? AND org=?'
    assert statement.args == ('b', 30, 1, 'x')


def test_update_single_row_form_is_normalized():
    """A single RowData on either side is stored as a one-element tuple"""
    command = UpdateRows('users', RowData('name', 'b'), RowData('id', 1))

    assert command.values == (RowData('name', 'b'),)
    assert command.where == (RowData('id', 1),)
    assert command.compile() == UpdateRows('users', [RowData('name', 'b')],
                                           [RowData('id', 1)]).compile()


def test_delete_rows():
    statement = DeleteRows('users', [RowData('id', 1), RowData('name', 'a')]).compile()

    assert statement.text == 'DELETE FROM users WHERE id=? AND name=?'
    assert statement.args == (1, 'a')


def test_delete_rows_single():
    statement = DeleteRows('users', RowData('id', 1)).compile()

    assert statement.text == 'DELETE FROM users WHERE id=?'
    assert statement.args == (1,)


def test_drop_table():
    statement = DropTable('users').compile()

    assert statement.text == 'DROP TABLE users'
    assert statement.args == ()


def test_select_entry():
    statement = SelectEntry('users', 'name', RowData('id', 1)).compile()

    assert statement.text == 'SELECT name FROM users WHERE id=?'
    assert statement.args == (1,)


class TestCreateTable:
    """Tests for CREATE TABLE compilation"""

    def test_basic(self, users_schema):
        statement = CreateTable(users_schema).compile()

        assert statement.text == 'CREATE TABLE users (id INT(11) NOT NULL, name VARCHAR(64))'
        assert statement.args == ()

    @pytest.mark.parametrize(('if_not_exists', 'prefix'), [
        (True, 'CREATE TABLE IF NOT EXISTS users ('),
        (False, 'CREATE TABLE users ('),
    ])
    def test_if_not_exists(self, users_schema, if_not_exists, prefix):
        text = CreateTable(users_schema, if_not_exists).compile().text

        assert text.startswith(prefix)
        assert ('IF NOT EXISTS' in text) is if_not_exists

    def test_auto_increment(self):
        schema = TableSchema('t', (ColumnSpec('id', 11, DataType.INT, nullable=False,
                                              auto_increment=True),))

        text = CreateTable(schema).compile().text

        assert text == 'CREATE TABLE t (id INT(11) NOT NULL AUTO_INCREMENT)'

    def test_engine_and_charset(self):
        schema = TableSchema('t', (ColumnSpec('body', 255, DataType.TEXT),),
                             engine=StorageEngine.MYISAM, charset='utf8mb4')

        text = CreateTable(schema).compile().text

        assert text == 'CREATE TABLE t (body TEXT(255)) ENGINE=MyISAM DEFAULT CHARACTER SET utf8mb4'

    def test_default_engine_not_emitted(self):
        schema = TableSchema('t', (ColumnSpec('id', 11, DataType.INT),),
                             engine=StorageEngine.INNODB, charset='')

        text = CreateTable(schema).compile().text

        assert text == 'CREATE TABLE t (id INT(11))'

    def test_column_order_preserved(self):
        columns = [ColumnSpec(name, 8, DataType.CHAR) for name in ('c', 'a', 'b')]

        text = CreateTable(TableSchema('t', columns)).compile().text

        assert text == 'CREATE TABLE t (c CHAR(8), a CHAR(8), b CHAR(8))'


@pytest.mark.parametrize('command', [
    InsertRows('t', [RowData('a', 1), RowData('b', 'x'), RowData('c', None)]),
    DeleteRows('t', [RowData('a', 1), RowData('b', 2.5)]),
    UpdateRows('t', [RowData('a', 1), RowData('b', 2)], [RowData('c', 3)]),
    SelectEntry('t', 'a', RowData('b', b'raw')),
    DropTable('t'),
])
def test_placeholder_count_matches_args(command):
    """Each placeholder in the text has exactly one bind value"""
    statement = command.compile()

    assert statement.text.count('?') == len(statement.args) == statement.parameter_count


def test_compilation_is_deterministic(user_rows):
    command = InsertRows('users', user_rows)

    first, second = command.compile(), command.compile()

    assert first.text == second.text
    assert first.args == second.args


def test_no_trailing_separator():
    statement = UpdateRows('t', [RowData('a', 1), RowData('b', 2)],
                           [RowData('c', 3), RowData('d', 4)]).compile()

    assert not statement.text.rstrip().endswith((',', 'AND'))
    assert ', WHERE' not in statement.text
    assert statement.text.count(' AND ') == 1


def test_values_never_inlined():
    """Row values travel as bind arguments, never as SQL text"""
    hostile = "x'; DROP TABLE users; --"
    statement = InsertRows('users', [RowData('name', hostile)]).compile()

    assert hostile not in statement.text
    assert statement.args == (hostile,)


@pytest.mark.parametrize(('factory', 'error'), [
    (lambda: InsertRows('users', []), ValueError),
    (lambda: DeleteRows('users', []), ValueError),
    (lambda: UpdateRows('users', [], [RowData('id', 1)]), ValueError),
    (lambda: UpdateRows('users', [RowData('id', 1)], []), ValueError),
    (lambda: DropTable(''), ValueError),
    (lambda: SelectEntry('users', '', RowData('id', 1)), ValueError),
    (lambda: InsertRows('users', [('id', 1)]), TypeError),
    (lambda: SelectEntry('users', 'name', ('id', 1)), TypeError),
])
def test_invalid_construction(factory, error):
    with pytest.raises(error):
        factory()


def test_commands_are_immutable(user_rows):
    command = InsertRows('users', user_rows)

    with pytest.raises(AttributeError):
        command.table = 'other'
    assert isinstance(command.rows, tuple)


def test_command_kinds():
    assert isinstance(DropTable('t'), UpdatingCommand)
    assert isinstance(InsertRows('t', [RowData('a', 1)]), UpdatingCommand)
    assert isinstance(SelectEntry('t', 'a', RowData('b', 1)), QueryCommand)
    assert not isinstance(SelectEntry('t', 'a', RowData('b', 1)), UpdatingCommand)


if __name__ == '__main__':
    pytest.main([__file__])
