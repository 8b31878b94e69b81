"""
Fixtures for SQLite integration tests.
"""
import pytest
import sqlcommand as sc


@pytest.fixture
def sqlite_file_path(tmp_path):
    """Path to a fresh file-based SQLite database."""
    return str(tmp_path / 'commands.db')


@pytest.fixture
def sqlite_file_conn(sqlite_file_path):
    """File-based SQLite connection for testing persistence across connections."""
    conn = sc.connect(drivername='sqlite', database=sqlite_file_path)
    yield conn
    conn.close()
