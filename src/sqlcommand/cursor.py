"""
Row cursor returned by query commands.

Wraps the DB-API cursor a query executed on and yields rows as
dictionaries keyed by column name.
"""
import logging
from collections.abc import Iterator
from typing import Any

logger = logging.getLogger(__name__)


def IterChunk(cursor: Any, size: int = 5000) -> Iterator[tuple]:
    """Iterate over cursor results in chunks.
    """
    while True:
        chunked = cursor.fetchmany(size)
        if not chunked:
            break
        yield from chunked


class RowCursor:
    """Cursor over the rows of an executed query.

    Args:
        cursor: The underlying DB-API cursor, already executed
        data_loader: Callable turning (rows, columns) into the caller's format
    """

    def __init__(self, cursor: Any, data_loader: Any = None) -> None:
        self.dbapi_cursor = cursor
        self.data_loader = data_loader
        description = cursor.description or ()
        self.columns: list[str] = [desc[0] for desc in description]

    def __enter__(self) -> 'RowCursor':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __iter__(self) -> Iterator[dict[str, Any]]:
        for values in IterChunk(self.dbapi_cursor):
            yield self._as_dict(values)

    def _as_dict(self, values: Any) -> dict[str, Any]:
        return dict(zip(self.columns, tuple(values)))

    @property
    def rowcount(self) -> int:
        """Number of rows produced by the query, or -1 if unknown."""
        return self.dbapi_cursor.rowcount

    def fetchone(self) -> dict[str, Any] | None:
        """Fetch the next row, or None when exhausted."""
        values = self.dbapi_cursor.fetchone()
        if values is None:
            return None
        return self._as_dict(values)

    def fetchall(self) -> list[dict[str, Any]]:
        """Fetch all remaining rows."""
        return [self._as_dict(values) for values in self.dbapi_cursor.fetchall()]

    def load(self, **kwargs: Any) -> Any:
        """Pass all remaining rows through the configured data loader."""
        data = self.fetchall()
        logger.debug(f'Loading {len(data)} rows with {len(self.columns)} columns')
        if self.data_loader is None:
            return data
        return self.data_loader(data, self.columns, **kwargs)

    def close(self) -> None:
        """Close cursor."""
        self.dbapi_cursor.close()
