from __future__ import annotations

import logging
import sqlite3
from collections import Counter
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from football_db.config import DEFAULT_PARAMETER_BUDGET
from football_db.ingest.rows import TableRow
from football_db.ingest.schema import TABLES, Table

logger = logging.getLogger(__name__)


def batch_size_for(column_count: int, parameter_budget: int = DEFAULT_PARAMETER_BUDGET) -> int:
    """Largest number of rows whose bound parameters fit inside ``parameter_budget``."""

    if column_count <= 0:
        raise ValueError("A table needs at least one column")
    size = parameter_budget // column_count
    if size < 1:
        raise ValueError(
            f"Parameter budget {parameter_budget} cannot hold a single row of {column_count} columns"
        )
    return size


def _parameter_ceiling(connection: sqlite3.Connection, requested: int) -> int:
    getlimit = getattr(connection, "getlimit", None)
    if getlimit is None:
        return requested
    return min(requested, getlimit(sqlite3.SQLITE_LIMIT_VARIABLE_NUMBER))


class BatchedWriter:
    """Buffer row candidates per table and write them with ``INSERT ... ON CONFLICT DO NOTHING``.

    Each table is flushed as soon as its buffer reaches the number of rows that
    fits in one statement. Flushing a table first flushes every buffered table
    listed before it in ``tables``, so parents always reach the database ahead
    of the rows that reference them. Only uniqueness conflicts are ignored; any
    other constraint failure propagates as :class:`sqlite3.IntegrityError`.
    """

    def __init__(
        self,
        connection: sqlite3.Connection,
        *,
        parameter_budget: int = DEFAULT_PARAMETER_BUDGET,
        tables: Sequence[Table] = TABLES,
    ) -> None:
        self._connection = connection
        self._parameter_budget = _parameter_ceiling(connection, parameter_budget)
        self._tables: Dict[str, Table] = {table.name: table for table in tables}
        self._order: Dict[str, int] = {table.name: index for index, table in enumerate(tables)}
        self._buffers: Dict[str, List[Tuple[Any, ...]]] = {}
        self._statements: Dict[Tuple[str, int], str] = {}
        self.rows_offered: Counter[str] = Counter()
        self.rows_inserted: Counter[str] = Counter()
        self.batches_written: Counter[str] = Counter()

    @property
    def parameter_budget(self) -> int:
        return self._parameter_budget

    def batch_size(self, table: str) -> int:
        return batch_size_for(len(self._table(table).columns), self._parameter_budget)

    def add(self, row: TableRow) -> None:
        table = self._table(row.table)
        unknown = set(row.values) - set(table.columns)
        if unknown:
            raise ValueError(f"Unknown columns for {table.name}: {', '.join(sorted(unknown))}")

        buffer = self._buffers.setdefault(table.name, [])
        buffer.append(tuple(row.values.get(column) for column in table.columns))
        self.rows_offered[table.name] += 1

        if len(buffer) >= self.batch_size(table.name):
            self.flush(table.name)

    def add_all(self, rows: Iterable[TableRow]) -> None:
        for row in rows:
            self.add(row)

    def insert_many(self, table: str, rows: Iterable[Mapping[str, Any]]) -> None:
        """Buffer ``rows`` for ``table`` and write them straight away."""

        for values in rows:
            self.add(TableRow(table, dict(values)))
        self.flush(table)

    def pending(self, table: Optional[str] = None) -> int:
        if table is not None:
            return len(self._buffers.get(table, ()))
        return sum(len(buffer) for buffer in self._buffers.values())

    def flush(self, table: Optional[str] = None) -> None:
        """Write buffered rows for ``table`` and its parents, or for every table."""

        names = sorted(self._buffers, key=self._order.__getitem__)
        if table is not None:
            limit = self._order[self._table(table).name]
            names = [name for name in names if self._order[name] <= limit]

        for name in names:
            self._drain(name)

    def _drain(self, name: str) -> None:
        rows = self._buffers.pop(name, [])
        size = self.batch_size(name)
        for start in range(0, len(rows), size):
            self._write(name, rows[start : start + size])

    def _write(self, name: str, rows: Sequence[Tuple[Any, ...]]) -> None:
        if not rows:
            return
        statement = self._statement(name, len(rows))
        parameters = [value for row in rows for value in row]
        cursor = self._connection.execute(statement, parameters)
        inserted = max(cursor.rowcount, 0)
        self.rows_inserted[name] += inserted
        self.batches_written[name] += 1
        logger.debug("Wrote batch of %d rows to %s (%d new)", len(rows), name, inserted)

    def _statement(self, name: str, row_count: int) -> str:
        key = (name, row_count)
        statement = self._statements.get(key)
        if statement is None:
            columns = self._tables[name].columns
            placeholders = "(" + ", ".join("?" for _ in columns) + ")"
            statement = (
                f"INSERT INTO {name} ({', '.join(columns)}) VALUES "
                + ", ".join([placeholders] * row_count)
                + " ON CONFLICT DO NOTHING"
            )
            if len(self._statements) > 256:
                self._statements.clear()
            self._statements[key] = statement
        return statement

    def _table(self, name: str) -> Table:
        try:
            return self._tables[name]
        except KeyError:
            raise ValueError(f"Unknown table: {name}") from None


__all__ = ["BatchedWriter", "batch_size_for"]
