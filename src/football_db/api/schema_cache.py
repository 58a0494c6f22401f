"""Schema introspection for the query playground, cached with a time-to-live."""

from __future__ import annotations

import sqlite3
import time
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")


class SchemaCache(Generic[T]):
    """Hold the result of ``loader`` until ``ttl`` seconds have passed or it is invalidated."""

    def __init__(self, loader: Callable[[], T], *, ttl: float, clock: Callable[[], float] = time.monotonic) -> None:
        self._loader = loader
        self._ttl = ttl
        self._clock = clock
        self._value: Optional[T] = None
        self._loaded_at: Optional[float] = None

    def get(self) -> T:
        now = self._clock()
        if self._loaded_at is None or now - self._loaded_at >= self._ttl:
            self._value = self._loader()
            self._loaded_at = now
        return self._value  # type: ignore[return-value]

    def invalidate(self) -> None:
        self._value = None
        self._loaded_at = None


def describe_schema(connection: sqlite3.Connection) -> List[Dict[str, Any]]:
    tables = [
        row[0]
        for row in connection.execute(
            "SELECT name FROM sqlite_master WHERE type = 'table' AND name NOT LIKE 'sqlite_%' ORDER BY name"
        )
    ]

    described = []
    for table in tables:
        foreign_keys = {
            row["from"]: f"{row['table']}.{row['to']}"
            for row in connection.execute(f"PRAGMA foreign_key_list('{table}')")
        }
        columns = [
            {
                "name": row["name"],
                "type": row["type"],
                "notNull": bool(row["notnull"]),
                "primaryKey": bool(row["pk"]),
                "default": row["dflt_value"],
                "references": foreign_keys.get(row["name"]),
            }
            for row in connection.execute(f"PRAGMA table_info('{table}')")
        ]
        indexes = [
            row["name"]
            for row in connection.execute(f"PRAGMA index_list('{table}')")
            if not row["name"].startswith("sqlite_autoindex")
        ]
        row_count = connection.execute(f'SELECT COUNT(*) FROM "{table}"').fetchone()[0]
        described.append({"name": table, "columns": columns, "indexes": indexes, "rowCount": row_count})
    return described


def format_schema(tables: List[Dict[str, Any]]) -> str:
    """Plain-text rendering used as context for people writing playground queries."""

    lines = ["DATABASE SCHEMA:", ""]
    for table in tables:
        lines.append(f"Table: {table['name']} ({table['rowCount']} rows)")
        for column in table["columns"]:
            parts = [f"  - {column['name']} {column['type'] or ''}".rstrip()]
            if column["primaryKey"]:
                parts.append("PRIMARY KEY")
            if column["notNull"]:
                parts.append("NOT NULL")
            if column["references"]:
                parts.append(f"-> {column['references']}")
            lines.append(" ".join(parts))
        lines.append("")
    return "\n".join(lines).rstrip() + "\n"


__all__ = ["SchemaCache", "describe_schema", "format_schema"]
