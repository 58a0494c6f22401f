from __future__ import annotations

import sqlite3

from football_db.api.schema_cache import SchemaCache, describe_schema, format_schema


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_cache_reloads_after_ttl_and_on_invalidate() -> None:
    clock = FakeClock()
    calls = []
    cache = SchemaCache(lambda: calls.append(1) or len(calls), ttl=60, clock=clock)

    assert cache.get() == 1
    clock.now = 59
    assert cache.get() == 1
    clock.now = 60
    assert cache.get() == 2
    cache.invalidate()
    assert cache.get() == 3


def test_describe_schema(loaded_connection: sqlite3.Connection) -> None:
    tables = {table["name"]: table for table in describe_schema(loaded_connection)}

    assert "sqlite_sequence" not in tables
    events = tables["events"]
    assert events["rowCount"] == 10
    columns = {column["name"]: column for column in events["columns"]}
    assert columns["id"]["primaryKey"] is True
    assert columns["match_id"]["references"] == "matches.match_id"
    assert "idx_events_match" in events["indexes"]


def test_format_schema(loaded_connection: sqlite3.Connection) -> None:
    text = format_schema(describe_schema(loaded_connection))

    assert text.startswith("DATABASE SCHEMA:\n")
    assert "Table: matches (2 rows)" in text
    assert "  - match_id INTEGER PRIMARY KEY" in text
