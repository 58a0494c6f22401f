from __future__ import annotations

import sqlite3

import pytest

from football_db.ingest.rows import TableRow
from football_db.ingest.schema import TABLES
from football_db.ingest.writer import BatchedWriter, batch_size_for


def test_batch_size_divides_the_parameter_budget() -> None:
    assert batch_size_for(2, 10) == 5
    assert batch_size_for(7, 30000) == 4285

    with pytest.raises(ValueError):
        batch_size_for(20, 10)


def test_one_row_over_the_threshold_makes_two_batches(connection: sqlite3.Connection) -> None:
    writer = BatchedWriter(connection, parameter_budget=10)
    assert writer.batch_size("play_patterns") == 5

    writer.add_all(TableRow("play_patterns", {"id": code, "name": f"Pattern {code}"}) for code in range(1, 7))
    assert writer.batches_written["play_patterns"] == 1
    assert writer.pending("play_patterns") == 1

    writer.flush()

    assert writer.batches_written["play_patterns"] == 2
    assert writer.rows_inserted["play_patterns"] == 6
    assert connection.execute("SELECT COUNT(*) FROM play_patterns").fetchone()[0] == 6


def test_duplicate_keys_are_ignored(connection: sqlite3.Connection) -> None:
    writer = BatchedWriter(connection)
    writer.insert_many("play_patterns", [{"id": 1, "name": "Regular Play"}])
    writer.insert_many("play_patterns", [{"id": 1, "name": "Something Else"}, {"id": 2, "name": "From Corner"}])

    rows = connection.execute("SELECT id, name FROM play_patterns ORDER BY id").fetchall()
    assert [tuple(row) for row in rows] == [(1, "Regular Play"), (2, "From Corner")]
    assert writer.rows_offered["play_patterns"] == 3
    assert writer.rows_inserted["play_patterns"] == 2


def test_other_constraint_failures_propagate(connection: sqlite3.Connection) -> None:
    writer = BatchedWriter(connection)
    writer.add(TableRow("play_patterns", {"id": 1, "name": None}))

    with pytest.raises(sqlite3.IntegrityError):
        writer.flush()


def test_flushing_a_child_writes_its_parents_first(connection: sqlite3.Connection) -> None:
    writer = BatchedWriter(connection)
    writer.add(
        TableRow(
            "seasons",
            {"competition_id": 11, "season_id": 90, "season_name": "2020/2021", "raw_json": "{}"},
        )
    )
    writer.add(
        TableRow(
            "competitions",
            {"competition_id": 11, "competition_name": "La Liga", "raw_json": "{}"},
        )
    )

    writer.flush("seasons")

    assert writer.pending() == 0
    assert connection.execute("SELECT COUNT(*) FROM seasons").fetchone()[0] == 1


def test_unknown_columns_and_tables_are_rejected(connection: sqlite3.Connection) -> None:
    writer = BatchedWriter(connection)

    with pytest.raises(ValueError, match="Unknown columns"):
        writer.add(TableRow("play_patterns", {"id": 1, "name": "x", "colour": "red"}))
    with pytest.raises(ValueError, match="Unknown table"):
        writer.add(TableRow("nope", {"id": 1}))


def test_descriptors_match_the_created_tables(connection: sqlite3.Connection) -> None:
    for table in TABLES:
        created = {row["name"] for row in connection.execute(f"PRAGMA table_info('{table.name}')")}
        assert created, table.name
        assert set(table.columns) <= created, table.name
