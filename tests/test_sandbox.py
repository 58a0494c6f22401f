from __future__ import annotations

import itertools
import sqlite3

import pytest

from football_db.api.sandbox import (
    QueryResult,
    QuerySandbox,
    SandboxFailure,
    SandboxRejection,
    apply_row_limit,
    check_query,
)


@pytest.mark.parametrize(
    ("sql", "rule"),
    [
        ("DELETE FROM players", "mutating_keyword"),
        ("SELECT 1; SELECT 2", "multiple_statements"),
        ("SELECT * FROM players WHERE 1 = 1 or update players", "mutating_keyword"),
        ("with x as (select 1) insert into players select * from x", "mutating_keyword"),
        ("SELECT * FROM players; PRAGMA query_only = OFF", "mutating_keyword"),
        ("WITH x AS (SELECT 1) REPLACE INTO players (player_id, player_name) SELECT 1, 'x'", "mutating_keyword"),
        ("SELECT replace('abc', 'b', 'x')", "mutating_keyword"),
        ("EXPLAIN SELECT 1", "select_only"),
        ("   ", "empty_query"),
    ],
)
def test_rejections_name_the_rule(sql: str, rule: str) -> None:
    rejection = check_query(sql)

    assert isinstance(rejection, SandboxRejection)
    assert rejection.rule == rule


def test_rejection_names_the_keyword() -> None:
    assert check_query("DELETE FROM players").reason == "Keyword 'DELETE' is not allowed"


@pytest.mark.parametrize(
    "sql",
    [
        "SELECT 1;",
        "  with totals as (select 1 as n) select n from totals",
        "SELECT 1 AS last_updated",
    ],
)
def test_accepted_queries(sql: str) -> None:
    assert check_query(sql) is None


def test_row_limit_is_appended_only_when_missing() -> None:
    assert apply_row_limit("SELECT * FROM players;", 5) == "SELECT * FROM players\nLIMIT 5"
    assert apply_row_limit("SELECT * FROM players limit 3", 5) == "SELECT * FROM players limit 3"


@pytest.mark.parametrize(
    "sql",
    [
        "SELECT * FROM (SELECT * FROM players LIMIT 5)",
        "SELECT * FROM players -- LIMIT 5",
        "SELECT * FROM players /* LIMIT 5 */",
    ],
)
def test_inner_or_commented_limits_do_not_count(sql: str) -> None:
    assert apply_row_limit(sql, 10) == f"{sql}\nLIMIT 10"


@pytest.mark.parametrize(
    "sql",
    [
        "SELECT * FROM players LIMIT 5 OFFSET 2",
        "SELECT * FROM players LIMIT 2, 5",
        "SELECT * FROM players LIMIT 5 -- first five",
    ],
)
def test_trailing_limit_is_kept(sql: str) -> None:
    assert apply_row_limit(sql, 10) == sql


def test_outer_limit_caps_a_subquery_with_a_larger_limit(loaded_connection: sqlite3.Connection) -> None:
    sandbox = QuerySandbox(timeout=5, row_limit=1)

    result = sandbox.run(loaded_connection, "SELECT * FROM (SELECT player_id FROM players LIMIT 3) -- LIMIT 3")

    assert isinstance(result, QueryResult)
    assert result.row_count == 1


def test_results_are_capped_by_the_row_limit(loaded_connection: sqlite3.Connection) -> None:
    sandbox = QuerySandbox(timeout=5, row_limit=2)

    result = sandbox.run(loaded_connection, "SELECT player_id, player_name FROM players ORDER BY player_id")

    assert isinstance(result, QueryResult)
    assert result.columns == ["player_id", "player_name"]
    assert result.row_count == 2
    assert len(result.rows) == 2


def test_rejected_queries_are_never_executed(loaded_connection: sqlite3.Connection) -> None:
    sandbox = QuerySandbox(timeout=5, row_limit=10)

    outcome = sandbox.run(loaded_connection, "DELETE FROM players")

    assert isinstance(outcome, SandboxRejection)
    assert loaded_connection.execute("SELECT COUNT(*) FROM players").fetchone()[0] == 4


def test_slow_queries_time_out(connection: sqlite3.Connection) -> None:
    ticks = itertools.count()
    sandbox = QuerySandbox(timeout=0.5, row_limit=10, clock=lambda: float(next(ticks)))

    outcome = sandbox.run(
        connection,
        "WITH RECURSIVE n(x) AS (SELECT 1 UNION ALL SELECT x + 1 FROM n WHERE x < 1000000) SELECT max(x) FROM n",
    )

    assert isinstance(outcome, SandboxFailure)
    assert outcome.reason == "timeout"


def test_execution_errors_are_reported(connection: sqlite3.Connection) -> None:
    outcome = QuerySandbox(timeout=5, row_limit=10).run(connection, "SELECT * FROM no_such_table")

    assert isinstance(outcome, SandboxFailure)
    assert outcome.reason == "execution_error"
    assert "no_such_table" in outcome.message


def test_connection_is_restored_after_running(connection: sqlite3.Connection) -> None:
    sandbox = QuerySandbox(timeout=5, row_limit=10)
    sandbox.run(connection, "SELECT * FROM no_such_table")
    sandbox.run(connection, "SELECT 1")

    assert connection.execute("PRAGMA query_only").fetchone()[0] == 0
    assert not connection.in_transaction
    connection.execute("INSERT INTO play_patterns (id, name) VALUES (1, 'Regular Play')")


def test_invalid_limits_are_rejected() -> None:
    with pytest.raises(ValueError):
        QuerySandbox(timeout=0, row_limit=10)
    with pytest.raises(ValueError):
        QuerySandbox(timeout=1, row_limit=0)
