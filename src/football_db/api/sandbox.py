"""Guarded execution of ad-hoc read-only SQL.

A query is checked before it reaches SQLite, in this order:

1. no mutating keyword may appear anywhere as a whole word, in any case;
2. only one statement is allowed (a single trailing ``;`` is tolerated);
3. the statement must start with ``SELECT`` or ``WITH``.

Accepted queries run with ``PRAGMA query_only`` switched on, inside a
transaction that is always rolled back, and are interrupted once the
deadline passes. A ``LIMIT`` is appended unless the outer statement already
ends with one.
"""

from __future__ import annotations

import logging
import re
import sqlite3
import time
from typing import Any, Callable, List, NamedTuple, Optional, Union

logger = logging.getLogger(__name__)

MUTATING_KEYWORDS = (
    "INSERT",
    "UPDATE",
    "DELETE",
    "DROP",
    "TRUNCATE",
    "ALTER",
    "CREATE",
    "GRANT",
    "REVOKE",
    "EXECUTE",
    "EXEC",
    "ATTACH",
    "DETACH",
    "PRAGMA",
    "VACUUM",
    "REINDEX",
    "REPLACE",
)

RULE_EMPTY = "empty_query"
RULE_MUTATING_KEYWORD = "mutating_keyword"
RULE_MULTIPLE_STATEMENTS = "multiple_statements"
RULE_SELECT_ONLY = "select_only"

FAILURE_TIMEOUT = "timeout"
FAILURE_EXECUTION = "execution_error"

# SQLite VM instructions between two deadline checks.
PROGRESS_INTERVAL = 1000

_KEYWORD_PATTERN = re.compile(r"\b(" + "|".join(MUTATING_KEYWORDS) + r")\b", re.IGNORECASE)
_PREFIX_PATTERN = re.compile(r"^\s*(SELECT|WITH)\b", re.IGNORECASE)
_TRAILING_LIMIT_PATTERN = re.compile(r"\bLIMIT\s+\d+(\s*(,|\bOFFSET\b)\s*\d+)?\s*$", re.IGNORECASE)
_COMMENT_PATTERN = re.compile(r"--[^\n]*|/\*.*?\*/", re.DOTALL)


class SandboxRejection(NamedTuple):
    rule: str
    reason: str


class SandboxFailure(NamedTuple):
    reason: str
    message: str


class QueryResult(NamedTuple):
    columns: List[str]
    rows: List[List[Any]]
    row_count: int
    execution_time_ms: float


SandboxOutcome = Union[QueryResult, SandboxRejection, SandboxFailure]


def strip_terminator(sql: str) -> str:
    text = sql.strip()
    if text.endswith(";"):
        text = text[:-1].rstrip()
    return text


def check_query(sql: str) -> Optional[SandboxRejection]:
    """Return the first rule ``sql`` violates, or ``None`` when it may run."""

    if not sql or not sql.strip():
        return SandboxRejection(RULE_EMPTY, "Query is empty")

    match = _KEYWORD_PATTERN.search(sql)
    if match is not None:
        keyword = match.group(1).upper()
        return SandboxRejection(RULE_MUTATING_KEYWORD, f"Keyword '{keyword}' is not allowed")

    if ";" in strip_terminator(sql):
        return SandboxRejection(RULE_MULTIPLE_STATEMENTS, "Only a single statement is allowed")

    if _PREFIX_PATTERN.match(sql) is None:
        return SandboxRejection(RULE_SELECT_ONLY, "Query must start with SELECT or WITH")

    return None


def apply_row_limit(sql: str, row_limit: int) -> str:
    statement = strip_terminator(sql)
    # Only a LIMIT closing the outer statement counts; subqueries and comments do not.
    if _TRAILING_LIMIT_PATTERN.search(_COMMENT_PATTERN.sub(" ", statement).rstrip()):
        return statement
    # On its own line so a trailing comment cannot swallow it.
    return f"{statement}\nLIMIT {row_limit}"


class QuerySandbox:
    def __init__(
        self,
        *,
        timeout: float,
        row_limit: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        if row_limit <= 0:
            raise ValueError("row_limit must be positive")
        self.timeout = timeout
        self.row_limit = row_limit
        self._clock = clock

    def run(self, connection: sqlite3.Connection, sql: str) -> SandboxOutcome:
        rejection = check_query(sql)
        if rejection is not None:
            logger.info("Rejected query (%s): %s", rejection.rule, rejection.reason)
            return rejection

        statement = apply_row_limit(sql, self.row_limit)
        previous_query_only = connection.execute("PRAGMA query_only").fetchone()[0]
        started = self._clock()
        deadline = started + self.timeout
        timed_out = False

        def past_deadline() -> int:
            nonlocal timed_out
            if self._clock() > deadline:
                timed_out = True
                return 1
            return 0

        connection.execute("PRAGMA query_only = ON")
        connection.set_progress_handler(past_deadline, PROGRESS_INTERVAL)
        try:
            connection.execute("BEGIN")
            cursor = connection.execute(statement)
            columns = [description[0] for description in cursor.description or ()]
            rows = [list(row) for row in cursor.fetchmany(self.row_limit)]
        except sqlite3.Error as exc:
            if timed_out:
                logger.warning("Query exceeded %.1fs and was interrupted", self.timeout)
                return SandboxFailure(FAILURE_TIMEOUT, f"Query exceeded the {self.timeout:g}s time limit")
            logger.info("Query failed: %s", exc)
            return SandboxFailure(FAILURE_EXECUTION, str(exc))
        finally:
            connection.set_progress_handler(None, 0)
            if connection.in_transaction:
                connection.rollback()
            connection.execute(f"PRAGMA query_only = {int(previous_query_only)}")

        elapsed_ms = round((self._clock() - started) * 1000, 2)
        return QueryResult(columns, rows, len(rows), elapsed_ms)


__all__ = [
    "MUTATING_KEYWORDS",
    "QueryResult",
    "QuerySandbox",
    "SandboxFailure",
    "SandboxOutcome",
    "SandboxRejection",
    "apply_row_limit",
    "check_query",
]
