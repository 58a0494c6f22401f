"""Query helpers for the team endpoints."""

from __future__ import annotations

import sqlite3
from typing import Any, Dict, List, Optional, Tuple

from football_db.api._row_utils import camel_row, order_by

TEAM_SORT_COLUMNS = {
    "teamName": "t.team_name",
    "teamGender": "t.team_gender",
}

_SELECT_TEAM = """
    SELECT
        t.team_id,
        t.team_name,
        t.team_gender,
        t.team_group,
        c.name AS country_name
    FROM teams t
    LEFT JOIN countries c ON c.id = t.country_id
"""

_RECORD = """
    SELECT
        COUNT(*) AS played,
        COALESCE(SUM(CASE
            WHEN (home_team_id = :team AND home_score > away_score)
              OR (away_team_id = :team AND away_score > home_score) THEN 1 ELSE 0 END), 0) AS wins,
        COALESCE(SUM(CASE WHEN home_score = away_score THEN 1 ELSE 0 END), 0) AS draws,
        COALESCE(SUM(CASE
            WHEN (home_team_id = :team AND home_score < away_score)
              OR (away_team_id = :team AND away_score < home_score) THEN 1 ELSE 0 END), 0) AS losses,
        COALESCE(SUM(CASE WHEN home_team_id = :team THEN home_score ELSE away_score END), 0) AS goals_for,
        COALESCE(SUM(CASE WHEN home_team_id = :team THEN away_score ELSE home_score END), 0) AS goals_against
    FROM matches
    WHERE (home_team_id = :team OR away_team_id = :team)
      AND home_score IS NOT NULL
      AND away_score IS NOT NULL
"""


def list_teams(
    connection: sqlite3.Connection,
    *,
    limit: int,
    offset: int,
    sort: str = "teamName",
    order: str = "asc",
    gender: Optional[str] = None,
) -> Tuple[List[Dict[str, Any]], int]:
    ordering = order_by(sort, order, TEAM_SORT_COLUMNS, tiebreak="t.team_id")
    where, parameters = "", []
    if gender:
        where = "WHERE t.team_gender = ?"
        parameters = [gender]

    total = connection.execute(f"SELECT COUNT(*) FROM teams t {where}", parameters).fetchone()[0]
    rows = connection.execute(
        f"{_SELECT_TEAM} {where} {ordering} LIMIT ? OFFSET ?",
        [*parameters, limit, offset],
    ).fetchall()
    return [camel_row(row) for row in rows], total


def get_team(connection: sqlite3.Connection, team_id: int) -> Optional[Dict[str, Any]]:
    row = connection.execute(f"{_SELECT_TEAM} WHERE t.team_id = ?", (team_id,)).fetchone()
    if row is None:
        return None

    team = camel_row(row)
    record = connection.execute(_RECORD, {"team": team_id}).fetchone()
    team["record"] = camel_row(record)
    team["record"]["goalDifference"] = record["goals_for"] - record["goals_against"]
    team["squadSize"] = connection.execute(
        "SELECT COUNT(DISTINCT player_id) FROM player_lineups WHERE team_id = ?", (team_id,)
    ).fetchone()[0]
    return team


__all__ = ["TEAM_SORT_COLUMNS", "get_team", "list_teams"]
