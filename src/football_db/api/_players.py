"""Query helpers for the player endpoints."""

from __future__ import annotations

import sqlite3
from typing import Any, Dict, List, Optional, Tuple

from football_db.api._row_utils import camel_row, order_by, ratio

PLAYER_SORT_COLUMNS = {
    "totalGoals": "p.total_goals",
    "totalAssists": "p.total_assists",
    "totalMatches": "p.total_matches",
    "playerName": "p.player_name",
}

_SELECT_PLAYER = """
    SELECT
        p.player_id,
        p.player_name,
        p.player_nickname,
        p.total_matches,
        p.total_minutes_played,
        p.total_goals,
        p.total_assists,
        p.total_yellow_cards,
        p.total_red_cards,
        p.total_passes,
        p.total_completed_passes
    FROM players p
"""


def list_players(
    connection: sqlite3.Connection,
    *,
    limit: int,
    offset: int,
    sort: str = "totalGoals",
    order: str = "desc",
    search: Optional[str] = None,
) -> Tuple[List[Dict[str, Any]], int]:
    ordering = order_by(sort, order, PLAYER_SORT_COLUMNS, tiebreak="p.player_id")
    where, parameters = "", []
    if search:
        where = "WHERE p.player_name LIKE ? OR p.player_nickname LIKE ?"
        parameters = [f"%{search}%", f"%{search}%"]

    total = connection.execute(f"SELECT COUNT(*) FROM players p {where}", parameters).fetchone()[0]
    rows = connection.execute(
        f"{_SELECT_PLAYER} {where} {ordering} LIMIT ? OFFSET ?",
        [*parameters, limit, offset],
    ).fetchall()
    return [camel_row(row) for row in rows], total


def get_player(connection: sqlite3.Connection, player_id: int) -> Optional[Dict[str, Any]]:
    row = connection.execute(f"{_SELECT_PLAYER} WHERE p.player_id = ?", (player_id,)).fetchone()
    if row is None:
        return None

    player = camel_row(row)
    player["derived"] = {
        "passCompletionRate": ratio(row["total_completed_passes"], row["total_passes"], digits=4),
        "goalsPer90": ratio((row["total_goals"] or 0) * 90, row["total_minutes_played"]),
        "minutesPerMatch": ratio(row["total_minutes_played"], row["total_matches"]),
    }
    player["teams"] = [
        camel_row(team)
        for team in connection.execute(
            """
            SELECT t.team_id, t.team_name, COUNT(DISTINCT pl.match_id) AS matches
            FROM player_lineups pl
            JOIN teams t ON t.team_id = pl.team_id
            WHERE pl.player_id = ?
            GROUP BY t.team_id, t.team_name
            ORDER BY matches DESC, t.team_id
            """,
            (player_id,),
        )
    ]
    player["positions"] = [
        camel_row(position)
        for position in connection.execute(
            """
            SELECT pos.id AS position_id, pos.name AS position_name, COUNT(DISTINCT pp.match_id) AS matches
            FROM player_positions pp
            JOIN positions pos ON pos.id = pp.position_id
            WHERE pp.player_id = ?
            GROUP BY pos.id, pos.name
            ORDER BY matches DESC, pos.id
            """,
            (player_id,),
        )
    ]
    return player


__all__ = ["PLAYER_SORT_COLUMNS", "get_player", "list_players"]
