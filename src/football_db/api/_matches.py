"""Query helpers for match listing endpoints."""

from __future__ import annotations

import sqlite3
from typing import Any, Dict, List, Optional, Tuple

from football_db.api._row_utils import camel_row, int_to_bool, order_by

MATCH_SORT_COLUMNS = {
    "matchDate": "m.match_date",
    "matchWeek": "m.match_week",
    "homeScore": "m.home_score",
    "awayScore": "m.away_score",
}

_SELECT_MATCH = """
    SELECT
        m.match_id,
        m.match_date,
        m.kick_off,
        m.match_week,
        m.home_score,
        m.away_score,
        m.match_status,
        m.competition_id,
        c.competition_name,
        m.season_id,
        s.season_name,
        cs.name AS competition_stage,
        m.home_team_id,
        ht.team_name AS home_team_name,
        m.away_team_id,
        at.team_name AS away_team_name,
        st.name AS stadium_name,
        r.name AS referee_name
    FROM matches m
    JOIN competitions c ON c.competition_id = m.competition_id
    JOIN seasons s ON s.competition_id = m.competition_id AND s.season_id = m.season_id
    LEFT JOIN competition_stages cs ON cs.id = m.competition_stage_id
    LEFT JOIN teams ht ON ht.team_id = m.home_team_id
    LEFT JOIN teams at ON at.team_id = m.away_team_id
    LEFT JOIN stadiums st ON st.stadium_id = m.stadium_id
    LEFT JOIN referees r ON r.referee_id = m.referee_id
"""


def _match_payload(row: sqlite3.Row) -> Dict[str, Any]:
    return {
        "matchId": row["match_id"],
        "matchDate": row["match_date"],
        "kickOff": row["kick_off"],
        "matchWeek": row["match_week"],
        "status": row["match_status"],
        "competition": {"id": row["competition_id"], "name": row["competition_name"]},
        "season": {"id": row["season_id"], "name": row["season_name"]},
        "stage": row["competition_stage"],
        "homeTeam": {"id": row["home_team_id"], "name": row["home_team_name"]},
        "awayTeam": {"id": row["away_team_id"], "name": row["away_team_name"]},
        "homeScore": row["home_score"],
        "awayScore": row["away_score"],
    }


def list_matches(
    connection: sqlite3.Connection,
    *,
    limit: int,
    offset: int,
    sort: str = "matchDate",
    order: str = "desc",
    competition_id: Optional[int] = None,
    season_id: Optional[int] = None,
    team_id: Optional[int] = None,
) -> Tuple[List[Dict[str, Any]], int]:
    ordering = order_by(sort, order, MATCH_SORT_COLUMNS, tiebreak="m.match_id")
    clauses: List[str] = []
    parameters: List[Any] = []
    if competition_id is not None:
        clauses.append("m.competition_id = ?")
        parameters.append(competition_id)
    if season_id is not None:
        clauses.append("m.season_id = ?")
        parameters.append(season_id)
    if team_id is not None:
        clauses.append("(m.home_team_id = ? OR m.away_team_id = ?)")
        parameters.extend([team_id, team_id])
    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

    total = connection.execute(f"SELECT COUNT(*) FROM matches m {where}", parameters).fetchone()[0]
    rows = connection.execute(
        f"{_SELECT_MATCH} {where} {ordering} LIMIT ? OFFSET ?",
        [*parameters, limit, offset],
    ).fetchall()
    return [_match_payload(row) for row in rows], total


def get_match(connection: sqlite3.Connection, match_id: int) -> Optional[Dict[str, Any]]:
    row = connection.execute(f"{_SELECT_MATCH} WHERE m.match_id = ?", (match_id,)).fetchone()
    if row is None:
        return None

    match = _match_payload(row)
    match["stadium"] = row["stadium_name"]
    match["referee"] = row["referee_name"]
    match["managers"] = [
        {
            "managerId": manager["manager_id"],
            "name": manager["name"],
            "teamId": manager["team_id"],
            "isHomeTeam": int_to_bool(manager["is_home_team"]),
        }
        for manager in connection.execute(
            """
            SELECT mm.manager_id, mg.name, mm.team_id, mm.is_home_team
            FROM match_managers mm
            JOIN managers mg ON mg.manager_id = mm.manager_id
            WHERE mm.match_id = ?
            ORDER BY mm.is_home_team DESC, mm.manager_id
            """,
            (match_id,),
        )
    ]
    match["eventCounts"] = [
        camel_row(count)
        for count in connection.execute(
            """
            SELECT et.id AS type_id, et.name AS type_name, COUNT(*) AS event_count
            FROM events e
            JOIN event_types et ON et.id = e.type_id
            WHERE e.match_id = ?
            GROUP BY et.id, et.name
            ORDER BY event_count DESC, et.id
            """,
            (match_id,),
        )
    ]
    match["threeSixtyFrames"] = connection.execute(
        "SELECT COUNT(*) FROM three_sixty_frames WHERE match_id = ?", (match_id,)
    ).fetchone()[0]
    return match


__all__ = ["MATCH_SORT_COLUMNS", "get_match", "list_matches"]
