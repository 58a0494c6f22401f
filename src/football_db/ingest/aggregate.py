"""Recompute the ``total_*`` columns on ``players`` from the loaded facts.

Each column is replaced in full, so running the aggregation twice gives the
same result. Goals and cards are matched by lookup name rather than code.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Dict, Mapping, Tuple

logger = logging.getLogger(__name__)

GOAL_OUTCOME = "Goal"
YELLOW_CARDS = ("Yellow Card",)
RED_CARDS = ("Red Card", "Second Yellow")

_PLAYER = "players.player_id"

PLAYER_AGGREGATES: Mapping[str, Tuple[str, Tuple[object, ...]]] = {
    "total_matches": (
        f"SELECT COUNT(DISTINCT pl.match_id) FROM player_lineups AS pl WHERE pl.player_id = {_PLAYER}",
        (),
    ),
    "total_minutes_played": (
        f"SELECT ROUND(SUM(pl.minutes_played), 2) FROM player_lineups AS pl WHERE pl.player_id = {_PLAYER}",
        (),
    ),
    "total_goals": (
        "SELECT COUNT(*) FROM events AS e "
        "JOIN shots AS s ON s.event_id = e.id "
        "JOIN shot_outcomes AS so ON so.id = s.outcome_id "
        f"WHERE e.player_id = {_PLAYER} AND so.name = ?",
        (GOAL_OUTCOME,),
    ),
    "total_assists": (
        "SELECT COUNT(*) FROM events AS e JOIN passes AS p ON p.event_id = e.id "
        f"WHERE e.player_id = {_PLAYER} AND p.goal_assist = 1",
        (),
    ),
    "total_yellow_cards": (
        "SELECT COUNT(*) FROM player_cards AS c "
        f"WHERE c.player_id = {_PLAYER} AND c.card_type IN ({', '.join('?' for _ in YELLOW_CARDS)})",
        YELLOW_CARDS,
    ),
    "total_red_cards": (
        "SELECT COUNT(*) FROM player_cards AS c "
        f"WHERE c.player_id = {_PLAYER} AND c.card_type IN ({', '.join('?' for _ in RED_CARDS)})",
        RED_CARDS,
    ),
    "total_passes": (
        "SELECT COUNT(*) FROM events AS e JOIN passes AS p ON p.event_id = e.id "
        f"WHERE e.player_id = {_PLAYER}",
        (),
    ),
    # A pass without an outcome is a completed pass.
    "total_completed_passes": (
        "SELECT COUNT(*) FROM events AS e JOIN passes AS p ON p.event_id = e.id "
        f"WHERE e.player_id = {_PLAYER} AND p.outcome_id IS NULL",
        (),
    ),
}


def aggregate_player_stats(connection: sqlite3.Connection) -> Dict[str, int]:
    """Update every player's totals and return the number of players with a non-zero value per column."""

    for table in ("player_lineups", "events"):
        if connection.execute(f"SELECT 1 FROM {table} LIMIT 1").fetchone() is None:
            logger.warning("%s is empty; player totals that depend on it will be zero", table)

    for column, (subquery, parameters) in PLAYER_AGGREGATES.items():
        connection.execute(
            f"UPDATE players SET {column} = COALESCE(({subquery}), 0)",
            parameters,
        )
        logger.debug("Recomputed players.%s", column)
    connection.commit()

    non_zero = {
        column: connection.execute(f"SELECT COUNT(*) FROM players WHERE {column} > 0").fetchone()[0]
        for column in PLAYER_AGGREGATES
    }
    logger.info(
        "Aggregated stats for %d players",
        connection.execute("SELECT COUNT(*) FROM players").fetchone()[0],
    )
    return non_zero


__all__ = ["PLAYER_AGGREGATES", "aggregate_player_stats"]
