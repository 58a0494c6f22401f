from __future__ import annotations

from typing import Any, Iterator, List, Mapping, Optional, Sequence, Tuple

from football_db.ingest.extractors import Resolve
from football_db.ingest.rows import TableRow
from football_db.ingest.value_extractors import (
    get_int,
    get_nested_str,
    get_str,
    stint_minutes,
    to_json,
)

STARTING_XI = "Starting XI"

LineupEntry = Tuple[int, Optional[str], Mapping[str, Any]]


def iter_lineup_players(document: Any) -> Iterator[LineupEntry]:
    """Yield ``(team_id, team_name, player)`` for every player in a lineups file."""

    if not isinstance(document, list):
        return
    for team in document:
        if not isinstance(team, Mapping):
            continue
        team_id = get_int(team.get("team_id"))
        if team_id is None:
            continue
        team_name = get_str(team.get("team_name"))
        for player in _records(team.get("lineup")):
            if get_int(player.get("player_id")) is not None:
                yield team_id, team_name, player


def minutes_played(positions: Sequence[Mapping[str, Any]]) -> float:
    """Sum of stint durations; a stint without ``to`` runs until full time."""

    total = sum(stint_minutes(stint.get("from"), stint.get("to")) for stint in positions)
    return round(total, 2)


def is_starter(positions: Sequence[Mapping[str, Any]]) -> bool:
    return bool(positions) and get_str(positions[0].get("start_reason")) == STARTING_XI


def extract_lineup_rows(document: Any, *, match_id: int, resolve: Resolve) -> List[TableRow]:
    """Lineup, position and card rows for ``lineups/<match_id>.json``."""

    rows: List[TableRow] = []
    for team_id, _, player in iter_lineup_players(document):
        player_id = resolve("players", get_int(player.get("player_id")))
        team_id = resolve("teams", team_id)
        positions = _records(player.get("positions"))

        rows.append(
            TableRow(
                "player_lineups",
                {
                    "match_id": match_id,
                    "player_id": player_id,
                    "team_id": team_id,
                    "jersey_number": get_int(player.get("jersey_number")),
                    "country_id": resolve("countries", get_nested_str(player, ("country", "name"))),
                    "is_starter": int(is_starter(positions)),
                    "minutes_played": minutes_played(positions),
                    "raw_json": to_json(player),
                },
            )
        )

        for stint in positions:
            from_time = get_str(stint.get("from"))
            from_period = get_int(stint.get("from_period"))
            if not from_time or from_period is None:
                continue
            rows.append(
                TableRow(
                    "player_positions",
                    {
                        "match_id": match_id,
                        "player_id": player_id,
                        "position_id": resolve("positions", get_int(stint.get("position_id"))),
                        "from_time": from_time,
                        "to_time": get_str(stint.get("to")),
                        "from_period": from_period,
                        "to_period": get_int(stint.get("to_period")),
                        "start_reason": get_str(stint.get("start_reason")),
                        "end_reason": get_str(stint.get("end_reason")),
                    },
                )
            )

        for card in _records(player.get("cards")):
            time = get_str(card.get("time"))
            card_type = get_str(card.get("card_type"))
            if not time or not card_type:
                continue
            rows.append(
                TableRow(
                    "player_cards",
                    {
                        "match_id": match_id,
                        "player_id": player_id,
                        "time": time,
                        "card_type": card_type,
                        "reason": get_str(card.get("reason")),
                        "period": get_int(card.get("period")),
                    },
                )
            )

    return rows


def _records(value: Any) -> List[Mapping[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, Mapping)]


__all__ = [
    "STARTING_XI",
    "iter_lineup_players",
    "minutes_played",
    "is_starter",
    "extract_lineup_rows",
]
