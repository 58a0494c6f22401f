from __future__ import annotations

from datetime import datetime
from typing import Any, Iterator, List, Mapping, Optional, Tuple

from football_db.ingest.extractors import Resolve
from football_db.ingest.rows import TableRow
from football_db.ingest.value_extractors import (
    get_int,
    get_nested_int,
    get_nested_str,
    get_nested_value,
    get_str,
    to_json,
)

SIDES = ("home", "away")


def country_refs(match: Mapping[str, Any]) -> Iterator[Tuple[str, Optional[int]]]:
    """Yield ``(name, statsbomb_id)`` for every country a match record mentions."""

    for side in SIDES:
        team = match.get(f"{side}_team")
        yield from _country(get_nested_value(team, ("country",)))
        for manager in _managers(team):
            yield from _country(manager.get("country"))
    for key in ("stadium", "referee"):
        yield from _country(get_nested_value(match, (key, "country")))

    competition_country = get_nested_str(match, ("competition", "country_name"))
    if competition_country:
        yield competition_country, None


def extract_match_rows(
    match: Mapping[str, Any],
    *,
    competition_id: int,
    season_id: int,
    resolve: Resolve,
) -> List[TableRow]:
    """Rows for one entry of ``matches/<competition_id>/<season_id>.json``.

    Competition and season ids come from the file path. The competition and
    season rows derived here only guarantee the parents exist; the
    competitions loader never overwrites them.
    """

    match_id = get_int(match.get("match_id"))
    if match_id is None:
        return []

    competition = match.get("competition") if isinstance(match.get("competition"), Mapping) else {}
    season = match.get("season") if isinstance(match.get("season"), Mapping) else {}
    competition_country = get_str(competition.get("country_name"))

    rows = [
        TableRow(
            "competitions",
            {
                "competition_id": competition_id,
                "competition_name": get_str(competition.get("competition_name")) or str(competition_id),
                "country_id": resolve("countries", competition_country),
                "competition_gender": get_nested_str(match, ("home_team", "home_team_gender")),
                "competition_youth": None,
                "competition_international": int(competition_country == "International"),
                "raw_json": to_json(competition),
            },
        ),
        TableRow(
            "seasons",
            {
                "competition_id": competition_id,
                "season_id": season_id,
                "season_name": get_str(season.get("season_name")) or str(season_id),
                "match_updated": parse_timestamp(match.get("last_updated")),
                "match_available": parse_timestamp(match.get("last_updated")),
                "match_updated_360": parse_timestamp(match.get("last_updated_360")),
                "match_available_360": parse_timestamp(match.get("last_updated_360")),
                "raw_json": to_json(season),
            },
        ),
    ]

    stage_id = get_nested_int(match, ("competition_stage", "id"))
    stage_name = get_nested_str(match, ("competition_stage", "name"))
    if stage_id is not None:
        rows.append(TableRow("competition_stages", {"id": stage_id, "name": stage_name or str(stage_id)}))

    team_ids = {}
    for side in SIDES:
        team = match.get(f"{side}_team")
        team_id = get_nested_int(team, (f"{side}_team_id",))
        team_ids[side] = team_id
        if team_id is None:
            continue
        rows.append(
            TableRow(
                "teams",
                {
                    "team_id": team_id,
                    "team_name": get_nested_str(team, (f"{side}_team_name",)) or str(team_id),
                    "team_gender": get_nested_str(team, (f"{side}_team_gender",)),
                    "team_group": get_nested_str(team, (f"{side}_team_group",)),
                    "country_id": resolve("countries", get_nested_str(team, ("country", "name"))),
                },
            )
        )

    stadium_id = _named_entity(rows, match, "stadium", "stadiums", "stadium_id", resolve)
    referee_id = _named_entity(rows, match, "referee", "referees", "referee_id", resolve)

    rows.append(
        TableRow(
            "matches",
            {
                "match_id": match_id,
                "competition_id": competition_id,
                "season_id": season_id,
                "match_date": get_str(match.get("match_date")),
                "kick_off": get_str(match.get("kick_off")),
                "home_team_id": team_ids["home"],
                "away_team_id": team_ids["away"],
                "home_score": get_int(match.get("home_score")),
                "away_score": get_int(match.get("away_score")),
                "match_status": get_str(match.get("match_status")),
                "match_status_360": get_str(match.get("match_status_360")),
                "last_updated": get_str(match.get("last_updated")),
                "last_updated_360": get_str(match.get("last_updated_360")),
                "match_week": get_int(match.get("match_week")),
                "competition_stage_id": stage_id,
                "stadium_id": stadium_id,
                "referee_id": referee_id,
                "data_version": get_nested_str(match, ("metadata", "data_version")),
                "shot_fidelity_version": get_nested_str(match, ("metadata", "shot_fidelity_version")),
                "xy_fidelity_version": get_nested_str(match, ("metadata", "xy_fidelity_version")),
                "raw_json": to_json(match),
            },
        )
    )

    for side in SIDES:
        team_id = team_ids[side]
        for manager in _managers(match.get(f"{side}_team")):
            manager_id = get_int(manager.get("id"))
            name = get_str(manager.get("name"))
            if manager_id is None or not name:
                continue
            rows.append(
                TableRow(
                    "managers",
                    {
                        "manager_id": manager_id,
                        "name": name,
                        "nickname": get_str(manager.get("nickname")),
                        "date_of_birth": get_str(manager.get("dob")),
                        "country_id": resolve("countries", get_nested_str(manager, ("country", "name"))),
                    },
                )
            )
            if team_id is not None:
                rows.append(
                    TableRow(
                        "match_managers",
                        {
                            "match_id": match_id,
                            "manager_id": manager_id,
                            "team_id": team_id,
                            "is_home_team": int(side == "home"),
                        },
                    )
                )

    return rows


def parse_timestamp(value: Any) -> Optional[str]:
    """Return ``value`` when it is an ISO-8601 timestamp, otherwise ``None``."""

    text = get_str(value)
    if not text:
        return None
    candidate = text.strip()
    if candidate.endswith("Z"):
        candidate = candidate[:-1] + "+00:00"
    try:
        datetime.fromisoformat(candidate)
    except ValueError:
        return None
    return text


def _country(value: Any) -> Iterator[Tuple[str, Optional[int]]]:
    name = get_nested_str(value, ("name",))
    if name:
        yield name, get_nested_int(value, ("id",))


def _managers(team: Any) -> List[Mapping[str, Any]]:
    managers = get_nested_value(team, ("managers",))
    if isinstance(managers, Mapping):
        managers = [managers]
    if not isinstance(managers, list):
        return []
    return [manager for manager in managers if isinstance(manager, Mapping)]


def _named_entity(
    rows: List[TableRow],
    match: Mapping[str, Any],
    key: str,
    table: str,
    id_column: str,
    resolve: Resolve,
) -> Optional[int]:
    entity = match.get(key)
    entity_id = get_nested_int(entity, ("id",))
    name = get_nested_str(entity, ("name",))
    if entity_id is None or not name:
        return None
    rows.append(
        TableRow(
            table,
            {
                id_column: entity_id,
                "name": name,
                "country_id": resolve("countries", get_nested_str(entity, ("country", "name"))),
            },
        )
    )
    return entity_id


__all__ = ["country_refs", "extract_match_rows", "parse_timestamp"]
