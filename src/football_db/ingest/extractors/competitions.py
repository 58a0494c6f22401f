from __future__ import annotations

from typing import Any, List, Mapping, Optional

from football_db.ingest.extractors import Resolve
from football_db.ingest.extractors.matches import parse_timestamp
from football_db.ingest.rows import TableRow
from football_db.ingest.value_extractors import bool_to_int, get_int, get_str, to_json


def competition_country(record: Mapping[str, Any]) -> Optional[str]:
    return get_str(record.get("country_name")) or None


def extract_competition_rows(record: Mapping[str, Any], *, resolve: Resolve) -> List[TableRow]:
    """One competition row and one season row per ``competitions.json`` entry."""

    competition_id = get_int(record.get("competition_id"))
    if competition_id is None:
        return []

    raw_json = to_json(record)
    rows = [
        TableRow(
            "competitions",
            {
                "competition_id": competition_id,
                "competition_name": get_str(record.get("competition_name")) or str(competition_id),
                "country_id": resolve("countries", competition_country(record)),
                "competition_gender": get_str(record.get("competition_gender")),
                "competition_youth": bool_to_int(record.get("competition_youth")),
                "competition_international": bool_to_int(record.get("competition_international")),
                "raw_json": raw_json,
            },
        )
    ]

    season_id = get_int(record.get("season_id"))
    if season_id is not None:
        rows.append(
            TableRow(
                "seasons",
                {
                    "competition_id": competition_id,
                    "season_id": season_id,
                    "season_name": get_str(record.get("season_name")) or str(season_id),
                    "match_updated": parse_timestamp(record.get("match_updated")),
                    "match_available": parse_timestamp(record.get("match_available")),
                    "match_updated_360": parse_timestamp(record.get("match_updated_360")),
                    "match_available_360": parse_timestamp(record.get("match_available_360")),
                    "raw_json": raw_json,
                },
            )
        )
    return rows


__all__ = ["competition_country", "extract_competition_rows"]
