from __future__ import annotations

import json
import sqlite3
from pathlib import Path
from typing import Any, Dict, List

import pytest

from football_db.database import connect
from football_db.ingest.pipeline import run_all
from football_db.ingest.schema import initialise_schema

SPAIN = {"id": 214, "name": "Spain"}
ARGENTINA = {"id": 11, "name": "Argentina"}

BARCELONA = {"id": 217, "name": "Barcelona"}
ALAVES = {"id": 206, "name": "Deportivo Alavés"}

MESSI = 5503
GRIEZMANN = 5246
PIQUE = 5213
LAGUARDIA = 6374


def write_json(path: Path, payload: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def make_match(match_id: int, *, home_score: int, away_score: int, match_date: str) -> Dict[str, Any]:
    return {
        "match_id": match_id,
        "match_date": match_date,
        "kick_off": "21:00:00.000",
        "competition": {"competition_id": 11, "country_name": "Spain", "competition_name": "La Liga"},
        "season": {"season_id": 90, "season_name": "2020/2021"},
        "home_team": {
            "home_team_id": BARCELONA["id"],
            "home_team_name": BARCELONA["name"],
            "home_team_gender": "male",
            "home_team_group": None,
            "country": SPAIN,
            "managers": [
                {
                    "id": 5677,
                    "name": "Ronald Koeman",
                    "nickname": None,
                    "dob": "1963-03-21",
                    "country": {"id": 160, "name": "Netherlands"},
                }
            ],
        },
        "away_team": {
            "away_team_id": ALAVES["id"],
            "away_team_name": ALAVES["name"],
            "away_team_gender": "male",
            "away_team_group": None,
            "country": SPAIN,
            "managers": [
                {
                    "id": 404,
                    "name": "Pablo Machín",
                    "nickname": None,
                    "dob": "1975-04-07",
                    "country": SPAIN,
                }
            ],
        },
        "home_score": home_score,
        "away_score": away_score,
        "match_status": "available",
        "match_status_360": "available",
        "last_updated": "2021-06-13T16:17:31.694",
        "last_updated_360": None,
        "metadata": {"data_version": "1.1.0", "shot_fidelity_version": "2", "xy_fidelity_version": "2"},
        "match_week": 1 if match_id == 1001 else 2,
        "competition_stage": {"id": 1, "name": "Regular Season"},
        "stadium": {"id": 342, "name": "Spotify Camp Nou", "country": SPAIN},
        "referee": {"id": 581, "name": "Jesús Gil Manzano", "country": SPAIN},
    }


def _stint(position_id: int, position: str, start: str, end: Any, reason: str) -> Dict[str, Any]:
    return {
        "position_id": position_id,
        "position": position,
        "from": start,
        "to": end,
        "from_period": 1,
        "to_period": None if end is None else 2,
        "start_reason": reason,
        "end_reason": "Final Whistle",
    }


def make_lineups(match_id: int) -> List[Dict[str, Any]]:
    barcelona = [
        {
            "player_id": MESSI,
            "player_name": "Lionel Andrés Messi Cuccittini",
            "player_nickname": "Lionel Messi",
            "jersey_number": 10,
            "country": ARGENTINA,
            "cards": [],
            "positions": [
                _stint(17, "Right Wing", "00:00", "45:00", "Starting XI"),
                _stint(23, "Center Forward", "45:00", None, "Tactical Shift"),
            ],
        },
        {
            "player_id": GRIEZMANN,
            "player_name": "Antoine Griezmann",
            "player_nickname": None,
            "jersey_number": 7,
            "country": {"id": 78, "name": "France"},
            "cards": [],
            "positions": [_stint(23, "Center Forward", "60:00", None, "Substitution - On (Tactical)")],
        },
    ]
    alaves = [
        {
            "player_id": LAGUARDIA,
            "player_name": "Víctor Laguardia Cisneros",
            "player_nickname": "Víctor Laguardia",
            "jersey_number": 5,
            "country": SPAIN,
            "cards": [{"time": "34:12", "card_type": "Yellow Card", "reason": "Foul Committed", "period": 1}]
            if match_id == 1001
            else [],
            "positions": [_stint(3, "Right Center Back", "00:00", None, "Starting XI")],
        },
    ]
    if match_id == 1002:
        barcelona = barcelona[1:] + [
            {
                "player_id": PIQUE,
                "player_name": "Gerard Piqué Bernabéu",
                "player_nickname": "Gerard Piqué",
                "jersey_number": 3,
                "country": SPAIN,
                "cards": [],
                "positions": [_stint(5, "Left Center Back", "00:00", None, "Starting XI")],
            }
        ]
    return [
        {"team_id": BARCELONA["id"], "team_name": BARCELONA["name"], "lineup": barcelona},
        {"team_id": ALAVES["id"], "team_name": ALAVES["name"], "lineup": alaves},
    ]


def _event(event_id: str, index: int, type_id: int, type_name: str, **extra: Any) -> Dict[str, Any]:
    event = {
        "id": event_id,
        "index": index,
        "period": 1,
        "timestamp": f"00:{index:02d}:00.000",
        "minute": index,
        "second": 0,
        "type": {"id": type_id, "name": type_name},
        "possession": 1,
        "possession_team": BARCELONA,
        "play_pattern": {"id": 1, "name": "Regular Play"},
        "team": BARCELONA,
    }
    event.update(extra)
    return event


def make_events_1001() -> List[Dict[str, Any]]:
    return [
        _event("ev-start", 1, 35, "Starting XI", tactics={"formation": 433}),
        _event(
            "ev-pass",
            2,
            30,
            "Pass",
            player={"id": MESSI, "name": "Lionel Andrés Messi Cuccittini"},
            position={"id": 17, "name": "Right Wing"},
            location=[80.0, 30.0],
            duration=1.2,
            related_events=["ev-shot", "missing-id"],
            **{
                "pass": {
                    "recipient": {"id": GRIEZMANN, "name": "Antoine Griezmann"},
                    "length": 20.5,
                    "angle": 0.3,
                    "height": {"id": 1, "name": "Ground Pass"},
                    "end_location": [100.0, 40.0],
                    "body_part": {"id": 38, "name": "Left Foot"},
                    "goal_assist": True,
                    "shot_assist": True,
                    "assisted_shot_id": "ev-shot",
                    "cross": True,
                }
            },
        ),
        _event(
            "ev-shot",
            3,
            16,
            "Shot",
            player={"id": GRIEZMANN, "name": "Antoine Griezmann"},
            position={"id": 23, "name": "Center Forward"},
            location=[100.0, 40.0],
            under_pressure=True,
            related_events=["ev-pass", "ev-pass"],
            shot={
                "statsbomb_xg": 0.42,
                "end_location": [120.0, 38.0, 0.5],
                "key_pass_id": "ev-pass",
                "outcome": {"id": 97, "name": "Goal"},
                "type": {"id": 87, "name": "Open Play"},
                "body_part": {"id": 40, "name": "Right Foot"},
                "technique": {"id": 93, "name": "Normal"},
                "first_time": True,
                "freeze_frame": [{"location": [118.0, 40.0], "teammate": False}],
            },
        ),
        _event(
            "ev-pass-2",
            4,
            30,
            "Pass",
            player={"id": MESSI, "name": "Lionel Andrés Messi Cuccittini"},
            **{
                "pass": {
                    "recipient": {"id": PIQUE, "name": "Gerard Piqué Bernabéu"},
                    "height": {"id": 3, "name": "High Pass"},
                    "outcome": {"id": 9, "name": "Incomplete"},
                }
            },
        ),
        _event(
            "ev-press",
            5,
            17,
            "Pressure",
            team=ALAVES,
            player={"id": LAGUARDIA, "name": "Víctor Laguardia Cisneros"},
            counterpress=True,
        ),
        _event(
            "ev-foul",
            6,
            22,
            "Foul Committed",
            team=ALAVES,
            player={"id": LAGUARDIA, "name": "Víctor Laguardia Cisneros"},
            foul_committed={"card": {"id": 5, "name": "Yellow Card"}, "advantage": True},
        ),
        _event(
            "ev-foul-won",
            7,
            21,
            "Foul Won",
            player={"id": MESSI, "name": "Lionel Andrés Messi Cuccittini"},
            foul_won={"defensive": True},
        ),
        _event("ev-mystery", 8, 99, "Mystery Event", play_pattern={"id": 77, "name": "From Nowhere"}),
        {"id": "ev-untyped", "index": 9, "period": 1},
    ]


def make_events_1002() -> List[Dict[str, Any]]:
    return [
        _event(
            "ev2-shot",
            1,
            16,
            "Shot",
            player={"id": GRIEZMANN, "name": "Antoine Griezmann"},
            shot={"statsbomb_xg": 0.1, "outcome": {"id": 100, "name": "Saved"}},
        ),
        _event(
            "ev2-carry",
            2,
            43,
            "Carry",
            player={"id": PIQUE, "name": "Gerard Piqué Bernabéu"},
            carry={"end_location": [60.0, 20.0]},
        ),
    ]


def make_three_sixty_1001() -> List[Dict[str, Any]]:
    return [
        {
            "event_uuid": "ev-pass",
            "visible_area": [0.0, 0.0, 120.0, 0.0, 120.0, 80.0, 0.0, 80.0, 0.0, 0.0],
            "freeze_frame": [
                {"teammate": True, "actor": True, "keeper": False, "location": [80.0, 30.0]},
                {"teammate": False, "actor": False, "keeper": True, "location": [83.0, 34.0]},
                {"teammate": False, "actor": False, "keeper": False, "location": [130.0, 90.0]},
            ],
        },
        {
            "event_uuid": "ev-shot",
            "visible_area": [100.0, 20.0, 120.0, 20.0],
            "freeze_frame": [{"teammate": False, "actor": False, "keeper": True, "location": [118.0, 40.0]}],
        },
    ]


def make_competitions() -> List[Dict[str, Any]]:
    return [
        {
            "competition_id": 11,
            "season_id": 90,
            "country_name": "Spain",
            "competition_name": "La Liga",
            "competition_gender": "male",
            "competition_youth": False,
            "competition_international": False,
            "season_name": "2020/2021",
            "match_updated": "2023-11-18T14:41:31.658493",
            "match_updated_360": None,
            "match_available_360": None,
            "match_available": "2023-11-18T14:41:31.658493",
        },
        {
            "competition_id": 1267,
            "season_id": 107,
            "country_name": "Africa",
            "competition_name": "African Cup of Nations",
            "competition_gender": "male",
            "competition_youth": False,
            "competition_international": True,
            "season_name": "2023",
            "match_updated": "not a timestamp",
            "match_updated_360": None,
            "match_available_360": None,
            "match_available": "2024-02-12T12:00:00",
        },
    ]


def build_corpus(root: Path) -> Path:
    """Write a small StatsBomb-shaped data directory under ``root``."""

    write_json(root / "competitions.json", make_competitions())
    write_json(
        root / "matches" / "11" / "90.json",
        [
            make_match(1001, home_score=1, away_score=0, match_date="2020-09-27"),
            make_match(1002, home_score=2, away_score=2, match_date="2020-10-04"),
        ],
    )
    for match_id in (1001, 1002):
        write_json(root / "lineups" / f"{match_id}.json", make_lineups(match_id))
    write_json(root / "events" / "1001.json", make_events_1001())
    write_json(root / "events" / "1002.json", make_events_1002())
    write_json(root / "events" / "9999.json", make_events_1002())
    write_json(root / "events" / "latest.json", [])
    write_json(root / "three-sixty" / "1001.json", make_three_sixty_1001())
    (root / "three-sixty" / "1002.json").write_text("{not json", encoding="utf-8")
    return root


@pytest.fixture()
def data_path(tmp_path: Path) -> Path:
    return build_corpus(tmp_path / "data")


@pytest.fixture()
def connection(tmp_path: Path):
    connection = connect(tmp_path / "football.sqlite")
    initialise_schema(connection)
    try:
        yield connection
    finally:
        connection.close()


@pytest.fixture()
def loaded_connection(connection: sqlite3.Connection, data_path: Path) -> sqlite3.Connection:
    run_all(connection, data_path)
    return connection


@pytest.fixture()
def loaded_db_path(tmp_path: Path, data_path: Path) -> Path:
    db_path = tmp_path / "loaded.sqlite"
    connection = connect(db_path)
    try:
        initialise_schema(connection)
        run_all(connection, data_path)
    finally:
        connection.close()
    return db_path
