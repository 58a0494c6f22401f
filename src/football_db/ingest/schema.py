from __future__ import annotations

import sqlite3
from typing import Dict, NamedTuple, Tuple


class Table(NamedTuple):
    name: str
    columns: Tuple[str, ...]


VOCABULARY_TABLES = (
    "event_types",
    "play_patterns",
    "body_parts",
    "pass_heights",
    "pass_types",
    "pass_techniques",
    "pass_outcomes",
    "shot_outcomes",
    "shot_types",
    "shot_techniques",
    "duel_types",
    "duel_outcomes",
    "goalkeeper_positions",
    "goalkeeper_techniques",
    "goalkeeper_types",
    "goalkeeper_outcomes",
    "dribble_outcomes",
    "interception_outcomes",
    "ball_receipt_outcomes",
    "fifty_fifty_outcomes",
    "foul_types",
    "card_types",
)

_VOCABULARY_STATEMENTS = tuple(
    f"""
    CREATE TABLE IF NOT EXISTS {name} (
        id INTEGER PRIMARY KEY,
        name TEXT NOT NULL
    );
    """
    for name in VOCABULARY_TABLES
)

_DIMENSION_STATEMENTS = (
    """
    CREATE TABLE IF NOT EXISTS countries (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        statsbomb_id INTEGER UNIQUE,
        name TEXT NOT NULL UNIQUE,
        type TEXT NOT NULL CHECK (type IN ('country', 'region', 'international'))
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS competitions (
        competition_id INTEGER PRIMARY KEY,
        competition_name TEXT NOT NULL,
        country_id INTEGER REFERENCES countries(id),
        competition_gender TEXT,
        competition_youth INTEGER,
        competition_international INTEGER,
        raw_json TEXT NOT NULL
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS seasons (
        competition_id INTEGER NOT NULL REFERENCES competitions(competition_id),
        season_id INTEGER NOT NULL,
        season_name TEXT NOT NULL,
        match_updated TEXT,
        match_available TEXT,
        match_updated_360 TEXT,
        match_available_360 TEXT,
        raw_json TEXT NOT NULL,
        PRIMARY KEY (competition_id, season_id)
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS competition_stages (
        id INTEGER PRIMARY KEY,
        name TEXT NOT NULL
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS teams (
        team_id INTEGER PRIMARY KEY,
        team_name TEXT NOT NULL,
        team_gender TEXT,
        team_group TEXT,
        country_id INTEGER REFERENCES countries(id)
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS managers (
        manager_id INTEGER PRIMARY KEY,
        name TEXT NOT NULL,
        nickname TEXT,
        date_of_birth TEXT,
        country_id INTEGER REFERENCES countries(id)
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS stadiums (
        stadium_id INTEGER PRIMARY KEY,
        name TEXT NOT NULL,
        country_id INTEGER REFERENCES countries(id)
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS referees (
        referee_id INTEGER PRIMARY KEY,
        name TEXT NOT NULL,
        country_id INTEGER REFERENCES countries(id)
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS players (
        player_id INTEGER PRIMARY KEY,
        player_name TEXT NOT NULL,
        player_nickname TEXT,
        total_matches INTEGER NOT NULL DEFAULT 0,
        total_minutes_played REAL NOT NULL DEFAULT 0,
        total_goals INTEGER NOT NULL DEFAULT 0,
        total_assists INTEGER NOT NULL DEFAULT 0,
        total_yellow_cards INTEGER NOT NULL DEFAULT 0,
        total_red_cards INTEGER NOT NULL DEFAULT 0,
        total_passes INTEGER NOT NULL DEFAULT 0,
        total_completed_passes INTEGER NOT NULL DEFAULT 0
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS positions (
        id INTEGER PRIMARY KEY,
        name TEXT NOT NULL,
        category TEXT,
        display_order INTEGER
    );
    """,
)

_MATCH_STATEMENTS = (
    """
    CREATE TABLE IF NOT EXISTS matches (
        match_id INTEGER PRIMARY KEY,
        competition_id INTEGER NOT NULL REFERENCES competitions(competition_id),
        season_id INTEGER NOT NULL,
        match_date TEXT,
        kick_off TEXT,
        home_team_id INTEGER REFERENCES teams(team_id),
        away_team_id INTEGER REFERENCES teams(team_id),
        home_score INTEGER,
        away_score INTEGER,
        match_status TEXT,
        match_status_360 TEXT,
        last_updated TEXT,
        last_updated_360 TEXT,
        match_week INTEGER,
        competition_stage_id INTEGER REFERENCES competition_stages(id),
        stadium_id INTEGER REFERENCES stadiums(stadium_id),
        referee_id INTEGER REFERENCES referees(referee_id),
        data_version TEXT,
        shot_fidelity_version TEXT,
        xy_fidelity_version TEXT,
        raw_json TEXT NOT NULL,
        FOREIGN KEY (competition_id, season_id) REFERENCES seasons(competition_id, season_id)
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS match_managers (
        match_id INTEGER NOT NULL REFERENCES matches(match_id),
        manager_id INTEGER NOT NULL REFERENCES managers(manager_id),
        team_id INTEGER NOT NULL REFERENCES teams(team_id),
        is_home_team INTEGER NOT NULL,
        PRIMARY KEY (match_id, manager_id, team_id)
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS player_lineups (
        match_id INTEGER NOT NULL REFERENCES matches(match_id),
        player_id INTEGER NOT NULL REFERENCES players(player_id),
        team_id INTEGER NOT NULL REFERENCES teams(team_id),
        jersey_number INTEGER,
        country_id INTEGER REFERENCES countries(id),
        is_starter INTEGER NOT NULL,
        minutes_played REAL NOT NULL,
        raw_json TEXT NOT NULL,
        PRIMARY KEY (match_id, player_id)
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS player_positions (
        match_id INTEGER NOT NULL REFERENCES matches(match_id),
        player_id INTEGER NOT NULL REFERENCES players(player_id),
        position_id INTEGER REFERENCES positions(id),
        from_time TEXT NOT NULL,
        to_time TEXT,
        from_period INTEGER NOT NULL,
        to_period INTEGER,
        start_reason TEXT,
        end_reason TEXT,
        PRIMARY KEY (match_id, player_id, from_period, from_time)
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS player_cards (
        match_id INTEGER NOT NULL REFERENCES matches(match_id),
        player_id INTEGER NOT NULL REFERENCES players(player_id),
        time TEXT NOT NULL,
        card_type TEXT NOT NULL,
        reason TEXT,
        period INTEGER,
        PRIMARY KEY (match_id, player_id, time, card_type)
    );
    """,
)

_EVENT_STATEMENTS = (
    """
    CREATE TABLE IF NOT EXISTS events (
        id TEXT PRIMARY KEY,
        event_index INTEGER,
        match_id INTEGER NOT NULL REFERENCES matches(match_id),
        period INTEGER,
        timestamp TEXT,
        minute INTEGER,
        second INTEGER,
        type_id INTEGER NOT NULL REFERENCES event_types(id),
        possession INTEGER,
        possession_team_id INTEGER REFERENCES teams(team_id),
        play_pattern_id INTEGER REFERENCES play_patterns(id),
        team_id INTEGER REFERENCES teams(team_id),
        player_id INTEGER REFERENCES players(player_id),
        position_id INTEGER REFERENCES positions(id),
        location_x REAL,
        location_y REAL,
        duration REAL,
        under_pressure INTEGER NOT NULL DEFAULT 0,
        off_camera INTEGER NOT NULL DEFAULT 0,
        out INTEGER NOT NULL DEFAULT 0,
        counterpress INTEGER NOT NULL DEFAULT 0,
        raw_json TEXT NOT NULL
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS event_relationships (
        event_id TEXT NOT NULL REFERENCES events(id),
        related_event_id TEXT NOT NULL REFERENCES events(id),
        PRIMARY KEY (event_id, related_event_id)
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS passes (
        event_id TEXT PRIMARY KEY REFERENCES events(id),
        recipient_id INTEGER REFERENCES players(player_id),
        length REAL,
        angle REAL,
        end_x REAL,
        end_y REAL,
        height_id INTEGER REFERENCES pass_heights(id),
        type_id INTEGER REFERENCES pass_types(id),
        body_part_id INTEGER REFERENCES body_parts(id),
        technique_id INTEGER REFERENCES pass_techniques(id),
        outcome_id INTEGER REFERENCES pass_outcomes(id),
        assisted_shot_id TEXT,
        shot_assist INTEGER NOT NULL DEFAULT 0,
        goal_assist INTEGER NOT NULL DEFAULT 0,
        is_switch INTEGER NOT NULL DEFAULT 0,
        is_cross INTEGER NOT NULL DEFAULT 0,
        cut_back INTEGER NOT NULL DEFAULT 0,
        deflected INTEGER NOT NULL DEFAULT 0,
        miscommunication INTEGER NOT NULL DEFAULT 0,
        aerial_won INTEGER NOT NULL DEFAULT 0,
        no_touch INTEGER NOT NULL DEFAULT 0,
        backheel INTEGER NOT NULL DEFAULT 0,
        through_ball INTEGER NOT NULL DEFAULT 0,
        inswinging INTEGER NOT NULL DEFAULT 0,
        outswinging INTEGER NOT NULL DEFAULT 0,
        straight INTEGER NOT NULL DEFAULT 0
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS shots (
        event_id TEXT PRIMARY KEY REFERENCES events(id),
        statsbomb_xg REAL,
        end_x REAL,
        end_y REAL,
        end_z REAL,
        outcome_id INTEGER REFERENCES shot_outcomes(id),
        type_id INTEGER REFERENCES shot_types(id),
        body_part_id INTEGER REFERENCES body_parts(id),
        technique_id INTEGER REFERENCES shot_techniques(id),
        key_pass_id TEXT,
        first_time INTEGER NOT NULL DEFAULT 0,
        one_on_one INTEGER NOT NULL DEFAULT 0,
        aerial_won INTEGER NOT NULL DEFAULT 0,
        deflected INTEGER NOT NULL DEFAULT 0,
        open_goal INTEGER NOT NULL DEFAULT 0,
        follows_dribble INTEGER NOT NULL DEFAULT 0,
        redirect INTEGER NOT NULL DEFAULT 0,
        saved_off_target INTEGER NOT NULL DEFAULT 0,
        saved_to_post INTEGER NOT NULL DEFAULT 0,
        freeze_frame TEXT
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS carries (
        event_id TEXT PRIMARY KEY REFERENCES events(id),
        end_x REAL,
        end_y REAL
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS dribbles (
        event_id TEXT PRIMARY KEY REFERENCES events(id),
        outcome_id INTEGER REFERENCES dribble_outcomes(id),
        overrun INTEGER NOT NULL DEFAULT 0,
        nutmeg INTEGER NOT NULL DEFAULT 0,
        no_touch INTEGER NOT NULL DEFAULT 0
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS pressures (
        event_id TEXT PRIMARY KEY REFERENCES events(id),
        counterpress INTEGER NOT NULL DEFAULT 0
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS duels (
        event_id TEXT PRIMARY KEY REFERENCES events(id),
        type_id INTEGER REFERENCES duel_types(id),
        outcome_id INTEGER REFERENCES duel_outcomes(id),
        counterpress INTEGER NOT NULL DEFAULT 0
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS blocks (
        event_id TEXT PRIMARY KEY REFERENCES events(id),
        deflection INTEGER NOT NULL DEFAULT 0,
        offensive INTEGER NOT NULL DEFAULT 0,
        save_block INTEGER NOT NULL DEFAULT 0,
        counterpress INTEGER NOT NULL DEFAULT 0
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS interceptions (
        event_id TEXT PRIMARY KEY REFERENCES events(id),
        outcome_id INTEGER REFERENCES interception_outcomes(id),
        counterpress INTEGER NOT NULL DEFAULT 0
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS clearances (
        event_id TEXT PRIMARY KEY REFERENCES events(id),
        body_part_id INTEGER REFERENCES body_parts(id),
        aerial_won INTEGER NOT NULL DEFAULT 0
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS ball_receipts (
        event_id TEXT PRIMARY KEY REFERENCES events(id),
        outcome_id INTEGER REFERENCES ball_receipt_outcomes(id)
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS ball_recoveries (
        event_id TEXT PRIMARY KEY REFERENCES events(id),
        recovery_failure INTEGER NOT NULL DEFAULT 0,
        offensive INTEGER NOT NULL DEFAULT 0
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS fifty_fifties (
        event_id TEXT PRIMARY KEY REFERENCES events(id),
        outcome_id INTEGER REFERENCES fifty_fifty_outcomes(id),
        counterpress INTEGER NOT NULL DEFAULT 0
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS fouls (
        event_id TEXT PRIMARY KEY REFERENCES events(id),
        committed INTEGER NOT NULL,
        type_id INTEGER REFERENCES foul_types(id),
        card_id INTEGER REFERENCES card_types(id),
        penalty INTEGER NOT NULL DEFAULT 0,
        advantage INTEGER NOT NULL DEFAULT 0,
        offensive INTEGER NOT NULL DEFAULT 0,
        defensive INTEGER NOT NULL DEFAULT 0,
        counterpress INTEGER NOT NULL DEFAULT 0
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS bad_behaviours (
        event_id TEXT PRIMARY KEY REFERENCES events(id),
        card_id INTEGER REFERENCES card_types(id)
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS goalkeeper_events (
        event_id TEXT PRIMARY KEY REFERENCES events(id),
        position_id INTEGER REFERENCES goalkeeper_positions(id),
        technique_id INTEGER REFERENCES goalkeeper_techniques(id),
        body_part_id INTEGER REFERENCES body_parts(id),
        type_id INTEGER REFERENCES goalkeeper_types(id),
        outcome_id INTEGER REFERENCES goalkeeper_outcomes(id),
        end_x REAL,
        end_y REAL
    );
    """,
)

# Frames reference events by uuid only; tracking files may be loaded before events.
_THREE_SIXTY_STATEMENTS = (
    """
    CREATE TABLE IF NOT EXISTS three_sixty_frames (
        event_uuid TEXT PRIMARY KEY,
        match_id INTEGER NOT NULL REFERENCES matches(match_id),
        visible_area TEXT,
        player_count INTEGER NOT NULL,
        visible_area_size REAL,
        raw_json TEXT NOT NULL
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS three_sixty_players (
        event_uuid TEXT NOT NULL REFERENCES three_sixty_frames(event_uuid),
        player_index INTEGER NOT NULL,
        teammate INTEGER NOT NULL DEFAULT 0,
        actor INTEGER NOT NULL DEFAULT 0,
        keeper INTEGER NOT NULL DEFAULT 0,
        location_x REAL,
        location_y REAL,
        distance_to_actor REAL,
        in_visible_area INTEGER,
        PRIMARY KEY (event_uuid, player_index)
    );
    """,
)

CREATE_TABLE_STATEMENTS = (
    _VOCABULARY_STATEMENTS
    + _DIMENSION_STATEMENTS
    + _MATCH_STATEMENTS
    + _EVENT_STATEMENTS
    + _THREE_SIXTY_STATEMENTS
)

CREATE_INDEX_STATEMENTS = (
    "CREATE INDEX IF NOT EXISTS idx_matches_season ON matches(competition_id, season_id);",
    "CREATE INDEX IF NOT EXISTS idx_events_match ON events(match_id);",
    "CREATE INDEX IF NOT EXISTS idx_events_player ON events(player_id);",
    "CREATE INDEX IF NOT EXISTS idx_events_type ON events(type_id);",
    "CREATE INDEX IF NOT EXISTS idx_player_lineups_player ON player_lineups(player_id);",
    "CREATE INDEX IF NOT EXISTS idx_player_cards_player ON player_cards(player_id);",
    "CREATE INDEX IF NOT EXISTS idx_frames_match ON three_sixty_frames(match_id);",
)

_VOCABULARY = tuple(Table(name, ("id", "name")) for name in VOCABULARY_TABLES)

# Parent tables come before the tables that reference them.
TABLES: Tuple[Table, ...] = _VOCABULARY + (
    Table("countries", ("statsbomb_id", "name", "type")),
    Table(
        "competitions",
        (
            "competition_id",
            "competition_name",
            "country_id",
            "competition_gender",
            "competition_youth",
            "competition_international",
            "raw_json",
        ),
    ),
    Table(
        "seasons",
        (
            "competition_id",
            "season_id",
            "season_name",
            "match_updated",
            "match_available",
            "match_updated_360",
            "match_available_360",
            "raw_json",
        ),
    ),
    Table("competition_stages", ("id", "name")),
    Table("teams", ("team_id", "team_name", "team_gender", "team_group", "country_id")),
    Table("managers", ("manager_id", "name", "nickname", "date_of_birth", "country_id")),
    Table("stadiums", ("stadium_id", "name", "country_id")),
    Table("referees", ("referee_id", "name", "country_id")),
    Table("players", ("player_id", "player_name", "player_nickname")),
    Table("positions", ("id", "name", "category", "display_order")),
    Table(
        "matches",
        (
            "match_id",
            "competition_id",
            "season_id",
            "match_date",
            "kick_off",
            "home_team_id",
            "away_team_id",
            "home_score",
            "away_score",
            "match_status",
            "match_status_360",
            "last_updated",
            "last_updated_360",
            "match_week",
            "competition_stage_id",
            "stadium_id",
            "referee_id",
            "data_version",
            "shot_fidelity_version",
            "xy_fidelity_version",
            "raw_json",
        ),
    ),
    Table("match_managers", ("match_id", "manager_id", "team_id", "is_home_team")),
    Table(
        "player_lineups",
        (
            "match_id",
            "player_id",
            "team_id",
            "jersey_number",
            "country_id",
            "is_starter",
            "minutes_played",
            "raw_json",
        ),
    ),
    Table(
        "player_positions",
        (
            "match_id",
            "player_id",
            "position_id",
            "from_time",
            "to_time",
            "from_period",
            "to_period",
            "start_reason",
            "end_reason",
        ),
    ),
    Table("player_cards", ("match_id", "player_id", "time", "card_type", "reason", "period")),
    Table(
        "events",
        (
            "id",
            "event_index",
            "match_id",
            "period",
            "timestamp",
            "minute",
            "second",
            "type_id",
            "possession",
            "possession_team_id",
            "play_pattern_id",
            "team_id",
            "player_id",
            "position_id",
            "location_x",
            "location_y",
            "duration",
            "under_pressure",
            "off_camera",
            "out",
            "counterpress",
            "raw_json",
        ),
    ),
    Table("event_relationships", ("event_id", "related_event_id")),
    Table(
        "passes",
        (
            "event_id",
            "recipient_id",
            "length",
            "angle",
            "end_x",
            "end_y",
            "height_id",
            "type_id",
            "body_part_id",
            "technique_id",
            "outcome_id",
            "assisted_shot_id",
            "shot_assist",
            "goal_assist",
            "is_switch",
            "is_cross",
            "cut_back",
            "deflected",
            "miscommunication",
            "aerial_won",
            "no_touch",
            "backheel",
            "through_ball",
            "inswinging",
            "outswinging",
            "straight",
        ),
    ),
    Table(
        "shots",
        (
            "event_id",
            "statsbomb_xg",
            "end_x",
            "end_y",
            "end_z",
            "outcome_id",
            "type_id",
            "body_part_id",
            "technique_id",
            "key_pass_id",
            "first_time",
            "one_on_one",
            "aerial_won",
            "deflected",
            "open_goal",
            "follows_dribble",
            "redirect",
            "saved_off_target",
            "saved_to_post",
            "freeze_frame",
        ),
    ),
    Table("carries", ("event_id", "end_x", "end_y")),
    Table("dribbles", ("event_id", "outcome_id", "overrun", "nutmeg", "no_touch")),
    Table("pressures", ("event_id", "counterpress")),
    Table("duels", ("event_id", "type_id", "outcome_id", "counterpress")),
    Table("blocks", ("event_id", "deflection", "offensive", "save_block", "counterpress")),
    Table("interceptions", ("event_id", "outcome_id", "counterpress")),
    Table("clearances", ("event_id", "body_part_id", "aerial_won")),
    Table("ball_receipts", ("event_id", "outcome_id")),
    Table("ball_recoveries", ("event_id", "recovery_failure", "offensive")),
    Table("fifty_fifties", ("event_id", "outcome_id", "counterpress")),
    Table(
        "fouls",
        (
            "event_id",
            "committed",
            "type_id",
            "card_id",
            "penalty",
            "advantage",
            "offensive",
            "defensive",
            "counterpress",
        ),
    ),
    Table("bad_behaviours", ("event_id", "card_id")),
    Table(
        "goalkeeper_events",
        (
            "event_id",
            "position_id",
            "technique_id",
            "body_part_id",
            "type_id",
            "outcome_id",
            "end_x",
            "end_y",
        ),
    ),
    Table(
        "three_sixty_frames",
        ("event_uuid", "match_id", "visible_area", "player_count", "visible_area_size", "raw_json"),
    ),
    Table(
        "three_sixty_players",
        (
            "event_uuid",
            "player_index",
            "teammate",
            "actor",
            "keeper",
            "location_x",
            "location_y",
            "distance_to_actor",
            "in_visible_area",
        ),
    ),
)

TABLES_BY_NAME: Dict[str, Table] = {table.name: table for table in TABLES}

SUBTYPE_TABLES = (
    "passes",
    "shots",
    "carries",
    "dribbles",
    "pressures",
    "duels",
    "blocks",
    "interceptions",
    "clearances",
    "ball_receipts",
    "ball_recoveries",
    "fifty_fifties",
    "fouls",
    "bad_behaviours",
    "goalkeeper_events",
)


def initialise_schema(connection: sqlite3.Connection) -> None:
    connection.execute("PRAGMA foreign_keys = ON;")

    for statement in CREATE_TABLE_STATEMENTS:
        connection.execute(statement)

    for statement in CREATE_INDEX_STATEMENTS:
        connection.execute(statement)

    connection.commit()


__all__ = [
    "Table",
    "TABLES",
    "TABLES_BY_NAME",
    "VOCABULARY_TABLES",
    "SUBTYPE_TABLES",
    "CREATE_TABLE_STATEMENTS",
    "CREATE_INDEX_STATEMENTS",
    "initialise_schema",
]
