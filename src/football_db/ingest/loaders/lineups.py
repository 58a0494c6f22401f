from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import List, Tuple

from football_db.config import DEFAULT_PARAMETER_BUDGET
from football_db.errors import SkippableInputError
from football_db.ingest.extractors.lineups import extract_lineup_rows, iter_lineup_players
from football_db.ingest.loaders._common import (
    checkpoint,
    loaded_matches,
    match_for,
    progress,
    resolver_for,
    should_commit,
)
from football_db.ingest.reader import lineup_files, read_json_array
from football_db.ingest.report import LoadReport
from football_db.ingest.resolver import PLAYERS, POSITIONS, TEAMS, CountryResolver, IdentityResolver
from football_db.ingest.value_extractors import get_int, get_nested_int, get_nested_str, get_str
from football_db.ingest.writer import BatchedWriter

logger = logging.getLogger(__name__)

LINEUP_TABLES = ("players", "player_lineups", "player_positions", "player_cards")


def load_lineups(
    connection: sqlite3.Connection,
    data_path: Path | str,
    *,
    parameter_budget: int = DEFAULT_PARAMETER_BUDGET,
    show_progress: bool = False,
) -> LoadReport:
    """Load ``lineups/<match_id>.json`` for matches that are already loaded."""

    report = LoadReport("lineups")
    writer = BatchedWriter(connection, parameter_budget=parameter_budget)
    matches = loaded_matches(connection, writer)
    resolvers = {
        "countries": CountryResolver(connection, writer),
        "teams": IdentityResolver(connection, TEAMS, writer),
        "players": IdentityResolver(connection, PLAYERS, writer),
        "positions": IdentityResolver(connection, POSITIONS, writer),
    }

    paths = lineup_files(data_path)
    report.files_seen = len(paths)

    usable: List[Tuple[Path, int]] = []
    for path in progress(paths, desc="Scanning lineups", show_progress=show_progress):
        try:
            match_id = match_for(path, matches)
            document = read_json_array(path)
        except SkippableInputError as exc:
            report.skip(exc)
            continue
        _collect(document, resolvers)
        usable.append((path, match_id))

    # Countries first: players and teams inserted here reference them.
    for name in ("countries", "teams", "players", "positions"):
        resolvers[name].reconcile()
    resolve = resolver_for(resolvers)

    for path, match_id in progress(usable, desc="Loading lineups", show_progress=show_progress):
        writer.add_all(extract_lineup_rows(read_json_array(path), match_id=match_id, resolve=resolve))
        report.files_processed += 1
        if should_commit(report.files_processed):
            checkpoint(writer, connection)

    checkpoint(writer, connection)
    report.record_writer(writer)
    report.verify(connection, LINEUP_TABLES)
    report.log_summary()
    return report


def _collect(document: list, resolvers: dict) -> None:
    for team_id, team_name, player in iter_lineup_players(document):
        resolvers["teams"].collect(team_id, team_name=team_name or str(team_id))

        country = player.get("country")
        country_name = get_nested_str(country, ("name",))
        resolvers["countries"].collect(country_name, statsbomb_id=get_nested_int(country, ("id",)))

        player_id = get_int(player.get("player_id"))
        resolvers["players"].collect(
            player_id,
            player_name=get_str(player.get("player_name")) or str(player_id),
            player_nickname=get_str(player.get("player_nickname")),
        )

        positions = player.get("positions")
        for stint in positions if isinstance(positions, list) else []:
            position_id = get_nested_int(stint, ("position_id",))
            resolvers["positions"].collect(
                position_id, name=get_nested_str(stint, ("position",)) or str(position_id)
            )


__all__ = ["LINEUP_TABLES", "load_lineups"]
