"""Run the loaders in dependency order against one database."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Callable, Dict, List

from football_db.config import DEFAULT_PARAMETER_BUDGET
from football_db.ingest.aggregate import aggregate_player_stats
from football_db.ingest.loaders import (
    load_competitions,
    load_events,
    load_lineups,
    load_matches,
    load_three_sixty,
)
from football_db.ingest.report import LoadReport
from football_db.ingest.schema import VOCABULARY_TABLES
from football_db.ingest.vocabularies import seed_vocabularies
from football_db.ingest.writer import BatchedWriter

logger = logging.getLogger(__name__)

Loader = Callable[..., LoadReport]

# Matches create the countries that competitions require; everything else needs matches.
LOADERS: Dict[str, Loader] = {
    "matches": load_matches,
    "competitions": load_competitions,
    "lineups": load_lineups,
    "three-sixty": load_three_sixty,
    "events": load_events,
}


def seed(connection: sqlite3.Connection, *, parameter_budget: int = DEFAULT_PARAMETER_BUDGET) -> LoadReport:
    report = LoadReport("seed")
    writer = BatchedWriter(connection, parameter_budget=parameter_budget)
    seed_vocabularies(writer)
    connection.commit()
    report.record_writer(writer)
    report.verify(connection, VOCABULARY_TABLES + ("positions", "competition_stages"))
    report.log_summary()
    return report


def run_all(
    connection: sqlite3.Connection,
    data_path: Path | str,
    *,
    parameter_budget: int = DEFAULT_PARAMETER_BUDGET,
    show_progress: bool = False,
) -> List[LoadReport]:
    """Seed, run every loader, then aggregate player stats."""

    reports = [seed(connection, parameter_budget=parameter_budget)]
    for name, loader in LOADERS.items():
        logger.info("Running %s loader", name)
        reports.append(
            loader(
                connection,
                data_path,
                parameter_budget=parameter_budget,
                show_progress=show_progress,
            )
        )
    aggregate_player_stats(connection)
    return reports


__all__ = ["LOADERS", "run_all", "seed"]
