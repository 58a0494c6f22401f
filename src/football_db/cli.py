"""Command line entry point: ``football-db <command> [options]``."""

from __future__ import annotations

import argparse
import logging
import sqlite3
from pathlib import Path
from typing import List, Optional, Sequence

from football_db.config import Settings
from football_db.database import connect
from football_db.errors import PreconditionError, UnresolvedKeyError
from football_db.ingest.aggregate import aggregate_player_stats
from football_db.ingest.pipeline import LOADERS, run_all, seed
from football_db.ingest.report import LoadReport
from football_db.ingest.schema import initialise_schema

logger = logging.getLogger(__name__)

COMMANDS = ("seed", *LOADERS, "aggregate", "all")

_HELP = {
    "seed": "Insert the reference vocabularies, positions and competition stages",
    "matches": "Load matches and the dimensions they mention",
    "competitions": "Load competitions.json (requires matches)",
    "lineups": "Load lineups (requires matches)",
    "three-sixty": "Load 360 freeze frames (requires matches)",
    "events": "Load events, subtypes and relationships (requires matches)",
    "aggregate": "Recompute player totals",
    "all": "Run every step in order",
}


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--data-path", type=Path, default=None, help="Root of the StatsBomb data directory")
    common.add_argument("--database", type=Path, default=None, help="SQLite database file to load into")
    common.add_argument(
        "--parameter-budget",
        type=int,
        default=None,
        help="Maximum bound parameters per INSERT statement",
    )
    common.add_argument("--progress", action="store_true", help="Show progress bars")
    common.add_argument(
        "--log-level",
        default="INFO",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Logging verbosity",
    )

    parser = argparse.ArgumentParser(
        prog="football-db",
        description="Load the StatsBomb open-data layout into a SQLite database.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    for command in COMMANDS:
        subparsers.add_parser(command, parents=[common], help=_HELP[command])
    return parser


def run_command(
    command: str, connection: sqlite3.Connection, settings: Settings, *, show_progress: bool
) -> List[LoadReport]:
    initialise_schema(connection)
    if command == "seed":
        return [seed(connection, parameter_budget=settings.parameter_budget)]
    if command == "aggregate":
        aggregate_player_stats(connection)
        return []
    if command == "all":
        return run_all(
            connection,
            settings.data_path,
            parameter_budget=settings.parameter_budget,
            show_progress=show_progress,
        )
    loader = LOADERS[command]
    return [
        loader(
            connection,
            settings.data_path,
            parameter_budget=settings.parameter_budget,
            show_progress=show_progress,
        )
    ]


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s:%(name)s:%(message)s")

    try:
        settings = Settings.from_env().with_overrides(
            data_path=args.data_path,
            database_path=args.database,
            parameter_budget=args.parameter_budget,
        )
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 1

    connection = connect(settings.database_path)
    try:
        reports = run_command(args.command, connection, settings, show_progress=args.progress)
    except (PreconditionError, UnresolvedKeyError, FileNotFoundError, sqlite3.DatabaseError) as exc:
        connection.rollback()
        logger.error("%s failed: %s", args.command, exc)
        return 1
    finally:
        connection.close()

    for report in reports:
        for line in report.summary_lines():
            print(line)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
