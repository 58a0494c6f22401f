"""Load ``matches/<competition_id>/<season_id>.json`` files.

This is the first loader of a fresh database: besides matches it creates the
competitions, seasons, stages, teams, managers, stadiums, referees and
countries those matches mention.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import List, Tuple

from football_db.config import DEFAULT_PARAMETER_BUDGET
from football_db.errors import SkippableInputError
from football_db.ingest.extractors.matches import country_refs, extract_match_rows
from football_db.ingest.loaders._common import checkpoint, progress, resolver_for, should_commit
from football_db.ingest.reader import read_json_array, season_files, season_key_from_path
from football_db.ingest.report import LoadReport
from football_db.ingest.resolver import CountryResolver
from football_db.ingest.writer import BatchedWriter

logger = logging.getLogger(__name__)

MATCH_TABLES = (
    "countries",
    "competitions",
    "seasons",
    "competition_stages",
    "teams",
    "managers",
    "stadiums",
    "referees",
    "matches",
    "match_managers",
)


def load_matches(
    connection: sqlite3.Connection,
    data_path: Path | str,
    *,
    parameter_budget: int = DEFAULT_PARAMETER_BUDGET,
    show_progress: bool = False,
) -> LoadReport:
    report = LoadReport("matches")
    writer = BatchedWriter(connection, parameter_budget=parameter_budget)
    countries = CountryResolver(connection, writer)

    paths = season_files(data_path)
    report.files_seen = len(paths)

    usable: List[Tuple[Path, int, int]] = []
    for path in progress(paths, desc="Scanning matches", show_progress=show_progress):
        try:
            competition_id, season_id = season_key_from_path(path)
            records = read_json_array(path)
        except SkippableInputError as exc:
            report.skip(exc)
            continue
        for match in records:
            for name, statsbomb_id in country_refs(match):
                countries.collect(name, statsbomb_id=statsbomb_id)
        usable.append((path, competition_id, season_id))

    countries.reconcile()
    resolve = resolver_for({"countries": countries})

    for path, competition_id, season_id in progress(usable, desc="Loading matches", show_progress=show_progress):
        for match in read_json_array(path):
            rows = extract_match_rows(
                match, competition_id=competition_id, season_id=season_id, resolve=resolve
            )
            if not rows:
                report.records_skipped += 1
            writer.add_all(rows)
        report.files_processed += 1
        if should_commit(report.files_processed):
            checkpoint(writer, connection)

    checkpoint(writer, connection)
    report.record_writer(writer)
    report.verify(connection, MATCH_TABLES)
    report.log_summary()
    return report


__all__ = ["MATCH_TABLES", "load_matches"]
