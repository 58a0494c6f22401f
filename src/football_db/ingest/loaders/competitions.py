"""Load ``competitions.json`` on top of the dimensions created from matches."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from football_db.config import DEFAULT_PARAMETER_BUDGET
from football_db.errors import SkippableInputError
from football_db.ingest.extractors.competitions import competition_country, extract_competition_rows
from football_db.ingest.loaders._common import checkpoint, resolver_for
from football_db.ingest.reader import competitions_file, read_json_array
from football_db.ingest.report import LoadReport
from football_db.ingest.resolver import CountryResolver
from football_db.ingest.writer import BatchedWriter

logger = logging.getLogger(__name__)

COMPETITION_TABLES = ("countries", "competitions", "seasons")


def load_competitions(
    connection: sqlite3.Connection,
    data_path: Path | str,
    *,
    parameter_budget: int = DEFAULT_PARAMETER_BUDGET,
    show_progress: bool = False,
) -> LoadReport:
    """Insert competitions and seasons, leaving rows created from matches untouched.

    Countries must already be populated. Names missing from the table, such as
    regions ("Africa") of competitions that have no match files, are added
    without a StatsBomb id.
    """

    report = LoadReport("competitions")
    writer = BatchedWriter(connection, parameter_budget=parameter_budget)
    countries = CountryResolver(connection, writer)
    countries.require_populated("Run the matches loader first.")

    path = competitions_file(data_path)
    report.files_seen = 1
    try:
        records = read_json_array(path)
    except SkippableInputError as exc:
        report.skip(exc)
        records = []

    for record in records:
        countries.collect(competition_country(record))
    added = countries.reconcile()
    if added:
        logger.info("Added countries referenced only by competitions: %s", ", ".join(map(str, added)))

    resolve = resolver_for({"countries": countries})
    for record in records:
        rows = extract_competition_rows(record, resolve=resolve)
        if not rows:
            report.records_skipped += 1
        writer.add_all(rows)
    if not report.skipped:
        report.files_processed = 1

    checkpoint(writer, connection)
    report.record_writer(writer)
    report.verify(connection, COMPETITION_TABLES)
    report.log_summary()
    return report


__all__ = ["COMPETITION_TABLES", "load_competitions"]
