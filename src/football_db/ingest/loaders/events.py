"""Load ``events/<match_id>.json`` into ``events``, its subtype tables and relationships.

Every file is scanned twice. The first pass collects the teams, players,
positions and vocabulary codes the events reference so the missing ones can
be inserted up front; the second pass builds the rows. Only the file list is
kept between passes.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Dict, List, Tuple

from football_db.config import DEFAULT_PARAMETER_BUDGET
from football_db.errors import SkippableInputError
from football_db.ingest.extractors.events import (
    dimension_refs,
    extract_event_rows,
    extract_relationship_rows,
)
from football_db.ingest.loaders._common import (
    checkpoint,
    loaded_matches,
    match_for,
    progress,
    resolver_for,
    should_commit,
)
from football_db.ingest.reader import event_files, read_json_array
from football_db.ingest.report import LoadReport
from football_db.ingest.resolver import PLAYERS, POSITIONS, TEAMS, Dimension, IdentityResolver, vocabulary
from football_db.ingest.schema import SUBTYPE_TABLES
from football_db.ingest.value_extractors import get_str
from football_db.ingest.writer import BatchedWriter

logger = logging.getLogger(__name__)

EVENT_TABLES = ("events", "event_relationships") + SUBTYPE_TABLES

_DIMENSIONS: Dict[str, Dimension] = {"teams": TEAMS, "players": PLAYERS, "positions": POSITIONS}
_NAME_COLUMNS = {"teams": "team_name", "players": "player_name"}


def load_events(
    connection: sqlite3.Connection,
    data_path: Path | str,
    *,
    parameter_budget: int = DEFAULT_PARAMETER_BUDGET,
    show_progress: bool = False,
) -> LoadReport:
    report = LoadReport("events")
    writer = BatchedWriter(connection, parameter_budget=parameter_budget)
    matches = loaded_matches(connection, writer)
    resolvers: Dict[str, IdentityResolver] = {}

    paths = event_files(data_path)
    report.files_seen = len(paths)

    usable: List[Tuple[Path, int]] = []
    for path in progress(paths, desc="Scanning events", show_progress=show_progress):
        try:
            match_id = match_for(path, matches)
            events = read_json_array(path)
        except SkippableInputError as exc:
            report.skip(exc)
            continue
        for event in events:
            for table, code, name in dimension_refs(event):
                resolver = resolvers.get(table)
                if resolver is None:
                    dimension = _DIMENSIONS.get(table) or vocabulary(table)
                    resolver = resolvers[table] = IdentityResolver(connection, dimension, writer)
                resolver.collect(code, **{_NAME_COLUMNS.get(table, "name"): name or str(code)})
        usable.append((path, match_id))

    for resolver in resolvers.values():
        added = resolver.reconcile()
        if added:
            logger.info("Events introduced %d new %s codes", len(added), resolver.dimension.table)
    resolve = resolver_for(resolvers)

    for path, match_id in progress(usable, desc="Loading events", show_progress=show_progress):
        events = read_json_array(path)
        known_ids = set()
        for event in events:
            rows = extract_event_rows(event, match_id=match_id, resolve=resolve)
            if not rows:
                report.records_skipped += 1
                continue
            writer.add_all(rows)
            known_ids.add(get_str(event.get("id")))
        # Relationships go in after the whole file so both ends are buffered first.
        for event in events:
            if get_str(event.get("id")) in known_ids:
                writer.add_all(extract_relationship_rows(event, known_ids))
        report.files_processed += 1
        if should_commit(report.files_processed):
            checkpoint(writer, connection)

    checkpoint(writer, connection)
    report.record_writer(writer)
    report.verify(connection, EVENT_TABLES)
    report.log_summary()
    return report


__all__ = ["EVENT_TABLES", "load_events"]
