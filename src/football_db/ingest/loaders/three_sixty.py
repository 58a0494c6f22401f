from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from football_db.config import DEFAULT_PARAMETER_BUDGET
from football_db.errors import SkippableInputError
from football_db.ingest.extractors.three_sixty import extract_frame_rows
from football_db.ingest.loaders._common import (
    checkpoint,
    loaded_matches,
    match_for,
    progress,
    should_commit,
)
from football_db.ingest.reader import read_json_array, three_sixty_files
from football_db.ingest.report import LoadReport
from football_db.ingest.writer import BatchedWriter

logger = logging.getLogger(__name__)

THREE_SIXTY_TABLES = ("three_sixty_frames", "three_sixty_players")


def load_three_sixty(
    connection: sqlite3.Connection,
    data_path: Path | str,
    *,
    parameter_budget: int = DEFAULT_PARAMETER_BUDGET,
    show_progress: bool = False,
) -> LoadReport:
    """Load ``three-sixty/<match_id>.json`` freeze frames in a single pass.

    Frames are keyed by event uuid and never checked against ``events``, so
    this loader may run before the events loader.
    """

    report = LoadReport("three_sixty")
    writer = BatchedWriter(connection, parameter_budget=parameter_budget)
    matches = loaded_matches(connection, writer)

    paths = three_sixty_files(data_path)
    report.files_seen = len(paths)

    for path in progress(paths, desc="Loading 360 frames", show_progress=show_progress):
        try:
            match_id = match_for(path, matches)
            frames = read_json_array(path)
        except SkippableInputError as exc:
            report.skip(exc)
            continue

        for frame in frames:
            rows = extract_frame_rows(frame, match_id=match_id)
            if not rows:
                report.records_skipped += 1
            writer.add_all(rows)
        report.files_processed += 1
        if should_commit(report.files_processed):
            checkpoint(writer, connection)

    checkpoint(writer, connection)
    report.record_writer(writer)
    report.verify(connection, THREE_SIXTY_TABLES)
    report.log_summary()
    return report


__all__ = ["THREE_SIXTY_TABLES", "load_three_sixty"]
