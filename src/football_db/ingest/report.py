"""Per-run summaries printed after each loader finishes."""

from __future__ import annotations

import logging
import sqlite3
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List

from football_db.errors import SkippableInputError
from football_db.ingest.writer import BatchedWriter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SkippedFile:
    path: Path
    reason: str


@dataclass
class LoadReport:
    domain: str
    files_seen: int = 0
    files_processed: int = 0
    records_skipped: int = 0
    skipped: List[SkippedFile] = field(default_factory=list)
    rows_offered: Dict[str, int] = field(default_factory=dict)
    rows_inserted: Dict[str, int] = field(default_factory=dict)
    table_counts: Dict[str, int] = field(default_factory=dict)

    @property
    def files_skipped(self) -> int:
        return len(self.skipped)

    def skip(self, error: SkippableInputError) -> None:
        logger.warning("Skipping %s: %s", error.path, error.reason)
        self.skipped.append(SkippedFile(error.path, error.reason))

    def record_writer(self, writer: BatchedWriter) -> None:
        offered = Counter(self.rows_offered)
        offered.update(writer.rows_offered)
        inserted = Counter(self.rows_inserted)
        inserted.update(writer.rows_inserted)
        self.rows_offered = dict(offered)
        self.rows_inserted = dict(inserted)

    def verify(self, connection: sqlite3.Connection, tables: Iterable[str]) -> Dict[str, int]:
        self.table_counts = count_rows(connection, tables)
        return self.table_counts

    def log_summary(self) -> None:
        logger.info(
            "%s: %d files seen, %d processed, %d skipped, %d records skipped",
            self.domain,
            self.files_seen,
            self.files_processed,
            self.files_skipped,
            self.records_skipped,
        )
        for table, offered in sorted(self.rows_offered.items()):
            logger.info(
                "  %s: %d rows offered, %d inserted",
                table,
                offered,
                self.rows_inserted.get(table, 0),
            )
        for table, count in self.table_counts.items():
            logger.info("  %s now holds %d rows", table, count)

    def summary_lines(self) -> List[str]:
        lines = [
            f"{self.domain}: {self.files_processed}/{self.files_seen} files processed, "
            f"{self.files_skipped} skipped"
        ]
        lines.extend(f"  {table}: {count}" for table, count in self.table_counts.items())
        return lines


def count_rows(connection: sqlite3.Connection, tables: Iterable[str]) -> Dict[str, int]:
    return {
        table: connection.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
        for table in tables
    }


__all__ = ["LoadReport", "SkippedFile", "count_rows"]
