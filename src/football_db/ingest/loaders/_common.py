from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Iterable, Mapping, Optional, Sequence, TypeVar

from tqdm.auto import tqdm

from football_db.errors import MissingParentError
from football_db.ingest.extractors import Resolve
from football_db.ingest.reader import match_id_from_path
from football_db.ingest.resolver import MATCHES, IdentityResolver
from football_db.ingest.writer import BatchedWriter

T = TypeVar("T")

# Loaders commit after this many files so an interrupted run keeps its progress.
FILES_PER_COMMIT = 50


def progress(items: Sequence[T], *, desc: str, show_progress: bool) -> Iterable[T]:
    return tqdm(items, desc=desc, unit="file", dynamic_ncols=True, disable=not show_progress)


def resolver_for(resolvers: Mapping[str, IdentityResolver]) -> Resolve:
    """Bundle per-table resolvers into the ``resolve(table, key)`` extractors expect."""

    def resolve(table: str, key: Optional[object]) -> Optional[int]:
        if key is None:
            return None
        return resolvers[table].resolve(key)

    return resolve


def should_commit(files_done: int) -> bool:
    return files_done % FILES_PER_COMMIT == 0


def checkpoint(writer: BatchedWriter, connection: sqlite3.Connection) -> None:
    writer.flush()
    connection.commit()


def loaded_matches(connection: sqlite3.Connection, writer: BatchedWriter) -> IdentityResolver:
    matches = IdentityResolver(connection, MATCHES, writer)
    matches.require_populated("Run the matches loader first.")
    matches.load()
    return matches


def match_for(path: Path, matches: IdentityResolver) -> int:
    """The match id encoded in ``path``; the match must already be loaded."""

    match_id = match_id_from_path(path)
    if match_id not in matches:
        raise MissingParentError(path, f"match {match_id} is not loaded")
    return match_id
