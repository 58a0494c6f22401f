"""Two-phase resolution of dimension keys scattered across many files.

A loader first *collects* every natural key a dimension needs while scanning
its files, then *reconciles* once: the keys missing from the table are
inserted and the full key -> id map is re-read from the database. Only after
that may fact rows be built, and every lookup must succeed.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Any, Dict, Hashable, List, Mapping, NamedTuple, Optional, Set

from football_db.errors import PreconditionError, UnresolvedKeyError
from football_db.ingest.extractors import country_type
from football_db.ingest.writer import BatchedWriter

logger = logging.getLogger(__name__)


class Dimension(NamedTuple):
    table: str
    key_column: str
    id_column: str


COUNTRIES = Dimension("countries", "name", "id")
TEAMS = Dimension("teams", "team_id", "team_id")
PLAYERS = Dimension("players", "player_id", "player_id")
POSITIONS = Dimension("positions", "id", "id")
MATCHES = Dimension("matches", "match_id", "match_id")


def vocabulary(table: str) -> Dimension:
    return Dimension(table, "id", "id")


class IdentityResolver:
    def __init__(self, connection: sqlite3.Connection, dimension: Dimension, writer: BatchedWriter) -> None:
        self._connection = connection
        self.dimension = dimension
        self._writer = writer
        self._collected: Dict[Hashable, Dict[str, Any]] = {}
        self._ids: Optional[Dict[Hashable, int]] = None

    def collect(self, key: Optional[Hashable], **attributes: Any) -> None:
        """Record ``key`` as required; the first attributes seen for a key win."""

        if key is None:
            return
        if key not in self._collected:
            values = dict(attributes)
            values[self.dimension.key_column] = key
            self._collected[key] = values
            self._ids = None

    @property
    def collected(self) -> Mapping[Hashable, Mapping[str, Any]]:
        return self._collected

    def persisted(self) -> Dict[Hashable, int]:
        table, key_column, id_column = self.dimension
        rows = self._connection.execute(f"SELECT {key_column}, {id_column} FROM {table}")
        return {row[0]: row[1] for row in rows}

    def require_populated(self, hint: str) -> None:
        table = self.dimension.table
        if self._connection.execute(f"SELECT 1 FROM {table} LIMIT 1").fetchone() is None:
            raise PreconditionError(f"Table '{table}' is empty. {hint}")

    def reconcile(self) -> List[Hashable]:
        """Insert collected keys that are not persisted yet and reload the id map."""

        existing = self.persisted()
        missing = [key for key in self._collected if key not in existing]
        if missing:
            self._writer.insert_many(
                self.dimension.table,
                (self._insertable(self._collected[key]) for key in missing),
            )
            logger.info("Added %d missing rows to %s", len(missing), self.dimension.table)
            existing = self.persisted()
        self._ids = existing
        return missing

    def load(self) -> Dict[Hashable, int]:
        """Use the persisted map as-is, for dimensions this loader never inserts into."""

        self._ids = self.persisted()
        return self._ids

    def resolve(self, key: Optional[Hashable]) -> Optional[int]:
        if key is None:
            return None
        if self._ids is None:
            raise RuntimeError(f"{self.dimension.table} resolver used before reconcile()")
        try:
            return self._ids[key]
        except KeyError:
            raise UnresolvedKeyError(self.dimension.table, key) from None

    def __contains__(self, key: object) -> bool:
        return self._ids is not None and key in self._ids

    def _insertable(self, values: Mapping[str, Any]) -> Dict[str, Any]:
        if self.dimension.id_column == self.dimension.key_column:
            return dict(values)
        return {name: value for name, value in values.items() if name != self.dimension.id_column}



class CountryResolver(IdentityResolver):
    """Countries are keyed by name; regions and "International" have no StatsBomb id.

    A StatsBomb id is kept only for the first name that claims it, so a
    renamed country cannot trip the unique constraint and go unresolved.
    """

    def __init__(self, connection: sqlite3.Connection, writer: BatchedWriter) -> None:
        super().__init__(connection, COUNTRIES, writer)
        self._claimed_ids: Optional[Set[int]] = None

    def collect(self, key: Optional[Hashable], **attributes: Any) -> None:
        if key is None or key in self.collected:
            return
        if self._claimed_ids is None:
            rows = self._connection.execute(
                "SELECT statsbomb_id FROM countries WHERE statsbomb_id IS NOT NULL"
            )
            self._claimed_ids = {row[0] for row in rows}

        statsbomb_id = attributes.get("statsbomb_id")
        if statsbomb_id in self._claimed_ids:
            attributes["statsbomb_id"] = None
        elif statsbomb_id is not None:
            self._claimed_ids.add(statsbomb_id)
        attributes.setdefault("statsbomb_id", None)
        attributes.setdefault("type", country_type(str(key)))
        super().collect(key, **attributes)


__all__ = [
    "Dimension",
    "IdentityResolver",
    "CountryResolver",
    "COUNTRIES",
    "TEAMS",
    "PLAYERS",
    "POSITIONS",
    "MATCHES",
    "vocabulary",
]
