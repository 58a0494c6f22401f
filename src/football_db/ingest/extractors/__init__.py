"""Pure functions turning one decoded StatsBomb document into table rows.

Foreign keys are looked up through a ``resolve(table, key)`` callable built
from reconciled :class:`~football_db.ingest.resolver.IdentityResolver`
instances; it returns ``None`` for a ``None`` key and raises for a key that
was never collected.
"""

from __future__ import annotations

from typing import Callable, Hashable, Optional

Resolve = Callable[[str, Optional[Hashable]], Optional[int]]

REGIONS = frozenset({"Europe", "South America", "North and Central America", "Africa"})


def country_type(name: str) -> str:
    if name in REGIONS:
        return "region"
    if name == "International":
        return "international"
    return "country"


__all__ = ["Resolve", "REGIONS", "country_type"]
