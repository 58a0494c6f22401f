from __future__ import annotations

from typing import Any, Dict, NamedTuple


class TableRow(NamedTuple):
    """A normalised row candidate tagged with the table it belongs to."""

    table: str
    values: Dict[str, Any]


__all__ = ["TableRow"]
