"""Utility helpers for turning SQLite rows into API payloads."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence

import sqlite3

from football_db.api._responses import ApiError


def to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def camel_row(row: sqlite3.Row, columns: Optional[Sequence[str]] = None) -> Dict[str, Any]:
    keys = row.keys() if columns is None else columns
    return {to_camel(key): row[key] for key in keys}


def int_to_bool(value: Any, *, default: Optional[bool] = None) -> Optional[bool]:
    if value is None:
        return default
    try:
        return bool(int(value))
    except (TypeError, ValueError):
        return default


def ratio(numerator: Any, denominator: Any, *, digits: int = 2) -> Optional[float]:
    if not denominator:
        return None
    return round(float(numerator or 0) / float(denominator), digits)


def parse_id(value: str, label: str) -> int:
    """Path identifiers must be positive integers; anything else is a 400."""

    try:
        parsed = int(value)
    except ValueError:
        parsed = 0
    if parsed <= 0:
        raise ApiError(400, f"Invalid {label} id: {value!r}")
    return parsed


def order_by(
    sort: str,
    order: str,
    columns: Mapping[str, str],
    *,
    tiebreak: str,
) -> str:
    """``ORDER BY`` clause built only from allow-listed column expressions."""

    column = columns.get(sort)
    if column is None:
        raise ApiError(
            400,
            f"Invalid sort field: {sort!r}",
            details={"allowed": sorted(columns)},
        )
    direction = order.lower()
    if direction not in ("asc", "desc"):
        raise ApiError(400, f"Invalid sort order: {order!r}", details={"allowed": ["asc", "desc"]})
    return f"ORDER BY {column} {direction.upper()}, {tiebreak} ASC"


__all__ = ["camel_row", "int_to_bool", "order_by", "parse_id", "ratio", "to_camel"]
