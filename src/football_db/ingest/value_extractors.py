from __future__ import annotations

import json
from typing import Any, Mapping, Optional, Sequence, Tuple

FULL_TIME = "90:00"


def get_nested_value(data: Any, path: Sequence[str]) -> Any:
    current = data
    for key in path:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current


def get_nested_str(data: Any, path: Sequence[str]) -> Optional[str]:
    return get_str(get_nested_value(data, path))


def get_nested_int(data: Any, path: Sequence[str]) -> Optional[int]:
    return get_int(get_nested_value(data, path))


def get_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def get_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def get_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def bool_to_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return int(bool(value))
    return None


def flag(value: Any) -> int:
    """StatsBomb only writes boolean qualifiers when they are true."""

    return bool_to_int(value) or 0


def extract_location(value: Any) -> Tuple[Optional[float], Optional[float]]:
    if isinstance(value, Sequence) and not isinstance(value, str):
        coords = list(value)
        coords.extend([None, None])
        return get_float(coords[0]), get_float(coords[1])
    return None, None


def extract_end_location(value: Any) -> Tuple[Optional[float], Optional[float], Optional[float]]:
    if isinstance(value, Sequence) and not isinstance(value, str):
        coords = list(value)
        coords.extend([None, None, None])
        return get_float(coords[0]), get_float(coords[1]), get_float(coords[2])
    return None, None, None


def clock_to_seconds(value: Any) -> Optional[int]:
    """Convert a ``MM:SS`` match clock (minutes may exceed 59) into seconds."""

    text = get_str(value)
    if not text:
        return None
    minutes, sep, seconds = text.strip().partition(":")
    if not sep:
        return None
    try:
        return int(minutes) * 60 + int(float(seconds))
    except ValueError:
        return None


def stint_minutes(start: Any, end: Any, *, default_end: str = FULL_TIME) -> float:
    """Minutes between two match clocks; an open ``end`` runs to ``default_end``."""

    start_seconds = clock_to_seconds(start) or 0
    end_seconds = clock_to_seconds(end if end is not None else default_end)
    if end_seconds is None:
        return 0.0
    return max(end_seconds - start_seconds, 0) / 60


def to_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


__all__ = [
    "FULL_TIME",
    "get_nested_value",
    "get_nested_str",
    "get_nested_int",
    "get_str",
    "get_int",
    "get_float",
    "bool_to_int",
    "flag",
    "extract_location",
    "extract_end_location",
    "clock_to_seconds",
    "stint_minutes",
    "to_json",
]
