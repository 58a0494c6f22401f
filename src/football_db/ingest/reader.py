"""File discovery and JSON decoding for the StatsBomb open-data layout.

The corpus looks like::

    data/
      competitions.json
      matches/<competition_id>/<season_id>.json
      lineups/<match_id>.json
      three-sixty/<match_id>.json
      events/<match_id>.json

Only ``matches`` files carry their match ids in the payload; every per-match
file is identified by its name, which is parsed here and nowhere else.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Mapping, MutableMapping, Tuple

from football_db.errors import CorruptFileError, InvalidFilenameError

Document = MutableMapping[str, Any]

COMPETITIONS_FILE = "competitions.json"
MATCHES_DIR = "matches"
LINEUPS_DIR = "lineups"
THREE_SIXTY_DIR = "three-sixty"
EVENTS_DIR = "events"


def parse_positive_id(text: str, path: Path | str) -> int:
    try:
        value = int(text)
    except ValueError as exc:
        raise InvalidFilenameError(path, f"'{text}' is not a numeric identifier") from exc
    if value <= 0:
        raise InvalidFilenameError(path, f"identifier {value} must be positive")
    return value


def match_id_from_path(path: Path | str) -> int:
    """Return the match id encoded in ``<match_id>.json``."""

    return parse_positive_id(Path(path).stem, path)


def season_key_from_path(path: Path | str) -> Tuple[int, int]:
    """Return ``(competition_id, season_id)`` for ``matches/<competition_id>/<season_id>.json``."""

    path = Path(path)
    return parse_positive_id(path.parent.name, path), parse_positive_id(path.stem, path)


def read_json(path: Path | str) -> Any:
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise CorruptFileError(path, "file is not valid UTF-8") from exc
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise CorruptFileError(path, f"invalid JSON ({exc.msg} at line {exc.lineno})") from exc


def read_json_array(path: Path | str) -> List[Document]:
    """Decode a file holding a JSON array of objects."""

    data = read_json(path)
    if not isinstance(data, list):
        raise CorruptFileError(path, "expected a JSON array")

    documents: List[Document] = []
    for item in data:
        if not isinstance(item, Mapping):
            raise CorruptFileError(path, "every array element must be a JSON object")
        documents.append(dict(item))
    return documents


def competitions_file(data_path: Path | str) -> Path:
    path = Path(data_path) / COMPETITIONS_FILE
    if not path.is_file():
        raise FileNotFoundError(f"Competitions file not found: {path}")
    return path


def season_files(data_path: Path | str) -> List[Path]:
    return _json_files(Path(data_path) / MATCHES_DIR, recursive=True)


def lineup_files(data_path: Path | str) -> List[Path]:
    return _json_files(Path(data_path) / LINEUPS_DIR)


def three_sixty_files(data_path: Path | str) -> List[Path]:
    return _json_files(Path(data_path) / THREE_SIXTY_DIR)


def event_files(data_path: Path | str) -> List[Path]:
    return _json_files(Path(data_path) / EVENTS_DIR)


def _json_files(directory: Path, *, recursive: bool = False) -> List[Path]:
    if not directory.is_dir():
        raise FileNotFoundError(f"Directory not found: {directory}")
    pattern = "*/*.json" if recursive else "*.json"
    return sorted(directory.glob(pattern), key=_natural_key)


def _natural_key(path: Path) -> Tuple[Any, ...]:
    parts = path.parent.name, path.stem
    return tuple((0, int(part), "") if part.isdigit() else (1, 0, part) for part in parts)


__all__ = [
    "Document",
    "match_id_from_path",
    "season_key_from_path",
    "parse_positive_id",
    "read_json",
    "read_json_array",
    "competitions_file",
    "season_files",
    "lineup_files",
    "three_sixty_files",
    "event_files",
]
