from __future__ import annotations

import json
from pathlib import Path

import pytest

from football_db.errors import CorruptFileError, InvalidFilenameError
from football_db.ingest import reader


@pytest.mark.parametrize("name", ["abc.json", "0.json", "-5.json", "12a.json"])
def test_match_id_from_path_rejects_unusable_names(name: str) -> None:
    with pytest.raises(InvalidFilenameError) as excinfo:
        reader.match_id_from_path(Path("events") / name)

    assert excinfo.value.path == Path("events") / name


def test_match_id_from_path_parses_positive_ids() -> None:
    assert reader.match_id_from_path("events/3788741.json") == 3788741


def test_season_key_comes_from_directory_and_stem() -> None:
    assert reader.season_key_from_path(Path("matches/11/90.json")) == (11, 90)

    with pytest.raises(InvalidFilenameError):
        reader.season_key_from_path(Path("matches/liga/90.json"))


def test_read_json_array_reports_corrupt_files(tmp_path: Path) -> None:
    broken = tmp_path / "broken.json"
    broken.write_text("[{", encoding="utf-8")
    not_utf8 = tmp_path / "latin.json"
    not_utf8.write_bytes(b'["\xff"]')
    not_array = tmp_path / "object.json"
    not_array.write_text(json.dumps({"id": 1}), encoding="utf-8")
    scalars = tmp_path / "scalars.json"
    scalars.write_text(json.dumps([1, 2]), encoding="utf-8")

    for path in (broken, not_utf8, not_array, scalars):
        with pytest.raises(CorruptFileError):
            reader.read_json_array(path)


def test_read_json_array_returns_objects(tmp_path: Path) -> None:
    path = tmp_path / "1.json"
    path.write_text(json.dumps([{"id": "a"}, {"id": "b"}]), encoding="utf-8")

    assert reader.read_json_array(path) == [{"id": "a"}, {"id": "b"}]


def test_file_listing_uses_numeric_order(tmp_path: Path) -> None:
    events = tmp_path / "events"
    events.mkdir()
    for name in ("10", "2", "1"):
        (events / f"{name}.json").write_text("[]", encoding="utf-8")

    assert [path.stem for path in reader.event_files(tmp_path)] == ["1", "2", "10"]


def test_missing_directories_and_files_are_errors(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        reader.lineup_files(tmp_path)
    with pytest.raises(FileNotFoundError):
        reader.competitions_file(tmp_path)


def test_season_files_are_nested_by_competition(data_path: Path) -> None:
    files = reader.season_files(data_path)

    assert [reader.season_key_from_path(path) for path in files] == [(11, 90)]
