from __future__ import annotations

from pathlib import Path

import pytest

from football_db import cli
from football_db.config import DATABASE_ENV, DATA_PATH_ENV
from football_db.database import connect


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(DATA_PATH_ENV, raising=False)
    monkeypatch.delenv(DATABASE_ENV, raising=False)


def test_all_loads_and_prints_a_summary(tmp_path: Path, data_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    database = tmp_path / "cli.sqlite"

    exit_code = cli.main(["all", "--data-path", str(data_path), "--database", str(database)])

    assert exit_code == 0
    output = capsys.readouterr().out
    assert "matches: 1/1 files processed, 0 skipped" in output
    assert "events: 2/4 files processed, 2 skipped" in output
    connection = connect(database)
    try:
        assert connection.execute("SELECT COUNT(*) FROM events").fetchone()[0] == 10
    finally:
        connection.close()


def test_single_loader_commands(tmp_path: Path, data_path: Path) -> None:
    database = tmp_path / "steps.sqlite"
    common = ["--data-path", str(data_path), "--database", str(database)]

    for command in ("seed", "matches", "competitions", "lineups", "three-sixty", "events", "aggregate"):
        assert cli.main([command, *common]) == 0, command


def test_missing_prerequisite_exits_non_zero(tmp_path: Path, data_path: Path) -> None:
    database = tmp_path / "empty.sqlite"

    assert cli.main(["lineups", "--data-path", str(data_path), "--database", str(database)]) == 1


def test_missing_data_directory_exits_non_zero(tmp_path: Path) -> None:
    assert cli.main(["matches", "--data-path", str(tmp_path / "nowhere"), "--database", str(tmp_path / "x.sqlite")]) == 1


def test_unknown_command_is_a_usage_error() -> None:
    with pytest.raises(SystemExit):
        cli.main(["explode"])
