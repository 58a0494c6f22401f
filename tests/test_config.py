from __future__ import annotations

from pathlib import Path

import pytest

from football_db.config import DEFAULT_PARAMETER_BUDGET, Settings


def test_defaults_without_environment() -> None:
    settings = Settings.from_env({})

    assert settings.data_path == Path("data")
    assert settings.app_stage == "dev"
    assert settings.parameter_budget == DEFAULT_PARAMETER_BUDGET
    assert not settings.is_production


def test_environment_values_are_parsed() -> None:
    settings = Settings.from_env(
        {
            "FOOTBALL_DB_DATABASE": "/tmp/football.sqlite",
            "FOOTBALL_DB_APP_STAGE": " Production ",
            "FOOTBALL_DB_QUERY_TIMEOUT": "2.5",
            "FOOTBALL_DB_QUERY_ROW_LIMIT": "50",
            "FOOTBALL_DB_PARAMETER_BUDGET": "",
        }
    )

    assert settings.database_path == Path("/tmp/football.sqlite")
    assert settings.is_production
    assert settings.query_timeout == 2.5
    assert settings.query_row_limit == 50
    assert settings.parameter_budget == DEFAULT_PARAMETER_BUDGET


@pytest.mark.parametrize(
    "environ",
    [
        {"FOOTBALL_DB_APP_STAGE": "staging"},
        {"FOOTBALL_DB_QUERY_TIMEOUT": "soon"},
        {"FOOTBALL_DB_QUERY_ROW_LIMIT": "0"},
        {"FOOTBALL_DB_PARAMETER_BUDGET": "-1"},
    ],
)
def test_invalid_values_are_rejected(environ: dict) -> None:
    with pytest.raises(ValueError):
        Settings.from_env(environ)


def test_overrides_ignore_none() -> None:
    settings = Settings().with_overrides(data_path=Path("elsewhere"), database_path=None)

    assert settings.data_path == Path("elsewhere")
    assert settings.database_path == Path("football.sqlite")
