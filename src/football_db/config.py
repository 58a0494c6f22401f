"""Runtime configuration read from ``FOOTBALL_DB_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping, Optional

DATA_PATH_ENV = "FOOTBALL_DB_DATA_PATH"
DATABASE_ENV = "FOOTBALL_DB_DATABASE"
APP_STAGE_ENV = "FOOTBALL_DB_APP_STAGE"
QUERY_TIMEOUT_ENV = "FOOTBALL_DB_QUERY_TIMEOUT"
QUERY_ROW_LIMIT_ENV = "FOOTBALL_DB_QUERY_ROW_LIMIT"
SCHEMA_CACHE_TTL_ENV = "FOOTBALL_DB_SCHEMA_CACHE_TTL"
PARAMETER_BUDGET_ENV = "FOOTBALL_DB_PARAMETER_BUDGET"

APP_STAGES = ("dev", "test", "production")

# SQLite refuses statements with more than 32766 bound parameters.
DEFAULT_PARAMETER_BUDGET = 30000


@dataclass(frozen=True)
class Settings:
    data_path: Path = Path("data")
    database_path: Path = Path("football.sqlite")
    app_stage: str = "dev"
    query_timeout: float = 5.0
    query_row_limit: int = 1000
    schema_cache_ttl: float = 3600.0
    parameter_budget: int = DEFAULT_PARAMETER_BUDGET

    def __post_init__(self) -> None:
        if self.app_stage not in APP_STAGES:
            raise ValueError(
                f"{APP_STAGE_ENV} must be one of {', '.join(APP_STAGES)}; got {self.app_stage!r}"
            )
        if self.query_timeout <= 0:
            raise ValueError(f"{QUERY_TIMEOUT_ENV} must be positive")
        if self.query_row_limit <= 0:
            raise ValueError(f"{QUERY_ROW_LIMIT_ENV} must be positive")
        if self.schema_cache_ttl < 0:
            raise ValueError(f"{SCHEMA_CACHE_TTL_ENV} must not be negative")
        if self.parameter_budget <= 0:
            raise ValueError(f"{PARAMETER_BUDGET_ENV} must be positive")

    @property
    def is_production(self) -> bool:
        return self.app_stage == "production"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            data_path=Path(env.get(DATA_PATH_ENV) or defaults.data_path),
            database_path=Path(env.get(DATABASE_ENV) or defaults.database_path),
            app_stage=(env.get(APP_STAGE_ENV) or defaults.app_stage).strip().lower(),
            query_timeout=_parse(env, QUERY_TIMEOUT_ENV, float, defaults.query_timeout),
            query_row_limit=_parse(env, QUERY_ROW_LIMIT_ENV, int, defaults.query_row_limit),
            schema_cache_ttl=_parse(env, SCHEMA_CACHE_TTL_ENV, float, defaults.schema_cache_ttl),
            parameter_budget=_parse(env, PARAMETER_BUDGET_ENV, int, defaults.parameter_budget),
        )

    def with_overrides(self, **overrides: Any) -> "Settings":
        """Return a copy with every non-``None`` override applied."""

        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes)


def _parse(env: Mapping[str, str], name: str, cast: Any, default: Any) -> Any:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be a {cast.__name__}; got {raw!r}") from exc


__all__ = ["Settings", "DEFAULT_PARAMETER_BUDGET", "APP_STAGES"]
