from __future__ import annotations

from .aggregate import aggregate_player_stats
from .pipeline import LOADERS, run_all, seed
from .report import LoadReport
from .schema import initialise_schema

__all__ = ["LOADERS", "LoadReport", "aggregate_player_stats", "initialise_schema", "run_all", "seed"]
