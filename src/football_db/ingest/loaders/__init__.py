from __future__ import annotations

from .competitions import load_competitions
from .events import load_events
from .lineups import load_lineups
from .matches import load_matches
from .three_sixty import load_three_sixty

__all__ = [
    "load_competitions",
    "load_events",
    "load_lineups",
    "load_matches",
    "load_three_sixty",
]
