"""Per-request database connections."""

from __future__ import annotations

import sqlite3
from typing import Iterator

from fastapi import Request

from football_db.config import Settings
from football_db.database import connect


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request) -> Iterator[sqlite3.Connection]:
    """Yield a read-only connection to the configured database.

    Failures surface as :class:`sqlite3.Error` and are turned into a 500
    envelope by the application's exception handler.
    """

    connection = connect(get_settings(request).database_path, read_only=True)
    try:
        yield connection
    finally:
        connection.close()


__all__ = ["get_db", "get_settings"]
