"""ASGI entry point: ``uvicorn football_db.api.main:app``."""

from __future__ import annotations

from football_db.api.app import create_app

app = create_app()

__all__ = ["app", "create_app"]
