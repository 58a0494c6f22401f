"""FastAPI application exposing the loaded football database."""

from __future__ import annotations

import logging
import sqlite3
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, FastAPI, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from football_db import __version__
from football_db.api._database import get_db, get_settings
from football_db.api._matches import get_match, list_matches
from football_db.api._players import get_player, list_players
from football_db.api._responses import ApiError, failure, page_meta, success
from football_db.api._row_utils import parse_id
from football_db.api._teams import get_team, list_teams
from football_db.api.sandbox import (
    FAILURE_TIMEOUT,
    QuerySandbox,
    SandboxFailure,
    SandboxRejection,
)
from football_db.api.schema_cache import SchemaCache, describe_schema, format_schema
from football_db.api.schemas import QueryRequest
from football_db.config import Settings
from football_db.database import connect

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Instantiate the application; settings default to the environment."""

    settings = settings or Settings.from_env()
    app = FastAPI(title="Football DB API", version=__version__)
    app.state.settings = settings
    app.state.sandbox = QuerySandbox(timeout=settings.query_timeout, row_limit=settings.query_row_limit)
    app.state.schema_cache = SchemaCache(_schema_loader(settings), ttl=settings.schema_cache_ttl)

    _register_error_handlers(app, settings)
    app.include_router(_health_router())
    app.include_router(_players_router())
    app.include_router(_teams_router())
    app.include_router(_matches_router())
    app.include_router(_playground_router())
    return app


def _schema_loader(settings: Settings):
    def load() -> List[Dict[str, Any]]:
        connection = connect(settings.database_path, read_only=True)
        try:
            return describe_schema(connection)
        finally:
            connection.close()

    return load


def _register_error_handlers(app: FastAPI, settings: Settings) -> None:
    def visible(details: Any) -> Any:
        return None if settings.is_production else details

    @app.exception_handler(ApiError)
    async def handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
        details = visible(exc.details) if exc.internal else exc.details
        return JSONResponse(failure(exc.error, details), status_code=exc.status_code)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(failure(str(exc.detail)), status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            failure("Invalid request parameters", visible(jsonable_encoder(exc.errors()))),
            status_code=400,
        )

    @app.exception_handler(sqlite3.Error)
    async def handle_database_error(request: Request, exc: sqlite3.Error) -> JSONResponse:
        logger.error("Database error on %s: %s", request.url.path, exc)
        return JSONResponse(failure("Database error", visible(str(exc))), status_code=500)


def _health_router() -> APIRouter:
    router = APIRouter()

    @router.get("/api/health")
    def health(settings: Settings = Depends(get_settings)) -> Dict[str, Any]:
        try:
            connection = connect(settings.database_path, read_only=True)
        except sqlite3.Error as exc:
            logger.warning("Health check could not open the database: %s", exc)
            database = "unavailable"
        else:
            try:
                connection.execute("SELECT 1").fetchone()
                database = "ok"
            finally:
                connection.close()
        return success({"status": "ok", "database": database, "stage": settings.app_stage, "version": __version__})

    return router


def _players_router() -> APIRouter:
    router = APIRouter(prefix="/api/players")

    @router.get("")
    def players(
        limit: int = Query(10, ge=1, le=100),
        offset: int = Query(0, ge=0),
        sort: str = Query("totalGoals"),
        order: str = Query("desc"),
        search: Optional[str] = Query(None, max_length=100),
        connection: sqlite3.Connection = Depends(get_db),
    ) -> Dict[str, Any]:
        items, total = list_players(
            connection, limit=limit, offset=offset, sort=sort, order=order, search=search
        )
        return success(items, page_meta(total, limit, offset))

    @router.get("/{player_id}")
    def player(player_id: str, connection: sqlite3.Connection = Depends(get_db)) -> Dict[str, Any]:
        found = get_player(connection, parse_id(player_id, "player"))
        if found is None:
            raise ApiError(404, f"Player {player_id} not found")
        return success(found)

    return router


def _teams_router() -> APIRouter:
    router = APIRouter(prefix="/api/teams")

    @router.get("")
    def teams(
        limit: int = Query(10, ge=1, le=100),
        offset: int = Query(0, ge=0),
        sort: str = Query("teamName"),
        order: str = Query("asc"),
        gender: Optional[str] = Query(None),
        connection: sqlite3.Connection = Depends(get_db),
    ) -> Dict[str, Any]:
        items, total = list_teams(
            connection, limit=limit, offset=offset, sort=sort, order=order, gender=gender
        )
        return success(items, page_meta(total, limit, offset))

    @router.get("/{team_id}")
    def team(team_id: str, connection: sqlite3.Connection = Depends(get_db)) -> Dict[str, Any]:
        found = get_team(connection, parse_id(team_id, "team"))
        if found is None:
            raise ApiError(404, f"Team {team_id} not found")
        return success(found)

    return router


def _matches_router() -> APIRouter:
    router = APIRouter(prefix="/api/matches")

    @router.get("")
    def matches(
        limit: int = Query(10, ge=1, le=100),
        offset: int = Query(0, ge=0),
        sort: str = Query("matchDate"),
        order: str = Query("desc"),
        competition_id: Optional[int] = Query(None, alias="competitionId", ge=1),
        season_id: Optional[int] = Query(None, alias="seasonId", ge=1),
        team_id: Optional[int] = Query(None, alias="teamId", ge=1),
        connection: sqlite3.Connection = Depends(get_db),
    ) -> Dict[str, Any]:
        items, total = list_matches(
            connection,
            limit=limit,
            offset=offset,
            sort=sort,
            order=order,
            competition_id=competition_id,
            season_id=season_id,
            team_id=team_id,
        )
        return success(items, page_meta(total, limit, offset))

    @router.get("/{match_id}")
    def match(match_id: str, connection: sqlite3.Connection = Depends(get_db)) -> Dict[str, Any]:
        found = get_match(connection, parse_id(match_id, "match"))
        if found is None:
            raise ApiError(404, f"Match {match_id} not found")
        return success(found)

    return router


def _playground_router() -> APIRouter:
    router = APIRouter(prefix="/api/playground")

    @router.get("/schema")
    def schema(request: Request, refresh: bool = Query(False)) -> Dict[str, Any]:
        cache: SchemaCache = request.app.state.schema_cache
        if refresh:
            cache.invalidate()
        tables = cache.get()
        return success({"tables": tables, "text": format_schema(tables)}, {"tableCount": len(tables)})

    @router.post("/query")
    def query(
        payload: QueryRequest,
        request: Request,
        connection: sqlite3.Connection = Depends(get_db),
    ) -> Dict[str, Any]:
        sandbox: QuerySandbox = request.app.state.sandbox
        outcome = sandbox.run(connection, payload.query)

        if isinstance(outcome, SandboxRejection):
            raise ApiError(403, outcome.reason, details={"rule": outcome.rule})
        if isinstance(outcome, SandboxFailure):
            if outcome.reason == FAILURE_TIMEOUT:
                raise ApiError(408, "Query timed out", details={"reason": outcome.reason, "message": outcome.message})
            raise ApiError(
                400,
                "Query failed",
                details={"reason": outcome.reason, "message": outcome.message},
                internal=True,
            )

        return success(
            {
                "columns": outcome.columns,
                "rows": outcome.rows,
                "rowCount": outcome.row_count,
                "executionTimeMs": outcome.execution_time_ms,
            },
            {"rowLimit": sandbox.row_limit, "truncated": outcome.row_count >= sandbox.row_limit},
        )

    return router


__all__ = ["create_app"]
