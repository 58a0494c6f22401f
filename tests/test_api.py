from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from football_db.api import create_app
from football_db.config import Settings

from conftest import ALAVES, BARCELONA, GRIEZMANN, MESSI


@pytest.fixture()
def client(loaded_db_path: Path) -> TestClient:
    return TestClient(create_app(Settings(database_path=loaded_db_path, app_stage="test")))


@pytest.fixture()
def production_client(loaded_db_path: Path) -> TestClient:
    return TestClient(create_app(Settings(database_path=loaded_db_path, app_stage="production")))


def test_health(client: TestClient) -> None:
    response = client.get("/api/health")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"]["database"] == "ok"
    assert body["data"]["stage"] == "test"


def test_health_reports_a_missing_database(tmp_path: Path) -> None:
    client = TestClient(create_app(Settings(database_path=tmp_path / "missing.sqlite", app_stage="test")))

    assert client.get("/api/health").json()["data"]["database"] == "unavailable"


def test_players_are_listed_by_goals_with_paging_meta(client: TestClient) -> None:
    body = client.get("/api/players", params={"limit": 1}).json()

    assert body["success"] is True
    assert [player["playerId"] for player in body["data"]] == [GRIEZMANN]
    assert body["data"][0]["totalGoals"] == 1
    assert body["meta"] == {"total": 4, "limit": 1, "offset": 0, "hasMore": True}


def test_players_search(client: TestClient) -> None:
    body = client.get("/api/players", params={"search": "Messi"}).json()

    assert [player["playerId"] for player in body["data"]] == [MESSI]
    assert body["meta"]["hasMore"] is False


def test_unknown_sort_column_is_rejected(client: TestClient) -> None:
    response = client.get("/api/players", params={"sort": "salary"})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert "totalGoals" in body["details"]["allowed"]


def test_out_of_range_limit_is_a_bad_request(client: TestClient) -> None:
    response = client.get("/api/players", params={"limit": 0})

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert response.json()["error"] == "Invalid request parameters"


def test_player_detail(client: TestClient) -> None:
    body = client.get(f"/api/players/{MESSI}").json()

    player = body["data"]
    assert player["playerNickname"] == "Lionel Messi"
    assert player["totalPasses"] == 2
    assert player["derived"]["passCompletionRate"] == 0.5
    assert player["teams"] == [{"teamId": BARCELONA["id"], "teamName": BARCELONA["name"], "matches": 1}]
    assert [position["positionId"] for position in player["positions"]] == [17, 23]


@pytest.mark.parametrize(
    ("path", "status"),
    [("/api/players/abc", 400), ("/api/players/-3", 400), ("/api/players/1", 404)],
)
def test_player_lookup_errors(client: TestClient, path: str, status: int) -> None:
    response = client.get(path)

    assert response.status_code == status
    assert response.json()["success"] is False


def test_teams_list_and_filter(client: TestClient) -> None:
    body = client.get("/api/teams", params={"gender": "male"}).json()

    assert [team["teamName"] for team in body["data"]] == [BARCELONA["name"], ALAVES["name"]]
    assert body["data"][0]["countryName"] == "Spain"
    assert body["meta"]["total"] == 2
    assert client.get("/api/teams", params={"gender": "female"}).json()["meta"]["total"] == 0


def test_team_detail_record(client: TestClient) -> None:
    body = client.get(f"/api/teams/{BARCELONA['id']}").json()

    assert body["data"]["record"] == {
        "played": 2,
        "wins": 1,
        "draws": 1,
        "losses": 0,
        "goalsFor": 3,
        "goalsAgainst": 2,
        "goalDifference": 1,
    }
    assert client.get("/api/teams/999").status_code == 404


def test_matches_list_is_newest_first(client: TestClient) -> None:
    body = client.get("/api/matches").json()

    assert [match["matchId"] for match in body["data"]] == [1002, 1001]
    assert body["data"][1]["homeTeam"] == {"id": BARCELONA["id"], "name": BARCELONA["name"]}
    assert body["data"][1]["competition"]["name"] == "La Liga"


def test_matches_filters(client: TestClient) -> None:
    assert client.get("/api/matches", params={"teamId": ALAVES["id"]}).json()["meta"]["total"] == 2
    assert client.get("/api/matches", params={"competitionId": 11, "seasonId": 90}).json()["meta"]["total"] == 2
    assert client.get("/api/matches", params={"seasonId": 1}).json()["meta"]["total"] == 0


def test_match_detail(client: TestClient) -> None:
    match = client.get("/api/matches/1001").json()["data"]

    assert match["stadium"] == "Spotify Camp Nou"
    assert [manager["isHomeTeam"] for manager in match["managers"]] == [True, False]
    assert match["eventCounts"][0] == {"typeId": 30, "typeName": "Pass", "eventCount": 2}
    assert match["threeSixtyFrames"] == 2
    assert client.get("/api/matches/4242").status_code == 404


def test_unknown_route_uses_the_envelope(client: TestClient) -> None:
    response = client.get("/api/nothing-here")

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Not Found"}


def test_playground_schema(client: TestClient) -> None:
    body = client.get("/api/playground/schema", params={"refresh": True}).json()

    names = [table["name"] for table in body["data"]["tables"]]
    assert "events" in names
    assert body["meta"]["tableCount"] == len(names)
    assert body["data"]["text"].startswith("DATABASE SCHEMA:")


def test_playground_query(client: TestClient) -> None:
    response = client.post(
        "/api/playground/query",
        json={"query": "SELECT player_id, total_goals FROM players WHERE total_goals > 0;"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["data"]["columns"] == ["player_id", "total_goals"]
    assert body["data"]["rows"] == [[GRIEZMANN, 1]]
    assert body["meta"] == {"rowLimit": 1000, "truncated": False}


def test_playground_rejects_writes(client: TestClient) -> None:
    response = client.post("/api/playground/query", json={"query": "DROP TABLE players"})

    assert response.status_code == 403
    assert response.json() == {
        "success": False,
        "error": "Keyword 'DROP' is not allowed",
        "details": {"rule": "mutating_keyword"},
    }
    assert client.get("/api/players").json()["meta"]["total"] == 4


def test_playground_rejects_blank_queries(client: TestClient) -> None:
    assert client.post("/api/playground/query", json={"query": "   "}).status_code == 400


def test_playground_execution_errors(client: TestClient, production_client: TestClient) -> None:
    payload = {"query": "SELECT * FROM no_such_table"}

    response = client.post("/api/playground/query", json=payload)
    assert response.status_code == 400
    assert response.json()["error"] == "Query failed"
    assert "no_such_table" in response.json()["details"]["message"]

    hidden = production_client.post("/api/playground/query", json=payload)
    assert hidden.status_code == 400
    assert hidden.json() == {"success": False, "error": "Query failed"}


def test_module_level_app_reads_the_environment(monkeypatch: pytest.MonkeyPatch, loaded_db_path: Path) -> None:
    import importlib

    monkeypatch.setenv("FOOTBALL_DB_DATABASE", str(loaded_db_path))
    monkeypatch.setenv("FOOTBALL_DB_APP_STAGE", "production")
    from football_db.api import main

    main = importlib.reload(main)

    assert main.app.state.settings.is_production
    assert TestClient(main.app).get("/api/health").json()["data"]["database"] == "ok"
