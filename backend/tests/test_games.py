import os
import sys

import pytest
from fastapi.testclient import TestClient

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app.main import app

BASE = "/api/v0/games"


@pytest.fixture()
def client():
    with TestClient(app) as c:
        yield c


def _create(client, **body):
    resp = client.post(BASE, json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()


def _roll(client, game_id, pins):
    return client.post(f"{BASE}/{game_id}/rolls", json={"pins": pins})


def test_create_game_with_players(client):
    game = _create(client, players=["Ann", "Bob"])
    assert game["maxPlayers"] == 4
    assert [p["name"] for p in game["players"]] == ["Ann", "Bob"]
    assert [p["id"] for p in game["players"]] == [0, 1]
    assert game["currentPlayer"] == 0
    assert game["currentFrame"] == 0
    assert game["finished"] is False
    assert game["winner"] is None
    assert len(game["players"][0]["frames"]) == 10

    listing = client.get(BASE).json()
    assert listing == [{"id": game["id"]}]


def test_create_game_rejects_too_many_players(client):
    resp = client.post(BASE, json={"maxPlayers": 1, "players": ["Ann", "Bob"]})
    assert resp.status_code == 409
    assert resp.headers["content-type"].startswith("application/problem+json")
    assert resp.json()["code"] == "capacity_exceeded"
    assert client.get(BASE).json() == []


def test_create_game_rejects_blank_names(client):
    resp = client.post(BASE, json={"players": ["  "]})
    assert resp.status_code == 422


def test_add_player_and_capacity(client):
    game = _create(client, maxPlayers=2)
    gid = game["id"]

    resp = client.post(f"{BASE}/{gid}/players", json={"name": "Ann"})
    assert resp.status_code == 201
    assert resp.json() == {"id": 0, "name": "Ann"}
    client.post(f"{BASE}/{gid}/players", json={"name": "Bob"})

    resp = client.post(f"{BASE}/{gid}/players", json={"name": "Cy"})
    assert resp.status_code == 409
    body = resp.json()
    assert body["code"] == "capacity_exceeded"
    assert body["status"] == 409
    assert body["instance"] == f"{BASE}/{gid}/players"


def test_roll_without_players_is_rejected(client):
    gid = _create(client)["id"]
    resp = _roll(client, gid, 3)
    assert resp.status_code == 409
    assert resp.json()["code"] == "no_players"


@pytest.mark.parametrize("pins", [-5, 11])
def test_roll_out_of_range_is_rejected(client, pins):
    gid = _create(client, players=["Ann"])["id"]
    resp = _roll(client, gid, pins)
    assert resp.status_code == 422
    assert resp.json()["code"] == "out_of_range"
    assert client.get(f"{BASE}/{gid}").json()["players"][0]["total"] == 0


def test_rolls_update_scores_and_turns(client):
    gid = _create(client, players=["Ann", "Bob"])["id"]
    for pins in [3, 5]:
        game = _roll(client, gid, pins).json()
    assert game["currentPlayer"] == 1

    for pins in [2, 4]:
        game = _roll(client, gid, pins).json()

    ann = client.get(f"{BASE}/{gid}/players/0/score").json()
    bob = client.get(f"{BASE}/{gid}/players/1/score").json()
    assert ann["total"] == 8
    assert bob["total"] == 6
    assert ann["frames"][0] == {
        "index": 0,
        "rolls": [3, 5],
        "score": 8,
        "strike": False,
        "spare": False,
    }
    assert ann["frameIndex"] == 1


def test_perfect_game_finishes_with_winner(client):
    gid = _create(client, players=["Ann"])["id"]
    for _ in range(12):
        game = _roll(client, gid, 10).json()

    assert game["finished"] is True
    assert game["winner"] == {"id": 0, "name": "Ann"}
    assert game["players"][0]["total"] == 300
    assert game["players"][0]["runningTotals"][-1] == 300

    resp = _roll(client, gid, 0)
    assert resp.status_code == 409
    assert resp.json()["code"] == "game_over"

    resp = client.post(f"{BASE}/{gid}/players", json={"name": "Late"})
    assert resp.status_code == 409


def test_unknown_game_and_player(client):
    resp = client.get(f"{BASE}/missing")
    assert resp.status_code == 404
    assert resp.json()["code"] == "game_not_found"

    resp = _roll(client, "missing", 3)
    assert resp.status_code == 404

    gid = _create(client, players=["Ann"])["id"]
    resp = client.get(f"{BASE}/{gid}/players/5/score")
    assert resp.status_code == 404
    assert resp.json()["code"] == "player_not_found"


def test_delete_game(client):
    gid = _create(client)["id"]
    assert client.delete(f"{BASE}/{gid}").status_code == 204
    assert client.get(f"{BASE}/{gid}").status_code == 404
    assert client.delete(f"{BASE}/{gid}").status_code == 404


def test_health_endpoints(client):
    assert client.get("/healthz").json() == {"status": "ok"}
    assert client.get("/api/healthz").json() == {"status": "ok"}
