"""
Tests for the HTTP API.
"""

import random

import pytest
from fastapi.testclient import TestClient
from pokerarena.server.app import create_app
from pokerarena.server.service import GameService


@pytest.fixture
def client():
    return TestClient(create_app(GameService(rng=random.Random(0))))


@pytest.fixture
def game_id(client):
    response = client.post("/games", json={"mode": "smart", "models": ["alpha", "beta", "gamma"]})
    assert response.status_code == 200
    return response.json()["game_id"]


class TestHealth:
    def test_health(self, client):
        """The health check answers ok."""
        assert client.get("/health").json() == {"status": "ok"}


class TestStartGame:
    """Tests for POST /games."""

    def test_default_table(self, client):
        """A game with only a mode gets the default table."""
        response = client.post("/games", json={"mode": "fast"})
        assert response.status_code == 200
        state = response.json()["state"]
        assert len(state["players"]) == 5
        assert state["hand_number"] == 1
        assert state["action_timeout_ms"] == 500
        assert all("hole_cards" not in p for p in state["players"])

    def test_custom_settings(self, client):
        """Blinds, stacks and timeout can be set per game."""
        response = client.post("/games", json={
            "mode": "smart",
            "models": ["alpha", "beta"],
            "small_blind": 5,
            "big_blind": 10,
            "starting_chips": 500,
            "action_timeout_ms": 2000,
        })
        state = response.json()["state"]
        assert state["big_blind"] == 10
        assert state["action_timeout_ms"] == 2000
        assert state["pot"] == 15

    @pytest.mark.parametrize("payload", [
        {},
        {"mode": "fast", "models": ["solo"]},
        {"mode": "fast", "win_threshold": 0},
        {"mode": "fast", "action_timeout_ms": -1},
    ])
    def test_invalid_request(self, client, payload):
        """Malformed bodies are rejected by validation."""
        assert client.post("/games", json=payload).status_code == 422

    def test_invalid_mode(self, client):
        """An unknown mode is a bad request."""
        response = client.post("/games", json={"mode": "slow"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid mode: slow"

    def test_invalid_settings(self, client):
        """Settings the engine rejects are a bad request."""
        response = client.post("/games", json={"mode": "fast", "models": ["a", "a"]})
        assert response.status_code == 400

        response = client.post("/games", json={"mode": "fast", "small_blind": 50, "big_blind": 20})
        assert response.status_code == 400


class TestGameEndpoints:
    """Tests for reading and playing a game."""

    def test_get_game(self, client, game_id):
        """Test fetching state and replay log."""
        data = client.get(f"/games/{game_id}").json()
        assert data["state"]["id"] == game_id
        assert data["state"]["current_player"] == "beta"
        assert data["log"]["game_id"] == game_id
        assert data["log"]["hands"] == []

    def test_unknown_game(self, client):
        """Unknown games are 404 on every route."""
        assert client.get("/games/nope").status_code == 404
        assert client.post("/games/nope/action").status_code == 404
        assert client.get("/games/nope/legal_actions").status_code == 404
        assert client.delete("/games/nope").status_code == 404

    def test_legal_actions(self, client, game_id):
        """Test listing legal actions for the current player."""
        data = client.get(f"/games/{game_id}/legal_actions").json()
        assert data["model"] == "beta"
        assert data["actions"][0] == {"type": "fold"}
        assert {"type": "call", "amount": 20} in data["actions"]
        assert data["actions"][-1] == {"type": "all-in"}

    def test_take_action(self, client, game_id):
        """Test playing one action."""
        data = client.post(f"/games/{game_id}/action").json()
        assert data["action"]["model"] == "beta"
        assert data["action"]["action"] == "call"
        assert data["action"]["amount"] == 20
        assert data["used_fallback"] is False
        assert data["message"] is None
        assert data["state"]["current_player"] == "gamma"

    def test_finished_game(self, client):
        """A finished game reports its winner and accepts no actions."""
        game_id = client.post("/games", json={"mode": "smart", "models": ["alpha", "beta"]}).json()["game_id"]

        data = None
        for _ in range(500):
            data = client.post(f"/games/{game_id}/action").json()
            if data["message"] == "Game finished":
                break
        assert data["message"] == "Game finished"

        response = client.post(f"/games/{game_id}/action")
        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["error"] == "Game finished"
        assert detail["winner"] in ("alpha", "beta")

        legal = client.get(f"/games/{game_id}/legal_actions").json()
        assert legal == {"model": None, "actions": []}


class TestReasoning:
    """Tests for POST /games/{id}/reasoning."""

    def test_attach_reasoning(self, client, game_id):
        """The first reasoning stored wins."""
        client.post(f"/games/{game_id}/action")

        url = f"/games/{game_id}/reasoning"
        first = client.post(url, json={"action_index": 0, "reasoning": "Cheap flop"})
        assert first.json() == {"reasoning": "Cheap flop"}

        second = client.post(url, json={"action_index": 0, "reasoning": "Overwrite"})
        assert second.json() == {"reasoning": "Cheap flop"}

        history = client.get(f"/games/{game_id}").json()["state"]["action_history"]
        assert history[0]["reasoning"] == "Cheap flop"

    def test_unknown_action(self, client, game_id):
        """Reasoning for a missing action is 404."""
        response = client.post(f"/games/{game_id}/reasoning", json={"action_index": 0, "reasoning": "x"})
        assert response.status_code == 404

    def test_invalid_payload(self, client, game_id):
        """Bad reasoning payloads are rejected by validation."""
        response = client.post(f"/games/{game_id}/reasoning", json={"action_index": -1, "reasoning": "x"})
        assert response.status_code == 422
        response = client.post(f"/games/{game_id}/reasoning", json={"action_index": 0, "reasoning": ""})
        assert response.status_code == 422


class TestDeleteGame:
    """Tests for DELETE /games/{id}."""

    def test_delete_game(self, client, game_id):
        """A deleted game is gone."""
        response = client.delete(f"/games/{game_id}")
        assert response.json() == {"deleted": game_id}
        assert client.get(f"/games/{game_id}").status_code == 404

    def test_unknown_ids_do_not_pile_up(self, client):
        """Requests for unknown games leave no locks behind."""
        service = client.app.state.service
        for i in range(10):
            assert client.post(f"/games/bogus-{i}/action").status_code == 404
            response = client.post(f"/games/nope-{i}/reasoning", json={"action_index": 0, "reasoning": "x"})
            assert response.status_code == 404
        assert service.repository._locks == {}
        assert len(service.repository) == 0
