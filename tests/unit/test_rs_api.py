"""Unit tests for the /rs and /user HTTP endpoints."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from app.main import app

VOTE_TIME = "2024-05-01T12:00:00"


@pytest.fixture
def client():
    """TestClient with a fresh in-memory storage per test."""
    with TestClient(app) as test_client:
        yield test_client


def _register(client: TestClient, **overrides) -> int:
    payload = {
        "user_name": "idolice",
        "gender": "female",
        "age": 19,
        "email": "a@b.com",
        "phone": "18888888888",
    }
    payload.update(overrides)
    response = client.post("/user", json=payload)
    assert response.status_code == 201
    return response.json()["id"]


def _add_event(client: TestClient, user_id: int, name: str, keyword: str = "general") -> int:
    response = client.post(
        "/rs/event",
        json={"event_name": name, "keyword": keyword, "user_id": user_id},
    )
    assert response.status_code == 201
    return response.json()["id"]


def _vote(client: TestClient, event_id: int, user_id: int, vote_num: int):
    return client.post(
        f"/rs/vote/{event_id}",
        json={"user_id": user_id, "vote_num": vote_num, "time": VOTE_TIME},
    )


def _buy(client: TestClient, event_id: int, rank: int, amount: int):
    return client.post(f"/rs/buy/{event_id}", json={"amount": amount, "rank": rank})


class TestUsers:
    """User registration endpoints."""

    def test_register_and_fetch(self, client):
        user_id = _register(client)
        response = client.get(f"/user/{user_id}")
        assert response.status_code == 200
        assert response.json()["vote_num"] == 10
        assert len(client.get("/users").json()) == 1

    def test_register_rejects_invalid_age(self, client):
        response = client.post(
            "/user",
            json={
                "user_name": "kid",
                "gender": "male",
                "age": 12,
                "email": "k@b.com",
                "phone": "18888888888",
            },
        )
        assert response.status_code == 422

    def test_register_rejects_caller_vote_budget(self, client):
        response = client.post(
            "/user",
            json={
                "user_name": "greedy",
                "gender": "male",
                "age": 30,
                "email": "g@b.com",
                "phone": "18888888888",
                "vote_num": 100000,
            },
        )
        assert response.status_code == 422
        assert client.get("/users").json() == []

    def test_unknown_user(self, client):
        assert client.get("/user/77").status_code == 404


class TestEvents:
    """Event creation and lookup."""

    def test_add_event_for_unknown_user(self, client):
        response = client.post(
            "/rs/event",
            json={"event_name": "pork prices up", "keyword": "economy", "user_id": 100},
        )
        assert response.status_code == 400

    def test_get_event_by_index(self, client):
        user_id = _register(client)
        _add_event(client, user_id, "first")
        _add_event(client, user_id, "second")
        assert client.get("/rs/1").json()["event_name"] == "first"
        assert client.get("/rs/2").json()["event_name"] == "second"

    def test_invalid_index(self, client):
        response = client.get("/rs/4")
        assert response.status_code == 400
        assert response.json()["detail"] == "invalid index"

    def test_list_between(self, client):
        user_id = _register(client)
        for name in ("first", "second", "third"):
            _add_event(client, user_id, name)
        names = [item["event_name"] for item in client.get("/rs/list?start=2&end=3").json()]
        assert names == ["second", "third"]
        assert len(client.get("/rs/list").json()) == 3

    @pytest.mark.parametrize("query", ["start=1", "start=0&end=2", "start=2&end=9"])
    def test_list_rejects_bad_range(self, client, query):
        user_id = _register(client)
        _add_event(client, user_id, "only")
        response = client.get(f"/rs/list?{query}")
        assert response.status_code == 400
        assert response.json()["detail"] == "invalid request param"


class TestVotes:
    """Vote casting endpoint."""

    def test_vote_moves_budget(self, client):
        user_id = _register(client)
        event_id = _add_event(client, user_id, "first")
        assert _vote(client, event_id, user_id, 1).status_code == 200
        assert client.get(f"/user/{user_id}").json()["vote_num"] == 9
        assert client.get("/rs/1").json()["vote_num"] == 1

    def test_vote_over_budget(self, client):
        user_id = _register(client)
        event_id = _add_event(client, user_id, "first")
        assert _vote(client, event_id, user_id, 11).status_code == 400
        assert client.get(f"/user/{user_id}").json()["vote_num"] == 10


class TestPurchases:
    """Rank purchases and the merged list."""

    def test_buy_success(self, client):
        user_id = _register(client)
        event_id = _add_event(client, user_id, "e")
        response = _buy(client, event_id, rank=1, amount=100)
        assert response.status_code == 200
        assert response.json()["status"] == "accepted"

    def test_buy_fails_when_amount_not_enough(self, client):
        user_id = _register(client)
        event_id = _add_event(client, user_id, "e")
        assert _buy(client, event_id, rank=1, amount=100).status_code == 200
        response = _buy(client, event_id, rank=1, amount=90)
        assert response.status_code == 400
        assert response.json()["detail"] == "amount not enough"
        assert client.get("/admin/stats").json()["total_trades"] == 1

    def test_dangling_purchase_fails_ranking(self, client):
        user_id = _register(client)
        _add_event(client, user_id, "only")
        storage = client.app.state.storage
        client.portal.call(storage.create_trade, {"rank": 1, "amount": 1, "event_id": 999})

        for path in ("/rs/list", "/rs/1"):
            response = client.get(path)
            assert response.status_code == 500
            assert response.json()["detail"] == "ranking unavailable"

    def test_buy_unknown_event(self, client):
        assert _buy(client, 5, rank=1, amount=100).status_code == 400

    def test_sorted_list_honors_purchases(self, client):
        user_id = _register(client)
        event_ids = [_add_event(client, user_id, f"event {n}") for n in range(1, 5)]
        for votes, event_id in enumerate(event_ids, start=1):
            assert _vote(client, event_id, user_id, votes).status_code == 200

        assert _buy(client, event_ids[0], rank=1, amount=100).status_code == 200
        assert _buy(client, event_ids[1], rank=1, amount=120).status_code == 200
        assert _buy(client, event_ids[2], rank=3, amount=100).status_code == 200

        ranked = [item["id"] for item in client.get("/rs/list").json()]
        assert ranked == [event_ids[1], event_ids[3], event_ids[2], event_ids[0]]

        stats = client.get("/admin/stats").json()
        assert stats["total_events"] == 4
        assert stats["total_votes_cast"] == 10
        assert stats["contested_ranks"] == [1]
        assert stats["pinned_ranks"] == [1, 3]


class TestAdmin:
    """Admin and metadata endpoints."""

    def test_health(self, client):
        user_id = _register(client)
        _add_event(client, user_id, "first")
        body = client.get("/admin/health").json()
        assert body["status"] == "healthy"
        assert body["storage"] == {"backend": "in_memory", "events": 1, "reachable": True}

    def test_health_degraded_when_storage_fails(self, client, monkeypatch):
        storage = client.app.state.storage
        monkeypatch.setattr(
            storage, "list_events", AsyncMock(side_effect=ConnectionError("refused"))
        )
        body = client.get("/admin/health").json()
        assert body["status"] == "degraded"
        assert body["storage"]["reachable"] is False
        assert "events" not in body["storage"]

    def test_config(self, client):
        body = client.get("/admin/config").json()
        assert body["default_vote_num"] == 10
        assert body["schemas"] == ["rs_event", "trade", "user", "vote"]

    def test_root(self, client):
        assert client.get("/").json()["service"] == "rs-list-server"
