"""Unit tests for the in-memory storage backend."""

from __future__ import annotations

import pytest

from app.storage.in_memory import InMemoryStorage


class TestInMemoryStorage:
    """Id assignment, isolation and insertion order."""

    @pytest.mark.asyncio
    async def test_ids_are_sequential_per_collection(self):
        storage = InMemoryStorage()
        first = await storage.create_user({"user_name": "a"})
        second = await storage.create_user({"user_name": "b"})
        event = await storage.create_event({"event_name": "e"})
        assert (first["id"], second["id"], event["id"]) == (1, 2, 1)

    @pytest.mark.asyncio
    async def test_returned_documents_are_copies(self):
        storage = InMemoryStorage()
        created = await storage.create_event({"event_name": "e", "vote_num": 0})
        created["vote_num"] = 99
        assert (await storage.get_event(created["id"]))["vote_num"] == 0

    @pytest.mark.asyncio
    async def test_update_and_missing(self):
        storage = InMemoryStorage()
        created = await storage.create_user({"vote_num": 10})
        updated = await storage.update_user(created["id"], {"vote_num": 4})
        assert updated["vote_num"] == 4
        with pytest.raises(KeyError):
            await storage.get_user(404)
        with pytest.raises(KeyError):
            await storage.update_event(404, {"vote_num": 1})

    @pytest.mark.asyncio
    async def test_list_keeps_insertion_order(self):
        storage = InMemoryStorage()
        for amount in (30, 10, 20):
            await storage.create_trade({"rank": 1, "amount": amount, "event_id": 1})
        trades = await storage.list_trades()
        assert [trade["amount"] for trade in trades] == [30, 10, 20]
        assert await storage.list_votes() == []
