"""In-memory storage backend for users, events, votes and trades."""

from __future__ import annotations

import asyncio
from collections import Counter
from copy import deepcopy
from typing import Any


class InMemoryStorage:
    def __init__(self) -> None:
        self._collections: dict[str, dict[int, dict[str, Any]]] = {
            "users": {},
            "events": {},
            "votes": {},
            "trades": {},
        }
        self._sequences: Counter[str] = Counter()
        self._lock = asyncio.Lock()

    async def _insert(self, collection: str, document: dict[str, Any]) -> dict[str, Any]:
        async with self._lock:
            self._sequences[collection] += 1
            stored = {**deepcopy(document), "id": self._sequences[collection]}
            self._collections[collection][stored["id"]] = stored
            return deepcopy(stored)

    async def _get(self, collection: str, document_id: int) -> dict[str, Any]:
        async with self._lock:
            try:
                return deepcopy(self._collections[collection][document_id])
            except KeyError as exc:
                raise KeyError(f"{collection} {document_id} not found") from exc

    async def _update(
        self, collection: str, document_id: int, updates: dict[str, Any]
    ) -> dict[str, Any]:
        async with self._lock:
            documents = self._collections[collection]
            if document_id not in documents:
                raise KeyError(f"{collection} {document_id} not found")
            documents[document_id].update(deepcopy(updates))
            return deepcopy(documents[document_id])

    async def _list(self, collection: str) -> list[dict[str, Any]]:
        async with self._lock:
            # dicts keep insertion order, which is the vote tie-break order
            return [deepcopy(doc) for doc in self._collections[collection].values()]

    async def create_user(self, user: dict[str, Any]) -> dict[str, Any]:
        return await self._insert("users", user)

    async def get_user(self, user_id: int) -> dict[str, Any]:
        return await self._get("users", user_id)

    async def update_user(self, user_id: int, updates: dict[str, Any]) -> dict[str, Any]:
        return await self._update("users", user_id, updates)

    async def list_users(self) -> list[dict[str, Any]]:
        return await self._list("users")

    async def create_event(self, event: dict[str, Any]) -> dict[str, Any]:
        return await self._insert("events", event)

    async def get_event(self, event_id: int) -> dict[str, Any]:
        return await self._get("events", event_id)

    async def update_event(self, event_id: int, updates: dict[str, Any]) -> dict[str, Any]:
        return await self._update("events", event_id, updates)

    async def list_events(self) -> list[dict[str, Any]]:
        return await self._list("events")

    async def create_vote(self, vote: dict[str, Any]) -> dict[str, Any]:
        return await self._insert("votes", vote)

    async def list_votes(self) -> list[dict[str, Any]]:
        return await self._list("votes")

    async def create_trade(self, trade: dict[str, Any]) -> dict[str, Any]:
        return await self._insert("trades", trade)

    async def list_trades(self) -> list[dict[str, Any]]:
        return await self._list("trades")
