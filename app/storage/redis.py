"""Redis storage backend using redis-py asyncio client."""

from __future__ import annotations

from typing import Any

import orjson
from redis import asyncio as aioredis


class RedisStorage:
    def __init__(self, *, url: str, prefix: str = "rslist") -> None:
        if not url:
            raise ValueError("redis url missing")
        self._redis = aioredis.from_url(url)
        self._prefix = prefix.rstrip(":")

    def _document_key(self, collection: str, document_id: int) -> str:
        return f"{self._prefix}:{collection}:{document_id}"

    def _sequence_key(self, collection: str) -> str:
        return f"{self._prefix}:{collection}:seq"

    def _index_key(self, collection: str) -> str:
        return f"{self._prefix}:{collection}:index"

    async def _insert(self, collection: str, document: dict[str, Any]) -> dict[str, Any]:
        document_id = int(await self._redis.incr(self._sequence_key(collection)))
        stored = {**document, "id": document_id}
        async with self._redis.pipeline(transaction=True) as pipe:
            pipe.set(self._document_key(collection, document_id), orjson.dumps(stored))
            pipe.rpush(self._index_key(collection), document_id)
            await pipe.execute()
        return stored

    async def _get(self, collection: str, document_id: int) -> dict[str, Any]:
        raw = await self._redis.get(self._document_key(collection, document_id))
        if raw is None:
            raise KeyError(f"{collection} {document_id} not found")
        return orjson.loads(raw)

    async def _update(
        self, collection: str, document_id: int, updates: dict[str, Any]
    ) -> dict[str, Any]:
        document = await self._get(collection, document_id)
        document.update(updates)
        await self._redis.set(self._document_key(collection, document_id), orjson.dumps(document))
        return document

    async def _list(self, collection: str) -> list[dict[str, Any]]:
        ids = await self._redis.lrange(self._index_key(collection), 0, -1)
        if not ids:
            return []
        keys = [self._document_key(collection, int(value)) for value in ids]
        values = await self._redis.mget(keys)
        return [orjson.loads(value) for value in values if value]

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
