"""Postgres storage backend leveraging asyncpg."""

from __future__ import annotations

from typing import Any

import asyncpg
import orjson

_TABLES = {
    "users": "rs_users",
    "events": "rs_events",
    "votes": "rs_votes",
    "trades": "rs_trades",
}


class PostgresStorage:
    def __init__(self, *, dsn: str | None = None, **connect_kwargs: Any) -> None:
        if not dsn and not connect_kwargs:
            raise ValueError("postgres connection details missing")
        self._dsn = dsn
        self._connect_kwargs = connect_kwargs
        self._pool: asyncpg.Pool | None = None

    def _encode(self, payload: dict[str, Any]) -> str:
        return orjson.dumps(payload).decode()

    def _decode(self, document_id: int, value: Any) -> dict[str, Any]:
        if isinstance(value, (bytes, bytearray)):
            value = value.decode()
        if isinstance(value, str):
            value = orjson.loads(value)
        return {**value, "id": document_id}

    async def _ensure_pool(self) -> asyncpg.Pool:
        if self._pool is None:
            self._pool = await asyncpg.create_pool(dsn=self._dsn, **self._connect_kwargs)
            async with self._pool.acquire() as conn:
                for table in _TABLES.values():
                    await conn.execute(
                        f"""
                        CREATE TABLE IF NOT EXISTS {table} (
                            id BIGSERIAL PRIMARY KEY,
                            data JSONB NOT NULL
                        );
                        """
                    )
        return self._pool

    async def _insert(self, collection: str, document: dict[str, Any]) -> dict[str, Any]:
        pool = await self._ensure_pool()
        payload = {key: value for key, value in document.items() if key != "id"}
        async with pool.acquire() as conn:
            document_id = await conn.fetchval(
                f"""INSERT INTO {_TABLES[collection]}(data) VALUES($1) RETURNING id""",
                self._encode(payload),
            )
        return {**payload, "id": int(document_id)}

    async def _get(self, collection: str, document_id: int) -> dict[str, Any]:
        pool = await self._ensure_pool()
        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""SELECT id, data FROM {_TABLES[collection]} WHERE id=$1""",
                document_id,
            )
        if not row:
            raise KeyError(f"{collection} {document_id} not found")
        return self._decode(row["id"], row["data"])

    async def _update(
        self, collection: str, document_id: int, updates: dict[str, Any]
    ) -> dict[str, Any]:
        document = await self._get(collection, document_id)
        document.update(updates)
        payload = {key: value for key, value in document.items() if key != "id"}
        pool = await self._ensure_pool()
        async with pool.acquire() as conn:
            await conn.execute(
                f"""UPDATE {_TABLES[collection]} SET data=$2 WHERE id=$1""",
                document_id,
                self._encode(payload),
            )
        return document

    async def _list(self, collection: str) -> list[dict[str, Any]]:
        pool = await self._ensure_pool()
        async with pool.acquire() as conn:
            rows = await conn.fetch(f"SELECT id, data FROM {_TABLES[collection]} ORDER BY id")
        return [self._decode(row["id"], row["data"]) for row in rows]

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
