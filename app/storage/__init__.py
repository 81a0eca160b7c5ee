"""Storage backend factory."""

from __future__ import annotations

from typing import Protocol

from ..config import ServerConfig
from .in_memory import InMemoryStorage
from .postgres import PostgresStorage
from .redis import RedisStorage


class RsStorage(Protocol):
    async def create_user(self, user: dict) -> dict: ...

    async def get_user(self, user_id: int) -> dict: ...

    async def update_user(self, user_id: int, updates: dict) -> dict: ...

    async def list_users(self) -> list[dict]: ...

    async def create_event(self, event: dict) -> dict: ...

    async def get_event(self, event_id: int) -> dict: ...

    async def update_event(self, event_id: int, updates: dict) -> dict: ...

    async def list_events(self) -> list[dict]: ...

    async def create_vote(self, vote: dict) -> dict: ...

    async def list_votes(self) -> list[dict]: ...

    async def create_trade(self, trade: dict) -> dict: ...

    async def list_trades(self) -> list[dict]: ...


def build_storage(config: ServerConfig) -> RsStorage:
    backend = config.storage.backend
    options = dict(config.storage.options)
    if backend == "in_memory":
        return InMemoryStorage()
    if backend == "redis":
        return RedisStorage(**options)
    if backend == "postgres":
        return PostgresStorage(**options)
    raise ValueError(f"unknown storage backend {backend}")
