"""User registration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..storage import RsStorage


@dataclass
class UserService:
    storage: RsStorage
    default_vote_num: int = 10

    async def register(self, payload: dict[str, Any]) -> dict[str, Any]:
        user = dict(payload)
        user["vote_num"] = self.default_vote_num
        return await self.storage.create_user(user)

    async def get(self, user_id: int) -> dict[str, Any]:
        return await self.storage.get_user(user_id)

    async def list_users(self) -> list[dict[str, Any]]:
        return await self.storage.list_users()
