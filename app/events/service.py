"""Hot-search event creation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ..storage import RsStorage

logger = logging.getLogger(__name__)


class UnknownUser(ValueError):
    """Raised when an event is submitted on behalf of a user that does not exist."""


@dataclass
class EventService:
    storage: RsStorage

    async def add_event(self, event_name: str, keyword: str, user_id: int) -> dict[str, Any]:
        try:
            await self.storage.get_user(user_id)
        except KeyError as exc:
            raise UnknownUser(f"user {user_id} not found") from exc
        event = await self.storage.create_event(
            {
                "event_name": event_name,
                "keyword": keyword,
                "user_id": user_id,
                "vote_num": 0,
            }
        )
        logger.info("user %d created event %d", user_id, event["id"])
        return event
