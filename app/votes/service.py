"""Vote casting against a user's remaining vote budget."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ..storage import RsStorage
from .timestamps import TimestampError, format_timestamp, parse_timestamp

logger = logging.getLogger(__name__)


class VoteRejected(ValueError):
    """Raised when a vote cannot be applied."""


@dataclass
class VoteService:
    storage: RsStorage

    async def vote(self, event_id: int, user_id: int, vote_num: int, time: str) -> dict[str, Any]:
        if vote_num < 1:
            raise VoteRejected("vote_num must be positive")
        try:
            cast_at = parse_timestamp(time)
        except TimestampError as exc:
            raise VoteRejected(str(exc)) from exc
        try:
            event = await self.storage.get_event(event_id)
        except KeyError as exc:
            raise VoteRejected(f"event {event_id} not found") from exc
        try:
            user = await self.storage.get_user(user_id)
        except KeyError as exc:
            raise VoteRejected(f"user {user_id} not found") from exc
        remaining = int(user.get("vote_num", 0))
        if vote_num > remaining:
            raise VoteRejected(f"user {user_id} has {remaining} votes left, asked for {vote_num}")

        vote = await self.storage.create_vote(
            {
                "user_id": user_id,
                "event_id": event_id,
                "vote_num": vote_num,
                "time": format_timestamp(cast_at),
            }
        )
        await self.storage.update_user(user_id, {"vote_num": remaining - vote_num})
        await self.storage.update_event(
            event_id, {"vote_num": int(event.get("vote_num", 0)) + vote_num}
        )
        logger.info("user %d cast %d votes for event %d", user_id, vote_num, event_id)
        return vote
