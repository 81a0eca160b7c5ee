"""Glue between storage snapshots, purchase resolution and the merge."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..storage import RsStorage
from .merger import EventNotFound, merge
from .models import Event, PurchaseBid
from .resolver import resolve

logger = logging.getLogger(__name__)


class InvalidRange(ValueError):
    """Raised when a requested [start, end] window falls outside the list."""


class InvalidIndex(ValueError):
    """Raised when a 1-based position does not exist in the ranked list."""


@dataclass
class RankingService:
    storage: RsStorage

    async def ranked_events(self) -> list[Event]:
        events = [Event.from_record(record) for record in await self.storage.list_events()]
        bids = [PurchaseBid.from_record(record) for record in await self.storage.list_trades()]
        rank_map = resolve(bids)
        logger.debug("resolved %d purchased ranks from %d bids", len(rank_map), len(bids))
        try:
            return merge(events, rank_map)
        except EventNotFound:
            logger.error("ranking aborted: purchased rank references unknown event", exc_info=True)
            raise

    async def ranked_slice(self, start: int, end: int) -> list[Event]:
        ranked = await self.ranked_events()
        if start < 1 or end < start or end > len(ranked):
            raise InvalidRange(f"invalid range [{start}, {end}] for {len(ranked)} events")
        return ranked[start - 1 : end]

    async def event_at(self, index: int) -> Event:
        ranked = await self.ranked_events()
        if not 1 <= index <= len(ranked):
            raise InvalidIndex(f"index {index} out of range")
        return ranked[index - 1]
