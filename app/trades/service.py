"""Purchase flow: admit a bid for a rank, then persist it."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..ranking.models import PurchaseBid
from ..storage import RsStorage
from .admission import AdmissionResult, admit

logger = logging.getLogger(__name__)


class UnknownEvent(ValueError):
    """Raised when a purchase targets an event that does not exist."""


@dataclass
class TradeService:
    storage: RsStorage

    async def buy(self, event_id: int, rank: int, amount: int) -> AdmissionResult:
        try:
            await self.storage.get_event(event_id)
        except KeyError as exc:
            raise UnknownEvent(f"event {event_id} not found") from exc
        bid = PurchaseBid(rank=rank, amount=amount, event_id=event_id)
        admitted = [PurchaseBid.from_record(record) for record in await self.storage.list_trades()]
        result = admit(bid, admitted)
        if not result.accepted:
            logger.info(
                "rejected bid of %d for rank %d on event %d: %s",
                amount,
                rank,
                event_id,
                result.failure.value,
            )
            return result
        await self.storage.create_trade({"rank": rank, "amount": amount, "event_id": event_id})
        logger.info("admitted bid of %d for rank %d on event %d", amount, rank, event_id)
        return result
