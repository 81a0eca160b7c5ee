"""Ranking stats endpoint."""

from __future__ import annotations

from collections import Counter
from typing import Any

from fastapi import APIRouter, Depends, Request

from ..ranking import PurchaseBid, resolve
from ..storage import RsStorage

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_storage(request: Request) -> RsStorage:
    return request.app.state.storage


@router.get("/stats")
async def stats(storage: RsStorage = Depends(_get_storage)) -> dict[str, Any]:
    events = await storage.list_events()
    votes = await storage.list_votes()
    trades = await storage.list_trades()
    bids = [PurchaseBid.from_record(record) for record in trades]

    bids_per_rank: Counter[int] = Counter(bid.rank for bid in bids)
    contested_ranks = sorted(rank for rank, count in bids_per_rank.items() if count > 1)
    rank_map = resolve(bids)
    total_events = len(events)
    # a pin only lands when its rank exists in the current list
    pinned_ranks = sorted(rank for rank in rank_map if rank <= total_events)

    return {
        "total_events": total_events,
        "total_users": len(await storage.list_users()),
        "total_votes_cast": sum(int(vote.get("vote_num", 0)) for vote in votes),
        "total_trades": len(trades),
        "contested_ranks": contested_ranks,
        "pinned_ranks": pinned_ranks,
        "purchased_amount": sum(bid.amount for bid in bids),
    }
