"""Purchase resolution: one winning bid per rank."""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Optional

from .models import PurchaseBid, RankMap


def select_winner(bids: Iterable[PurchaseBid]) -> Optional[PurchaseBid]:
    # max() keeps the first of several equal maxima
    return max(bids, key=lambda bid: bid.amount, default=None)


def resolve(bids: Iterable[PurchaseBid]) -> RankMap:
    """Map each purchased rank to the event id of its highest bid."""
    by_rank: dict[int, list[PurchaseBid]] = defaultdict(list)
    for bid in bids:
        by_rank[bid.rank].append(bid)
    rank_map: RankMap = {}
    for rank, contenders in by_rank.items():
        winner = select_winner(contenders)
        if winner is not None:
            rank_map[rank] = winner.event_id
    return rank_map
