"""Vote and purchase ranking core."""

from .merger import EventNotFound, merge, sort_by_votes
from .models import Event, PurchaseBid, RankMap
from .resolver import resolve, select_winner

__all__ = [
    "Event",
    "EventNotFound",
    "PurchaseBid",
    "RankMap",
    "merge",
    "resolve",
    "select_winner",
    "sort_by_votes",
]
