"""Shared ranking data structures."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

RankMap = dict[int, int]


@dataclass(frozen=True)
class Event:
    id: int
    vote_num: int = 0
    event_name: str = ""
    keyword: str = ""
    user_id: int | None = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Event":
        return cls(
            id=int(record["id"]),
            vote_num=int(record.get("vote_num", 0)),
            event_name=record.get("event_name", ""),
            keyword=record.get("keyword", ""),
            user_id=record.get("user_id"),
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "event_name": self.event_name,
            "keyword": self.keyword,
            "vote_num": self.vote_num,
        }


@dataclass(frozen=True)
class PurchaseBid:
    rank: int
    amount: int
    event_id: int

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "PurchaseBid":
        return cls(
            rank=int(record["rank"]),
            amount=int(record["amount"]),
            event_id=int(record["event_id"]),
        )
