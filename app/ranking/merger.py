"""Merge vote order with purchased rank pins into the final list."""

from __future__ import annotations

import logging
from typing import Iterator, Mapping, Optional, Sequence

from .models import Event

logger = logging.getLogger(__name__)


class EventNotFound(LookupError):
    """Raised when a purchased rank points at an event missing from the snapshot."""

    def __init__(self, event_id: int, rank: int) -> None:
        super().__init__(f"event {event_id} won rank {rank} but is not in the event set")
        self.event_id = event_id
        self.rank = rank


def sort_by_votes(events: Sequence[Event]) -> list[Event]:
    # sorted() is stable with reverse=True, so equal votes keep input order
    return sorted(events, key=lambda event: event.vote_num, reverse=True)


def merge(events: Sequence[Event], rank_map: Mapping[int, int]) -> list[Event]:
    ordered = sort_by_votes(events)
    size = len(ordered)
    by_id = {event.id: event for event in ordered}
    pins = _collect_pins(by_id, rank_map, size)
    pinned_ids = {event.id for event in pins.values()}

    remainder = (event for event in ordered if event.id not in pinned_ids)
    placed: set[int] = set()
    result: list[Event] = []
    for position in range(1, size + 1):
        event = pins.get(position) or _next_unplaced(remainder, placed)
        if event is None:
            break
        result.append(event)
        placed.add(event.id)

    for event in remainder:
        if event.id not in placed:
            result.append(event)
            placed.add(event.id)
    return result


def _collect_pins(
    by_id: Mapping[int, Event], rank_map: Mapping[int, int], size: int
) -> dict[int, Event]:
    pins: dict[int, Event] = {}
    seen: set[int] = set()
    for rank in sorted(rank_map):
        if not 1 <= rank <= size:
            continue
        event_id = rank_map[rank]
        event = by_id.get(event_id)
        if event is None:
            raise EventNotFound(event_id, rank)
        if event_id in seen:
            # an event holds one slot; its lowest won rank keeps it
            logger.debug("event %s already pinned, rank %s falls back to votes", event_id, rank)
            continue
        pins[rank] = event
        seen.add(event_id)
    return pins


def _next_unplaced(remainder: Iterator[Event], placed: set[int]) -> Optional[Event]:
    for event in remainder:
        if event.id not in placed:
            return event
    return None
