"""Write-time admission check for purchase bids."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from ..ranking.models import PurchaseBid


class AdmissionFailure(str, Enum):
    AMOUNT_NOT_ENOUGH = "amount not enough"


@dataclass(frozen=True)
class AdmissionResult:
    bid: PurchaseBid
    failure: Optional[AdmissionFailure] = None

    @property
    def accepted(self) -> bool:
        return self.failure is None


def current_amount(rank: int, admitted: Iterable[PurchaseBid]) -> Optional[int]:
    amounts = [bid.amount for bid in admitted if bid.rank == rank]
    return max(amounts, default=None)


def admit(bid: PurchaseBid, admitted: Iterable[PurchaseBid]) -> AdmissionResult:
    """Accept a bid only when it beats every admitted bid for the same rank."""
    highest = current_amount(bid.rank, admitted)
    if highest is not None and highest >= bid.amount:
        return AdmissionResult(bid=bid, failure=AdmissionFailure.AMOUNT_NOT_ENOUGH)
    return AdmissionResult(bid=bid)
