"""Data transfer objects for STK push, callback and polling operations."""

from dataclasses import dataclass
from typing import Optional

from src.domain.entities import Transaction


@dataclass(frozen=True)
class CallbackOutcome:
    """What happened to one gateway callback."""

    shortcode: str
    outcome: str  # success, failed, malformed
    receipt: Optional[str] = None
    delivered: int = 0
    result_code: Optional[int] = None


@dataclass(frozen=True)
class RecentPaymentResponse:
    """A recent successful payment returned to polling clients."""

    amount: str
    phone: str
    receipt: str

    @classmethod
    def from_entity(cls, transaction: Transaction) -> "RecentPaymentResponse":
        return cls(
            amount=transaction.amount,
            phone=transaction.phone,
            receipt=transaction.receipt,
        )
