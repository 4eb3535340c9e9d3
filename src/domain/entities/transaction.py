"""Transaction entity representing a completed M-Pesa payment."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class TransactionStatus(str, Enum):
    """Status of a ledger transaction."""

    SUCCESS = "SUCCESS"


@dataclass(frozen=True)
class Transaction:
    """
    Immutable ledger record of a successful payment.

    Attributes:
        business_shortcode: Shortcode of the tenant that was paid
        receipt: M-Pesa receipt number
        amount: Paid amount as decimal text, e.g. "100" or "1.50"
        phone: Payer phone number
        status: Always SUCCESS; failed payments are never recorded
        created_at: Assigned by the ledger when the row is written
    """

    business_shortcode: str
    receipt: str
    amount: str
    phone: str
    status: TransactionStatus = TransactionStatus.SUCCESS
    created_at: Optional[datetime] = None
