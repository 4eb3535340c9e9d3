"""Payment request and result entities for the STK push flow."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Union

from .transaction import Transaction, TransactionStatus


@dataclass(frozen=True)
class PushRequest:
    """An STK push to prompt a payer, alive only for one initiation call."""

    shortcode: str
    amount: Union[int, float]
    phone: str


@dataclass(frozen=True)
class SuccessfulPayment:
    """A callback reporting a completed payment (ResultCode 0)."""

    shortcode: str
    amount: Any
    receipt: str
    phone: Any

    def to_transaction(self) -> Transaction:
        """Build the ledger record; amount is kept as exact decimal text."""
        return Transaction(
            business_shortcode=self.shortcode,
            receipt=str(self.receipt),
            amount=str(Decimal(str(self.amount))),
            phone=str(self.phone),
            status=TransactionStatus.SUCCESS,
        )

    def to_notification(self) -> dict:
        """Build the message pushed to live sessions in the tenant's room."""
        return {
            "type": "payment_received",
            "data": {
                "amount": self.amount,
                "phone": self.phone,
                "receipt": self.receipt,
            },
        }


@dataclass(frozen=True)
class FailedPayment:
    """A callback reporting a cancelled, timed out or rejected payment."""

    shortcode: str
    result_code: int
    result_desc: str = ""


PaymentResult = Union[SuccessfulPayment, FailedPayment]
