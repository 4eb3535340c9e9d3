"""Domain Entities - Core business objects."""

from .tenant import Tenant, GatewayCredentials
from .transaction import Transaction, TransactionStatus
from .payment import PushRequest, SuccessfulPayment, FailedPayment, PaymentResult

__all__ = [
    "Tenant",
    "GatewayCredentials",
    "Transaction",
    "TransactionStatus",
    "PushRequest",
    "SuccessfulPayment",
    "FailedPayment",
    "PaymentResult",
]
