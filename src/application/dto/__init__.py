"""Data Transfer Objects for application layer."""

from .tenant import RegistrationRequest, RegistrationResponse
from .payment import CallbackOutcome, RecentPaymentResponse

__all__ = [
    "RegistrationRequest",
    "RegistrationResponse",
    "CallbackOutcome",
    "RecentPaymentResponse",
]
