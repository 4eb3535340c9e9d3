"""Pydantic schemas for API request/response validation."""

from .payment import StkPushRequestSchema, RecentPaymentSchema, CallbackAckSchema
from .tenant import (
    RegistrationRequestSchema,
    RegistrationResponseSchema,
    RegistrationErrorSchema,
)
from .realtime import JoinRoomMessage, PaymentReceivedMessage, PaymentReceivedData
from .error import ErrorResponseSchema

__all__ = [
    "StkPushRequestSchema",
    "RecentPaymentSchema",
    "CallbackAckSchema",
    "RegistrationRequestSchema",
    "RegistrationResponseSchema",
    "RegistrationErrorSchema",
    "JoinRoomMessage",
    "PaymentReceivedMessage",
    "PaymentReceivedData",
    "ErrorResponseSchema",
]
