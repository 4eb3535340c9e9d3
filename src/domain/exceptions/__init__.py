"""Domain Exceptions - Business rule violations and domain errors."""

from .base import DomainException
from .tenant import TenantNotFoundException, TenantRegistrationException
from .gateway import (
    GatewayException,
    TokenAcquisitionException,
    PushFailedException,
)
from .callback import MalformedCallbackException

__all__ = [
    "DomainException",
    "TenantNotFoundException",
    "TenantRegistrationException",
    "GatewayException",
    "TokenAcquisitionException",
    "PushFailedException",
    "MalformedCallbackException",
]
