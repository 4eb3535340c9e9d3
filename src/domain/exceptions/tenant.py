"""Tenant-related domain exceptions."""

from .base import DomainException


class TenantNotFoundException(DomainException):
    """Raised when no business is registered under a shortcode."""

    def __init__(self, shortcode: str):
        super().__init__(
            message=f"Credentials not found for {shortcode}",
            code="TENANT_NOT_FOUND",
        )
        self.shortcode = shortcode


class TenantRegistrationException(DomainException):
    """Raised when a business registration cannot be stored."""

    def __init__(self, shortcode: str, reason: str):
        super().__init__(
            message=reason,
            code="REGISTRATION_FAILED",
        )
        self.shortcode = shortcode
