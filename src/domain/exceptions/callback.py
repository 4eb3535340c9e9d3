"""Callback-related domain exceptions."""

from .base import DomainException


class MalformedCallbackException(DomainException):
    """Raised when a gateway callback lacks the fields needed to record it."""

    def __init__(self, shortcode: str, reason: str):
        super().__init__(
            message=f"Malformed callback for {shortcode}: {reason}",
            code="MALFORMED_CALLBACK",
        )
        self.shortcode = shortcode
        self.reason = reason
