"""Daraja gateway domain exceptions."""

from .base import DomainException


class GatewayException(DomainException):
    """Base class for failures talking to the Daraja API."""

    def __init__(
        self,
        message: str,
        code: str = "GATEWAY_ERROR",
        status_code: int | None = None,
    ):
        super().__init__(message=message, code=code)
        self.status_code = status_code


class TokenAcquisitionException(GatewayException):
    """Raised when an OAuth access token cannot be obtained."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(
            message=message,
            code="TOKEN_ACQUISITION_FAILED",
            status_code=status_code,
        )


class PushFailedException(GatewayException):
    """
    Raised when an STK push cannot be initiated.

    The public message is deliberately generic; the underlying cause is
    logged where it happens and kept on ``__cause__``.
    """

    def __init__(self, shortcode: str, status_code: int | None = None):
        super().__init__(
            message="STK Push Failed",
            code="STK_PUSH_FAILED",
            status_code=status_code,
        )
        self.shortcode = shortcode
