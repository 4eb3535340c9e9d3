"""External API client implementations."""

from .daraja_client import HttpDarajaClient

__all__ = [
    "HttpDarajaClient",
]
