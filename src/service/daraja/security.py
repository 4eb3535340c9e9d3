"""
Credential encoding for Daraja requests.

Daraja authenticates the token request with HTTP Basic credentials and
every STK push with a password derived from the shortcode, the tenant's
passkey and the request timestamp.
"""

import base64
from datetime import datetime, timezone
from typing import Optional

TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"


def generate_timestamp(now: Optional[datetime] = None) -> str:
    """
    Format a moment as a Daraja timestamp (YYYYMMDDHHMMSS, UTC).

    Args:
        now: The moment to format; defaults to the current time.
            Aware datetimes are converted to UTC, naive ones are
            assumed to already be UTC.

    Returns:
        A 14-digit timestamp string
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return now.strftime(TIMESTAMP_FORMAT)


def generate_password(shortcode: str, passkey: str, timestamp: str) -> str:
    """Derive the STK push password: base64(shortcode + passkey + timestamp)."""
    raw = f"{shortcode}{passkey}{timestamp}".encode("utf-8")
    return base64.b64encode(raw).decode("ascii")


def basic_auth_header(consumer_key: str, consumer_secret: str) -> str:
    """Build the Authorization header value for the OAuth token request."""
    raw = f"{consumer_key}:{consumer_secret}".encode("utf-8")
    return "Basic " + base64.b64encode(raw).decode("ascii")
