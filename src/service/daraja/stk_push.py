"""
STK push request construction.

Builds the processrequest body Daraja expects. The callback URL carries the
tenant shortcode so the asynchronous result can be routed back to the
right room.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from .security import generate_password, generate_timestamp
from .settings import DarajaSettings, daraja_settings


def build_callback_url(
    base_url: str,
    shortcode: str,
    settings: DarajaSettings = daraja_settings,
) -> str:
    """Join the public base URL with the tenant's callback path."""
    path = settings.callback_path_template.format(shortcode=shortcode)
    return base_url.rstrip("/") + path


def build_stk_push_payload(
    shortcode: str,
    passkey: str,
    amount: Any,
    phone: str,
    callback_base_url: str,
    now: Optional[datetime] = None,
    settings: DarajaSettings = daraja_settings,
) -> Dict[str, Any]:
    """
    Build the body of an STK push request.

    The payer phone is used both as the debited party and as the number
    that receives the prompt; the tenant shortcode is both the business
    short code and the credited party.

    Args:
        shortcode: Tenant shortcode
        passkey: Tenant's Lipa Na M-Pesa passkey
        amount: Amount to request from the payer
        phone: Payer phone number
        callback_base_url: Public base URL of this service
        now: Moment used for the timestamp (defaults to now)
        settings: Daraja settings (uses defaults if not provided)

    Returns:
        The processrequest JSON body
    """
    timestamp = generate_timestamp(now)

    return {
        "BusinessShortCode": shortcode,
        "Password": generate_password(shortcode, passkey, timestamp),
        "Timestamp": timestamp,
        "TransactionType": settings.transaction_type,
        "Amount": amount,
        "PartyA": phone,
        "PartyB": shortcode,
        "PhoneNumber": phone,
        "CallBackURL": build_callback_url(callback_base_url, shortcode, settings),
        "AccountReference": settings.account_reference,
        "TransactionDesc": settings.transaction_desc,
    }
