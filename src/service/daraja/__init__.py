"""
Daraja STK Push Protocol Module for Pesa Bridge
"""

from .settings import DarajaSettings, daraja_settings
from .security import generate_timestamp, generate_password, basic_auth_header
from .stk_push import build_callback_url, build_stk_push_payload
from .callback import CallbackEnvelope, parse_stk_callback

__all__ = [
    # Settings
    "DarajaSettings",
    "daraja_settings",
    # Security
    "generate_timestamp",
    "generate_password",
    "basic_auth_header",
    # STK Push
    "build_callback_url",
    "build_stk_push_payload",
    # Callback
    "CallbackEnvelope",
    "parse_stk_callback",
]
