"""
Daraja Settings for the STK push flow.

Fixed values sent with every STK push and the API paths of the Daraja
endpoints the bridge calls. They can be adjusted via environment variables
without touching code.

Environment variables use the DARAJA_ prefix:
    DARAJA_ACCOUNT_REFERENCE=SautiPesa
    DARAJA_TRANSACTION_DESC=Payment

Usage:
    from src.service.daraja.settings import daraja_settings

    reference = daraja_settings.account_reference
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DarajaSettings(BaseSettings):
    """Constants of the Daraja STK push protocol."""

    model_config = SettingsConfigDict(
        env_prefix="DARAJA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Endpoints ===
    token_path: str = Field(
        default="/oauth/v1/generate?grant_type=client_credentials",
        description="OAuth client-credentials endpoint",
    )
    stk_push_path: str = Field(
        default="/mpesa/stkpush/v1/processrequest",
        description="STK push (Lipa Na M-Pesa Online) endpoint",
    )
    callback_path_template: str = Field(
        default="/api/mpesa/callback/{shortcode}",
        description="Path the gateway posts results to, relative to the callback base URL",
    )

    # === Request Constants ===
    transaction_type: str = Field(
        default="CustomerPayBillOnline",
        description="Daraja transaction type for paybill STK pushes",
    )
    account_reference: str = Field(
        default="SautiPesa",
        max_length=12,
        description="Account reference shown to the payer",
    )
    transaction_desc: str = Field(
        default="Payment",
        max_length=13,
        description="Transaction description shown to the payer",
    )

    # === Callback Metadata Names ===
    amount_item: str = "Amount"
    receipt_item: str = "MpesaReceiptNumber"
    phone_item: str = "PhoneNumber"


@lru_cache
def get_daraja_settings() -> DarajaSettings:
    """Get cached Daraja settings instance."""
    return DarajaSettings()


daraja_settings = get_daraja_settings()
