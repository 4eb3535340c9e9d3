"""
STK callback parsing.

Daraja posts the outcome of an STK push as:

    {"Body": {"stkCallback": {
        "MerchantRequestID": "...",
        "CheckoutRequestID": "...",
        "ResultCode": 0,
        "ResultDesc": "The service request is processed successfully.",
        "CallbackMetadata": {"Item": [
            {"Name": "Amount", "Value": 100},
            {"Name": "MpesaReceiptNumber", "Value": "ABC123"},
            {"Name": "PhoneNumber", "Value": 254708374149}
        ]}
    }}}

CallbackMetadata is only present when ResultCode is 0.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from src.domain.entities import FailedPayment, PaymentResult, SuccessfulPayment
from src.domain.exceptions import MalformedCallbackException

from .settings import DarajaSettings, daraja_settings


class CallbackItem(BaseModel):
    """One name/value pair of callback metadata."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., alias="Name")
    value: Any = Field(None, alias="Value")


class CallbackMetadata(BaseModel):
    model_config = ConfigDict(extra="ignore")

    items: List[CallbackItem] = Field(default_factory=list, alias="Item")


class StkCallback(BaseModel):
    model_config = ConfigDict(extra="ignore")

    result_code: int = Field(..., alias="ResultCode")
    result_desc: str = Field("", alias="ResultDesc")
    merchant_request_id: Optional[str] = Field(None, alias="MerchantRequestID")
    checkout_request_id: Optional[str] = Field(None, alias="CheckoutRequestID")
    metadata: Optional[CallbackMetadata] = Field(None, alias="CallbackMetadata")


class CallbackBody(BaseModel):
    model_config = ConfigDict(extra="ignore")

    stk_callback: StkCallback = Field(..., alias="stkCallback")


class CallbackEnvelope(BaseModel):
    """Top-level STK callback document."""

    model_config = ConfigDict(extra="ignore")

    body: CallbackBody = Field(..., alias="Body")


def metadata_value(items: List[CallbackItem], name: str) -> Any:
    """Return the value of the first item with the given name, or None."""
    for item in items:
        if item.name == name:
            return item.value
    return None


def parse_stk_callback(
    shortcode: str,
    payload: Dict[str, Any],
    settings: DarajaSettings = daraja_settings,
) -> PaymentResult:
    """
    Turn a raw callback document into a payment result.

    Args:
        shortcode: Tenant shortcode taken from the callback URL
        payload: Decoded JSON body posted by the gateway
        settings: Daraja settings (uses defaults if not provided)

    Returns:
        SuccessfulPayment when ResultCode is 0, FailedPayment otherwise

    Raises:
        MalformedCallbackException: If the document does not match the
            callback shape, or a successful result lacks Amount,
            MpesaReceiptNumber or PhoneNumber
    """
    try:
        envelope = CallbackEnvelope.model_validate(payload)
    except ValidationError as e:
        raise MalformedCallbackException(
            shortcode, f"invalid callback shape ({e.error_count()} errors)"
        ) from e

    callback = envelope.body.stk_callback

    if callback.result_code != 0:
        return FailedPayment(
            shortcode=shortcode,
            result_code=callback.result_code,
            result_desc=callback.result_desc,
        )

    items = callback.metadata.items if callback.metadata else []
    required = {
        "amount": settings.amount_item,
        "receipt": settings.receipt_item,
        "phone": settings.phone_item,
    }
    values = {key: metadata_value(items, name) for key, name in required.items()}

    missing = [required[key] for key, value in values.items() if value is None]
    if missing:
        raise MalformedCallbackException(
            shortcode, f"missing metadata: {', '.join(missing)}"
        )

    if isinstance(values["amount"], bool):
        raise MalformedCallbackException(shortcode, "amount is not a number")
    try:
        amount = Decimal(str(values["amount"]))
    except InvalidOperation as e:
        raise MalformedCallbackException(shortcode, "amount is not a number") from e
    if not amount.is_finite():
        raise MalformedCallbackException(shortcode, "amount is not a number")

    return SuccessfulPayment(
        shortcode=shortcode,
        amount=values["amount"],
        receipt=str(values["receipt"]),
        phone=values["phone"],
    )
