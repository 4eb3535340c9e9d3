"""Payment-related Pydantic schemas."""

from typing import Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class StkPushRequestSchema(BaseModel):
    """Schema for POST /api/mpesa/stkpush request body."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "phone": "254708374149",
                    "amount": 100,
                    "shortcode": "174379",
                }
            ]
        }
    )
    phone: str = Field(
        ...,
        min_length=1,
        max_length=20,
        description="Payer phone number in 2547XXXXXXXX format",
        examples=["254708374149"],
    )
    amount: Union[int, float] = Field(
        ...,
        description="Amount to request from the payer",
        examples=[100],
    )
    shortcode: str = Field(
        ...,
        min_length=1,
        max_length=32,
        description="Registered business shortcode",
        examples=["174379"],
    )

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v: Union[int, float]) -> Union[int, float]:
        """Ensure the amount is a positive number."""
        if v <= 0:
            raise ValueError("amount must be positive")
        return v

    @field_validator("phone", "shortcode")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("value cannot be empty or whitespace")
        return v.strip()


class RecentPaymentSchema(BaseModel):
    """Schema for GET /api/mpesa/check-payments/{shortcode} response."""

    amount: str = Field(
        ...,
        description="Paid amount as decimal text",
        examples=["100"],
    )
    phone: str = Field(
        ...,
        description="Payer phone number",
        examples=["254708374149"],
    )
    receipt: str = Field(
        ...,
        description="M-Pesa receipt number",
        examples=["ABC123"],
    )


class CallbackAckSchema(BaseModel):
    """Acknowledgement returned to the gateway for every callback."""

    ResultCode: int = 0
    ResultDesc: str = "Accepted"
