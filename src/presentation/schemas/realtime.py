"""WebSocket message schemas.

Clients may only send ``join_room``; the server only sends
``payment_received``. Anything else is dropped at the boundary.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class JoinRoomMessage(BaseModel):
    """Client request to receive a tenant's payment events."""

    model_config = ConfigDict(extra="ignore")

    type: Literal["join_room"]
    shortcode: str = Field(..., min_length=1, max_length=32)

    @field_validator("shortcode", mode="before")
    @classmethod
    def coerce_shortcode(cls, v: Any) -> Any:
        # Numeric shortcodes join the same room as their text form.
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class PaymentReceivedData(BaseModel):
    amount: Any
    phone: Any
    receipt: str


class PaymentReceivedMessage(BaseModel):
    """Server event announcing a completed payment."""

    type: Literal["payment_received"] = "payment_received"
    data: PaymentReceivedData
