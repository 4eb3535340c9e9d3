"""Tenant entity representing a registered business."""

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass(frozen=True)
class GatewayCredentials:
    """Daraja credentials needed to act on behalf of a tenant."""

    consumer_key: str
    consumer_secret: str
    passkey: str

    def __repr__(self) -> str:
        return "GatewayCredentials(consumer_key='***', consumer_secret='***', passkey='***')"


@dataclass
class Tenant:
    """
    A business registered with the bridge.

    The shortcode is globally unique and doubles as the Daraja business
    short code and the room key for live sessions. Re-registering a
    shortcode overwrites its credentials.
    """

    shortcode: str
    business_name: str
    consumer_key: str
    consumer_secret: str
    passkey: str
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def credentials(self) -> GatewayCredentials:
        return GatewayCredentials(
            consumer_key=self.consumer_key,
            consumer_secret=self.consumer_secret,
            passkey=self.passkey,
        )
