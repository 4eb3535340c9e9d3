"""Data transfer objects for business registration."""

from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class RegistrationRequest:
    """Input data for registering or re-registering a business."""

    business_name: str
    shortcode: str
    consumer_key: str
    consumer_secret: str
    passkey: str

    def validate(self) -> List[str]:
        errors = []

        for name in ("business_name", "shortcode", "consumer_key", "consumer_secret", "passkey"):
            value = getattr(self, name)
            if not value or not value.strip():
                errors.append(f"{name} is required")

        return errors


@dataclass(frozen=True)
class RegistrationResponse:
    """Result of a successful registration."""

    shortcode: str
    business_name: str
    status: str = "success"
    message: str = "Registration Successful"
