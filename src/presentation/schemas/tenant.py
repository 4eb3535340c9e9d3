"""Business registration Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field


class RegistrationRequestSchema(BaseModel):
    """Schema for POST /api/business/register request body."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "business_name": "Mama Mboga Stores",
                    "shortcode": "174379",
                    "consumer_key": "your-consumer-key",
                    "consumer_secret": "your-consumer-secret",
                    "passkey": "your-passkey",
                }
            ]
        }
    )
    business_name: str = Field(..., max_length=255, description="Display name")
    shortcode: str = Field(..., max_length=32, description="Daraja business shortcode")
    consumer_key: str = Field(..., description="Daraja app consumer key")
    consumer_secret: str = Field(..., description="Daraja app consumer secret")
    passkey: str = Field(..., description="Lipa Na M-Pesa Online passkey")


class RegistrationResponseSchema(BaseModel):
    """Schema for a successful registration."""

    status: str = Field("success", examples=["success"])
    message: str = Field("Registration Successful", examples=["Registration Successful"])
    shortcode: str = Field(..., examples=["174379"])


class RegistrationErrorSchema(BaseModel):
    """Schema for a failed registration."""

    status: str = Field("error", examples=["error"])
    error: str = Field(..., examples=["shortcode is required"])
