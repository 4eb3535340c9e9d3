"""Pydantic schema for API error responses."""

from pydantic import BaseModel, Field


class ErrorResponseSchema(BaseModel):
    """Standard error response format for all API errors."""
    error: str = Field(
        ...,
        description="Error code",
        examples=["STK_PUSH_FAILED"],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["STK Push Failed"],
    )
    request_id: str | None = Field(
        None,
        description="Request ID for tracing",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "error": "STK_PUSH_FAILED",
                    "message": "STK Push Failed",
                    "request_id": "abc123",
                }
            ]
        }
    }
