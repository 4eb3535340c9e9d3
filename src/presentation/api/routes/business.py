"""Business registration endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends

from src.application.dto import RegistrationRequest
from src.application.services import TenantService
from src.core.dependencies import get_tenant_service
from src.presentation.schemas import (
    RegistrationErrorSchema,
    RegistrationRequestSchema,
    RegistrationResponseSchema,
)

business_router = APIRouter(prefix="/api/business")


@business_router.post(
    "/register",
    response_model=RegistrationResponseSchema,
    status_code=201,
    summary="Register Business",
    description="""
    Register a business and its Daraja credentials. Registering an
    existing shortcode again replaces its credentials.
    """,
    responses={
        201: {"description": "Registration stored"},
        500: {"model": RegistrationErrorSchema, "description": "Registration failed"},
    },
)
async def register_business(
    request: RegistrationRequestSchema,
    tenant_service: Annotated[TenantService, Depends(get_tenant_service)],
) -> RegistrationResponseSchema:
    response = await tenant_service.register(
        RegistrationRequest(
            business_name=request.business_name,
            shortcode=request.shortcode,
            consumer_key=request.consumer_key,
            consumer_secret=request.consumer_secret,
            passkey=request.passkey,
        )
    )

    return RegistrationResponseSchema(
        status=response.status,
        message=response.message,
        shortcode=response.shortcode,
    )
