"""M-Pesa endpoints: STK push, gateway callback and polling fallback."""

from typing import Annotated, Any, Dict

import structlog
from fastapi import APIRouter, Depends, Path, Request, Response

from src.application.services import CallbackService, PollingService, PushService
from src.core.dependencies import (
    get_callback_service,
    get_polling_service,
    get_push_service,
)
from src.domain.entities import PushRequest
from src.presentation.schemas import (
    CallbackAckSchema,
    ErrorResponseSchema,
    RecentPaymentSchema,
    StkPushRequestSchema,
)

logger = structlog.get_logger(__name__)

mpesa_router = APIRouter(prefix="/api/mpesa")

Shortcode = Annotated[str, Path(min_length=1, max_length=32, description="Business shortcode")]


@mpesa_router.post(
    "/stkpush",
    summary="Initiate STK Push",
    description="""
    Ask the gateway to prompt the payer's phone for a payment to the
    business. The response is the gateway's acknowledgement, forwarded
    as-is; the payment result arrives later through the callback.
    """,
    responses={
        200: {"description": "Push accepted by the gateway"},
        500: {"model": ErrorResponseSchema, "description": "Push could not be initiated"},
    },
)
async def initiate_stk_push(
    request: StkPushRequestSchema,
    push_service: Annotated[PushService, Depends(get_push_service)],
) -> Dict[str, Any]:
    return await push_service.initiate(
        PushRequest(
            shortcode=request.shortcode,
            amount=request.amount,
            phone=request.phone,
        )
    )


@mpesa_router.post(
    "/callback/{shortcode}",
    response_model=CallbackAckSchema,
    summary="STK Push Callback",
    description="""
    Receives the asynchronous STK result from the gateway. Always
    acknowledged with 200 so the gateway stops retrying, whatever the
    outcome of processing.
    """,
)
async def stk_callback(
    shortcode: str,
    request: Request,
    callback_service: Annotated[CallbackService, Depends(get_callback_service)],
) -> CallbackAckSchema:
    try:
        payload = await request.json()
    except ValueError:
        logger.warning("callback_unreadable", shortcode=shortcode)
        return CallbackAckSchema()

    try:
        await callback_service.handle(shortcode, payload)
    except Exception:
        logger.exception("callback_processing_error", shortcode=shortcode)

    return CallbackAckSchema()


@mpesa_router.get(
    "/check-payments/{shortcode}",
    response_model=RecentPaymentSchema,
    summary="Check Recent Payment",
    description="""
    Returns the most recent successful payment for the business if it
    arrived within the polling window, or 204 No Content otherwise.
    """,
    responses={
        200: {"description": "Recent payment found"},
        204: {"description": "No recent payment"},
        500: {"model": ErrorResponseSchema, "description": "Polling failed"},
    },
)
async def check_payments(
    shortcode: Shortcode,
    polling_service: Annotated[PollingService, Depends(get_polling_service)],
):
    payment = await polling_service.get_recent_payment(shortcode)

    if payment is None:
        return Response(status_code=204)

    return RecentPaymentSchema(
        amount=payment.amount,
        phone=payment.phone,
        receipt=payment.receipt,
    )
