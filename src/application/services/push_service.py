"""Push service - orchestrates the STK push initiation use case."""

from datetime import datetime
from typing import Any, Callable, Dict

import structlog
from sqlalchemy.exc import SQLAlchemyError

from src.application.services.tenant_service import TenantService
from src.core.config import settings
from src.core.metrics import record_stk_push
from src.domain.entities import PushRequest
from src.domain.exceptions import (
    PushFailedException,
    TenantNotFoundException,
    TokenAcquisitionException,
)
from src.domain.interfaces import DarajaClient
from src.service.daraja import build_stk_push_payload

logger = structlog.get_logger(__name__)


class PushService:
    """
    Application service for initiating STK pushes.

    A push resolves the tenant's credentials, acquires a fresh access
    token and submits one processrequest. No state is created along the
    way, so a failure at any step leaves nothing to undo.
    """

    def __init__(
        self,
        tenant_service: TenantService,
        daraja_client: DarajaClient,
        callback_base_url: str | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._tenant_service = tenant_service
        self._daraja_client = daraja_client
        self._callback_base_url = callback_base_url or settings.callback_base_url
        self._clock = clock

    async def initiate(self, request: PushRequest) -> Dict[str, Any]:
        """
        Ask the gateway to prompt a payer.

        Args:
            request: Tenant shortcode, amount and payer phone

        Returns:
            The gateway's synchronous acknowledgement, unchanged. It means
            the request was accepted, not that the payer has paid.

        Raises:
            PushFailedException: If credentials, token or the push fail
        """
        log = logger.bind(shortcode=request.shortcode, amount=request.amount)
        log.info("stk_push_requested")

        try:
            credentials = await self._tenant_service.resolve_credentials(request.shortcode)
            token = await self._daraja_client.get_access_token(credentials)

            payload = build_stk_push_payload(
                shortcode=request.shortcode,
                passkey=credentials.passkey,
                amount=request.amount,
                phone=request.phone,
                callback_base_url=self._callback_base_url,
                now=self._clock() if self._clock else None,
            )

            acknowledgement = await self._daraja_client.send_stk_push(token, payload)

        except (TenantNotFoundException, TokenAcquisitionException) as e:
            record_stk_push(accepted=False)
            log.warning("stk_push_failed", code=e.code, reason=e.message)
            raise PushFailedException(request.shortcode) from e
        except PushFailedException as e:
            record_stk_push(accepted=False)
            log.warning("stk_push_failed", code=e.code, status_code=e.status_code)
            raise
        except SQLAlchemyError as e:
            record_stk_push(accepted=False)
            log.error("stk_push_failed", code="CREDENTIAL_STORE_ERROR", error_type=type(e).__name__)
            raise PushFailedException(request.shortcode) from e

        record_stk_push(accepted=True)
        log.info(
            "stk_push_accepted",
            checkout_request_id=acknowledgement.get("CheckoutRequestID")
            if isinstance(acknowledgement, dict)
            else None,
        )

        return acknowledgement
