"""HTTP implementation of DarajaClient."""

from typing import Any, Dict

import httpx
import structlog

from src.core.config import settings
from src.core.metrics import track_gateway_latency, record_gateway_failure
from src.domain.entities import GatewayCredentials
from src.domain.exceptions import PushFailedException, TokenAcquisitionException
from src.domain.interfaces import DarajaClient
from src.service.daraja import basic_auth_header, daraja_settings

logger = structlog.get_logger(__name__)


class HttpDarajaClient(DarajaClient):
    """
    HTTP client for the Safaricom Daraja API.

    Makes exactly one attempt per call with a bounded timeout. Tokens are
    not cached: every push acquires a fresh one.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._base_url = (base_url or settings.daraja_base_url).rstrip("/")
        self._timeout = timeout or settings.daraja_timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._timeout, transport=self._transport)

    async def get_access_token(self, credentials: GatewayCredentials) -> str:
        """Request a client-credentials token using HTTP Basic auth."""
        url = f"{self._base_url}{daraja_settings.token_path}"
        headers = {
            "Authorization": basic_auth_header(
                credentials.consumer_key, credentials.consumer_secret
            ),
        }

        try:
            with track_gateway_latency("token"):
                async with self._client() as client:
                    response = await client.get(url, headers=headers)
        except httpx.TimeoutException as e:
            record_gateway_failure("token", "timeout")
            logger.warning("daraja_token_timeout")
            raise TokenAcquisitionException("Token request timed out") from e
        except httpx.HTTPError as e:
            record_gateway_failure("token", "error")
            logger.error("daraja_token_error", error=str(e))
            raise TokenAcquisitionException("Token request failed") from e

        if response.status_code >= 300:
            record_gateway_failure("token", "error")
            logger.warning(
                "daraja_token_rejected",
                status_code=response.status_code,
            )
            raise TokenAcquisitionException(
                f"Token request rejected with status {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            record_gateway_failure("token", "malformed")
            raise TokenAcquisitionException("Token response is not JSON") from e

        token = data.get("access_token") if isinstance(data, dict) else None
        if not token:
            record_gateway_failure("token", "malformed")
            logger.warning("daraja_token_missing")
            raise TokenAcquisitionException("Token response has no access_token")

        return token

    async def send_stk_push(
        self,
        access_token: str,
        payload: Dict[str, Any],
    ) -> Dict[str, Any]:
        """Submit the processrequest body and return the acknowledgement."""
        url = f"{self._base_url}{daraja_settings.stk_push_path}"
        shortcode = str(payload.get("BusinessShortCode", ""))
        headers = {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
        }

        try:
            with track_gateway_latency("stk_push"):
                async with self._client() as client:
                    response = await client.post(url, json=payload, headers=headers)
        except httpx.TimeoutException as e:
            record_gateway_failure("stk_push", "timeout")
            logger.warning("daraja_stk_push_timeout", shortcode=shortcode)
            raise PushFailedException(shortcode) from e
        except httpx.HTTPError as e:
            record_gateway_failure("stk_push", "error")
            logger.error("daraja_stk_push_error", shortcode=shortcode, error=str(e))
            raise PushFailedException(shortcode) from e

        if response.status_code >= 300:
            record_gateway_failure("stk_push", "error")
            logger.warning(
                "daraja_stk_push_rejected",
                shortcode=shortcode,
                status_code=response.status_code,
                response=response.text[:200],
            )
            raise PushFailedException(shortcode, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            record_gateway_failure("stk_push", "malformed")
            logger.warning("daraja_stk_push_malformed", shortcode=shortcode)
            raise PushFailedException(shortcode) from e
