"""External client interfaces."""

from abc import ABC, abstractmethod
from typing import Any, Dict

from src.domain.entities import GatewayCredentials


class DarajaClient(ABC):
    """
    Abstract client for the Safaricom Daraja API.

    Each call is a single attempt; callers decide what a failure means.
    """

    @abstractmethod
    async def get_access_token(self, credentials: GatewayCredentials) -> str:
        """
        Exchange consumer credentials for a bearer access token.

        Args:
            credentials: The tenant's consumer key and secret

        Returns:
            A short-lived access token

        Raises:
            TokenAcquisitionException: On network error, non-2xx status
                or a response without an access token
        """
        ...

    @abstractmethod
    async def send_stk_push(
        self,
        access_token: str,
        payload: Dict[str, Any],
    ) -> Dict[str, Any]:
        """
        Submit an STK push request.

        Args:
            access_token: Bearer token from get_access_token
            payload: The processrequest body

        Returns:
            The gateway's synchronous acknowledgement body

        Raises:
            PushFailedException: On network error or non-2xx status
        """
        ...
