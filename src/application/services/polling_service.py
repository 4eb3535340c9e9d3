"""Polling service - recent payment lookup for clients that missed a broadcast."""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import structlog

from src.application.dto import RecentPaymentResponse
from src.core.config import settings
from src.domain.interfaces import TransactionRepository

logger = structlog.get_logger(__name__)


class PollingService:
    """
    Application service for the polling fallback.

    Only payments inside the recency window are returned; anything older
    is no longer recoverable through this path.
    """

    def __init__(
        self,
        transaction_repository: TransactionRepository,
        window_seconds: int | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._transaction_repo = transaction_repository
        self._window = timedelta(seconds=window_seconds or settings.polling_window_seconds)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def get_recent_payment(self, shortcode: str) -> Optional[RecentPaymentResponse]:
        """
        Return the newest successful payment within the window, if any.

        Args:
            shortcode: The tenant's shortcode

        Returns:
            RecentPaymentResponse, or None when nothing qualifies
        """
        since = self._clock() - self._window
        transaction = await self._transaction_repo.get_latest_success_since(shortcode, since)

        if transaction is None:
            return None

        logger.info("recent_payment_found", shortcode=shortcode, receipt=transaction.receipt)
        return RecentPaymentResponse.from_entity(transaction)
