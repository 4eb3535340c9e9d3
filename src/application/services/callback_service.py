"""Callback service - records and relays STK push results."""

from typing import Any, Dict

import structlog

from src.application.dto import CallbackOutcome
from src.application.services.ledger_writer import BackgroundLedgerWriter
from src.core.metrics import record_callback
from src.domain.entities import FailedPayment
from src.domain.exceptions import MalformedCallbackException
from src.domain.interfaces import RoomHub
from src.service.daraja import parse_stk_callback

logger = structlog.get_logger(__name__)


class CallbackService:
    """
    Application service for gateway callbacks.

    A successful result is handed to the ledger writer and then broadcast
    to the tenant's room without waiting for the write. Failed and
    malformed results are logged only. Nothing here raises: the gateway
    must be acknowledged whatever the outcome.
    """

    def __init__(self, ledger_writer: BackgroundLedgerWriter, room_hub: RoomHub):
        self._ledger_writer = ledger_writer
        self._room_hub = room_hub

    async def handle(self, shortcode: str, payload: Dict[str, Any]) -> CallbackOutcome:
        """
        Process one callback posted for a tenant.

        Args:
            shortcode: Tenant shortcode from the callback URL
            payload: Decoded JSON body from the gateway

        Returns:
            CallbackOutcome describing what was done
        """
        log = logger.bind(shortcode=shortcode)
        log.info("callback_received")

        try:
            result = parse_stk_callback(shortcode, payload)
        except MalformedCallbackException as e:
            record_callback("malformed")
            log.warning("callback_malformed", reason=e.reason)
            return CallbackOutcome(shortcode=shortcode, outcome="malformed")

        if isinstance(result, FailedPayment):
            record_callback("failed")
            log.info(
                "payment_not_completed",
                result_code=result.result_code,
                result_desc=result.result_desc,
            )
            return CallbackOutcome(
                shortcode=shortcode,
                outcome="failed",
                result_code=result.result_code,
            )

        record_callback("success")
        log = log.bind(receipt=result.receipt)
        log.info("payment_received", amount=result.amount)

        self._ledger_writer.submit(result.to_transaction())
        delivered = await self._room_hub.broadcast(shortcode, result.to_notification())

        return CallbackOutcome(
            shortcode=shortcode,
            outcome="success",
            receipt=result.receipt,
            delivered=delivered,
            result_code=0,
        )
