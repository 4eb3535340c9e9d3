"""Application services (use cases)."""

from .tenant_service import TenantService
from .push_service import PushService
from .ledger_writer import BackgroundLedgerWriter
from .callback_service import CallbackService
from .polling_service import PollingService

__all__ = [
    "TenantService",
    "PushService",
    "BackgroundLedgerWriter",
    "CallbackService",
    "PollingService",
]
