"""
Domain Interfaces (Ports)
"""

from .repositories import TenantRepository, TransactionRepository
from .clients import DarajaClient
from .realtime import LiveSession, RoomHub

__all__ = [
    "TenantRepository",
    "TransactionRepository",
    "DarajaClient",
    "LiveSession",
    "RoomHub",
]
