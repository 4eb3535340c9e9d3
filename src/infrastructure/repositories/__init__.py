"""Repository implementations."""

from .tenant_repository import PostgresTenantRepository
from .transaction_repository import PostgresTransactionRepository

__all__ = [
    "PostgresTenantRepository",
    "PostgresTransactionRepository",
]
