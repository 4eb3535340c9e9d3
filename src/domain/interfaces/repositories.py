"""Repository interfaces for data persistence."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from src.domain.entities import Tenant, Transaction


class TenantRepository(ABC):
    """
    Abstract repository for registered businesses (the credential store).

    Implementations may use PostgreSQL, in-memory storage, etc.
    """

    @abstractmethod
    async def upsert(self, tenant: Tenant) -> Tenant:
        """
        Insert a tenant or overwrite the one with the same shortcode.

        Args:
            tenant: The tenant to store

        Returns:
            The stored tenant
        """
        ...

    @abstractmethod
    async def get_by_shortcode(self, shortcode: str) -> Optional[Tenant]:
        """
        Retrieve a tenant by shortcode.

        Args:
            shortcode: The tenant's unique shortcode

        Returns:
            The tenant if registered, None otherwise
        """
        ...


class TransactionRepository(ABC):
    """
    Abstract repository for the append-only transaction ledger.

    The core only ever adds rows and reads the most recent one.
    """

    @abstractmethod
    async def add(self, transaction: Transaction) -> Transaction:
        """
        Append a transaction to the ledger.

        Args:
            transaction: The transaction to record

        Returns:
            The recorded transaction with created_at populated
        """
        ...

    @abstractmethod
    async def get_latest_success_since(
        self,
        shortcode: str,
        since: datetime,
    ) -> Optional[Transaction]:
        """
        Retrieve the newest SUCCESS transaction created after a point in time.

        Args:
            shortcode: The tenant's shortcode
            since: Exclusive lower bound on created_at

        Returns:
            The most recent qualifying transaction, or None
        """
        ...
