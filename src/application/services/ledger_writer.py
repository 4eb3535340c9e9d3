"""Background writer for the transaction ledger."""

import asyncio
from typing import AsyncContextManager, Callable, Optional, Set

import structlog

from src.core.config import settings
from src.core.metrics import (
    ledger_pending_writes,
    record_ledger_write_failure,
    record_transaction_recorded,
)
from src.domain.entities import Transaction
from src.domain.interfaces import TransactionRepository

logger = structlog.get_logger(__name__)

RepositoryScope = Callable[[], AsyncContextManager[TransactionRepository]]


class BackgroundLedgerWriter:
    """
    Records transactions off the request path.

    Each write runs as its own task with its own database session, so the
    callback can be acknowledged without waiting on the store. At most
    ``max_concurrent`` writes talk to the database at once; failures are
    logged and counted, never raised to the submitter. Pending writes are
    awaited by ``drain()`` on shutdown and cancelled if they outlast it.
    """

    def __init__(
        self,
        repository_scope: RepositoryScope,
        max_concurrent: int | None = None,
    ):
        self._repository_scope = repository_scope
        self._semaphore = asyncio.Semaphore(
            max_concurrent or settings.ledger_max_concurrent_writes
        )
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def submit(self, transaction: Transaction) -> asyncio.Task:
        """Schedule a write and return the task tracking it."""
        task = asyncio.create_task(self._write(transaction))
        self._tasks.add(task)
        ledger_pending_writes.set(len(self._tasks))
        task.add_done_callback(self._forget)
        return task

    async def drain(self, timeout: Optional[float] = None) -> None:
        """Wait for every pending write to finish, cancelling any still running after ``timeout``."""
        if not self._tasks:
            return
        logger.info("ledger_draining", pending=len(self._tasks))
        _, unfinished = await asyncio.wait(set(self._tasks), timeout=timeout)

        if not unfinished:
            return

        logger.warning("ledger_drain_timeout", cancelled=len(unfinished))
        for task in unfinished:
            task.cancel()
        await asyncio.gather(*unfinished, return_exceptions=True)

    async def _write(self, transaction: Transaction) -> Optional[Transaction]:
        log = logger.bind(
            shortcode=transaction.business_shortcode,
            receipt=transaction.receipt,
        )
        async with self._semaphore:
            try:
                async with self._repository_scope() as repository:
                    recorded = await repository.add(transaction)
            except Exception as e:
                record_ledger_write_failure()
                log.error(
                    "ledger_write_failed",
                    error=str(e),
                    error_type=type(e).__name__,
                )
                return None

        record_transaction_recorded()
        log.info("transaction_recorded", amount=transaction.amount)
        return recorded

    def _forget(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        ledger_pending_writes.set(len(self._tasks))
