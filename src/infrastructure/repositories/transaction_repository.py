"""PostgreSQL implementation of TransactionRepository."""

from dataclasses import replace
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import Transaction, TransactionStatus
from src.domain.interfaces import TransactionRepository
from src.infrastructure.database.models import TransactionModel


class PostgresTransactionRepository(TransactionRepository):
    """PostgreSQL-backed append-only transaction ledger."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def add(self, transaction: Transaction) -> Transaction:
        created_at = transaction.created_at or datetime.now(timezone.utc)

        model = TransactionModel(
            business_shortcode=transaction.business_shortcode,
            receipt=transaction.receipt,
            amount=transaction.amount,
            phone=transaction.phone,
            status=transaction.status.value,
            created_at=created_at,
        )

        self._session.add(model)
        await self._session.flush()

        return replace(transaction, created_at=created_at)

    async def get_latest_success_since(
        self,
        shortcode: str,
        since: datetime,
    ) -> Optional[Transaction]:
        stmt = (
            select(TransactionModel)
            .where(TransactionModel.business_shortcode == shortcode)
            .where(TransactionModel.status == TransactionStatus.SUCCESS.value)
            .where(TransactionModel.created_at > since)
            .order_by(TransactionModel.created_at.desc())
            .limit(1)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._to_entity(model)

    def _to_entity(self, model: TransactionModel) -> Transaction:
        return Transaction(
            business_shortcode=model.business_shortcode,
            receipt=model.receipt,
            amount=model.amount,
            phone=model.phone,
            status=TransactionStatus(model.status),
            created_at=model.created_at,
        )
