"""Dependency injection for FastAPI."""

from contextlib import asynccontextmanager
from typing import Annotated, AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database import db_manager, get_db_session
from src.infrastructure.realtime import InMemoryRoomHub, room_hub
from src.infrastructure.repositories import (
    PostgresTenantRepository,
    PostgresTransactionRepository,
)
from src.infrastructure.clients import HttpDarajaClient
from src.application.services import (
    BackgroundLedgerWriter,
    CallbackService,
    PollingService,
    PushService,
    TenantService,
)


@asynccontextmanager
async def transaction_repository_scope() -> AsyncGenerator[PostgresTransactionRepository, None]:
    """Repository bound to a fresh session, committed when the scope exits."""
    async with db_manager.session() as session:
        yield PostgresTransactionRepository(session)


ledger_writer = BackgroundLedgerWriter(transaction_repository_scope)


# Repository dependencies
async def get_tenant_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> PostgresTenantRepository:
    """Get a TenantRepository instance."""
    return PostgresTenantRepository(session)


async def get_transaction_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> PostgresTransactionRepository:
    """Get a TransactionRepository instance."""
    return PostgresTransactionRepository(session)


# External client dependencies
def get_daraja_client() -> HttpDarajaClient:
    """Get a DarajaClient instance."""
    return HttpDarajaClient()


# Process-wide singletons
def get_room_hub() -> InMemoryRoomHub:
    """Get the shared RoomHub."""
    return room_hub


def get_ledger_writer() -> BackgroundLedgerWriter:
    """Get the shared background ledger writer."""
    return ledger_writer


# Service dependencies
async def get_tenant_service(
    tenant_repo: Annotated[PostgresTenantRepository, Depends(get_tenant_repository)],
) -> TenantService:
    """Get a TenantService instance."""
    return TenantService(tenant_repository=tenant_repo)


async def get_push_service(
    tenant_service: Annotated[TenantService, Depends(get_tenant_service)],
    daraja_client: Annotated[HttpDarajaClient, Depends(get_daraja_client)],
) -> PushService:
    """Get a PushService instance with all dependencies."""
    return PushService(
        tenant_service=tenant_service,
        daraja_client=daraja_client,
    )


def get_callback_service(
    writer: Annotated[BackgroundLedgerWriter, Depends(get_ledger_writer)],
    hub: Annotated[InMemoryRoomHub, Depends(get_room_hub)],
) -> CallbackService:
    """Get a CallbackService instance."""
    return CallbackService(ledger_writer=writer, room_hub=hub)


async def get_polling_service(
    transaction_repo: Annotated[
        PostgresTransactionRepository, Depends(get_transaction_repository)
    ],
) -> PollingService:
    """Get a PollingService instance."""
    return PollingService(transaction_repository=transaction_repo)
