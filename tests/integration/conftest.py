"""
Fixtures for integration tests.

Provides:
- Test client for FastAPI app
- Recording Daraja client in place of the real gateway
- File-backed SQLite database for testing
- Fresh room hub and ledger writer per test
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, List

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import select
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from src.main import app
from src.application.services import BackgroundLedgerWriter
from src.core.dependencies import (
    get_daraja_client,
    get_ledger_writer,
    get_room_hub,
)
from src.infrastructure.database import Base, BusinessModel, TransactionModel, get_db_session
from src.infrastructure.realtime import InMemoryRoomHub
from src.infrastructure.repositories import PostgresTransactionRepository
from tests.doubles import RecordingDarajaClient


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def test_engine(tmp_path):
    """
    Create a file-backed SQLite async engine for testing.

    Requests and background ledger writes use separate sessions at the
    same time, so each gets its own connection to the same file.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'bridge.db'}",
        echo=False,
        poolclass=NullPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


@pytest.fixture
def fetch_transactions(session_factory):
    """Read every ledger row for a shortcode, oldest first."""
    async def fetch(shortcode: str) -> List[TransactionModel]:
        async with session_factory() as session:
            result = await session.execute(
                select(TransactionModel)
                .where(TransactionModel.business_shortcode == shortcode)
                .order_by(TransactionModel.created_at)
            )
            return list(result.scalars().all())

    return fetch


@pytest.fixture
def fetch_business(session_factory):
    """Read the stored registration for a shortcode."""
    async def fetch(shortcode: str) -> BusinessModel | None:
        async with session_factory() as session:
            result = await session.execute(
                select(BusinessModel).where(BusinessModel.shortcode == shortcode)
            )
            return result.scalar_one_or_none()

    return fetch


# =============================================================================
# Collaborator Fixtures
# =============================================================================

@pytest.fixture
def mock_daraja_client() -> RecordingDarajaClient:
    """Create a gateway client that accepts every push."""
    return RecordingDarajaClient()


@pytest.fixture
def room_hub() -> InMemoryRoomHub:
    """Create an empty room hub."""
    return InMemoryRoomHub()


@pytest.fixture
def ledger_writer(session_factory) -> BackgroundLedgerWriter:
    """Create a ledger writer that records into the test database."""
    @asynccontextmanager
    async def scope():
        async with session_factory() as session:
            yield PostgresTransactionRepository(session)
            await session.commit()

    return BackgroundLedgerWriter(scope)


# =============================================================================
# App Client Fixtures
# =============================================================================

def install_overrides(session_factory, daraja_client, hub, writer) -> None:
    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_daraja_client] = lambda: daraja_client
    app.dependency_overrides[get_room_hub] = lambda: hub
    app.dependency_overrides[get_ledger_writer] = lambda: writer


@pytest_asyncio.fixture
async def client(
    session_factory,
    mock_daraja_client: RecordingDarajaClient,
    room_hub: InMemoryRoomHub,
    ledger_writer: BackgroundLedgerWriter,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client with mocked dependencies.

    This client:
    - Uses a temporary SQLite database
    - Replaces the Daraja API with a recording client
    - Uses a fresh room hub and ledger writer
    """
    install_overrides(session_factory, mock_daraja_client, room_hub, ledger_writer)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    await ledger_writer.drain()
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client_with_failing_gateway(
    session_factory,
    room_hub: InMemoryRoomHub,
    ledger_writer: BackgroundLedgerWriter,
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client where the gateway rejects every push."""
    install_overrides(
        session_factory,
        RecordingDarajaClient(fail_push=True),
        room_hub,
        ledger_writer,
    )

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# =============================================================================
# Helper Fixtures
# =============================================================================

@pytest.fixture
def registration_request() -> dict:
    """Request body registering the sandbox test shortcode."""
    return {
        "business_name": "Mama Mboga Stores",
        "shortcode": "174379",
        "consumer_key": "sandbox-key",
        "consumer_secret": "sandbox-secret",
        "passkey": "sandbox-passkey",
    }


@pytest.fixture
def success_callback() -> dict:
    """A successful STK result as posted by the gateway."""
    return {
        "Body": {
            "stkCallback": {
                "MerchantRequestID": "29115-34620561-1",
                "CheckoutRequestID": "ws_CO_191220191020363925",
                "ResultCode": 0,
                "ResultDesc": "The service request is processed successfully.",
                "CallbackMetadata": {
                    "Item": [
                        {"Name": "Amount", "Value": 100},
                        {"Name": "MpesaReceiptNumber", "Value": "ABC123"},
                        {"Name": "TransactionDate", "Value": 20191219102115},
                        {"Name": "PhoneNumber", "Value": 254708374149},
                    ]
                },
            }
        }
    }


@pytest.fixture
def cancelled_callback() -> dict:
    """A failed STK result: the payer cancelled the prompt."""
    return {
        "Body": {
            "stkCallback": {
                "MerchantRequestID": "29115-34620561-1",
                "CheckoutRequestID": "ws_CO_191220191020363925",
                "ResultCode": 1032,
                "ResultDesc": "Request cancelled by user",
            }
        }
    }
