"""
Unit tests for application services.

These tests verify:
1. Credential resolution and registration upsert semantics
2. STK push orchestration and error wrapping
3. Callback processing: persistence, fan-out and failure branches
4. Background ledger writes and the polling window
"""

import asyncio
import base64
from datetime import datetime, timedelta, timezone

import pytest

from src.application.dto import RegistrationRequest
from src.application.services import (
    BackgroundLedgerWriter,
    CallbackService,
    PollingService,
    PushService,
    TenantService,
)
from src.domain.entities import GatewayCredentials, PushRequest, Tenant, Transaction
from src.domain.exceptions import (
    PushFailedException,
    TenantNotFoundException,
    TenantRegistrationException,
    TokenAcquisitionException,
)
from src.infrastructure.realtime import InMemoryRoomHub
from tests.doubles import (
    FakeSession,
    InMemoryTenantRepository,
    InMemoryTransactionRepository,
    RecordingDarajaClient,
    repository_scope,
)


def success_callback(amount=100, receipt="ABC123", phone=254708374149) -> dict:
    return {
        "Body": {
            "stkCallback": {
                "ResultCode": 0,
                "ResultDesc": "The service request is processed successfully.",
                "CallbackMetadata": {
                    "Item": [
                        {"Name": "Amount", "Value": amount},
                        {"Name": "MpesaReceiptNumber", "Value": receipt},
                        {"Name": "PhoneNumber", "Value": phone},
                    ]
                },
            }
        }
    }


TENANT = Tenant(
    shortcode="174379",
    business_name="Mama Mboga Stores",
    consumer_key="key",
    consumer_secret="secret",
    passkey="passkey",
)


# =============================================================================
# TenantService
# =============================================================================

class TestTenantService:

    @pytest.mark.asyncio
    async def test_resolve_returns_registered_credentials(self):
        repo = InMemoryTenantRepository()
        await repo.upsert(TENANT)

        credentials = await TenantService(repo).resolve_credentials("174379")

        assert credentials == GatewayCredentials("key", "secret", "passkey")

    @pytest.mark.asyncio
    async def test_resolve_unknown_shortcode_raises_not_found(self):
        with pytest.raises(TenantNotFoundException):
            await TenantService(InMemoryTenantRepository()).resolve_credentials("000000")

    @pytest.mark.asyncio
    async def test_reregistration_overwrites_credentials(self):
        repo = InMemoryTenantRepository()
        service = TenantService(repo)

        await service.register(RegistrationRequest("Shop", "174379", "k1", "s1", "p1"))
        await service.register(RegistrationRequest("Shop v2", "174379", "k2", "s2", "p2"))

        assert len(repo.tenants) == 1
        assert await service.resolve_credentials("174379") == GatewayCredentials("k2", "s2", "p2")

    @pytest.mark.asyncio
    async def test_incomplete_registration_is_rejected(self):
        service = TenantService(InMemoryTenantRepository())

        with pytest.raises(TenantRegistrationException) as exc_info:
            await service.register(RegistrationRequest("Shop", "174379", "", "s", "p"))

        assert "consumer_key is required" in exc_info.value.message

    def test_credentials_repr_hides_secrets(self):
        credentials = GatewayCredentials("live-key", "live-secret-value", "live-passkey")

        text = repr(credentials)

        assert "live-key" not in text
        assert "live-secret-value" not in text
        assert "live-passkey" not in text


# =============================================================================
# PushService
# =============================================================================

class TestPushService:

    @pytest.fixture
    def tenant_service(self) -> TenantService:
        repo = InMemoryTenantRepository()
        repo.tenants[TENANT.shortcode] = TENANT
        return TenantService(repo)

    @pytest.mark.asyncio
    async def test_push_returns_gateway_acknowledgement(self, tenant_service):
        client = RecordingDarajaClient()
        service = PushService(
            tenant_service,
            client,
            callback_base_url="https://bridge.example.com",
            clock=lambda: datetime(2024, 3, 5, 7, 8, 9, tzinfo=timezone.utc),
        )

        ack = await service.initiate(PushRequest(shortcode="174379", amount=100, phone="254708374149"))

        assert ack["CheckoutRequestID"] == "ws_CO_191220191020363925"
        assert client.token_requests == [TENANT.credentials]

        sent = client.pushes[0]
        assert sent["token"] == "token-123"
        payload = sent["payload"]
        assert payload["Timestamp"] == "20240305070809"
        assert base64.b64decode(payload["Password"]).decode() == "174379passkey20240305070809"
        assert payload["CallBackURL"] == "https://bridge.example.com/api/mpesa/callback/174379"
        assert payload["PartyA"] == payload["PhoneNumber"] == "254708374149"

    @pytest.mark.asyncio
    async def test_push_acquires_a_fresh_token_every_time(self, tenant_service):
        client = RecordingDarajaClient()
        service = PushService(tenant_service, client, callback_base_url="https://b.example.com")

        request = PushRequest(shortcode="174379", amount=1, phone="254700000000")
        await service.initiate(request)
        await service.initiate(request)

        assert len(client.token_requests) == 2

    @pytest.mark.asyncio
    async def test_unknown_tenant_surfaces_as_push_failed(self, tenant_service):
        client = RecordingDarajaClient()
        service = PushService(tenant_service, client, callback_base_url="https://b.example.com")

        with pytest.raises(PushFailedException) as exc_info:
            await service.initiate(PushRequest(shortcode="000000", amount=1, phone="2547"))

        assert isinstance(exc_info.value.__cause__, TenantNotFoundException)
        assert client.token_requests == []

    @pytest.mark.asyncio
    async def test_token_failure_aborts_before_push(self, tenant_service):
        client = RecordingDarajaClient(fail_token=True)
        service = PushService(tenant_service, client, callback_base_url="https://b.example.com")

        with pytest.raises(PushFailedException) as exc_info:
            await service.initiate(PushRequest(shortcode="174379", amount=1, phone="2547"))

        assert isinstance(exc_info.value.__cause__, TokenAcquisitionException)
        assert client.pushes == []

    @pytest.mark.asyncio
    async def test_gateway_rejection_surfaces_as_push_failed(self, tenant_service):
        service = PushService(
            tenant_service,
            RecordingDarajaClient(fail_push=True),
            callback_base_url="https://b.example.com",
        )

        with pytest.raises(PushFailedException) as exc_info:
            await service.initiate(PushRequest(shortcode="174379", amount=1, phone="2547"))

        assert exc_info.value.message == "STK Push Failed"


# =============================================================================
# CallbackService & BackgroundLedgerWriter
# =============================================================================

class TestCallbackService:

    @pytest.mark.asyncio
    async def test_success_persists_once_and_notifies_each_session(self):
        ledger = InMemoryTransactionRepository()
        writer = BackgroundLedgerWriter(repository_scope(ledger))
        hub = InMemoryRoomHub()
        first, second = FakeSession(), FakeSession()
        await hub.join(first, "174379")
        await hub.join(second, "174379")

        outcome = await CallbackService(writer, hub).handle("174379", success_callback())
        await writer.drain()

        assert outcome.outcome == "success"
        assert outcome.delivered == 2
        assert len(ledger.rows) == 1
        row = ledger.rows[0]
        assert (row.business_shortcode, row.receipt, row.amount, row.phone) == (
            "174379", "ABC123", "100", "254708374149",
        )
        expected = {
            "type": "payment_received",
            "data": {"amount": 100, "phone": 254708374149, "receipt": "ABC123"},
        }
        assert first.sent == [expected]
        assert second.sent == [expected]

    @pytest.mark.asyncio
    async def test_failed_result_persists_and_broadcasts_nothing(self):
        ledger = InMemoryTransactionRepository()
        writer = BackgroundLedgerWriter(repository_scope(ledger))
        hub = InMemoryRoomHub()
        session = FakeSession()
        await hub.join(session, "174379")

        payload = {"Body": {"stkCallback": {"ResultCode": 1032, "ResultDesc": "Request cancelled by user"}}}
        outcome = await CallbackService(writer, hub).handle("174379", payload)
        await writer.drain()

        assert outcome.outcome == "failed"
        assert outcome.result_code == 1032
        assert ledger.rows == []
        assert session.sent == []

    @pytest.mark.asyncio
    async def test_malformed_success_records_nothing(self):
        ledger = InMemoryTransactionRepository()
        writer = BackgroundLedgerWriter(repository_scope(ledger))
        hub = InMemoryRoomHub()
        session = FakeSession()
        await hub.join(session, "174379")

        payload = success_callback()
        payload["Body"]["stkCallback"]["CallbackMetadata"]["Item"].pop(1)
        outcome = await CallbackService(writer, hub).handle("174379", payload)
        await writer.drain()

        assert outcome.outcome == "malformed"
        assert ledger.rows == []
        assert session.sent == []

    @pytest.mark.asyncio
    async def test_ledger_failure_does_not_block_fan_out(self):
        writer = BackgroundLedgerWriter(repository_scope(InMemoryTransactionRepository(fail=True)))
        hub = InMemoryRoomHub()
        session = FakeSession()
        await hub.join(session, "174379")

        outcome = await CallbackService(writer, hub).handle("174379", success_callback())
        await writer.drain()

        assert outcome.delivered == 1
        assert len(session.sent) == 1
        assert writer.pending == 0

    @pytest.mark.asyncio
    async def test_success_without_room_is_still_recorded(self):
        ledger = InMemoryTransactionRepository()
        writer = BackgroundLedgerWriter(repository_scope(ledger))

        outcome = await CallbackService(writer, InMemoryRoomHub()).handle("174379", success_callback())
        await writer.drain()

        assert outcome.delivered == 0
        assert len(ledger.rows) == 1

    @pytest.mark.asyncio
    async def test_writer_task_result_is_recorded_transaction(self):
        ledger = InMemoryTransactionRepository()
        writer = BackgroundLedgerWriter(repository_scope(ledger), max_concurrent=1)

        task = writer.submit(Transaction(business_shortcode="174379", receipt="R1", amount="5", phone="2547"))
        recorded = await task

        assert recorded.created_at is not None
        assert writer.pending == 0

    @pytest.mark.asyncio
    async def test_drain_cancels_writes_that_outlast_timeout(self):
        stalled = asyncio.Event()

        class StalledRepository(InMemoryTransactionRepository):
            async def add(self, transaction):
                await stalled.wait()

        writer = BackgroundLedgerWriter(repository_scope(StalledRepository()))
        task = writer.submit(Transaction(business_shortcode="174379", receipt="R1", amount="5", phone="2547"))

        await writer.drain(timeout=0.05)

        assert task.cancelled()
        assert writer.pending == 0

    @pytest.mark.asyncio
    async def test_drain_waits_for_writes_within_timeout(self):
        ledger = InMemoryTransactionRepository()
        writer = BackgroundLedgerWriter(repository_scope(ledger))
        writer.submit(Transaction(business_shortcode="174379", receipt="R1", amount="5", phone="2547"))
        writer.submit(Transaction(business_shortcode="174379", receipt="R2", amount="5", phone="2547"))

        await writer.drain(timeout=5.0)

        assert [row.receipt for row in ledger.rows] == ["R1", "R2"]


# =============================================================================
# PollingService
# =============================================================================

class TestPollingService:

    NOW = datetime(2024, 3, 5, 12, 0, 0, tzinfo=timezone.utc)

    def _row(self, receipt: str, seconds_ago: int, shortcode: str = "174379") -> Transaction:
        return Transaction(
            business_shortcode=shortcode,
            receipt=receipt,
            amount="100",
            phone="254708374149",
            created_at=self.NOW - timedelta(seconds=seconds_ago),
        )

    @pytest.mark.asyncio
    async def test_returns_newest_payment_in_window(self):
        ledger = InMemoryTransactionRepository()
        ledger.rows = [self._row("OLD", 50), self._row("NEW", 5)]

        payment = await PollingService(ledger, window_seconds=60, clock=lambda: self.NOW).get_recent_payment("174379")

        assert payment.receipt == "NEW"
        assert payment.amount == "100"

    @pytest.mark.asyncio
    async def test_ignores_payments_older_than_window(self):
        ledger = InMemoryTransactionRepository()
        ledger.rows = [self._row("STALE", 120)]

        payment = await PollingService(ledger, window_seconds=60, clock=lambda: self.NOW).get_recent_payment("174379")

        assert payment is None

    @pytest.mark.asyncio
    async def test_ignores_other_tenants(self):
        ledger = InMemoryTransactionRepository()
        ledger.rows = [self._row("OTHER", 5, shortcode="600000")]

        payment = await PollingService(ledger, window_seconds=60, clock=lambda: self.NOW).get_recent_payment("174379")

        assert payment is None
