"""
Tests for Billed Portal Core models and ambient components

Test strategy:
1. Unit tests for individual models (validators, serialization)
2. Diagnostics, settings and the component factory in isolation
3. No real API calls in tests (flows get mocks, HTTP gets MockTransport)
"""

import json
from datetime import date
from unittest.mock import AsyncMock

import pytest
from pydantic import ValidationError

from billed.config import StoreSettings, get_settings, validate_all_settings
from billed.config.settings import AppSettings
from billed.diagnostics import DiagnosticLogger, MemoryDiagnosticSink
from billed.flows import BillListFlow, LoginFlow, NewBillFlow
from billed.models.bill import (
    BillPayload,
    BillStatus,
    DisplayBill,
    ExpenseType,
    NewBillForm,
    PendingUpload,
    RawBill,
    UploadReceipt,
)
from billed.models.diagnostic import (
    DiagnosticEventBuilder,
    DiagnosticEventType,
    DiagnosticSeverity,
)
from billed.models.session import Credential, SessionIdentity, UserType
from billed.orchestrator import create_app_components
from billed.routes import Route, landing_route
from billed.services.session import MemorySessionStore, read_identity
from billed.util import compact_json


class TestBillModels:
    """Tests for bill-related Pydantic models."""

    def test_raw_bill_keeps_unknown_fields(self):
        """Records are duck-typed, nothing is rejected."""
        bill = RawBill.model_validate({"id": 3, "date": 12, "extra": "kept"})
        assert bill.date == 12
        assert bill.model_dump()["extra"] == "kept"
        assert bill.record_id == "3"

    def test_raw_bill_without_id(self):
        assert RawBill().record_id == "<unknown>"

    def test_display_bill_hides_source_date(self):
        bill = DisplayBill(date="12 Avr. 23", source_date="2023-04-12")
        assert "source_date" not in bill.model_dump()

    def test_upload_receipt_coerces_numeric_key(self):
        receipt = UploadReceipt.model_validate({"fileUrl": "https://x/y.png", "key": 42})
        assert receipt.key == "42"

    def test_upload_receipt_requires_key(self):
        with pytest.raises(ValidationError):
            UploadReceipt.model_validate({"fileUrl": "https://x/y.png"})

    def test_pending_upload_is_frozen(self):
        pending = PendingUpload(file_name="fake.jpg")
        with pytest.raises(ValidationError):
            pending.bill_id = "1234"

    def test_pending_upload_keeps_selection(self):
        """The uploaded copy belongs to the same selection."""
        pending = PendingUpload(file_name="fake.jpg")
        receipt = UploadReceipt(file_url="https://x/fake.jpg", key="1234")

        uploaded = pending.uploaded(receipt)

        assert uploaded.selection_id == pending.selection_id
        assert uploaded.is_uploaded
        assert not pending.is_uploaded
        assert uploaded.file_name == "fake.jpg"

    def test_new_bill_form_rejects_unknown_type(self):
        with pytest.raises(ValidationError):
            NewBillForm(type="Voyage", amount=10, date="2023-04-12")

    def test_new_bill_form_rejects_bad_amount(self):
        with pytest.raises(ValidationError):
            NewBillForm(type=ExpenseType.IT, amount="beaucoup", date="2023-04-12")

    def test_bill_payload_document(self):
        """Field names follow the portal's JSON documents."""
        form = NewBillForm(
            type=ExpenseType.TRANSPORTS,
            name="Train",
            amount=120,
            date="2023-03-05",
            commentary="",
        )
        pending = PendingUpload(bill_id="1", file_url="https://x/t.pdf", file_name="t.pdf")

        document = BillPayload.from_form(form, "e@test.tld", pending).to_document()

        assert list(document) == [
            "email", "type", "name", "amount", "date", "vat", "pct",
            "commentary", "fileUrl", "fileName", "status",
        ]
        assert document["date"] == "2023-03-05"
        assert document["status"] == BillStatus.PENDING.value
        assert document["pct"] == 20

    def test_form_date_kept_as_date(self):
        form = NewBillForm(type=ExpenseType.IT, amount=1, date="2023-04-12")
        assert form.date == date(2023, 4, 12)


class TestSessionModels:
    """Tests for credentials and the session identity."""

    def test_credential_requires_email(self):
        with pytest.raises(ValidationError):
            Credential(email="  ", password="password")

    def test_account_name_is_local_part(self):
        assert Credential(email="jane.doe@email.com", password="x").account_name == "jane.doe"

    def test_identity_session_value(self):
        identity = SessionIdentity(type=UserType.ADMIN, email="admin@test.tld")
        assert json.loads(identity.to_session_value()) == {
            "type": "Admin",
            "email": "admin@test.tld",
        }

    def test_read_identity_ignores_garbage(self):
        store = MemorySessionStore({"user": "not json"})
        assert read_identity(store) is None
        assert read_identity(MemorySessionStore()) is None
        assert read_identity(None) is None


class TestRoutes:

    def test_landing_routes(self):
        assert landing_route(UserType.EMPLOYEE) == Route.BILLS
        assert landing_route(UserType.ADMIN) == Route.DASHBOARD
        assert Route.LOGIN.value == "/"
        assert Route.NEW_BILL.value == "#employee/bill/new"


class TestCompactJson:

    def test_no_whitespace(self):
        assert compact_json({"foo": "bar"}) == '{"foo":"bar"}'

    def test_non_ascii_kept(self):
        assert compact_json({"type": "Hôtel et logement"}) == '{"type":"Hôtel et logement"}'


class TestDiagnostics:
    """Tests for diagnostic events and the diagnostic logger."""

    def test_malformed_record_event(self):
        event = DiagnosticEventBuilder.malformed_record("7", "date", 12, "bad date")

        assert event.event_type == DiagnosticEventType.MALFORMED_RECORD
        assert event.severity == DiagnosticSeverity.WARNING
        assert event.entity_id == "7"
        assert event.details == {"field": "date", "raw_value": "12"}

    def test_to_log_dict(self):
        event = DiagnosticEventBuilder.upload_failed("fake.jpg", "Erreur 500")
        log_dict = event.to_log_dict()

        assert log_dict["event_type"] == "upload_failed"
        assert log_dict["severity"] == "error"
        assert log_dict["error_message"] == "Erreur 500"

    def test_description_length_limited(self):
        with pytest.raises(ValidationError):
            DiagnosticEventBuilder.update_skipped("x" * 600)

    @pytest.mark.asyncio
    async def test_logger_appends_to_sink(self):
        sink = MemoryDiagnosticSink()
        logger = DiagnosticLogger(sink)

        await logger.log_bill_updated("1234")

        [event] = sink.events
        assert event.event_type == DiagnosticEventType.BILL_UPDATED

    @pytest.mark.asyncio
    async def test_broken_sink_does_not_raise(self):
        sink = MemoryDiagnosticSink()
        sink.append_event = AsyncMock(side_effect=RuntimeError("disk full"))
        logger = DiagnosticLogger(sink)

        stored = await logger.log(DiagnosticEventBuilder.bill_updated("1234"))

        assert stored is False

    @pytest.mark.asyncio
    async def test_sink_limit(self):
        sink = MemoryDiagnosticSink(max_events=2)
        logger = DiagnosticLogger(sink)

        for bill_id in ("1", "2", "3"):
            await logger.log_bill_updated(bill_id)

        assert [e.entity_id for e in sink.events] == ["2", "3"]


class TestSettings:

    def test_store_url_trailing_slash_removed(self):
        assert StoreSettings(base_url="http://portal.test/").base_url == "http://portal.test"

    def test_store_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            StoreSettings(timeout_seconds=0)

    def test_store_settings_from_env(self, monkeypatch):
        monkeypatch.setenv("BILLED_STORE_BASE_URL", "http://env.test")
        assert StoreSettings().base_url == "http://env.test"

    def test_app_settings_only_carry_log_level(self):
        assert set(AppSettings.model_fields) == {"log_level"}

    def test_log_level_normalized(self):
        assert AppSettings(log_level="debug").log_level == "DEBUG"
        with pytest.raises(ValidationError):
            AppSettings(log_level="LOUD")

    def test_validate_all_settings(self):
        get_settings.cache_clear()
        results = validate_all_settings()
        assert results["store"] and results["session"] and results["app"]


class TestComponentFactory:

    @pytest.mark.asyncio
    async def test_flows_share_the_store(self):
        session = MemorySessionStore()
        login_flow, bill_list_flow, new_bill_flow, store = create_app_components(
            session_store=session
        )

        assert isinstance(login_flow, LoginFlow)
        assert isinstance(bill_list_flow, BillListFlow)
        assert isinstance(new_bill_flow, NewBillFlow)
        assert login_flow.store is store
        assert bill_list_flow.store is store
        assert new_bill_flow.store is store
        await store.aclose()

    @pytest.mark.asyncio
    async def test_without_store(self):
        sink = MemoryDiagnosticSink()
        _, bill_list_flow, new_bill_flow, store = create_app_components(
            use_store=False, diagnostics_sink=sink
        )

        assert store is None
        assert await bill_list_flow.get_bills() == []
        await new_bill_flow.update_bill({"foo": "bar"})
        assert len(sink.of_type(DiagnosticEventType.UPDATE_SKIPPED)) == 1
