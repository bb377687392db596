"""
Tests for the bill list: fetching, formatting, corrupt-record tolerance.
"""

from unittest.mock import AsyncMock

import pytest

from billed.flows.bills import BillListFlow
from billed.models.diagnostic import DiagnosticEventType
from billed.routes import Route
from billed.services.store import StoreTransportError


def _with_records(store, records):
    store.bills.return_value.list = AsyncMock(return_value=records)
    return store


class TestGetBills:

    @pytest.mark.asyncio
    async def test_formats_status_labels(self, store, navigate):
        _with_records(store, [
            {"id": "1", "date": "2023-04-12", "status": "pending"},
            {"id": "2", "date": "2023-03-05", "status": "accepted"},
        ])
        flow = BillListFlow(store, navigate)

        bills = await flow.get_bills()

        assert len(bills) == 2
        assert bills[0].status == "En attente"
        assert bills[1].status == "Accepté"

    @pytest.mark.asyncio
    async def test_formats_dates(self, store, navigate):
        _with_records(store, [
            {"id": "1", "date": "2023-04-12", "status": "pending"},
            {"id": "2", "date": "2023-03-05", "status": "accepted"},
        ])
        flow = BillListFlow(store, navigate)

        bills = await flow.get_bills()

        assert [b.date for b in bills] == ["12 Avr. 23", "05 Mar. 23"]

    @pytest.mark.asyncio
    async def test_other_fields_kept(self, store, navigate):
        _with_records(store, [{
            "id": "47qAXb6fIm2zOKkLzMro",
            "date": "2004-04-04",
            "status": "refused",
            "name": "encore",
            "amount": 400,
            "vat": "80",
            "pct": 20,
            "commentary": "séminaire billed",
            "fileUrl": "https://test.storage.tld/preview-facture-free.jpg",
            "fileName": "preview-facture-free-201801-pdf-1.jpg",
            "commentAdmin": "ok",
        }])
        flow = BillListFlow(store, navigate)

        [bill] = await flow.get_bills()

        assert bill.status == "refused"
        assert bill.amount == 400
        assert bill.file_url == "https://test.storage.tld/preview-facture-free.jpg"
        dumped = bill.model_dump(by_alias=True)
        assert dumped["fileName"] == "preview-facture-free-201801-pdf-1.jpg"
        assert dumped["commentAdmin"] == "ok"
        assert "source_date" not in dumped

    @pytest.mark.asyncio
    async def test_unparsable_date_kept_and_reported(
        self, store, navigate, diagnostics, sink
    ):
        _with_records(store, [{"id": "1", "date": "invalid-date", "status": "pending"}])
        flow = BillListFlow(store, navigate, diagnostics)

        bills = await flow.get_bills()

        assert bills[0].date == "invalid-date"
        assert bills[0].status == "En attente"
        [event] = sink.of_type(DiagnosticEventType.MALFORMED_RECORD)
        assert event.entity_id == "1"
        assert event.details["field"] == "date"

    @pytest.mark.asyncio
    async def test_unknown_status_passes_through(self, store, navigate, diagnostics, sink):
        _with_records(store, [{"id": "9", "date": "2023-01-02", "status": "archived"}])
        flow = BillListFlow(store, navigate, diagnostics)

        [bill] = await flow.get_bills()

        assert bill.status == "archived"
        assert bill.date == "02 Jan. 23"
        [event] = sink.of_type(DiagnosticEventType.MALFORMED_RECORD)
        assert event.details["field"] == "status"

    @pytest.mark.asyncio
    async def test_corrupt_records_never_dropped(self, store, navigate, diagnostics, sink):
        records = [
            {"id": "1", "date": "2023-04-12", "status": "pending"},
            {"id": "2", "date": None, "status": None},
            {"id": "3", "date": 20230412, "status": ["pending"]},
            {"id": "4"},
            "not a record",
            {"id": "6", "date": "2023-13-45", "status": "accepted"},
        ]
        _with_records(store, records)
        flow = BillListFlow(store, navigate, diagnostics)

        bills = await flow.get_bills()

        assert len(bills) == len(records)
        assert bills[0].date == "12 Avr. 23"
        assert bills[2].date == 20230412
        assert bills[2].status == ["pending"]
        assert bills[5].date == "2023-13-45"
        assert bills[5].status == "Accepté"
        [summary] = sink.of_type(DiagnosticEventType.BILLS_FETCHED)
        assert summary.details == {"count": 6, "malformed": 5}

    @pytest.mark.asyncio
    async def test_no_store_returns_empty_list(self, navigate):
        flow = BillListFlow(None, navigate)

        assert await flow.get_bills() == []

    @pytest.mark.asyncio
    async def test_transport_failure_propagates(self, store, navigate, diagnostics, sink):
        store.bills.return_value.list = AsyncMock(
            side_effect=StoreTransportError("unreachable")
        )
        flow = BillListFlow(store, navigate, diagnostics)

        with pytest.raises(StoreTransportError):
            await flow.get_bills()

        store.bills.return_value.list.assert_awaited_once()
        assert len(sink.of_type(DiagnosticEventType.BILLS_FETCH_FAILED)) == 1


class TestNavigation:

    def test_new_bill_button(self, store, navigate):
        flow = BillListFlow(store, navigate)

        flow.handle_click_new_bill()

        navigate.assert_called_once_with(Route.NEW_BILL.value)
