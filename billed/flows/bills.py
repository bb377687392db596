"""
Bill List Flow

Fetches the signed-in user's bills and prepares them for the list page.

GUARANTEES:
- Every record the store returns is in the result, in the same order
- A field that cannot be formatted keeps its raw value and is reported
- Only a failure to reach the store is raised to the caller
"""

from typing import Any, Mapping, Optional

from billed.diagnostics import DiagnosticLogger
from billed.formatting import try_format_date, try_format_status
from billed.models.bill import DisplayBill, RawBill
from billed.routes import Navigator, Route
from billed.services.store import RemoteStoreInterface


class BillListFlow:
    """
    Bill list page logic.

    Sorting is left to the page (see billed.formatting.sort_bills_latest_first).
    """

    def __init__(
        self,
        store: Optional[RemoteStoreInterface],
        navigate: Navigator,
        diagnostics: Optional[DiagnosticLogger] = None,
    ):
        self.store = store
        self._navigate = navigate
        self._diagnostics = diagnostics or DiagnosticLogger()

    def handle_click_new_bill(self) -> None:
        self._navigate(Route.NEW_BILL.value)

    async def get_bills(self) -> list[DisplayBill]:
        """
        Fetch and format the bills.

        Returns:
            Display-ready bills, [] when no store is configured

        Raises:
            StoreError: If the store itself cannot be queried
        """
        if not self.store:
            return []

        try:
            records = await self.store.bills().list()
        except Exception as e:
            await self._diagnostics.log_bills_fetch_failed(str(e))
            raise

        bills = []
        malformed = 0
        for record in records:
            bill, clean = await self._format_record(record)
            bills.append(bill)
            if not clean:
                malformed += 1

        await self._diagnostics.log_bills_fetched(len(bills), malformed)
        return bills

    async def _format_record(self, record: Mapping[str, Any]) -> tuple[DisplayBill, bool]:
        """
        Format one record. Returns (bill, formatted_cleanly).
        """
        if not isinstance(record, Mapping):
            await self._diagnostics.log_malformed_record(
                "<unknown>", "record", record, "record is not an object"
            )
            return DisplayBill(), False

        raw = RawBill.model_validate(dict(record))
        date = try_format_date(raw.date)
        status = try_format_status(raw.status)

        for field, raw_value, result in (
            ("date", raw.date, date),
            ("status", raw.status, status),
        ):
            if not result.ok:
                await self._diagnostics.log_malformed_record(
                    raw.record_id, field, raw_value, result.error
                )

        data = raw.model_dump(by_alias=True)
        data.update(date=date.value, status=status.value, source_date=raw.date)
        return DisplayBill.model_validate(data), date.ok and status.ok
