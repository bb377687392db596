"""
Display Formatting for Bills

Turns raw store values into what the bill list shows:
- dates become short French labels, "2023-04-12" -> "12 Avr. 23"
- status codes go through a fixed label table

The try_* helpers never raise. They return the formatted value, or the
original value together with the reason it could not be formatted, so a
single bad field never costs the whole record.
"""

import datetime
import re
from typing import Any, Iterable, NamedTuple, Optional

from billed.models.bill import BillStatus, DisplayBill


MONTH_LABELS = (
    "Jan", "Fév", "Mar", "Avr", "Mai", "Jui",
    "Jui", "Aoû", "Sep", "Oct", "Nov", "Déc",
)

STATUS_LABELS = {
    BillStatus.PENDING.value: "En attente",
    BillStatus.ACCEPTED.value: "Accepté",
}

_KNOWN_STATUS_CODES = {status.value for status in BillStatus}

# "Jui" is both June and July; the first month wins
_MONTH_NUMBERS: dict[str, int] = {}
for _number, _label in enumerate(MONTH_LABELS, start=1):
    _MONTH_NUMBERS.setdefault(_label, _number)

_LABEL_PATTERN = re.compile(r"^\s*(\d{1,2}) (\w{3})\. (\d{2})\s*$")

_FALLBACK_DATE_FORMATS = ("%Y/%m/%d", "%d/%m/%Y")


class FieldFormat(NamedTuple):
    """Formatted value, or the original value and why it was kept."""
    value: Any
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_raw_date(value: Any) -> datetime.date:
    """
    Parse an ISO-ish date as stored with a bill.

    Raises:
        ValueError: If the value is not a recognizable date
        TypeError: If the value is not a string or date
    """
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if not isinstance(value, str):
        raise TypeError(f"Unsupported date value: {value!r}")

    text = value.strip()
    try:
        return datetime.date.fromisoformat(text)
    except ValueError:
        pass
    try:
        # Timestamps, with "Z" accepted before Python 3.11
        return datetime.datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    for fmt in _FALLBACK_DATE_FORMATS:
        try:
            return datetime.datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Invalid date: {value!r}")


def format_date(value: Any) -> str:
    """Short French label, "12 Avr. 23". Raises on unparsable input."""
    parsed = parse_raw_date(value)
    return f"{parsed.day:02d} {MONTH_LABELS[parsed.month - 1]}. {parsed.year % 100:02d}"


def format_status(value: Any) -> Any:
    """Label for a status code; unknown codes come back unchanged."""
    if isinstance(value, str):
        return STATUS_LABELS.get(value, value)
    return value


def try_format_date(value: Any) -> FieldFormat:
    if value is None:
        return FieldFormat(None, "missing date")
    try:
        return FieldFormat(format_date(value))
    except (ValueError, TypeError, OverflowError) as e:
        return FieldFormat(value, str(e))


def try_format_status(value: Any) -> FieldFormat:
    if value is None:
        return FieldFormat(None, "missing status")
    if isinstance(value, str) and value in _KNOWN_STATUS_CODES:
        return FieldFormat(format_status(value))
    return FieldFormat(format_status(value), f"unknown status code {value!r}")


# =============================================================================
# DISPLAY ORDERING
# =============================================================================

def date_sort_key(label: Any) -> tuple:
    """
    Chronological key for a date label.

    Valid "DD Mon. YY" labels order by date; anything else orders before
    every valid date. Ties fall back to the text itself, so the order is
    total.
    """
    text = str(label)
    match = _LABEL_PATTERN.match(text)
    if match:
        day, month_label, year = match.groups()
        month = _MONTH_NUMBERS.get(month_label.capitalize())
        if month is not None:
            return (1, 2000 + int(year), month, int(day), text)
    return (0, text)


def sort_dates_latest_first(labels: Iterable[Any]) -> list:
    """
    Latest first; labels that are not dates go last.

    ["12 Avr. 23", "05 Mar. 23", "20 Jui. 23"]
        -> ["20 Jui. 23", "12 Avr. 23", "05 Mar. 23"]
    """
    return sorted(labels, key=date_sort_key, reverse=True)


def _bill_sort_key(bill: DisplayBill) -> tuple:
    try:
        parsed = parse_raw_date(bill.source_date)
    except (ValueError, TypeError, OverflowError):
        return date_sort_key(bill.date)
    return (1, parsed.year, parsed.month, parsed.day, str(bill.date))


def sort_bills_latest_first(bills: Iterable[DisplayBill]) -> list[DisplayBill]:
    """
    Order bills for the list page, latest first.

    Uses each bill's original date when it parses, which keeps June and
    July apart even though both are labelled "Jui".
    """
    return sorted(bills, key=_bill_sort_key, reverse=True)
