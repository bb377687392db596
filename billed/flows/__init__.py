"""The three user-facing flows of the portal."""

from billed.flows.bills import BillListFlow
from billed.flows.login import LoginFlow
from billed.flows.new_bill import NewBillFlow, SubmissionState

__all__ = [
    "BillListFlow",
    "LoginFlow",
    "NewBillFlow",
    "SubmissionState",
]
