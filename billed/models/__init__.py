"""
Data Models Package

This package contains all Pydantic models used by the Billed portal core.
"""

from billed.models.bill import (
    BillPayload,
    BillStatus,
    DisplayBill,
    ExpenseType,
    NewBillForm,
    PendingUpload,
    ProofFile,
    RawBill,
    UploadReceipt,
)
from billed.models.diagnostic import (
    DiagnosticEvent,
    DiagnosticEventBuilder,
    DiagnosticEventType,
    DiagnosticSeverity,
)
from billed.models.session import (
    AuthOutcome,
    AuthStage,
    Credential,
    LoginResult,
    SessionIdentity,
    UserType,
)

__all__ = [
    # Bill models
    "BillPayload",
    "BillStatus",
    "DisplayBill",
    "ExpenseType",
    "NewBillForm",
    "PendingUpload",
    "ProofFile",
    "RawBill",
    "UploadReceipt",
    # Diagnostic models
    "DiagnosticEvent",
    "DiagnosticEventBuilder",
    "DiagnosticEventType",
    "DiagnosticSeverity",
    # Session models
    "AuthOutcome",
    "AuthStage",
    "Credential",
    "LoginResult",
    "SessionIdentity",
    "UserType",
]
