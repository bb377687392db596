"""
Diagnostic Models for Billed Portal Core

Anomalies the flows tolerate (a corrupt bill, a failed upload, a rejected
login) are not raised to the screen. They are reported as diagnostic
events instead, so they stay visible without breaking the page.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class DiagnosticEventType(str, Enum):
    """
    Types of events we report.

    Each unit has its own group of event types.
    """
    # Authentication
    LOGIN_SUCCEEDED = "login_succeeded"
    LOGIN_REJECTED = "login_rejected"
    ACCOUNT_CREATED = "account_created"
    ACCOUNT_CREATION_FAILED = "account_creation_failed"
    ACCOUNT_CREATION_SKIPPED = "account_creation_skipped"

    # Bill list
    BILLS_FETCHED = "bills_fetched"
    BILLS_FETCH_FAILED = "bills_fetch_failed"
    MALFORMED_RECORD = "malformed_record"

    # New bill
    UPLOAD_COMPLETED = "upload_completed"
    UPLOAD_FAILED = "upload_failed"
    UPLOAD_DISCARDED = "upload_discarded"
    BILL_UPDATED = "bill_updated"
    UPDATE_SKIPPED = "update_skipped"
    PERSIST_FAILED = "persist_failed"


class DiagnosticSeverity(str, Enum):
    """Severity level for diagnostic events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class DiagnosticEvent(BaseModel):
    """A single diagnostic event."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    event_type: DiagnosticEventType
    severity: DiagnosticSeverity = DiagnosticSeverity.INFO

    # What the event is about (bill id, email, ...)
    entity_id: Optional[str] = None

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class DiagnosticEventBuilder:
    """
    Helper class to build diagnostic events with common patterns.

    Usage:
        event = DiagnosticEventBuilder.malformed_record(bill_id, "date", raw, error)
        event = DiagnosticEventBuilder.upload_failed(file_name, error)
    """

    @staticmethod
    def login_succeeded(email: str, user_type: str) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.LOGIN_SUCCEEDED,
            entity_id=email,
            description=f"{user_type} signed in",
            details={"user_type": user_type},
        )

    @staticmethod
    def login_rejected(email: str, user_type: str, error: str) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.LOGIN_REJECTED,
            severity=DiagnosticSeverity.WARNING,
            entity_id=email,
            description="Login rejected, falling back to account creation",
            details={"user_type": user_type},
            error_message=error,
        )

    @staticmethod
    def account_created(email: str, user_type: str) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.ACCOUNT_CREATED,
            entity_id=email,
            description=f"{user_type} account created",
            details={"user_type": user_type},
        )

    @staticmethod
    def account_creation_failed(
        email: str,
        user_type: str,
        error: str,
    ) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.ACCOUNT_CREATION_FAILED,
            severity=DiagnosticSeverity.ERROR,
            entity_id=email,
            description="Account creation failed",
            details={"user_type": user_type},
            error_message=error,
        )

    @staticmethod
    def account_creation_skipped(email: str) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.ACCOUNT_CREATION_SKIPPED,
            severity=DiagnosticSeverity.WARNING,
            entity_id=email,
            description="No remote store configured, account not created",
        )

    @staticmethod
    def bills_fetched(count: int, malformed: int) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.BILLS_FETCHED,
            description=f"Fetched {count} bills ({malformed} malformed)",
            details={"count": count, "malformed": malformed},
        )

    @staticmethod
    def bills_fetch_failed(error: str) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.BILLS_FETCH_FAILED,
            severity=DiagnosticSeverity.ERROR,
            description="Could not fetch bills from the remote store",
            error_message=error,
        )

    @staticmethod
    def malformed_record(
        bill_id: str,
        field: str,
        raw_value: Any,
        error: str,
    ) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.MALFORMED_RECORD,
            severity=DiagnosticSeverity.WARNING,
            entity_id=bill_id,
            description=f"Bill {bill_id}: could not format {field}, kept raw value",
            details={"field": field, "raw_value": repr(raw_value)},
            error_message=error,
        )

    @staticmethod
    def upload_completed(bill_id: str, file_name: str) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.UPLOAD_COMPLETED,
            entity_id=bill_id,
            description=f"Proof file uploaded: {file_name}",
            details={"file_name": file_name},
        )

    @staticmethod
    def upload_failed(file_name: str, error: str) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.UPLOAD_FAILED,
            severity=DiagnosticSeverity.ERROR,
            description=f"Proof file upload failed: {file_name}",
            details={"file_name": file_name},
            error_message=error,
        )

    @staticmethod
    def upload_discarded(file_name: Optional[str]) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.UPLOAD_DISCARDED,
            severity=DiagnosticSeverity.WARNING,
            description="Upload finished after its selection was replaced",
            details={"file_name": file_name},
        )

    @staticmethod
    def bill_updated(bill_id: str) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.BILL_UPDATED,
            entity_id=bill_id,
            description="Bill finalized",
        )

    @staticmethod
    def update_skipped(reason: str) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.UPDATE_SKIPPED,
            severity=DiagnosticSeverity.WARNING,
            description=f"Bill update skipped: {reason}",
            details={"reason": reason},
        )

    @staticmethod
    def persist_failed(bill_id: str, error: str) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.PERSIST_FAILED,
            severity=DiagnosticSeverity.ERROR,
            entity_id=bill_id,
            description="Bill update rejected, staying on the form",
            error_message=error,
        )

