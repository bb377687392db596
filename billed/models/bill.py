"""
Bill Data Models for Billed Portal Core

These models describe bills as they travel between the remote store and
the screens:
1. RawBill - whatever the store returned, every field optional
2. DisplayBill - the same record with its date and status made readable
3. PendingUpload - the proof file uploaded ahead of the bill form
4. NewBillForm / BillPayload - what the employee typed and what we persist

DESIGN DECISION: Raw records are duck-typed. The store is not trusted to
send complete or well-formed bills, so nothing here rejects a record for a
missing or odd field. Formatting decides what to do with it instead.
"""

import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class BillStatus(str, Enum):
    """
    Raw status codes stored with a bill.

    Codes outside this set can still come back from the store; they are
    shown unchanged.
    """
    PENDING = "pending"
    ACCEPTED = "accepted"
    REFUSED = "refused"


class ExpenseType(str, Enum):
    """Expense types offered by the new bill form."""
    TRANSPORTS = "Transports"
    RESTAURANTS = "Restaurants et bars"
    HOTEL = "Hôtel et logement"
    ONLINE_SERVICES = "Services en ligne"
    IT = "IT et électronique"
    EQUIPMENT = "Equipement et matériel"
    OFFICE_SUPPLIES = "Fournitures de bureau"


DEFAULT_VAT_PCT = 20


# =============================================================================
# BILL RECORDS
# =============================================================================

class RawBill(BaseModel):
    """
    A bill exactly as received from the remote store.

    All fields are optional and untyped; unknown keys are kept.
    """
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: Optional[Any] = None
    date: Optional[Any] = None
    status: Optional[Any] = None
    type: Optional[Any] = None
    name: Optional[Any] = None
    amount: Optional[Any] = None
    vat: Optional[Any] = None
    pct: Optional[Any] = None
    commentary: Optional[Any] = None
    email: Optional[Any] = None
    file_url: Optional[Any] = Field(default=None, alias="fileUrl")
    file_name: Optional[Any] = Field(default=None, alias="fileName")

    @property
    def record_id(self) -> str:
        """Identifier used when reporting anomalies about this record."""
        return str(self.id) if self.id is not None else "<unknown>"


class DisplayBill(RawBill):
    """
    A bill ready to be shown in the bill list.

    `date` holds the short localized label ("12 Avr. 23") or, when the raw
    value could not be parsed, the raw value itself. `status` holds the
    label from the status table or the raw code.
    """

    # Original date value, used for chronological ordering only
    source_date: Optional[Any] = Field(default=None, exclude=True)


# =============================================================================
# NEW BILL SUBMISSION
# =============================================================================

class ProofFile(BaseModel):
    """The proof-of-purchase file picked by the employee."""

    file_name: str = Field(
        ...,
        min_length=1,
        description="Name of the picked file"
    )
    content: bytes = Field(
        ...,
        description="Raw file content"
    )
    content_type: str = Field(
        default="application/octet-stream",
        description="MIME type reported by the browser"
    )


class UploadReceipt(BaseModel):
    """What the store returns once a proof file has been stored."""
    model_config = ConfigDict(populate_by_name=True)

    file_url: str = Field(
        ...,
        alias="fileUrl",
        description="Where the stored file can be fetched"
    )
    key: str = Field(
        ...,
        min_length=1,
        description="Identifier allocated for the new bill"
    )

    @field_validator('key', mode='before')
    @classmethod
    def coerce_key(cls, v: Any) -> Any:
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class PendingUpload(BaseModel):
    """
    Link between an uploaded proof file and the bill being built.

    Created (without bill_id/file_url) as soon as a file is picked, then
    replaced by an uploaded copy once the store allocates the bill.
    """
    model_config = ConfigDict(frozen=True)

    selection_id: UUID = Field(
        default_factory=uuid4,
        description="Identifies one file selection"
    )
    bill_id: Optional[str] = None
    file_url: Optional[str] = None
    file_name: Optional[str] = None

    @property
    def is_uploaded(self) -> bool:
        return self.bill_id is not None

    def uploaded(self, receipt: UploadReceipt) -> "PendingUpload":
        """Copy of this selection carrying the allocated bill."""
        return self.model_copy(
            update={"bill_id": receipt.key, "file_url": receipt.file_url}
        )


class NewBillForm(BaseModel):
    """Fields of the new bill form, as submitted."""
    model_config = ConfigDict(str_strip_whitespace=True)

    type: ExpenseType
    name: str = ""
    amount: int = Field(
        ...,
        description="Amount including taxes, whole euros"
    )
    date: datetime.date
    vat: Optional[str] = None
    pct: int = Field(
        default=DEFAULT_VAT_PCT,
        description="VAT percentage"
    )
    commentary: str = ""

    @field_validator('amount', mode='before')
    @classmethod
    def truncate_amount(cls, v: Any) -> Any:
        """Keep the integer part, "348.50" becomes 348."""
        if isinstance(v, str):
            v = v.strip()
            try:
                return int(float(v))
            except ValueError:
                return v
        if isinstance(v, float):
            return int(v)
        return v

    @field_validator('pct', mode='before')
    @classmethod
    def default_pct(cls, v: Any) -> Any:
        """Missing, blank or zero percentage falls back to 20."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_VAT_PCT
        try:
            parsed = int(float(v))
        except (TypeError, ValueError):
            return DEFAULT_VAT_PCT
        return parsed or DEFAULT_VAT_PCT


class BillPayload(BaseModel):
    """
    The full bill written by the finalizing update.

    Field order matches the JSON document the portal stores.
    """
    model_config = ConfigDict(populate_by_name=True)

    email: Optional[str] = None
    type: ExpenseType
    name: str
    amount: int
    date: datetime.date
    vat: Optional[str] = None
    pct: int
    commentary: str
    file_url: Optional[str] = Field(default=None, alias="fileUrl")
    file_name: Optional[str] = Field(default=None, alias="fileName")
    status: BillStatus = BillStatus.PENDING

    @classmethod
    def from_form(
        cls,
        form: NewBillForm,
        email: Optional[str],
        pending: Optional[PendingUpload],
    ) -> "BillPayload":
        return cls(
            email=email,
            type=form.type,
            name=form.name,
            amount=form.amount,
            date=form.date,
            vat=form.vat,
            pct=form.pct,
            commentary=form.commentary,
            file_url=pending.file_url if pending else None,
            file_name=pending.file_name if pending else None,
        )

    def to_document(self) -> dict:
        """JSON-ready dict using the portal's field names."""
        return self.model_dump(mode="json", by_alias=True)
