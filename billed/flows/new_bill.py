"""
New Bill Submission Flow

Flow:
1. File picked → FILE_SELECTED, the proof file is uploaded right away
2. Upload resolves → FILE_UPLOADED, the store has allocated the bill id
3. Form submitted → the allocated bill is finalized with its metadata
4. Update resolves → SUBMITTED, back to the bill list

DESIGN DECISION: The store treats the file upload as the bill's creation.
The bill identifier is therefore allocated when the file is uploaded, not
when the form is submitted, and the submit only fills in the rest.

Failures never escape a handler. They are reported as diagnostics and the
user stays on the form, free to pick the file again or resubmit.
"""

from enum import Enum
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from billed.diagnostics import DiagnosticLogger
from billed.models.bill import (
    BillPayload,
    NewBillForm,
    PendingUpload,
    ProofFile,
    UploadReceipt,
)
from billed.routes import Navigator, Route
from billed.services.session import SessionStoreInterface, read_identity
from billed.services.store import RemoteStoreInterface
from billed.util import compact_json


class SubmissionState(str, Enum):
    IDLE = "idle"
    FILE_SELECTED = "file_selected"
    FILE_UPLOADED = "file_uploaded"
    SUBMITTED = "submitted"


class NewBillFlow:
    """
    State machine behind the new bill form.

    Holds at most one PendingUpload, the last file the store accepted.
    Picking another file replaces it only once that file's upload
    succeeds; an upload that completes for a replaced selection is
    discarded.
    """

    def __init__(
        self,
        store: Optional[RemoteStoreInterface],
        session_store: SessionStoreInterface,
        navigate: Navigator,
        diagnostics: Optional[DiagnosticLogger] = None,
    ):
        self.store = store
        self._session_store = session_store
        self._navigate = navigate
        self._diagnostics = diagnostics or DiagnosticLogger()
        self.state = SubmissionState.IDLE
        self.pending: Optional[PendingUpload] = None
        # Latest picked file whose upload has not resolved yet
        self._selection: Optional[PendingUpload] = None

    @property
    def bill_id(self) -> Optional[str]:
        return self.pending.bill_id if self.pending else None

    @property
    def file_url(self) -> Optional[str]:
        return self.pending.file_url if self.pending else None

    @property
    def file_name(self) -> Optional[str]:
        return self.pending.file_name if self.pending else None

    def _current_email(self) -> Optional[str]:
        identity = read_identity(self._session_store)
        return identity.email if identity else None

    async def handle_change_file(self, file: ProofFile) -> bool:
        """
        Select a proof file and upload it.

        A failed upload leaves the previously uploaded file, if any, linked
        to the form.

        Returns:
            True if the store allocated a bill for this file
        """
        selection = PendingUpload(file_name=file.file_name)
        self._selection = selection
        self.state = SubmissionState.FILE_SELECTED

        if not self.store:
            self._drop_selection(selection)
            await self._diagnostics.log_upload_failed(
                file.file_name, "No remote store configured"
            )
            return False

        form_data = {"file": file, "email": self._current_email()}
        try:
            answer = await self.store.bills().create(form_data)
        except Exception as e:
            self._drop_selection(selection)
            await self._diagnostics.log_upload_failed(file.file_name, str(e))
            return False

        try:
            receipt = UploadReceipt.model_validate(answer)
        except ValidationError as e:
            self._drop_selection(selection)
            await self._diagnostics.log_upload_failed(
                file.file_name, f"Unexpected upload answer: {e}"
            )
            return False

        # Replaced by another file, or already submitted, while in flight
        if self._selection is None or self._selection.selection_id != selection.selection_id:
            await self._diagnostics.log_upload_discarded(file.file_name)
            return False

        self._selection = None
        self.pending = selection.uploaded(receipt)
        self.state = SubmissionState.FILE_UPLOADED
        await self._diagnostics.log_upload_completed(receipt.key, file.file_name)
        return True

    def _drop_selection(self, selection: PendingUpload) -> None:
        if self._selection is not None and self._selection.selection_id == selection.selection_id:
            self._selection = None

    async def handle_submit(self, form: NewBillForm) -> bool:
        """
        Finalize the bill with the form fields.

        Uses whatever upload state exists at submit time.
        """
        payload = BillPayload.from_form(form, self._current_email(), self.pending)
        return await self.update_bill(payload)

    async def update_bill(self, payload: Union[BillPayload, Mapping[str, Any]]) -> bool:
        """
        Write the bill metadata to the allocated bill, then go back to the list.

        Without an allocated bill the update is skipped and the user is still
        sent back to the list. A rejected update keeps the user on the form.

        Returns:
            True if the flow navigated away
        """
        if isinstance(payload, BillPayload):
            document = payload.to_document()
        else:
            document = dict(payload)

        bill_id = self.bill_id
        if bill_id is None or not self.store:
            reason = "no uploaded proof file" if bill_id is None else "no remote store configured"
            await self._diagnostics.log_update_skipped(reason)
        else:
            try:
                await self.store.bills().update(
                    data=compact_json(document),
                    selector=bill_id,
                )
            except Exception as e:
                await self._diagnostics.log_persist_failed(bill_id, str(e))
                return False
            await self._diagnostics.log_bill_updated(bill_id)

        self.pending = None
        self._selection = None
        self.state = SubmissionState.SUBMITTED
        self._navigate(Route.BILLS.value)
        return True
