"""
Diagnostic Logger

DESIGN DECISION: Every anomaly the flows tolerate is reported here.
The diagnostic logger:
- Always writes a structured local log line
- Optionally appends the event to a sink
- Never raises: a broken sink must not break a sign-in or an upload
"""

import logging
from typing import Any, Optional

import structlog

from billed.diagnostics.sinks import DiagnosticSinkInterface
from billed.models.diagnostic import (
    DiagnosticEvent,
    DiagnosticEventBuilder,
    DiagnosticSeverity,
)


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route structlog output through the stdlib root logger at ``level``."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, level.upper()))


class DiagnosticLogger:
    """
    Central diagnostic channel shared by the three flows.

    Logs events both to:
    1. Structured local log (JSON lines through structlog)
    2. The configured sink, if any
    """

    def __init__(
        self,
        sink: Optional[DiagnosticSinkInterface] = None,
    ):
        """
        Initialize diagnostic logger.

        Args:
            sink: Where events are appended. If None, only logs locally.
        """
        self._sink = sink
        self._logger = structlog.get_logger("billed")

    @property
    def sink(self) -> Optional[DiagnosticSinkInterface]:
        return self._sink

    async def log(self, event: DiagnosticEvent) -> bool:
        """
        Log a diagnostic event.

        Returns True if the sink write succeeded (or no sink is configured).
        """
        log_dict = event.to_log_dict()

        if event.severity == DiagnosticSeverity.ERROR:
            self._logger.error("diagnostic_event", **log_dict)
        elif event.severity == DiagnosticSeverity.WARNING:
            self._logger.warning("diagnostic_event", **log_dict)
        elif event.severity == DiagnosticSeverity.DEBUG:
            self._logger.debug("diagnostic_event", **log_dict)
        else:
            self._logger.info("diagnostic_event", **log_dict)

        if self._sink:
            try:
                return await self._sink.append_event(event)
            except Exception as e:
                self._logger.error(
                    "diagnostic_sink_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    # Authentication

    async def log_login_succeeded(self, email: str, user_type: str) -> None:
        await self.log(DiagnosticEventBuilder.login_succeeded(email, user_type))

    async def log_login_rejected(self, email: str, user_type: str, error: str) -> None:
        await self.log(DiagnosticEventBuilder.login_rejected(email, user_type, error))

    async def log_account_created(self, email: str, user_type: str) -> None:
        await self.log(DiagnosticEventBuilder.account_created(email, user_type))

    async def log_account_creation_failed(
        self,
        email: str,
        user_type: str,
        error: str,
    ) -> None:
        await self.log(
            DiagnosticEventBuilder.account_creation_failed(email, user_type, error)
        )

    async def log_account_creation_skipped(self, email: str) -> None:
        await self.log(DiagnosticEventBuilder.account_creation_skipped(email))

    # Bill list

    async def log_bills_fetched(self, count: int, malformed: int) -> None:
        await self.log(DiagnosticEventBuilder.bills_fetched(count, malformed))

    async def log_bills_fetch_failed(self, error: str) -> None:
        await self.log(DiagnosticEventBuilder.bills_fetch_failed(error))

    async def log_malformed_record(
        self,
        bill_id: str,
        field: str,
        raw_value: Any,
        error: str,
    ) -> None:
        """Log a bill field that could not be formatted."""
        await self.log(
            DiagnosticEventBuilder.malformed_record(bill_id, field, raw_value, error)
        )

    # New bill

    async def log_upload_completed(self, bill_id: str, file_name: str) -> None:
        await self.log(DiagnosticEventBuilder.upload_completed(bill_id, file_name))

    async def log_upload_failed(self, file_name: str, error: str) -> None:
        await self.log(DiagnosticEventBuilder.upload_failed(file_name, error))

    async def log_upload_discarded(self, file_name: Optional[str]) -> None:
        await self.log(DiagnosticEventBuilder.upload_discarded(file_name))

    async def log_bill_updated(self, bill_id: str) -> None:
        await self.log(DiagnosticEventBuilder.bill_updated(bill_id))

    async def log_update_skipped(self, reason: str) -> None:
        await self.log(DiagnosticEventBuilder.update_skipped(reason))

    async def log_persist_failed(self, bill_id: str, error: str) -> None:
        await self.log(DiagnosticEventBuilder.persist_failed(bill_id, error))

