"""
Component Factory for Billed Portal Core

Wires the three flows to one shared remote store, one session store and
one diagnostic channel. Each flow only ever sees the handles it is given.
"""

from typing import Optional

import structlog

from billed.config import get_settings
from billed.diagnostics import (
    DiagnosticLogger,
    DiagnosticSinkInterface,
    configure_logging,
)
from billed.flows import BillListFlow, LoginFlow, NewBillFlow
from billed.routes import Navigator
from billed.services.session import MemorySessionStore, SessionStoreInterface
from billed.services.store import HttpRemoteStore


def _ignore_navigation(path: str) -> None:
    pass


def create_app_components(
    session_store: Optional[SessionStoreInterface] = None,
    navigate: Optional[Navigator] = None,
    use_store: bool = True,
    diagnostics_sink: Optional[DiagnosticSinkInterface] = None,
) -> tuple[LoginFlow, BillListFlow, NewBillFlow, Optional[HttpRemoteStore]]:
    """
    Factory function to create all application components.

    Args:
        session_store: Where the signed-in identity lives.
                       Defaults to an in-memory store.
        navigate: Receives route identifiers. Defaults to a no-op.
        use_store: Whether to create the HTTP remote store.
                   Set to False to run the flows without a backend.
        diagnostics_sink: Optional sink for diagnostic events.

    Returns:
        (login_flow, bill_list_flow, new_bill_flow, store)
    """
    settings = get_settings()
    configure_logging(settings.app.log_level)

    session_store = session_store or MemorySessionStore()
    navigate = navigate or _ignore_navigation
    diagnostics = DiagnosticLogger(diagnostics_sink)

    store = None
    if use_store:
        try:
            store = HttpRemoteStore(settings=settings.store, session_store=session_store)
        except Exception as e:
            # Invalid store configuration - continue without a backend
            structlog.get_logger("billed").warning(
                "store_not_configured",
                error=str(e),
            )
            store = None

    login_flow = LoginFlow(store, session_store, navigate, diagnostics)
    bill_list_flow = BillListFlow(store, navigate, diagnostics)
    new_bill_flow = NewBillFlow(store, session_store, navigate, diagnostics)

    return login_flow, bill_list_flow, new_bill_flow, store
