"""
Shared fixtures.

Store collaborators are mocks; no test talks to a real portal API.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from billed.diagnostics import DiagnosticLogger, MemoryDiagnosticSink
from billed.models.session import SessionIdentity, UserType
from billed.services.session import MemorySessionStore, write_identity


@pytest.fixture
def sink():
    return MemoryDiagnosticSink()


@pytest.fixture
def diagnostics(sink):
    return DiagnosticLogger(sink)


@pytest.fixture
def navigate():
    return MagicMock()


@pytest.fixture
def session_store():
    return MemorySessionStore()


@pytest.fixture
def employee_session(session_store):
    write_identity(
        session_store,
        SessionIdentity(type=UserType.EMPLOYEE, email="employee@test.tld"),
    )
    return session_store


@pytest.fixture
def store():
    """
    Remote store mock.

    `store.bills()` always returns the same resource mock, so calls made
    by a flow can be inspected on `store.bills.return_value`.
    """
    store = MagicMock()
    store.login = AsyncMock(return_value={"jwt": "token"})
    store.users.return_value.create = AsyncMock(return_value=None)
    store.bills.return_value.list = AsyncMock(return_value=[])
    store.bills.return_value.create = AsyncMock(
        return_value={"fileUrl": "https://localhost/fake.jpg", "key": "1234"}
    )
    store.bills.return_value.update = AsyncMock(return_value=None)
    return store
