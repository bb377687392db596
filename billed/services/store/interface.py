"""
Abstract Remote Store Interface

DESIGN DECISION: The flows only see this interface, never HTTP.
This allows us to:
1. Swap the REST API for another backend
2. Use mocks or in-memory stores for testing
3. Keep the sign-in, list and submission logic decoupled from transport

The shape mirrors the portal API: resources are reached through
`bills()` and `users()`, and every call is awaitable.
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional


class BillsResourceInterface(ABC):
    """Operations on the bills collection."""

    @abstractmethod
    async def list(self) -> list[Mapping[str, Any]]:
        """
        List the raw bill records visible to the signed-in user.

        Raises:
            StoreTransportError: If the store cannot be reached
        """
        pass

    @abstractmethod
    async def create(self, payload: Mapping[str, Any]) -> Mapping[str, Any]:
        """
        Store a proof file and allocate a new bill.

        Args:
            payload: Multipart form fields, `file` (a ProofFile) and `email`

        Returns:
            `{"fileUrl": ..., "key": ...}`
        """
        pass

    @abstractmethod
    async def update(self, data: str, selector: str) -> Any:
        """
        Replace the metadata of an existing bill.

        Args:
            data: JSON document of the bill
            selector: Identifier of the bill to update
        """
        pass


class UsersResourceInterface(ABC):
    """Operations on the users collection."""

    @abstractmethod
    async def create(self, data: str) -> Any:
        """
        Create an account.

        Args:
            data: JSON document `{type, name, email, password}`
        """
        pass


class RemoteStoreInterface(ABC):
    """
    Abstract interface for the backing persistence/authentication service.
    """

    @abstractmethod
    def bills(self) -> BillsResourceInterface:
        pass

    @abstractmethod
    def users(self) -> UsersResourceInterface:
        pass

    @abstractmethod
    async def login(self, credentials: str) -> Mapping[str, Any]:
        """
        Authenticate.

        Args:
            credentials: JSON document `{"email": ..., "password": ...}`

        Returns:
            `{"jwt": ...}`
        """
        pass


class StoreError(Exception):
    """Base exception for remote store operations."""
    pass


class StoreTransportError(StoreError):
    """The remote store could not be reached."""
    pass


class StoreRejectedError(StoreError):
    """The remote store answered with an error."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class StoreResponseError(StoreError):
    """The remote store answered with something we cannot read."""
    pass
