"""
Remote Store Package

Provides the abstract remote store interface and its HTTP implementation.
"""

from billed.services.store.interface import (
    BillsResourceInterface,
    RemoteStoreInterface,
    StoreError,
    StoreRejectedError,
    StoreResponseError,
    StoreTransportError,
    UsersResourceInterface,
)
from billed.services.store.http_store import (
    HttpBillsResource,
    HttpRemoteStore,
    HttpUsersResource,
    PortalApiClient,
)

__all__ = [
    # Interfaces
    "BillsResourceInterface",
    "RemoteStoreInterface",
    "UsersResourceInterface",
    # Exceptions
    "StoreError",
    "StoreRejectedError",
    "StoreResponseError",
    "StoreTransportError",
    # HTTP implementation
    "HttpBillsResource",
    "HttpRemoteStore",
    "HttpUsersResource",
    "PortalApiClient",
]
