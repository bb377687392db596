"""Services package."""

from billed.services.session import (
    MemorySessionStore,
    SessionStoreInterface,
    read_identity,
    write_identity,
)
from billed.services.store import (
    HttpRemoteStore,
    RemoteStoreInterface,
    StoreError,
    StoreRejectedError,
    StoreResponseError,
    StoreTransportError,
)

__all__ = [
    # Session
    "MemorySessionStore",
    "SessionStoreInterface",
    "read_identity",
    "write_identity",
    # Remote store
    "HttpRemoteStore",
    "RemoteStoreInterface",
    "StoreError",
    "StoreRejectedError",
    "StoreResponseError",
    "StoreTransportError",
]
