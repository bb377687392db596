"""
Session Store Package

Key/value persistence of the signed-in identity.
"""

from billed.services.session.interface import SessionStoreInterface
from billed.services.session.memory import MemorySessionStore
from billed.services.session.identity import read_identity, write_identity

__all__ = [
    "MemorySessionStore",
    "SessionStoreInterface",
    "read_identity",
    "write_identity",
]
