"""
Abstract Session Store Interface

The core reads and writes the session, it never interprets anything but
the identity it stored itself.
"""

from abc import ABC, abstractmethod
from typing import Optional


class SessionStoreInterface(ABC):
    """String key/value store, last write wins."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the stored value, or None if the key was never set."""
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        pass
