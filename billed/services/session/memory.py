from typing import Optional

from billed.services.session.interface import SessionStoreInterface


class MemorySessionStore(SessionStoreInterface):
    """Session store kept in a dict, for one process."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = str(value)

    def clear(self) -> None:
        self._items.clear()
