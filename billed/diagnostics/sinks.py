"""
Diagnostic Sinks

A sink is where diagnostic events go besides the local log.
Sinks are append-only - events are never modified or removed.
"""

from abc import ABC, abstractmethod
from typing import Optional

from billed.models.diagnostic import DiagnosticEvent, DiagnosticEventType


class DiagnosticSinkInterface(ABC):
    """Abstract interface for diagnostic event storage."""

    @abstractmethod
    async def append_event(self, event: DiagnosticEvent) -> bool:
        """
        Append a diagnostic event.

        Returns:
            True if stored successfully
        """
        pass


class MemoryDiagnosticSink(DiagnosticSinkInterface):
    """
    Keeps events in memory, oldest first.

    Used for in-process inspection of what a flow reported.
    """

    def __init__(self, max_events: Optional[int] = None):
        self._events: list[DiagnosticEvent] = []
        self._max_events = max_events

    async def append_event(self, event: DiagnosticEvent) -> bool:
        self._events.append(event)
        if self._max_events is not None and len(self._events) > self._max_events:
            del self._events[0]
        return True

    @property
    def events(self) -> list[DiagnosticEvent]:
        return list(self._events)

    def of_type(self, event_type: DiagnosticEventType) -> list[DiagnosticEvent]:
        return [e for e in self._events if e.event_type == event_type]

    def clear(self) -> None:
        self._events.clear()
