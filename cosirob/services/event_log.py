from __future__ import annotations

import itertools
import logging
import threading
from collections import deque
from collections.abc import Callable
from datetime import datetime

from cosirob.common.logging_config import EVENTS_LOGGER
from cosirob.protocol.types import LogKind, ProtocolEvent

MAX_HISTORY = 1000

Subscriber = Callable[[ProtocolEvent], None]

# Protocol events are mirrored into Python logging under this name
event_logger = logging.getLogger(EVENTS_LOGGER)

_LEVELS = {
    LogKind.INFO: logging.DEBUG,
    LogKind.TX: logging.DEBUG,
    LogKind.RX: logging.DEBUG,
    LogKind.WARNING: logging.WARNING,
    LogKind.ERROR: logging.ERROR,
}


def _now() -> datetime:
    return datetime.now().replace(microsecond=0)


class EventLog:
    """
    Ordered, bounded history of protocol events with synchronous broadcast.

    One instance is shared by every component that emits or observes
    protocol traffic. append() holds the lock while pushing and notifying,
    so each subscriber sees events in append order and a snapshot never
    contains an event whose delivery is still in progress.
    """

    def __init__(self, max_history: int = MAX_HISTORY, clock: Callable[[], datetime] = _now) -> None:
        self._history: deque[ProtocolEvent] = deque(maxlen=max_history)
        self._subscribers: list[tuple[int, Subscriber]] = []
        self._tokens = itertools.count()
        self._lock = threading.RLock()
        self._clock = clock

    @property
    def max_history(self) -> int:
        return self._history.maxlen or MAX_HISTORY

    def __len__(self) -> int:
        with self._lock:
            return len(self._history)

    def append(self, kind: LogKind | str, message: str) -> ProtocolEvent:
        event = ProtocolEvent(timestamp=self._clock(), kind=LogKind(kind), message=message)
        event_logger.log(_LEVELS[event.kind], "[%s] %s", event.kind.value.upper(), message)
        with self._lock:
            self._history.append(event)
            self._broadcast(event)
        return event

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register callback; returns an idempotent unsubscribe function."""
        with self._lock:
            token = next(self._tokens)
            self._subscribers.append((token, callback))

        def unsubscribe() -> None:
            with self._lock:
                self._subscribers = [s for s in self._subscribers if s[0] != token]

        return unsubscribe

    def snapshot(self) -> list[ProtocolEvent]:
        with self._lock:
            return list(self._history)

    def clear(self) -> ProtocolEvent:
        """Empty the history and announce it with an info event."""
        with self._lock:
            self._history.clear()
            return self.append(LogKind.INFO, "Log cleared")

    # Convenience emitters
    def info(self, message: str) -> ProtocolEvent:
        return self.append(LogKind.INFO, message)

    def tx(self, message: str) -> ProtocolEvent:
        return self.append(LogKind.TX, message)

    def rx(self, message: str) -> ProtocolEvent:
        return self.append(LogKind.RX, message)

    def warning(self, message: str) -> ProtocolEvent:
        return self.append(LogKind.WARNING, message)

    def error(self, message: str) -> ProtocolEvent:
        return self.append(LogKind.ERROR, message)

    def _broadcast(self, event: ProtocolEvent) -> None:
        for _, callback in list(self._subscribers):
            try:
                callback(event)
            except Exception:
                logging.exception("Event log subscriber %r failed", callback)
