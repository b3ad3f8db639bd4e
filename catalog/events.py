"""Publish/subscribe helper for signals the catalog sends to rendering collaborators."""

import logging
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

Listener = Callable[[Any], None]


class EventBus:
    """
    Synchronous topic-based broadcaster.

    Listeners run in subscription order, inside the publishing call. A
    failing listener is logged and skipped so one collaborator cannot break
    a catalog mutation for the others.
    """

    def __init__(self) -> None:
        self._listeners: Dict[str, List[Listener]] = {}

    def subscribe(self, event_type: str, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that unsubscribes it."""
        self._listeners.setdefault(event_type, []).append(listener)

        def unsubscribe() -> None:
            self.unsubscribe(event_type, listener)

        return unsubscribe

    def unsubscribe(self, event_type: str, listener: Listener) -> None:
        listeners = self._listeners.get(event_type, [])
        if listener in listeners:
            listeners.remove(listener)

    def publish(self, event_type: str, payload: Any) -> int:
        """
        Deliver payload to every listener of event_type.

        Returns:
            Number of listeners that handled the event without raising
        """
        delivered = 0
        for listener in list(self._listeners.get(event_type, [])):
            try:
                listener(payload)
                delivered += 1
            except Exception:
                logger.exception(f"Listener for '{event_type}' failed")
        return delivered

    def listener_count(self, event_type: str) -> int:
        return len(self._listeners.get(event_type, []))
