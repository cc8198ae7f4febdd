"""Change notifications so independent views can refresh after a write."""

import logging
from collections import defaultdict
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)

CLIENTS_UPDATED = "clients_updated"
PAYMENTS_UPDATED = "payments_updated"
SESSIONS_UPDATED = "sessions_updated"
REMINDERS_UPDATED = "reminders_updated"

Listener = Callable[[str], None]


class ChangeNotifier:
    def __init__(self):
        self._listeners: Dict[str, List[Listener]] = defaultdict(list)

    def subscribe(self, topic: str, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for ``topic`` and return a callable that removes it."""
        self._listeners[topic].append(listener)

        def unsubscribe() -> None:
            self.unsubscribe(topic, listener)

        return unsubscribe

    def unsubscribe(self, topic: str, listener: Listener) -> None:
        listeners = self._listeners.get(topic, [])
        if listener in listeners:
            listeners.remove(listener)

    def publish(self, topic: str) -> None:
        # Iterate over a copy so listeners may unsubscribe while being notified
        for listener in self._listeners.get(topic, [])[:]:
            try:
                listener(topic)
            except Exception:
                logger.exception("Listener %r failed handling %s", listener, topic)
