"""
In-process publish/subscribe registry for live notification push.

A transport (for example a WebSocket consumer) subscribes a callback per
connected user; services publish payloads after the stored notification
has committed. Delivery is best effort: a failing subscriber is logged and
skipped, and never affects the caller.
"""

import logging
import threading
from collections import defaultdict
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)

Subscriber = Callable[[dict], None]


class NotificationBroker:
    """Maps user ids to the callbacks listening for that user's events."""

    def __init__(self):
        self._lock = threading.Lock()
        self._subscribers: Dict[int, List[Subscriber]] = defaultdict(list)

    def subscribe(self, user_id: int, callback: Subscriber) -> Callable[[], None]:
        """
        Register ``callback`` for ``user_id``.

        Returns:
            A function that removes this subscription; calling it twice is harmless
        """
        with self._lock:
            self._subscribers[user_id].append(callback)

        def unsubscribe():
            with self._lock:
                callbacks = self._subscribers.get(user_id, [])
                if callback in callbacks:
                    callbacks.remove(callback)
                if not callbacks:
                    self._subscribers.pop(user_id, None)

        return unsubscribe

    def subscriber_count(self, user_id: int) -> int:
        with self._lock:
            return len(self._subscribers.get(user_id, []))

    def publish(self, user_id: int, payload: dict) -> int:
        """
        Deliver ``payload`` to every subscriber of ``user_id``.

        Returns:
            Number of subscribers that received it
        """
        with self._lock:
            callbacks = list(self._subscribers.get(user_id, []))

        delivered = 0
        for callback in callbacks:
            try:
                callback(payload)
            except Exception:
                logger.exception("Notification subscriber for user %s failed", user_id)
                continue
            delivered += 1
        return delivered

    def clear(self) -> None:
        with self._lock:
            self._subscribers.clear()


broker = NotificationBroker()
