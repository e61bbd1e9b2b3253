"""Subscribe upstream only while someone listens downstream."""

from __future__ import annotations
import threading
from typing import Callable

class DemandSubscriptionManager:
    """State machine keyed on the downstream consumer count.

    ``subscribe`` runs on the 0 -> >=1 transition and ``unsubscribe`` when the
    count drops back to 0. Repeated reports of the same side (1 -> 2, 0 -> 0)
    do nothing. Transitions are serialized by one lock; conversion work does
    not run under it.
    """

    def __init__(self, subscribe: Callable[[], None], unsubscribe: Callable[[], None]):
        self._subscribe = subscribe
        self._unsubscribe = unsubscribe
        self._lock = threading.Lock()
        self._subscribed = False

    @property
    def subscribed(self) -> bool:
        with self._lock:
            return self._subscribed

    def update(self, consumer_count: int) -> bool:
        """Apply a consumer count report; returns True if a transition ran."""
        with self._lock:
            if consumer_count <= 0:
                if not self._subscribed:
                    return False
                self._unsubscribe()
                self._subscribed = False
                return True
            if self._subscribed:
                return False
            # State only flips once subscribe() succeeded
            self._subscribe()
            self._subscribed = True
            return True

    def shutdown(self) -> None:
        """Tear down upstream regardless of the last reported count."""
        self.update(0)
