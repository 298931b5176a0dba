"""Change notification bus.

Listeners receive no payload: after a notification they re-read the store
snapshots, which are reference-stable until the next commit.
"""

import logging
import threading
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

Listener = Callable[[], None]
Unsubscribe = Callable[[], None]


class ChangeBus:
    """Minimal observer registry.

    Args:
        on_first_subscribe: Hook run once, before the first listener is
            registered (used for lazy store hydration)
    """

    def __init__(self, on_first_subscribe: Optional[Callable[[], None]] = None) -> None:
        self._listeners: List[Listener] = []
        self._lock = threading.Lock()
        self._on_first_subscribe = on_first_subscribe
        self._first_subscribe_done = False

    def subscribe(self, listener: Listener) -> Unsubscribe:
        """Register a listener.

        Returns:
            Callable that removes the listener; calling it twice is harmless
        """
        run_hook = False
        with self._lock:
            if not self._first_subscribe_done:
                self._first_subscribe_done = True
                run_hook = self._on_first_subscribe is not None
        if run_hook:
            self._on_first_subscribe()

        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    @property
    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)

    def publish(self) -> None:
        """Notify every listener registered at the time of the call.

        A failing listener is logged and does not prevent the others from
        being notified.
        """
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener()
            except Exception:
                logger.exception(f"Change listener {listener!r} failed")
