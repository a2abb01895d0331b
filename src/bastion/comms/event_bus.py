"""EventBus — thread-safe pub/sub for simulation events.

Every message is a dict ``{"type": <event name>, "data": {...}}``.  The
engine, wave director and fire controller publish; renderers, HUDs and
tests subscribe.

Event names used by the simulation:
  - ``wave_start``, ``victory``, ``game_over``, ``game_state_change``
  - ``projectile_fired``, ``enemy_destroyed``, ``core_hit``
  - ``catalog_loaded``, ``catalog_unavailable``
"""

from __future__ import annotations

import queue
import threading


class EventBus:
    """Simple thread-safe pub/sub for pushing events to subscribers."""

    def __init__(self, maxsize: int = 100) -> None:
        self._lock = threading.Lock()
        self._maxsize = maxsize
        self._subscribers: list[tuple[queue.Queue, str | None]] = []

    def subscribe(self, _filter: str | None = None) -> queue.Queue:
        """Subscribe to events. Returns a Queue that receives events.

        When ``_filter`` is given only events of that type are delivered.
        """
        q: queue.Queue = queue.Queue(maxsize=self._maxsize)
        with self._lock:
            self._subscribers.append((q, _filter))
        return q

    def unsubscribe(self, q: queue.Queue) -> None:
        with self._lock:
            self._subscribers = [
                (sub, flt) for sub, flt in self._subscribers if sub is not q
            ]

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def publish(self, event_type: str, data: dict | None = None) -> None:
        msg = {"type": event_type}
        if data is not None:
            msg["data"] = data
        with self._lock:
            for q, flt in self._subscribers:
                if flt is not None and flt != event_type:
                    continue
                try:
                    q.put_nowait(msg)
                except queue.Full:
                    # Drop oldest so terminal events (game_over, victory)
                    # still reach a subscriber that fell behind.
                    try:
                        q.get_nowait()
                    except queue.Empty:
                        pass
                    try:
                        q.put_nowait(msg)
                    except queue.Full:
                        pass
