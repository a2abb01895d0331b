"""Scheduling primitives — frame clock and fixed-interval task.

Both run their callback on a daemon thread and can be stopped cleanly:
``stop()`` sets a stop event, then joins the thread unless it is called
from that same thread (e.g. the engine stopping itself on game over from
inside a frame callback).

FrameClock passes the *measured* monotonic time since the previous frame,
so a slow frame produces a larger ``dt`` rather than a dropped one.
PeriodicTask ignores elapsed time and simply fires every ``interval``.

An exception escaping a callback is logged and stops that task.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable

from loguru import logger


class _ThreadedTask:
    def __init__(self, interval: float, name: str) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.interval = interval
        self.name = name
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._stop.is_set()

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._guarded_run, name=self.name, daemon=True)
        self._thread.start()
        logger.debug(f"{self.name}: started ({self.interval:.3f}s)")

    def request_stop(self) -> None:
        """Signal the loop to exit without waiting for it."""
        self._stop.set()

    def stop(self, timeout: float = 2.0) -> None:
        self._stop.set()
        thread = self._thread
        if thread is None:
            return
        if thread is not threading.current_thread():
            thread.join(timeout=timeout)
            if thread.is_alive():
                logger.warning(f"{self.name}: thread did not exit within {timeout}s")
        self._thread = None
        logger.debug(f"{self.name}: stopped")

    def _guarded_run(self) -> None:
        try:
            self._run()
        except Exception:
            logger.exception(f"{self.name}: callback raised, stopping")
            self._stop.set()

    def _run(self) -> None:
        raise NotImplementedError


class FrameClock(_ThreadedTask):
    """Variable-delta frame loop: ``callback(dt)`` roughly every *interval*."""

    def __init__(self, callback: Callable[[float], None], interval: float = 1.0 / 60.0,
                 name: str = "frame-clock") -> None:
        super().__init__(interval, name)
        self._callback = callback

    def _run(self) -> None:
        last = time.monotonic()
        while not self._stop.wait(self.interval):
            now = time.monotonic()
            dt = now - last
            last = now
            self._callback(dt)


class PeriodicTask(_ThreadedTask):
    """Fixed-cadence task: ``callback()`` every *interval* seconds."""

    def __init__(self, callback: Callable[[], None], interval: float,
                 name: str = "periodic-task") -> None:
        super().__init__(interval, name)
        self._callback = callback

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            self._callback()
