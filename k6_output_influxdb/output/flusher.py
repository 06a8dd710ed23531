"""Periodic flush scheduler."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class PeriodicFlusher:
    """
    Calls a flush callback every ``period`` seconds on a background thread.

    The callback runs synchronously on the flusher thread, so a slow flush
    delays the next tick instead of overlapping with it. ``stop()`` cancels the
    timer and runs one last flush before returning, so nothing buffered before
    the stop is left behind.
    """

    def __init__(self, period: float, flush_callback: Callable[[], None], name: str = "influxdb-flusher"):
        """
        Create and start the flusher.

        Args:
            period: Seconds between flushes, must be positive
            flush_callback: Function called on every tick and once on stop
            name: Name of the background thread

        Raises:
            ValueError: If the period is not positive
        """
        if period <= 0:
            raise ValueError(f"the flush period should be positive, got {period}")

        self.period = period
        self._flush_callback = flush_callback
        self._stop_event = threading.Event()
        self._stopped = False
        self._stop_lock = threading.Lock()
        self._thread: Optional[threading.Thread] = threading.Thread(
            target=self._run, name=name, daemon=True
        )
        self._thread.start()

    def stop(self) -> None:
        """Stop ticking, run the final flush and wait for it. Safe to call twice."""
        with self._stop_lock:
            if self._stopped:
                return
            self._stopped = True

        self._stop_event.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None

    def _run(self) -> None:
        while not self._stop_event.wait(self.period):
            self._flush()
        # Final flush after cancellation
        self._flush()

    def _flush(self) -> None:
        try:
            self._flush_callback()
        except Exception as e:
            logger.error(f"Error in periodic flush: {e}", exc_info=True)
