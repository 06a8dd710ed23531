"""Thread-safe buffer between the sample producers and the flusher."""

from __future__ import annotations

import threading
from typing import Iterable, List

from ..models.samples import SampleContainer


class SampleBuffer:
    """
    Unbounded accumulator of sample containers.

    ``add_metric_samples`` may be called from any number of producer threads;
    ``get_buffered_samples`` swaps the buffer out atomically.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._buffer: List[SampleContainer] = []

    def add_metric_samples(self, containers: Iterable[SampleContainer]) -> None:
        """Append a group of sample containers, keeping their order."""
        containers = list(containers)
        if not containers:
            return
        with self._lock:
            self._buffer.extend(containers)

    def get_buffered_samples(self) -> List[SampleContainer]:
        """Return everything buffered so far and start a new, empty buffer."""
        with self._lock:
            buffered, self._buffer = self._buffer, []
        return buffered

    def __len__(self) -> int:
        with self._lock:
            return len(self._buffer)
