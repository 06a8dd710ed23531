"""
Bounded-concurrency dispatch of flush cycles to InfluxDB.

Every non-empty flush cycle is handed to one writer thread. A semaphore of
``concurrent_writes`` permits bounds the number of writers; the permit is
taken on the flushing thread before the writer is submitted, so when
InfluxDB cannot keep up the flush itself blocks and the samples keep piling
up in the buffer instead of in an ever-growing queue of pending writes.
"""

from __future__ import annotations

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Sequence

from ..config.constants import OVERRUN_WARNING
from ..models.points import Point
from ..models.samples import SampleContainer
from ..observability.logging import OutputLogger
from .batch import batch_from_samples
from .buffer import SampleBuffer
from .fields import FieldKindTable


class PointWriter(Protocol):
    """Blocking writer of a batch of points."""

    def write(self, points: Sequence[Point]) -> None:
        ...

    def close(self) -> None:
        ...


class WaitGroup:
    """Counter of outstanding tasks that can be waited on until it drops to zero."""

    def __init__(self) -> None:
        self._count = 0
        self._cond = threading.Condition()

    def add(self, delta: int = 1) -> None:
        with self._cond:
            self._count += delta
            if self._count < 0:
                raise ValueError("negative WaitGroup counter")
            if self._count == 0:
                self._cond.notify_all()

    def done(self) -> None:
        self.add(-1)

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the counter is zero; returns False on timeout."""
        with self._cond:
            return self._cond.wait_for(lambda: self._count == 0, timeout=timeout)

    @property
    def count(self) -> int:
        with self._cond:
            return self._count


@dataclass
class DispatchStats:
    """Counters of completed writes."""
    writes_ok: int = 0
    writes_failed: int = 0
    points_written: int = 0
    points_dropped: int = 0


class Dispatcher:
    """
    Drains the sample buffer and writes each cycle on a bounded writer pool.

    Features:
    - At most ``concurrent_writes`` writes in flight
    - Backpressure on the flushing thread when all permits are taken
    - Outstanding writers tracked for a clean shutdown
    """

    def __init__(
        self,
        buffer: SampleBuffer,
        field_kinds: FieldKindTable,
        writer: PointWriter,
        concurrent_writes: int,
        push_interval: float,
        logger: Optional[OutputLogger] = None
    ):
        """
        Initialize the dispatcher.

        Args:
            buffer: Buffer the samples are drained from
            field_kinds: Tag-to-field promotion table
            writer: Blocking point writer shared by all writer threads
            concurrent_writes: Number of write permits, at least 1
            push_interval: Seconds between flushes, used for overrun warnings
            logger: Structured logger
        """
        if concurrent_writes < 1:
            raise ValueError("concurrent_writes must be at least 1")

        self.buffer = buffer
        self.field_kinds = field_kinds
        self.writer = writer
        self.concurrent_writes = concurrent_writes
        self.push_interval = push_interval
        self.logger = logger or OutputLogger()

        self._permits = threading.Semaphore(concurrent_writes)
        self._inflight = WaitGroup()
        self._executor = ThreadPoolExecutor(
            max_workers=concurrent_writes,
            thread_name_prefix="influxdb-writer"
        )
        self._stats = DispatchStats()
        self._stats_lock = threading.Lock()

    def flush_metrics(self) -> None:
        """
        Drain the buffer and hand the cycle to a writer.

        Blocks while all write permits are in use.
        """
        samples = self.buffer.get_buffered_samples()
        if not samples:
            return

        self._inflight.add(1)
        self._permits.acquire()
        try:
            self._executor.submit(self._write_samples, samples)
        except RuntimeError:
            # Pool already shut down
            self._permits.release()
            self._inflight.done()
            raise

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Wait for every submitted writer to finish."""
        return self._inflight.wait(timeout)

    def close(self) -> None:
        """Wait for outstanding writers and release the writer pool."""
        self._inflight.wait()
        self._executor.shutdown(wait=True)

    @property
    def inflight(self) -> int:
        return self._inflight.count

    def stats(self) -> Dict[str, Any]:
        with self._stats_lock:
            return {
                "writes_ok": self._stats.writes_ok,
                "writes_failed": self._stats.writes_failed,
                "points_written": self._stats.points_written,
                "points_dropped": self._stats.points_dropped,
                "inflight": self._inflight.count,
            }

    def _write_samples(self, samples: List[SampleContainer]) -> None:
        try:
            start = time.monotonic()
            batch: List[Point] = []
            try:
                batch = batch_from_samples(samples, self.field_kinds)
                self.logger.debug(
                    "Sending metrics points...",
                    samples=len(samples),
                    points=len(batch)
                )
                self.writer.write(batch)
            except Exception as e:
                self.logger.error(
                    "Couldn't send metrics points",
                    error=e,
                    elapsed=time.monotonic() - start,
                    points=len(batch)
                )
                self._record(ok=False, points=len(batch))
                return

            elapsed = time.monotonic() - start
            self.logger.debug("Metrics points have been sent", elapsed=elapsed)
            self._record(ok=True, points=len(batch))
            if elapsed > self.push_interval:
                self.logger.warning(OVERRUN_WARNING, t=f"{elapsed:.3f}s")
        finally:
            self._permits.release()
            self._inflight.done()

    def _record(self, ok: bool, points: int) -> None:
        with self._stats_lock:
            if ok:
                self._stats.writes_ok += 1
                self._stats.points_written += points
            else:
                self._stats.writes_failed += 1
                self._stats.points_dropped += points
