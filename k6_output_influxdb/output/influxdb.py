"""
InfluxDB v2 output for the k6 load-testing engine.

The host creates the output with :class:`OutputParams`, starts it, feeds it
sample containers for the duration of the test and stops it at the end:

    output = InfluxDBOutput(OutputParams(config_argument="http://localhost:8086/k6"))
    output.start()
    output.add_metric_samples([samples])
    output.stop()
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, Mapping, Optional

from ..client.writer import InfluxPointWriter
from ..config.constants import OUTPUT_LABEL
from ..config.loader import JSONConfig, get_consolidated_config, validate_config
from ..config.models import Config
from ..errors import StartError, StopError
from ..models.samples import SampleContainer
from ..observability.logging import OutputLogger
from .buffer import SampleBuffer
from .dispatcher import Dispatcher, PointWriter
from .fields import FieldKindTable, make_field_kinds
from .flusher import PeriodicFlusher


class OutputState(str, Enum):
    """Lifecycle states of an output."""
    UNSTARTED = "unstarted"
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"


@dataclass
class OutputParams:
    """What the host hands to an output on creation."""
    json_config: Optional[JSONConfig] = None
    environment: Mapping[str, str] = field(default_factory=dict)
    config_argument: str = ""
    logger: Optional[logging.Logger] = None


class InfluxDBOutput:
    """
    Buffers samples and pushes them to InfluxDB on a fixed interval.

    ``add_metric_samples`` only touches the in-memory buffer. Every push
    interval the flusher drains the buffer and the dispatcher writes the
    cycle on one of ``concurrent_writes`` writer threads.
    """

    def __init__(
        self,
        params: OutputParams,
        writer_factory: Optional[Callable[[Config], PointWriter]] = None
    ):
        """
        Resolve and validate the configuration and build the collaborators.

        Args:
            params: Host supplied parameters
            writer_factory: Builds the point writer from the config; defaults
                to the InfluxDB client writer

        Raises:
            ConfigError: If the configuration is invalid
        """
        self.params = params
        self.logger = OutputLogger(params.logger)

        config = get_consolidated_config(
            params.json_config, params.environment, params.config_argument
        )
        validate_config(config)
        self.config: Config = config
        self.field_kinds: FieldKindTable = make_field_kinds(config.tags_as_fields or ())

        self.writer = (writer_factory or InfluxPointWriter)(config)
        self.buffer = SampleBuffer()
        self.dispatcher = Dispatcher(
            buffer=self.buffer,
            field_kinds=self.field_kinds,
            writer=self.writer,
            concurrent_writes=config.concurrent_writes,
            push_interval=config.push_interval_seconds,
            logger=self.logger,
        )
        self.periodic_flusher: Optional[PeriodicFlusher] = None
        self._state = OutputState.UNSTARTED
        self._state_lock = threading.Lock()

    @property
    def state(self) -> OutputState:
        return self._state

    def description(self) -> str:
        """Human-readable description of the output."""
        return f"{OUTPUT_LABEL} ({self.config.addr})"

    def start(self) -> None:
        """
        Start the periodic flusher.

        Raises:
            StartError: If the output was already started
        """
        self.logger.debug("Starting...")
        with self._state_lock:
            if self._state is not OutputState.UNSTARTED:
                raise StartError(f"cannot start an output in state {self._state.value}")
            self.periodic_flusher = PeriodicFlusher(
                self.config.push_interval_seconds,
                self.dispatcher.flush_metrics,
            )
            self._state = OutputState.RUNNING
        self.logger.debug("Started")

    def add_metric_samples(self, containers: Iterable[SampleContainer]) -> None:
        """Buffer sample containers until the next flush."""
        self.buffer.add_metric_samples(containers)

    def stop(self) -> None:
        """
        Flush what is left, wait for every writer and close the client.

        Failed writes are logged by the writers and do not make ``stop`` fail.

        Raises:
            StopError: If the output is not running
        """
        self.logger.debug("Stopping...")
        with self._state_lock:
            if self._state is not OutputState.RUNNING:
                raise StopError(f"cannot stop an output in state {self._state.value}")
            self._state = OutputState.STOPPING

        if self.periodic_flusher is not None:
            self.periodic_flusher.stop()
        self.dispatcher.close()
        self.writer.close()

        with self._state_lock:
            self._state = OutputState.STOPPED
        self.logger.debug("Stopped", **self.dispatcher.stats())
