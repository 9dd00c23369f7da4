"""Telemetry publishing utilities."""

from __future__ import annotations

import logging
import random
import time
from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional, Protocol

from pydantic import BaseModel, Field

from .config import TelemetryConfig

LOGGER = logging.getLogger(__name__)


class TelemetryEvent(BaseModel):
    """A single request lifecycle event."""

    event: str
    method: str
    url: str
    status_code: Optional[int] = None
    elapsed_ms: Optional[float] = None
    error: Optional[str] = None
    headers: Optional[dict[str, str]] = None
    timestamp: float = Field(default_factory=time.time)


class TelemetrySink(Protocol):
    """Sink that handles telemetry events."""

    def handle(self, event: TelemetryEvent) -> None:  # pragma: no cover - protocol
        ...


class TelemetryPublisher:
    """Publish telemetry events to registered sinks respecting config sample rate."""

    def __init__(
        self,
        config: Optional[TelemetryConfig] = None,
        *,
        random_fn: Callable[[], float] = random.random,
    ) -> None:
        self.config = config or TelemetryConfig()
        self._random = random_fn
        self._sinks: List[TelemetrySink] = []

    def subscribe(self, sink: TelemetrySink) -> None:
        self._sinks.append(sink)

    def unsubscribe(self, sink: TelemetrySink) -> None:
        if sink in self._sinks:
            self._sinks.remove(sink)

    @contextmanager
    def subscribed(self, sink: TelemetrySink) -> Iterator[TelemetrySink]:
        self.subscribe(sink)
        try:
            yield sink
        finally:
            self.unsubscribe(sink)

    def emit(self, event: TelemetryEvent) -> None:
        if not self.config.enabled:
            return
        if self._random() > self.config.sample_rate:
            return
        for sink in list(self._sinks):
            try:
                sink.handle(event)
            except Exception:
                LOGGER.exception("Telemetry sink %r failed handling %s", sink, event.event)


class InMemoryTelemetrySink:
    """Collects telemetry events in memory for diagnostics or testing."""

    def __init__(self) -> None:
        self.events: list[TelemetryEvent] = []

    def handle(self, event: TelemetryEvent) -> None:
        self.events.append(event)


__all__ = [
    "InMemoryTelemetrySink",
    "TelemetryEvent",
    "TelemetryPublisher",
    "TelemetrySink",
]
