"""Middleware emitting request lifecycle telemetry events."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Optional

from ..telemetry import TelemetryEvent, TelemetryPublisher
from .base import Next

if TYPE_CHECKING:
    from ..client import Client
    from ..request import Request
    from ..response import Response


class Telemetry:
    """Emit ``request.success`` or ``request.error`` for every pass through the chain."""

    def __init__(self, publisher: Optional[TelemetryPublisher] = None) -> None:
        self.publisher = publisher or TelemetryPublisher()

    async def handle(self, request: "Request", client: "Client", next: Next) -> "Response":
        start = time.perf_counter()
        try:
            response = await next.run(request, client)
        except Exception as exc:
            self._emit("request.error", request, start, error=repr(exc))
            raise
        self._emit("request.success", request, start, status_code=response.status)
        return response

    def _emit(
        self,
        event_name: str,
        request: "Request",
        start: float,
        *,
        status_code: Optional[int] = None,
        error: Optional[str] = None,
    ) -> None:
        headers = None
        if self.publisher.config.include_headers:
            headers = dict(request.headers.iter())
        self.publisher.emit(
            TelemetryEvent(
                event=event_name,
                method=request.method.value,
                url=str(request.url),
                status_code=status_code,
                elapsed_ms=(time.perf_counter() - start) * 1000.0,
                error=error,
                headers=headers,
            )
        )


__all__ = ["Telemetry"]
