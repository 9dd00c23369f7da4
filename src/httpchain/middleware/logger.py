"""Default request/response logging middleware."""

from __future__ import annotations

import itertools
import logging
import time
from typing import TYPE_CHECKING, Optional

from .base import Next

if TYPE_CHECKING:
    from ..client import Client
    from ..request import Request
    from ..response import Response

LOGGER = logging.getLogger(__name__)

_REQUEST_IDS = itertools.count(1)


class RequestId(int):
    """Per-request identifier stored in the request's extension slot."""


class Logger:
    """Log every request and the response (or failure) it produced."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or LOGGER

    async def handle(self, request: "Request", client: "Client", next: Next) -> "Response":
        request_id = request.ext(RequestId)
        if request_id is None:
            request_id = RequestId(next_request_id())
            request.set_ext(request_id)
        self.logger.info(
            "sending request id=%d method=%s url=%s",
            request_id,
            request.method.value,
            request.url,
        )
        start = time.perf_counter()
        try:
            response = await next.run(request, client)
        except Exception as exc:
            self.logger.error(
                "request failed id=%d elapsed_ms=%.1f error=%r",
                request_id,
                _elapsed_ms(start),
                exc,
            )
            raise

        if response.status >= 500:
            level = logging.ERROR
        elif response.status >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO
        self.logger.log(
            level,
            "request completed id=%d status=%d elapsed_ms=%.1f",
            request_id,
            response.status,
            _elapsed_ms(start),
        )
        return response

    def __repr__(self) -> str:
        return f"Logger({self.logger.name!r})"


def next_request_id() -> int:
    return next(_REQUEST_IDS)


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000.0


__all__ = ["Logger", "RequestId"]
