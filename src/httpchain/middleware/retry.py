"""Retry middleware that re-runs the continuation on failure."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Awaitable, Callable, Optional

import anyio

from ..config import RetryConfig, ThrottleConfig
from ..errors import TransportError
from ..throttle import BackoffController
from .base import Next

if TYPE_CHECKING:
    from ..client import Client
    from ..request import Request
    from ..response import Response

LOGGER = logging.getLogger(__name__)


@dataclass
class RetryState:
    """Attempt bookkeeping carried in the request's extension slot."""

    attempt: int = 0
    max_attempts: int = 1


class Retry:
    """Retry transport failures and retryable statuses with exponential backoff.

    Each attempt runs a fresh copy of the request through the rest of the chain.
    Requests with a streaming body are sent once.
    """

    def __init__(
        self,
        config: Optional[RetryConfig] = None,
        throttle: Optional[ThrottleConfig] = None,
        *,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
        random_fn: Optional[Callable[[], float]] = None,
    ) -> None:
        self.config = config or RetryConfig()
        self._backoff = BackoffController(self.config, throttle or ThrottleConfig(), random_fn=random_fn)
        self._sleep = sleep or anyio.sleep

    async def handle(self, request: "Request", client: "Client", next: Next) -> "Response":
        if not request.body.is_replayable:
            return await next.run(request, client)

        max_attempts = self.config.max_attempts
        attempt = 0
        while True:
            attempt += 1
            attempt_request = request.clone()
            attempt_request.set_ext(RetryState(attempt=attempt, max_attempts=max_attempts))
            try:
                response = await next.run(attempt_request, client)
            except TransportError as exc:
                if not self.config.retry_on_transport_errors or attempt >= max_attempts:
                    raise
                delay = self._backoff.backoff_delay(attempt)
                LOGGER.warning(
                    "Retrying %s %s after transport error (attempt %d/%d, delay %.2fs): %s",
                    request.method.value,
                    request.url,
                    attempt,
                    max_attempts,
                    delay,
                    exc,
                )
            else:
                if response.status not in self.config.retry_on_status or attempt >= max_attempts:
                    return response
                delay = self._backoff.backoff_delay(attempt, response)
                LOGGER.warning(
                    "Retrying %s %s after status %d (attempt %d/%d, delay %.2fs)",
                    request.method.value,
                    request.url,
                    response.status,
                    attempt,
                    max_attempts,
                    delay,
                )
                await response.aclose()
            if delay > 0:
                await self._sleep(delay)


__all__ = ["Retry", "RetryState"]
