"""Retry backoff computation."""

from __future__ import annotations

import random
from typing import Callable, Optional

from .config import RetryConfig, ThrottleConfig
from .response import Response


class BackoffController:
    """Computes the delay before a retry attempt."""

    def __init__(
        self,
        retry: RetryConfig,
        throttle: ThrottleConfig,
        *,
        random_fn: Optional[Callable[[], float]] = None,
    ) -> None:
        self._retry = retry
        self._throttle = throttle
        self._random = random_fn or random.random

    def backoff_delay(self, attempt: int, response: Optional[Response] = None) -> float:
        """Return delay in seconds before the attempt following ``attempt``."""

        retry = self._retry
        throttle = self._throttle

        delay = retry.backoff_factor * (2 ** max(0, attempt - 1))
        if retry.jitter_seconds:
            delay += self._random() * retry.jitter_seconds

        if response is not None and throttle.enabled and throttle.use_server_hints:
            hint = retry_after_seconds(response)
            if hint is not None:
                delay = max(delay, hint)

        if throttle.enabled:
            delay = min(delay, throttle.max_delay_seconds)
        return delay


def retry_after_seconds(response: Response) -> Optional[float]:
    """Parse a numeric ``Retry-After`` header. HTTP-date values are ignored."""

    value = response.headers.get("Retry-After")
    if not value:
        return None
    try:
        seconds = float(value)
    except ValueError:
        return None
    return max(seconds, 0.0)


__all__ = ["BackoffController", "retry_after_seconds"]
