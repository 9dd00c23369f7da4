"""Middleware contract and bundled middleware."""

from .base import (
    Endpoint,
    FunctionMiddleware,
    Middleware,
    MiddlewareFn,
    MiddlewareStack,
    Next,
    as_middleware,
)
from .headers import BearerAuth, SetHeaders
from .logger import Logger, RequestId
from .redirect import Redirect
from .retry import Retry, RetryState
from .telemetry import Telemetry

__all__ = [
    "BearerAuth",
    "Endpoint",
    "FunctionMiddleware",
    "Logger",
    "Middleware",
    "MiddlewareFn",
    "MiddlewareStack",
    "Next",
    "Redirect",
    "RequestId",
    "Retry",
    "RetryState",
    "SetHeaders",
    "Telemetry",
    "as_middleware",
]
