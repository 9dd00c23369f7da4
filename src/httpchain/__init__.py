"""Public package interface for httpchain."""

from typing import Optional, Union

import httpx

from .body import Body
from .client import Client
from .config import (
    ClientConfig,
    RedirectConfig,
    RetryConfig,
    TelemetryConfig,
    ThrottleConfig,
    TransportBackend,
    UrlErrorPolicy,
)
from .errors import (
    ClientError,
    DecodeError,
    InvalidURLError,
    RedirectLimitError,
    StackFrozenError,
    TransportError,
)
from .headers import Headers
from .middleware import (
    BearerAuth,
    Logger,
    Middleware,
    Next,
    Redirect,
    Retry,
    SetHeaders,
    Telemetry,
)
from .request import Method, Request, RequestBuilder, parse_url
from .response import Response
from .telemetry import InMemoryTelemetrySink, TelemetryPublisher
from .transport import HttpTransport, HttpxTransport, build_transport

Target = Union[str, httpx.URL]


def client(config: Optional[ClientConfig] = None) -> Client:
    """Create a new client with the default transport."""

    return Client(config)


def _unbound(method: Method, target: Target) -> RequestBuilder:
    return RequestBuilder(method, parse_url(target))


def get(target: Target) -> RequestBuilder:
    return _unbound(Method.GET, target)


def head(target: Target) -> RequestBuilder:
    return _unbound(Method.HEAD, target)


def post(target: Target) -> RequestBuilder:
    return _unbound(Method.POST, target)


def put(target: Target) -> RequestBuilder:
    return _unbound(Method.PUT, target)


def delete(target: Target) -> RequestBuilder:
    return _unbound(Method.DELETE, target)


def connect(target: Target) -> RequestBuilder:
    return _unbound(Method.CONNECT, target)


def options(target: Target) -> RequestBuilder:
    return _unbound(Method.OPTIONS, target)


def trace(target: Target) -> RequestBuilder:
    return _unbound(Method.TRACE, target)


def patch(target: Target) -> RequestBuilder:
    return _unbound(Method.PATCH, target)


__all__ = [
    "BearerAuth",
    "Body",
    "Client",
    "ClientConfig",
    "ClientError",
    "DecodeError",
    "Headers",
    "HttpTransport",
    "HttpxTransport",
    "InMemoryTelemetrySink",
    "InvalidURLError",
    "Logger",
    "Method",
    "Middleware",
    "Next",
    "Redirect",
    "RedirectConfig",
    "RedirectLimitError",
    "Request",
    "RequestBuilder",
    "Response",
    "Retry",
    "RetryConfig",
    "SetHeaders",
    "StackFrozenError",
    "Telemetry",
    "TelemetryConfig",
    "TelemetryPublisher",
    "ThrottleConfig",
    "TransportBackend",
    "TransportError",
    "UrlErrorPolicy",
    "build_transport",
    "client",
    "connect",
    "delete",
    "get",
    "head",
    "options",
    "parse_url",
    "patch",
    "post",
    "put",
    "trace",
]
