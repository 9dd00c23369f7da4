"""Transport backends the terminal handler dispatches through."""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

import httpx

from .config import ClientConfig, TransportBackend

LOGGER = logging.getLogger(__name__)


class HttpTransport(Protocol):
    """Accepts a protocol-level request and returns a protocol-level response."""

    async def send(self, request: httpx.Request) -> httpx.Response:  # pragma: no cover - protocol
        ...

    async def aclose(self) -> None:  # pragma: no cover - protocol
        ...


class HttpxTransport:
    """Transport backed by an ``httpx.AsyncClient`` and its connection pool.

    Responses are returned streaming; redirects are left to middleware.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None, **client_options: Any) -> None:
        if client is not None and client_options:
            raise ValueError("pass either an httpx.AsyncClient or client options, not both")
        options = dict(client_options)
        options["follow_redirects"] = False
        self._client = client or httpx.AsyncClient(**options)
        self._closed = False

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client

    async def send(self, request: httpx.Request) -> httpx.Response:
        return await self._client.send(request, stream=True, follow_redirects=False)

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._client.aclose()


def build_transport(
    config: ClientConfig,
    *,
    app: Any = None,
    client_options: Optional[dict[str, Any]] = None,
) -> HttpTransport:
    """Create the transport selected by ``config.transport``."""

    options = dict(client_options or {})
    options.setdefault("timeout", config.timeout)
    if config.transport is TransportBackend.IN_PROCESS:
        if app is None:
            raise ValueError("the in-process transport requires an ASGI app")
        options.setdefault("transport", httpx.ASGITransport(app=app))
    elif app is not None:
        raise ValueError("an ASGI app was given but the network transport is selected")
    LOGGER.debug("Building %s transport", config.transport.value)
    return HttpxTransport(**options)


__all__ = ["HttpTransport", "HttpxTransport", "build_transport"]
