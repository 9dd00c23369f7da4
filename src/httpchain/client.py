"""HTTP client that runs every request through a middleware chain."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Optional, Union

import httpx

from .config import ClientConfig, UrlErrorPolicy
from .errors import InvalidURLError, TransportError
from .middleware.base import Middleware, MiddlewareFn, MiddlewareStack, Next
from .middleware.logger import Logger
from .request import Method, Request, RequestBuilder, parse_url
from .response import Response
from .transport import HttpTransport, build_transport

LOGGER = logging.getLogger(__name__)


class Client:
    """An HTTP client, capable of sending requests and running a middleware stack.

    Cloning a client shares its transport (and therefore its connection pool)
    and the middleware instances, but gives the clone its own stack container
    so further middleware can be registered on it alone. The source stack is
    frozen by the clone, as it is by the first ``send``.
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        transport: Optional[HttpTransport] = None,
        app: Any = None,
        client_options: Optional[dict[str, Any]] = None,
    ) -> None:
        self.config = config or ClientConfig()
        if transport is None:
            transport = build_transport(self.config, app=app, client_options=client_options)
        self._transport = transport
        self._stack = _default_stack(self.config)

    @classmethod
    def with_http_transport(
        cls,
        transport: HttpTransport,
        config: Optional[ClientConfig] = None,
    ) -> "Client":
        """Create a client around an existing transport."""

        return cls(config, transport=transport)

    @property
    def transport(self) -> HttpTransport:
        return self._transport

    @property
    def middleware(self) -> tuple[Middleware, ...]:
        """The middleware chain in traversal order."""

        return tuple(self._stack)

    # ------------------------------------------------------------------
    # Stack management
    # ------------------------------------------------------------------
    def with_middleware(self, middleware: Union[Middleware, MiddlewareFn]) -> "Client":
        """Push middleware onto the stack.

        Raises ``StackFrozenError`` once this client has been cloned or used.
        """

        self._stack.push(middleware)
        return self

    def clone(self) -> "Client":
        clone = Client.__new__(Client)
        clone.config = self.config
        clone._transport = self._transport
        self._stack.freeze()
        clone._stack = self._stack.copy()
        return clone

    __copy__ = clone

    def _bare(self) -> "Client":
        """A client on the same transport carrying only the default stack."""

        bare = Client.__new__(Client)
        bare.config = self.config
        bare._transport = self._transport
        bare._stack = _default_stack(self.config)
        return bare

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------
    def send(self, request: Union[Request, RequestBuilder]) -> Awaitable[Response]:
        """Send a request through the middleware chain.

        The stack is frozen as soon as this is called, before the returned
        awaitable is awaited.
        """

        if isinstance(request, RequestBuilder):
            request = request.build()
        chain = self._stack.freeze()
        return self._dispatch(request, chain)

    async def _dispatch(self, request: Request, chain: tuple[Middleware, ...]) -> Response:
        for name, value in self.config.headers.items():
            request.headers.setdefault(name, value)
        next = Next(chain, self._terminal)
        return await next.run(request, self._bare())

    async def _terminal(self, request: Request, client: "Client") -> Response:
        raw_request = request.to_httpx()
        try:
            raw = await client.transport.send(raw_request)
        except httpx.HTTPError as exc:
            raise TransportError(f"{request.method.value} {request.url} failed: {exc}", request=request) from exc
        return Response.from_httpx(raw, request)

    async def recv_bytes(self, request: Union[Request, RequestBuilder]) -> bytes:
        """Send the request and return the response body as bytes."""

        response = await self.send(request)
        return await response.body_bytes()

    async def recv_string(self, request: Union[Request, RequestBuilder]) -> str:
        """Send the request and return the response body as a string."""

        response = await self.send(request)
        return await response.body_string()

    async def recv_json(self, request: Union[Request, RequestBuilder], model: Any = None) -> Any:
        """Send the request and decode the response body from JSON.

        When ``model`` is given, the decoded value is validated into it.
        """

        response = await self.send(request)
        return await response.body_json(model)

    async def recv_form(self, request: Union[Request, RequestBuilder], model: Any = None) -> Any:
        """Send the request and decode the response body from form encoding."""

        response = await self.send(request)
        return await response.body_form(model)

    # ------------------------------------------------------------------
    # Verb helpers
    # ------------------------------------------------------------------
    def request(self, method: Union[Method, str], target: Union[str, httpx.URL]) -> RequestBuilder:
        """Start building a request bound to a clone of this client.

        The clone freezes this client, so the chain the builder sends through
        is fixed when the builder is created.
        """

        try:
            url = parse_url(target, self.config.base_url)
        except InvalidURLError as exc:
            if self.config.url_errors is UrlErrorPolicy.RAISE:
                raise
            return RequestBuilder(method, None, client=self.clone(), error=exc)
        return RequestBuilder(method, url, client=self.clone())

    def get(self, target: Union[str, httpx.URL]) -> RequestBuilder:
        return self.request(Method.GET, target)

    def head(self, target: Union[str, httpx.URL]) -> RequestBuilder:
        return self.request(Method.HEAD, target)

    def post(self, target: Union[str, httpx.URL]) -> RequestBuilder:
        return self.request(Method.POST, target)

    def put(self, target: Union[str, httpx.URL]) -> RequestBuilder:
        return self.request(Method.PUT, target)

    def delete(self, target: Union[str, httpx.URL]) -> RequestBuilder:
        return self.request(Method.DELETE, target)

    def connect(self, target: Union[str, httpx.URL]) -> RequestBuilder:
        return self.request(Method.CONNECT, target)

    def options(self, target: Union[str, httpx.URL]) -> RequestBuilder:
        return self.request(Method.OPTIONS, target)

    def trace(self, target: Union[str, httpx.URL]) -> RequestBuilder:
        return self.request(Method.TRACE, target)

    def patch(self, target: Union[str, httpx.URL]) -> RequestBuilder:
        return self.request(Method.PATCH, target)

    # ------------------------------------------------------------------
    # Context management
    # ------------------------------------------------------------------
    async def aclose(self) -> None:
        await self._transport.aclose()

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        return f"<Client middleware={len(self._stack)}>"


def _default_stack(config: ClientConfig) -> MiddlewareStack:
    if config.logger:
        return MiddlewareStack([Logger()])
    return MiddlewareStack()


__all__ = ["Client"]
