"""Request values and the fluent request builder."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Generator, Mapping, Optional, TypeVar, Union

import httpx

from .body import Body
from .errors import InvalidURLError
from .headers import HeaderInput, Headers

if TYPE_CHECKING:
    from .client import Client
    from .response import Response

T = TypeVar("T")

ALLOWED_SCHEMES = frozenset({"http", "https"})


class Method(str, Enum):
    """HTTP request methods."""

    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    CONNECT = "CONNECT"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"
    PATCH = "PATCH"


def parse_url(target: Union[str, httpx.URL], base_url: Optional[str] = None) -> httpx.URL:
    """Parse ``target`` into an absolute http(s) URL, joining it onto ``base_url``."""

    try:
        url = target if isinstance(target, httpx.URL) else httpx.URL(target)
        if url.is_relative_url and base_url:
            url = httpx.URL(base_url).join(url)
    except httpx.InvalidURL as exc:
        raise InvalidURLError(str(target), str(exc)) from exc
    if url.is_relative_url or not url.host:
        raise InvalidURLError(str(target), "URL must be absolute")
    if url.scheme not in ALLOWED_SCHEMES:
        raise InvalidURLError(str(target), f"unsupported scheme {url.scheme!r}")
    return url


class Request:
    """An HTTP request travelling down the middleware chain."""

    def __init__(
        self,
        method: Union[Method, str],
        url: Union[str, httpx.URL],
        *,
        headers: HeaderInput = None,
        body: Optional[Body] = None,
    ) -> None:
        self.method = Method(method.upper()) if isinstance(method, str) else method
        self.url = parse_url(url)
        self.headers = Headers(headers)
        self.body = body or Body.empty()
        self._extensions: dict[type, Any] = {}

    # ------------------------------------------------------------------
    # Headers
    # ------------------------------------------------------------------
    def header(self, name: str) -> Optional[str]:
        return self.headers.get(name)

    def set_header(self, name: str, value: str) -> Optional[str]:
        return self.headers.insert(name, value)

    # ------------------------------------------------------------------
    # Typed extension slot
    # ------------------------------------------------------------------
    def ext(self, kind: type[T]) -> Optional[T]:
        """Return the extension stored for ``kind``, if any."""

        return self._extensions.get(kind)

    def set_ext(self, value: Any) -> Any:
        """Store ``value`` keyed by its type. Returns the value it replaced."""

        previous = self._extensions.get(type(value))
        self._extensions[type(value)] = value
        return previous

    def remove_ext(self, kind: type[T]) -> Optional[T]:
        return self._extensions.pop(kind, None)

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------
    def clone(self) -> "Request":
        """Copy the request so it can be dispatched again.

        Extensions are shallow-copied; the body is shared and must be replayable.
        """

        if not self.body.is_replayable:
            raise RuntimeError("cannot clone a request with a streaming body")
        clone = Request(self.method, self.url, headers=self.headers.copy(), body=self.body)
        clone._extensions = dict(self._extensions)
        return clone

    def to_httpx(self) -> httpx.Request:
        headers = self.headers.header_map().copy()
        if self.body.mime and "content-type" not in headers:
            headers["Content-Type"] = self.body.mime
        return httpx.Request(
            self.method.value,
            self.url,
            headers=headers,
            content=self.body.transport_content(),
        )

    def __repr__(self) -> str:
        return f"<Request [{self.method.value} {self.url}]>"


class RequestBuilder:
    """Fluent request construction bound to an optional client.

    Awaiting a builder sends it. Builders without a client dispatch through a
    short-lived default client and return a fully buffered response.
    """

    def __init__(
        self,
        method: Union[Method, str],
        url: Optional[Union[str, httpx.URL]],
        *,
        client: Optional["Client"] = None,
        error: Optional[InvalidURLError] = None,
    ) -> None:
        self._client = client
        self._error = error
        self._request: Optional[Request] = None
        if error is None:
            if url is None:
                raise ValueError("RequestBuilder needs a url unless it carries a deferred error")
            self._request = Request(method, url)

    @property
    def client(self) -> Optional["Client"]:
        return self._client

    def with_client(self, client: "Client") -> "RequestBuilder":
        self._client = client
        return self

    def _pending(self) -> Request:
        if self._error is not None:
            raise self._error
        if self._request is None:
            raise RuntimeError("RequestBuilder has no pending request")
        return self._request

    def header(self, name: str, value: str) -> "RequestBuilder":
        self._pending().headers.insert(name, value)
        return self

    def headers(self, headers: Mapping[str, str]) -> "RequestBuilder":
        request = self._pending()
        for name, value in headers.items():
            request.headers.insert(name, value)
        return self

    def content_type(self, mime: str) -> "RequestBuilder":
        return self.header("Content-Type", mime)

    def query(self, params: Mapping[str, Any]) -> "RequestBuilder":
        request = self._pending()
        request.url = request.url.copy_merge_params(params)
        return self

    def body(self, body: Body) -> "RequestBuilder":
        self._pending().body = body
        return self

    def body_bytes(self, data: bytes) -> "RequestBuilder":
        return self.body(Body.from_bytes(data))

    def body_string(self, text: str) -> "RequestBuilder":
        return self.body(Body.from_string(text))

    def body_json(self, value: Any) -> "RequestBuilder":
        return self.body(Body.from_json(value))

    def body_form(self, value: Any) -> "RequestBuilder":
        return self.body(Body.from_form(value))

    def ext(self, value: Any) -> "RequestBuilder":
        self._pending().set_ext(value)
        return self

    def build(self) -> Request:
        """Return the built request, raising any deferred URL error."""

        return self._pending()

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------
    async def send(self) -> "Response":
        request = self.build()
        if self._client is not None:
            return await self._client.send(request)

        from .client import Client

        async with Client() as client:
            response = await client.send(request)
            await response.body.read()
            return response

    async def recv_bytes(self) -> bytes:
        response = await self.send()
        return await response.body_bytes()

    async def recv_string(self) -> str:
        response = await self.send()
        return await response.body_string()

    async def recv_json(self, model: Any = None) -> Any:
        response = await self.send()
        return await response.body_json(model)

    async def recv_form(self, model: Any = None) -> Any:
        response = await self.send()
        return await response.body_form(model)

    def __await__(self) -> Generator[Any, None, "Response"]:
        return self.send().__await__()

    def __repr__(self) -> str:
        if self._error is not None:
            return f"<RequestBuilder error={self._error}>"
        return f"<RequestBuilder {self._request!r}>"


__all__ = ["ALLOWED_SCHEMES", "Method", "Request", "RequestBuilder", "parse_url"]
