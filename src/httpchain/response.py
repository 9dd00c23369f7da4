"""Response values returned up the middleware chain."""

from __future__ import annotations

from typing import Any, Optional, TypeVar

import httpx

from .body import Body
from .errors import DecodeError
from .headers import HeaderInput, Headers
from .request import Request

T = TypeVar("T")


class Response:
    """An HTTP response travelling back up the middleware chain."""

    def __init__(
        self,
        status: int,
        *,
        headers: HeaderInput = None,
        body: Optional[Body] = None,
        version: str = "HTTP/1.1",
        request: Optional[Request] = None,
    ) -> None:
        self.status = status
        self.headers = Headers(headers)
        self.body = body or Body.empty()
        self.version = version
        self.request = request
        self._extensions: dict[type, Any] = {}

    @classmethod
    def from_httpx(cls, raw: httpx.Response, request: Optional[Request] = None) -> "Response":
        """Wrap a transport response without buffering its body."""

        body = Body(
            raw.aiter_bytes(),
            mime=raw.headers.get("content-type"),
            length=_content_length(raw),
            close=raw.aclose,
        )
        return cls(
            raw.status_code,
            headers=raw.headers,
            body=body,
            version=raw.http_version,
            request=request,
        )

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 400

    @property
    def is_redirect(self) -> bool:
        return self.status in (301, 302, 303, 307, 308) and "location" in self.headers

    def header(self, name: str) -> Optional[str]:
        return self.headers.get(name)

    def set_header(self, name: str, value: str) -> Optional[str]:
        return self.headers.insert(name, value)

    def ext(self, kind: type[T]) -> Optional[T]:
        return self._extensions.get(kind)

    def set_ext(self, value: Any) -> Any:
        previous = self._extensions.get(type(value))
        self._extensions[type(value)] = value
        return previous

    # ------------------------------------------------------------------
    # Body helpers
    # ------------------------------------------------------------------
    async def body_bytes(self) -> bytes:
        return await self.body.bytes()

    async def body_string(self) -> str:
        try:
            return await self.body.text()
        except DecodeError as exc:
            exc.response = self
            raise

    async def body_json(self, model: Any = None) -> Any:
        try:
            return await self.body.json(model)
        except DecodeError as exc:
            exc.response = self
            raise

    async def body_form(self, model: Any = None) -> Any:
        try:
            return await self.body.form(model)
        except DecodeError as exc:
            exc.response = self
            raise

    async def aclose(self) -> None:
        await self.body.aclose()

    def __repr__(self) -> str:
        return f"<Response [{self.status}]>"


def _content_length(raw: httpx.Response) -> Optional[int]:
    value = raw.headers.get("content-length")
    if value is None or not value.isdigit():
        return None
    return int(value)


__all__ = ["Response"]
