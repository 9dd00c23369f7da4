"""Streaming request/response bodies and their decoders."""

from __future__ import annotations

import json
from typing import Any, AsyncIterable, AsyncIterator, Awaitable, Callable, Mapping, Optional, Union
from urllib.parse import parse_qsl, urlencode

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from .errors import DecodeError, TransportError

MIME_BYTES = "application/octet-stream"
MIME_TEXT = "text/plain;charset=utf-8"
MIME_JSON = "application/json"
MIME_FORM = "application/x-www-form-urlencoded"

BodyContent = Union[bytes, AsyncIterable[bytes]]


class Body:
    """A body that is either fully buffered or streamed once from an async iterator."""

    def __init__(
        self,
        content: BodyContent = b"",
        *,
        mime: Optional[str] = None,
        length: Optional[int] = None,
        close: Optional[Callable[[], Awaitable[None]]] = None,
    ) -> None:
        self.mime = mime
        self._close = close
        self._consumed = False
        if isinstance(content, (bytes, bytearray, memoryview)):
            self._buffer: Optional[bytes] = bytes(content)
            self._stream: Optional[AsyncIterable[bytes]] = None
            self.length: Optional[int] = len(self._buffer)
        else:
            self._buffer = None
            self._stream = content
            self.length = length

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------
    @classmethod
    def empty(cls) -> "Body":
        return cls(b"")

    @classmethod
    def from_bytes(cls, data: bytes, *, mime: str = MIME_BYTES) -> "Body":
        return cls(data, mime=mime)

    @classmethod
    def from_string(cls, text: str, *, mime: str = MIME_TEXT) -> "Body":
        return cls(text.encode("utf-8"), mime=mime)

    @classmethod
    def from_json(cls, value: Any) -> "Body":
        if isinstance(value, BaseModel):
            payload = value.model_dump_json().encode("utf-8")
        else:
            payload = json.dumps(value).encode("utf-8")
        return cls(payload, mime=MIME_JSON)

    @classmethod
    def from_form(cls, value: Union[Mapping[str, Any], BaseModel]) -> "Body":
        if isinstance(value, BaseModel):
            value = value.model_dump(mode="json", exclude_none=True)
        return cls(urlencode(value, doseq=True).encode("utf-8"), mime=MIME_FORM)

    # ------------------------------------------------------------------
    # Streaming
    # ------------------------------------------------------------------
    @property
    def is_replayable(self) -> bool:
        """Whether the body can be sent more than once."""

        return self._buffer is not None

    @property
    def is_empty(self) -> bool:
        return self._buffer is not None and not self._buffer

    async def aiter_bytes(self) -> AsyncIterator[bytes]:
        if self._buffer is not None:
            if self._buffer:
                yield self._buffer
            return
        stream = self._stream
        if self._consumed or stream is None:
            raise RuntimeError("body stream has already been consumed")
        self._consumed = True
        try:
            async for chunk in stream:
                yield chunk
        finally:
            await self.aclose()

    async def read(self) -> bytes:
        """Buffer the whole body, caching it for later reads."""

        if self._buffer is not None:
            return self._buffer
        try:
            data = b"".join([chunk async for chunk in self.aiter_bytes()])
        except httpx.HTTPError as exc:
            raise TransportError(f"failed to read body: {exc}") from exc
        self._buffer = data
        self._stream = None
        self.length = len(data)
        return data

    async def aclose(self) -> None:
        close, self._close = self._close, None
        if close is not None:
            await close()

    def transport_content(self) -> Optional[BodyContent]:
        """Return the content in the form httpx accepts for ``httpx.Request``."""

        if self._buffer is not None:
            return self._buffer or None
        return self.aiter_bytes()

    # ------------------------------------------------------------------
    # Decoders
    # ------------------------------------------------------------------
    async def bytes(self) -> bytes:
        return await self.read()

    async def text(self) -> str:
        data = await self.read()
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError(f"body is not valid UTF-8: {exc}") from exc

    async def json(self, model: Any = None) -> Any:
        """Decode the body as JSON, optionally validating it into ``model``."""

        data = await self.read()
        try:
            value = json.loads(data)
        except ValueError as exc:
            raise DecodeError(f"body is not valid JSON: {exc}") from exc
        return _validate(value, model)

    async def form(self, model: Any = None) -> Any:
        """Decode an ``application/x-www-form-urlencoded`` body."""

        text = await self.text()
        try:
            pairs = parse_qsl(text, keep_blank_values=True, strict_parsing=bool(text))
        except ValueError as exc:
            raise DecodeError(f"body is not valid form data: {exc}") from exc
        return _validate(dict(pairs), model)

    def __repr__(self) -> str:
        kind = "buffered" if self._buffer is not None else "streaming"
        return f"<Body {kind} mime={self.mime!r} length={self.length!r}>"


def _validate(value: Any, model: Any) -> Any:
    if model is None:
        return value
    try:
        return TypeAdapter(model).validate_python(value)
    except ValidationError as exc:
        raise DecodeError(f"body does not match {model!r}: {exc}") from exc


__all__ = ["Body", "BodyContent", "MIME_BYTES", "MIME_FORM", "MIME_JSON", "MIME_TEXT"]
