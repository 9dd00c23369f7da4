"""Exception hierarchy raised by the client."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .request import Request
    from .response import Response


class ClientError(Exception):
    """Base class for every error raised by httpchain itself."""


class InvalidURLError(ClientError, ValueError):
    """A request target could not be parsed into an absolute URL."""

    def __init__(self, target: str, reason: str) -> None:
        super().__init__(f"invalid request target {target!r}: {reason}")
        self.target = target
        self.reason = reason


class StackFrozenError(ClientError, RuntimeError):
    """Middleware was registered on a stack that is already shared or in use."""


class TransportError(ClientError):
    """The transport failed to produce a response."""

    def __init__(self, message: str, *, request: Optional["Request"] = None) -> None:
        super().__init__(message)
        self.request = request


class DecodeError(ClientError):
    """A response body could not be decoded into the requested form."""

    def __init__(self, message: str, *, response: Optional["Response"] = None) -> None:
        super().__init__(message)
        self.response = response


class RedirectLimitError(ClientError):
    """More redirects were returned than the client is configured to follow."""

    def __init__(self, max_redirects: int, *, response: Optional["Response"] = None) -> None:
        super().__init__(f"exceeded maximum of {max_redirects} redirects")
        self.max_redirects = max_redirects
        self.response = response


__all__ = [
    "ClientError",
    "DecodeError",
    "InvalidURLError",
    "RedirectLimitError",
    "StackFrozenError",
    "TransportError",
]
