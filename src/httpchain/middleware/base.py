"""Middleware contract, the continuation that drives it, and the stack container."""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Iterable, Optional, Protocol, Union, runtime_checkable

from ..errors import StackFrozenError

if TYPE_CHECKING:
    from ..client import Client
    from ..request import Request
    from ..response import Response

Endpoint = Callable[["Request", "Client"], Awaitable["Response"]]
MiddlewareFn = Callable[["Request", "Client", "Next"], Awaitable["Response"]]


@runtime_checkable
class Middleware(Protocol):
    """Intercepts a request on its way to the transport.

    ``handle`` may change the request, call ``await next.run(request, client)``
    zero, one or several times, and change the response it gets back. Not
    calling ``next`` short-circuits the chain; the middleware then has to
    return a response or raise itself.
    """

    async def handle(self, request: "Request", client: "Client", next: "Next") -> "Response":
        ...  # pragma: no cover - protocol


class FunctionMiddleware:
    """Adapts a plain ``async def fn(request, client, next)`` to the middleware contract."""

    __slots__ = ("fn",)

    def __init__(self, fn: MiddlewareFn) -> None:
        self.fn = fn

    async def handle(self, request: "Request", client: "Client", next: "Next") -> "Response":
        return await self.fn(request, client, next)

    def __repr__(self) -> str:
        return f"FunctionMiddleware({getattr(self.fn, '__qualname__', self.fn)!r})"


def as_middleware(obj: Union[Middleware, MiddlewareFn]) -> Middleware:
    """Return ``obj`` as a middleware instance, wrapping bare coroutine functions."""

    if isinstance(obj, Middleware):
        return obj
    if inspect.iscoroutinefunction(obj) or inspect.iscoroutinefunction(getattr(obj, "__call__", None)):
        return FunctionMiddleware(obj)
    raise TypeError(f"{obj!r} is neither a middleware nor an async function")


class Next:
    """The remainder of a middleware chain plus its terminal handler.

    A ``Next`` is an immutable value: running it never changes it, so a
    middleware may run the same continuation repeatedly (for retries).
    """

    __slots__ = ("_middleware", "_endpoint", "_cursor")

    def __init__(self, middleware: tuple[Middleware, ...], endpoint: Endpoint, cursor: int = 0) -> None:
        self._middleware = middleware
        self._endpoint = endpoint
        self._cursor = cursor

    @property
    def remaining(self) -> int:
        return len(self._middleware) - self._cursor

    async def run(self, request: "Request", client: "Client") -> "Response":
        """Invoke the next middleware, or the terminal handler once none remain."""

        if self._cursor < len(self._middleware):
            current = self._middleware[self._cursor]
            rest = Next(self._middleware, self._endpoint, self._cursor + 1)
            return await current.handle(request, client, rest)
        return await self._endpoint(request, client)

    def __repr__(self) -> str:
        return f"<Next remaining={self.remaining}>"


class MiddlewareStack:
    """Ordered middleware container that becomes read-only once shared or used."""

    __slots__ = ("_items", "_frozen")

    def __init__(self, middleware: Optional[Iterable[Middleware]] = None) -> None:
        self._items: list[Middleware] = list(middleware or [])
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def push(self, middleware: Any) -> None:
        if self._frozen:
            raise StackFrozenError(
                "Registering middleware is not possible after the Client has been used or cloned"
            )
        self._items.append(as_middleware(middleware))

    def freeze(self) -> tuple[Middleware, ...]:
        """Freeze the container and return the chain as an immutable snapshot."""

        self._frozen = True
        return tuple(self._items)

    def copy(self) -> "MiddlewareStack":
        """Return an unfrozen container holding the same middleware instances."""

        return MiddlewareStack(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(tuple(self._items))


__all__ = [
    "Endpoint",
    "FunctionMiddleware",
    "Middleware",
    "MiddlewareFn",
    "MiddlewareStack",
    "Next",
    "as_middleware",
]
