"""Header and auth injection middleware."""

from __future__ import annotations

from typing import TYPE_CHECKING, Mapping

from .base import Next

if TYPE_CHECKING:
    from ..client import Client
    from ..request import Request
    from ..response import Response


class SetHeaders:
    """Add fixed headers to every outgoing request.

    With ``override=False`` headers the request already carries are kept.
    """

    def __init__(self, headers: Mapping[str, str], *, override: bool = True) -> None:
        self.headers = dict(headers)
        self.override = override

    async def handle(self, request: "Request", client: "Client", next: Next) -> "Response":
        for name, value in self.headers.items():
            if self.override:
                request.headers.insert(name, value)
            else:
                request.headers.setdefault(name, value)
        return await next.run(request, client)


class BearerAuth(SetHeaders):
    """Inject an ``Authorization: Bearer`` header."""

    def __init__(self, token: str) -> None:
        if not token:
            raise ValueError("token must be non-empty")
        super().__init__({"Authorization": f"Bearer {token}"})

    def __repr__(self) -> str:
        return "BearerAuth(token=***)"


__all__ = ["BearerAuth", "SetHeaders"]
