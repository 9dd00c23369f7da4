"""Redirect-following middleware."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

import httpx

from ..body import Body
from ..config import RedirectConfig
from ..errors import InvalidURLError, RedirectLimitError
from ..request import Method, parse_url
from .base import Next

if TYPE_CHECKING:
    from ..client import Client
    from ..request import Request
    from ..response import Response

LOGGER = logging.getLogger(__name__)

SENSITIVE_HEADERS = ("Authorization", "Cookie", "Proxy-Authorization")
BODY_HEADERS = ("Content-Type", "Content-Length", "Transfer-Encoding")


class Redirect:
    """Follow 3xx responses carrying a ``Location`` header.

    303 responses, and 301/302 responses to anything but GET or HEAD, are
    followed with a bodiless GET. 307 and 308 keep the method and body, which
    therefore has to be replayable.
    """

    def __init__(self, config: Optional[RedirectConfig] = None) -> None:
        self.config = config or RedirectConfig()

    async def handle(self, request: "Request", client: "Client", next: Next) -> "Response":
        current = request
        redirects = 0
        while True:
            replayable = current.body.is_replayable
            response = await next.run(current.clone() if replayable else current, client)
            if not response.is_redirect:
                return response
            if redirects >= self.config.max_redirects:
                raise RedirectLimitError(self.config.max_redirects, response=response)
            following = self._follow(current, response)
            if following is None:
                return response
            await response.aclose()
            redirects += 1
            LOGGER.debug(
                "Following redirect %d/%d: %d -> %s",
                redirects,
                self.config.max_redirects,
                response.status,
                following.url,
            )
            current = following

    def _follow(self, request: "Request", response: "Response") -> Optional["Request"]:
        location = response.headers["Location"]
        try:
            url = parse_url(request.url.join(location))
        except (InvalidURLError, httpx.InvalidURL):
            LOGGER.debug("Not following redirect to unsupported location %r", location)
            return None
        switch_to_get = response.status == 303 or (
            response.status in (301, 302) and request.method not in (Method.GET, Method.HEAD)
        )
        if not switch_to_get and not request.body.is_replayable:
            # cannot resend a consumed stream; hand the redirect to the caller
            return None

        following = request.clone() if request.body.is_replayable else request
        following.url = url
        if switch_to_get:
            if following.method is not Method.HEAD:
                following.method = Method.GET
            following.body = Body.empty()
            for name in BODY_HEADERS:
                following.headers.remove(name)
        if self.config.strip_sensitive_headers and not _same_origin(request.url, url):
            for name in SENSITIVE_HEADERS:
                following.headers.remove(name)
        return following


def _same_origin(left: httpx.URL, right: httpx.URL) -> bool:
    return (left.scheme, left.host, left.port) == (right.scheme, right.host, right.port)


__all__ = ["Redirect"]
