"""Case-insensitive header accessor shared by requests and responses."""

from __future__ import annotations

from typing import Iterable, Iterator, Mapping, Optional, Union

import httpx

HeaderName = str
HeaderValue = str
HeaderTuple = tuple[HeaderName, HeaderValue]
HeaderInput = Union[Mapping[str, str], Iterable[HeaderTuple], httpx.Headers, None]


class Headers:
    """A thin view over an ``httpx.Headers`` store.

    Keys are matched case-insensitively. Iteration yields lower-cased keys in
    the order they were first inserted; replacing a value keeps its position.
    """

    __slots__ = ("_headers",)

    def __init__(self, headers: HeaderInput = None) -> None:
        if isinstance(headers, Headers):
            headers = headers.header_map()
        if isinstance(headers, httpx.Headers):
            self._headers = headers
        else:
            self._headers = httpx.Headers(headers)

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get a header, joining repeated values with a comma."""

        return self._headers.get(key, default)

    def get_all(self, key: str) -> list[str]:
        return self._headers.get_list(key)

    def insert(self, key: str, value: str) -> Optional[str]:
        """Set a header, replacing existing values. Returns the previous value."""

        previous = self._headers.get(key)
        self._headers[key] = value
        return previous

    def remove(self, key: str) -> Optional[str]:
        previous = self._headers.get(key)
        if previous is not None:
            del self._headers[key]
        return previous

    def setdefault(self, key: str, value: str) -> str:
        existing = self._headers.get(key)
        if existing is not None:
            return existing
        self._headers[key] = value
        return value

    def iter(self) -> Iterator[HeaderTuple]:
        """Iterate over all headers in insertion order."""

        return iter(self._headers.multi_items())

    def header_map(self) -> httpx.Headers:
        """Return the underlying ``httpx.Headers`` store."""

        return self._headers

    def copy(self) -> "Headers":
        return Headers(self._headers.copy())

    def __iter__(self) -> Iterator[HeaderTuple]:
        return self.iter()

    def __getitem__(self, key: str) -> str:
        return self._headers[key]

    def __setitem__(self, key: str, value: str) -> None:
        self._headers[key] = value

    def __contains__(self, key: object) -> bool:
        return key in self._headers

    def __len__(self) -> int:
        return len(self._headers.multi_items())

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Headers):
            return self._headers == other._headers
        return NotImplemented

    def __repr__(self) -> str:
        return f"Headers({self._headers.multi_items()!r})"


__all__ = ["HeaderInput", "HeaderName", "HeaderTuple", "HeaderValue", "Headers"]
