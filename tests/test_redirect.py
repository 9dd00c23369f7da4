import httpx
import pytest

from httpchain.client import Client
from httpchain.config import ClientConfig, RedirectConfig
from httpchain.errors import RedirectLimitError
from httpchain.middleware import BearerAuth, Redirect


def _client(handler) -> Client:
    return Client(
        ClientConfig(logger=False),
        client_options={"transport": httpx.MockTransport(handler)},
    )


@pytest.mark.anyio
async def test_follows_relative_location():
    paths: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        paths.append(request.url.path)
        if request.url.path == "/old":
            return httpx.Response(301, headers={"Location": "/new"})
        return httpx.Response(200, text="moved")

    client = _client(handler).with_middleware(Redirect())
    response = await client.get("https://example.com/old")

    assert response.status == 200
    assert await response.body_string() == "moved"
    assert paths == ["/old", "/new"]


@pytest.mark.anyio
async def test_see_other_switches_to_bodiless_get():
    seen: list[tuple[str, bytes]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.content))
        if request.url.path == "/submit":
            return httpx.Response(303, headers={"Location": "/result"})
        return httpx.Response(200)

    client = _client(handler).with_middleware(Redirect())
    await client.post("https://example.com/submit").body_string("form")

    assert seen == [("POST", b"form"), ("GET", b"")]


@pytest.mark.anyio
async def test_temporary_redirect_keeps_method_and_body():
    seen: list[tuple[str, bytes]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.content))
        if request.url.path == "/upload":
            return httpx.Response(307, headers={"Location": "/upload-v2"})
        return httpx.Response(201)

    client = _client(handler).with_middleware(Redirect())
    response = await client.put("https://example.com/upload").body_bytes(b"data")

    assert response.status == 201
    assert seen == [("PUT", b"data"), ("PUT", b"data")]


@pytest.mark.anyio
async def test_redirect_limit_raises():
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(302, headers={"Location": "/loop"})

    client = _client(handler).with_middleware(Redirect(RedirectConfig(max_redirects=2)))

    with pytest.raises(RedirectLimitError) as info:
        await client.get("https://example.com/loop")
    assert len(calls) == 3
    assert info.value.response.status == 302


@pytest.mark.anyio
async def test_cross_origin_redirect_strips_credentials():
    auth: list[str | None] = []

    def handler(request: httpx.Request) -> httpx.Response:
        auth.append(request.headers.get("Authorization"))
        if request.url.host == "example.com":
            return httpx.Response(302, headers={"Location": "https://cdn.example.net/file"})
        return httpx.Response(200)

    client = _client(handler).with_middleware(BearerAuth("token")).with_middleware(Redirect())
    await client.get("https://example.com/file")

    assert auth == ["Bearer token", None]


@pytest.mark.anyio
async def test_unsupported_location_returns_redirect_response():
    calls: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(str(request.url))
        return httpx.Response(302, headers={"Location": "ftp://files.example.com/report.csv"})

    client = _client(handler).with_middleware(Redirect())
    response = await client.get("https://example.com/report")

    assert response.status == 302
    assert response.header("Location") == "ftp://files.example.com/report.csv"
    assert calls == ["https://example.com/report"]
