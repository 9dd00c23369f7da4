import httpx
import pytest

from httpchain.body import Body
from httpchain.client import Client
from httpchain.config import ClientConfig, RetryConfig, ThrottleConfig
from httpchain.errors import TransportError
from httpchain.middleware import Retry, RetryState

URL = "https://example.com/data"


def _client(handler) -> Client:
    return Client(
        ClientConfig(logger=False),
        client_options={"transport": httpx.MockTransport(handler)},
    )


def _retry(max_attempts: int, delays: list[float]) -> Retry:
    async def sleep(delay: float) -> None:
        delays.append(delay)

    return Retry(
        RetryConfig(max_attempts=max_attempts, backoff_factor=0.01, jitter_seconds=0.0),
        ThrottleConfig(enabled=False),
        sleep=sleep,
    )


@pytest.mark.anyio
async def test_retry_recovers_after_two_transport_failures():
    calls: list[httpx.Request] = []
    delays: list[float] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if len(calls) < 3:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, text="ok")

    client = _client(handler).with_middleware(_retry(3, delays))
    response = await client.get(URL)

    assert response.status == 200
    assert await response.body_string() == "ok"
    assert len(calls) == 3
    assert delays == [0.01, 0.02]


@pytest.mark.anyio
async def test_retry_gives_up_after_max_attempts():
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler).with_middleware(_retry(2, []))

    with pytest.raises(TransportError):
        await client.get(URL)
    assert len(calls) == 2


@pytest.mark.anyio
async def test_retry_on_status_returns_last_response():
    statuses = iter([503, 503, 503])

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(next(statuses))

    client = _client(handler).with_middleware(_retry(3, []))
    response = await client.get(URL)

    assert response.status == 503


@pytest.mark.anyio
async def test_retry_does_not_retry_success_or_client_errors():
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(404)

    client = _client(handler).with_middleware(_retry(3, []))
    response = await client.get(URL)

    assert response.status == 404
    assert len(calls) == 1


@pytest.mark.anyio
async def test_retry_state_is_visible_downstream():
    states: list[RetryState] = []

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502 if len(states) < 3 else 200)

    async def observe(request, client, next):
        states.append(request.ext(RetryState))
        return await next.run(request, client)

    client = _client(handler).with_middleware(_retry(3, [])).with_middleware(observe)
    await client.get(URL)

    assert [state.attempt for state in states] == [1, 2, 3]
    assert all(state.max_attempts == 3 for state in states)


@pytest.mark.anyio
async def test_retry_uses_server_hint():
    delays: list[float] = []
    statuses = iter([429, 200])

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(next(statuses), headers={"Retry-After": "1.5"})

    async def sleep(delay: float) -> None:
        delays.append(delay)

    retry = Retry(
        RetryConfig(max_attempts=2, backoff_factor=0.1, jitter_seconds=0.0),
        ThrottleConfig(enabled=True, use_server_hints=True, max_delay_seconds=5.0),
        sleep=sleep,
    )
    client = _client(handler).with_middleware(retry)

    assert (await client.get(URL)).status == 200
    assert delays == [1.5]


@pytest.mark.anyio
async def test_streaming_body_is_sent_once():
    calls: list[httpx.Request] = []

    async def stream():
        yield b"payload"

    async def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        await request.aread()
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler).with_middleware(_retry(3, []))

    with pytest.raises(TransportError):
        await client.post(URL).body(Body(stream()))
    assert len(calls) == 1
