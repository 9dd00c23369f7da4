from httpchain.config import RetryConfig, ThrottleConfig
from httpchain.response import Response
from httpchain.throttle import BackoffController, retry_after_seconds


def test_backoff_with_jitter_and_server_hint():
    retry = RetryConfig(max_attempts=3, backoff_factor=1.0, jitter_seconds=1.0)
    throttle = ThrottleConfig(enabled=True, max_delay_seconds=5.0, use_server_hints=True)

    controller = BackoffController(retry, throttle, random_fn=lambda: 0.5)
    response = Response(429, headers={"Retry-After": "2"})

    delay = controller.backoff_delay(attempt=2, response=response)

    # base: 1 * 2^(2-1) = 2, jitter adds 0.5, server hint of 2 is lower
    assert 2.49 <= delay <= 2.51


def test_server_hint_raises_delay_up_to_cap():
    retry = RetryConfig(backoff_factor=0.1, jitter_seconds=0.0)
    throttle = ThrottleConfig(enabled=True, max_delay_seconds=3.0)
    controller = BackoffController(retry, throttle)

    assert controller.backoff_delay(1, Response(503, headers={"Retry-After": "2"})) == 2.0
    assert controller.backoff_delay(1, Response(503, headers={"Retry-After": "30"})) == 3.0


def test_throttle_disabled_ignores_hints_and_cap():
    controller = BackoffController(
        RetryConfig(backoff_factor=4.0, jitter_seconds=0.0),
        ThrottleConfig(enabled=False, max_delay_seconds=1.0),
    )

    assert controller.backoff_delay(1) == 4.0
    assert controller.backoff_delay(3, Response(429, headers={"Retry-After": "60"})) == 16.0


def test_retry_after_ignores_http_dates():
    assert retry_after_seconds(Response(503, headers={"Retry-After": "Wed, 21 Oct 2015 07:28:00 GMT"})) is None
    assert retry_after_seconds(Response(503)) is None
    assert retry_after_seconds(Response(503, headers={"Retry-After": "-5"})) == 0.0
