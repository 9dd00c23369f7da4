import httpx

from httpchain.headers import Headers


def test_lookup_is_case_insensitive():
    headers = Headers({"Content-Type": "text/html"})

    assert headers.get("content-type") == "text/html"
    assert headers["CONTENT-TYPE"] == "text/html"
    assert "Content-type" in headers
    assert headers.get("missing") is None


def test_insert_returns_previous_value():
    headers = Headers()

    assert headers.insert("X-Trace", "a") is None
    assert headers.insert("x-trace", "b") == "a"
    assert headers.get("X-Trace") == "b"
    assert len(headers) == 1


def test_iteration_preserves_first_seen_order():
    headers = Headers([("B-Header", "1"), ("A-Header", "2")])
    headers.insert("C-Header", "3")
    headers.insert("b-header", "replaced")

    assert list(headers) == [
        ("b-header", "replaced"),
        ("a-header", "2"),
        ("c-header", "3"),
    ]


def test_remove_and_setdefault():
    headers = Headers({"Authorization": "secret"})

    assert headers.remove("authorization") == "secret"
    assert headers.remove("authorization") is None
    assert headers.setdefault("Accept", "*/*") == "*/*"
    assert headers.setdefault("accept", "text/html") == "*/*"


def test_view_shares_underlying_store():
    raw = httpx.Headers({"Accept": "*/*"})
    headers = Headers(raw)
    headers.insert("X-Extra", "1")

    assert headers.header_map() is raw
    assert raw["x-extra"] == "1"

    copied = headers.copy()
    copied.insert("X-Extra", "2")
    assert raw["x-extra"] == "1"
