"""Tests for paperplane.http.request — building the immutable Request."""

import dataclasses

import pytest

from paperplane.errors import PayloadTooLarge
from paperplane.http.headers import Headers
from paperplane.http.request import Request, build_request


def _scope(
    method: str = "GET",
    path: str = "/",
    query: bytes = b"",
    headers: list[tuple[bytes, bytes]] | None = None,
    scheme: str = "http",
) -> dict:
    return {
        "type": "http",
        "method": method,
        "path": path,
        "raw_path": path.encode("latin-1"),
        "query_string": query,
        "headers": headers or [],
        "scheme": scheme,
    }


def _body(data: bytes = b""):
    sent = False

    async def receive() -> dict:
        nonlocal sent
        if sent:
            return {"type": "http.disconnect"}
        sent = True
        return {"type": "http.request", "body": data, "more_body": False}

    return receive


class TestFromScope:
    def test_basic_fields(self) -> None:
        request = Request.from_scope(_scope(method="get", path="/users", query=b"page=2"))
        assert request.method == "GET"
        assert request.pathname == "/users"
        assert request.url == "/users?page=2"
        assert request.query == {"page": "2"}
        assert request.protocol == "http"
        assert request.params == {}
        assert request.body == ""

    def test_pathname_stays_percent_encoded(self) -> None:
        scope = _scope()
        scope["path"] = "/a b"
        scope["raw_path"] = b"/a%20b"
        request = Request.from_scope(scope)
        assert request.pathname == "/a%20b"

    def test_falls_back_to_path_without_raw_path(self) -> None:
        scope = _scope(path="/plain")
        del scope["raw_path"]
        assert Request.from_scope(scope).pathname == "/plain"

    @pytest.mark.parametrize(("scheme", "protocol"), [("https", "https"), ("wss", "https")])
    def test_secure_schemes(self, scheme: str, protocol: str) -> None:
        request = Request.from_scope(_scope(scheme=scheme))
        assert request.protocol == protocol
        assert request.secure is True

    def test_cookies_and_headers(self) -> None:
        request = Request.from_scope(
            _scope(
                headers=[
                    (b"cookie", b"a=1"),
                    (b"cookie", b"b=2"),
                    (b"content-type", b"text/plain"),
                ]
            )
        )
        assert request.cookies == {"a": "1", "b": "2"}
        assert request.headers["cookie"] == "a=1; b=2"
        assert request.content_type == "text/plain"

    def test_frozen(self) -> None:
        request = Request.from_scope(_scope())
        with pytest.raises(dataclasses.FrozenInstanceError):
            request.method = "POST"  # type: ignore[misc]

    def test_replace_leaves_original_untouched(self) -> None:
        request = Request.from_scope(_scope(path="/users/7"))
        effective = dataclasses.replace(request, params={"id": "7"})
        assert effective.params == {"id": "7"}
        assert request.params == {}


class TestBuildRequest:
    async def test_json_body(self) -> None:
        scope = _scope(
            method="POST",
            headers=[(b"content-type", b"application/json"), (b"content-length", b"9")],
        )
        request = await build_request(scope, _body(b'{"a": 1}\n'), max_body_size=1024)
        assert request.body == {"a": 1}

    async def test_uses_given_headers(self) -> None:
        headers = Headers({"x-test": "yes"})
        request = await build_request(_scope(), _body(), max_body_size=1024, headers=headers)
        assert request.headers is headers

    async def test_oversized_body(self) -> None:
        scope = _scope(method="POST", headers=[(b"content-length", b"2048")])
        with pytest.raises(PayloadTooLarge):
            await build_request(scope, _body(b"x" * 2048), max_body_size=1024)
