"""Immutable HTTP request.

A ``Request`` is built once per connection, after the body has been
fully read, and never changes afterwards. Route parameters are added by
building a new request with ``dataclasses.replace``, not by mutation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from paperplane._internal.asgi import Receive, Scope
from paperplane.http.body import receive_body
from paperplane.http.cookies import parse_cookies
from paperplane.http.headers import Headers
from paperplane.http.query import parse_query


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``body`` is already decoded: a ``str`` for most content types, or the
    parsed value for JSON and form-encoded bodies. ``""`` means no body.

    ``params`` holds path parameters captured by ``routes()``; it is empty
    for requests that did not go through a route table.
    """

    method: str
    url: str
    pathname: str
    protocol: str
    headers: Headers
    cookies: dict[str, str] = field(default_factory=dict)
    query: dict[str, Any] = field(default_factory=dict)
    body: Any = ""
    params: dict[str, str] = field(default_factory=dict)

    # -- Computed properties --

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def secure(self) -> bool:
        """True when the connection arrived over TLS."""
        return self.protocol == "https"

    # -- Factory --

    @classmethod
    def from_scope(cls, scope: Scope, *, body: Any = "", headers: Headers | None = None) -> Request:
        """Create a Request from an ASGI scope and an already-decoded body."""
        if headers is None:
            headers = Headers.from_asgi(scope.get("headers", ()))

        raw_path = scope.get("raw_path")
        pathname = raw_path.decode("latin-1") if raw_path else scope.get("path", "/")
        query_string: bytes = scope.get("query_string", b"")
        url = f"{pathname}?{query_string.decode('latin-1')}" if query_string else pathname

        scheme = scope.get("scheme", "http")
        return cls(
            method=scope["method"].upper(),
            url=url,
            pathname=pathname,
            protocol="https" if scheme in ("https", "wss") else "http",
            headers=headers,
            cookies=parse_cookies(headers.get("cookie")),
            query=parse_query(query_string),
            body=body,
        )


async def build_request(
    scope: Scope,
    receive: Receive,
    *,
    max_body_size: int,
    default_charset: str = "utf-8",
    headers: Headers | None = None,
) -> Request:
    """Build a Request from a raw ASGI connection.

    Drains the body from *receive* before returning, so the handler can
    never read the stream a second time.

    Raises:
        PayloadTooLarge: The body exceeds *max_body_size*.
        UnsupportedMediaType: The declared charset is unknown.
        MalformedInput: The body could not be decoded or parsed.
    """
    if headers is None:
        headers = Headers.from_asgi(scope.get("headers", ()))
    body = await receive_body(
        receive,
        headers.get("content-type"),
        headers.get("content-length"),
        limit=max_body_size,
        default_charset=default_charset,
    )
    return Request.from_scope(scope, body=body, headers=headers)
