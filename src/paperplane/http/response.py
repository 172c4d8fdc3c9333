"""HTTP response value and response helpers.

``Response`` is a plain frozen value; each ``.with_*()`` call returns a
new one. The body decides how the response is written:

- ``None`` or empty → no body, ``content-length: 0``
- ``str`` / ``bytes`` → buffered, with ``content-length`` and ``etag``
- async iterable or iterator of chunks → streamed as-is

Helpers cover the common shapes::

    html("<h1>hi</h1>")
    json({"a": 1}, status=201)
    redirect("/login")
    send("plain text", status=202)
"""

import json as json_module
from collections.abc import AsyncIterable, Iterator, Mapping
from dataclasses import dataclass, field, replace
from typing import Any, TypeAlias

from paperplane.http.cookies import SetCookie

Chunk: TypeAlias = bytes | str
Body: TypeAlias = str | bytes | bytearray | AsyncIterable[Chunk] | Iterator[Chunk] | None


def is_stream(body: object) -> bool:
    """True when *body* is a lazy chunk stream rather than a buffer."""
    if isinstance(body, (str, bytes, bytearray)):
        return False
    return isinstance(body, (AsyncIterable, Iterator))


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations.

    Construct with a body, then chain ``.with_*()`` calls to set status,
    headers, and cookies::

        Response("created", status=201).with_header("Location", "/items/7")
    """

    body: Body = None
    status: int = 200
    headers: Mapping[str, str] = field(default_factory=dict)
    cookies: tuple[SetCookie, ...] = ()

    def __post_init__(self) -> None:
        body = self.body
        if not (body is None or isinstance(body, (str, bytes, bytearray)) or is_stream(body)):
            msg = (
                f"Response body must be str, bytes, an iterator or async iterable "
                f"of chunks, or None; got {type(body).__name__}"
            )
            raise TypeError(msg)
        if isinstance(self.status, bool) or not isinstance(self.status, int):
            msg = f"Response status must be an int, got {type(self.status).__name__}"
            raise TypeError(msg)
        object.__setattr__(self, "headers", dict(self.headers))

    # -- Chainable transformations --

    def with_status(self, status: int) -> "Response":
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> "Response":
        """Return a new Response with *name* set, replacing any existing value.

        Header names are matched case-insensitively.
        """
        lowered = name.lower()
        headers = {k: v for k, v in self.headers.items() if k.lower() != lowered}
        headers[name] = value
        return replace(self, headers=headers)

    def with_headers(self, headers: Mapping[str, str]) -> "Response":
        """Return a new Response with every header in *headers* set."""
        response = self
        for name, value in headers.items():
            response = response.with_header(name, value)
        return response

    def with_cookie(
        self,
        name: str,
        value: str,
        *,
        max_age: int | None = None,
        path: str = "/",
        domain: str | None = None,
        secure: bool = False,
        httponly: bool = True,
        samesite: str = "lax",
    ) -> "Response":
        """Return a new Response with an additional Set-Cookie."""
        cookie = SetCookie(
            name=name,
            value=value,
            max_age=max_age,
            path=path,
            domain=domain,
            secure=secure,
            httponly=httponly,
            samesite=samesite,
        )
        return replace(self, cookies=(*self.cookies, cookie))

    def without_cookie(self, name: str, path: str = "/") -> "Response":
        """Return a new Response that deletes a cookie (Max-Age=0)."""
        cookie = SetCookie(name=name, value="", max_age=0, path=path)
        return replace(self, cookies=(*self.cookies, cookie))

    def header(self, name: str) -> str | None:
        """Case-insensitive header lookup."""
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None

    # -- Body helpers --

    @property
    def is_stream(self) -> bool:
        return is_stream(self.body)

    @property
    def body_bytes(self) -> bytes:
        """Buffered body as bytes. Empty for streams and missing bodies."""
        if not self.body or is_stream(self.body):
            return b""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return bytes(self.body)  # type: ignore[arg-type]


# -- Helpers --


def send(body: Body = None, status: int = 200) -> Response:
    """A plain response with no content type of its own."""
    return Response(body=body, status=status)


def html(body: Body, status: int = 200) -> Response:
    """A ``text/html`` response."""
    return Response(body=body, status=status, headers={"content-type": "text/html"})


def json(value: Any, status: int = 200) -> Response:
    """A compact ``application/json`` response for any JSON-serializable value."""
    body = json_module.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return Response(body=body, status=status, headers={"content-type": "application/json"})


def redirect(location: str, status: int = 302) -> Response:
    """A redirect to *location* with an empty body."""
    return Response(body="", status=status, headers={"location": location})
