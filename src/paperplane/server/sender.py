"""ASGI response sending — writes a paperplane Response onto ``send``.

Buffered bodies get ``content-length`` and ``etag`` and may short-circuit
to ``304 Not Modified``. Stream bodies are piped chunk by chunk; an error
mid-stream propagates so the server aborts the connection.
"""

import inspect
import logging
from collections.abc import AsyncIterable, Mapping
from typing import Any

from paperplane._internal.asgi import Message, Send
from paperplane.http.conditional import compute_etag, is_fresh
from paperplane.http.response import Response

logger = logging.getLogger("paperplane.server")

# Stripped from 304 responses: they describe a body that is not sent.
_CONTENT_HEADERS = frozenset(
    {
        "content-encoding",
        "content-language",
        "content-length",
        "content-range",
        "content-type",
        "transfer-encoding",
    }
)


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


class ResponseSink:
    """Guards an ASGI ``send`` for exactly-once response semantics.

    - ``http.response.start`` may be sent only once
    - once the body is complete, further writes are rejected
    - if the peer has gone away (``OSError`` from the server), the sink is
      marked closed and later writes are dropped without error
    """

    __slots__ = ("_send", "closed", "finished", "started")

    def __init__(self, send: Send) -> None:
        self._send = send
        self.started = False
        self.finished = False
        self.closed = False

    async def __call__(self, message: Message) -> None:
        if self.closed:
            return
        if message["type"] == "http.response.start":
            if self.started:
                msg = "response already started"
                raise RuntimeError(msg)
            self.started = True
        elif self.finished:
            msg = "response already finished"
            raise RuntimeError(msg)
        if message["type"] == "http.response.body" and not message.get("more_body", False):
            self.finished = True
        try:
            await self._send(message)
        except OSError:
            logger.debug("client disconnected; dropping %s", message["type"])
            self.closed = True


def _raw_headers(response: Response) -> dict[str, str]:
    """Lower-cased header dict (last value wins for case-variant duplicates)."""
    return {name.lower(): str(value) for name, value in response.headers.items()}


def _encode(headers: Mapping[str, str], response: Response) -> list[tuple[bytes, bytes]]:
    raw = [(name.encode("latin-1"), value.encode("latin-1")) for name, value in headers.items()]
    raw.extend(
        (b"set-cookie", cookie.to_header_value().encode("latin-1")) for cookie in response.cookies
    )
    return raw


async def _close_stream(body: Any) -> None:
    """Release a stream body that will not be iterated."""
    close = getattr(body, "aclose", None) or getattr(body, "close", None)
    if close is None:
        return
    result = close()
    if inspect.isawaitable(result):
        await result


async def _send_not_modified(response: Response, headers: dict[str, str], send: Send) -> None:
    kept = {k: v for k, v in headers.items() if k not in _CONTENT_HEADERS}
    await send(
        {
            "type": "http.response.start",
            "status": 304,
            "headers": _encode(kept, response),
        }
    )
    await send({"type": "http.response.body", "body": b""})


async def send_response(
    response: Response,
    send: Send,
    *,
    method: str = "GET",
    request_headers: Mapping[str, str] | None = None,
) -> None:
    """Translate a Response into ASGI ``send()`` calls.

    *method* and *request_headers* come from the inbound request and drive
    ``HEAD`` handling and conditional GET.
    """
    if response.is_stream:
        await send_streaming_response(
            response, send, method=method, request_headers=request_headers
        )
        return

    headers = _raw_headers(response)
    body = response.body_bytes if _body_allowed(response.status) else b""

    if body:
        headers.setdefault("content-length", str(len(body)))
        headers.setdefault("etag", compute_etag(body))
    elif _body_allowed(response.status):
        headers.setdefault("content-length", "0")

    if _is_conditional_hit(response.status, method, request_headers, headers):
        await _send_not_modified(response, headers, send)
        return

    if method == "HEAD":
        body = b""

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": _encode(headers, response),
        }
    )
    await send({"type": "http.response.body", "body": body})


def _is_conditional_hit(
    status: int,
    method: str,
    request_headers: Mapping[str, str] | None,
    headers: Mapping[str, str],
) -> bool:
    return (
        request_headers is not None
        and method in ("GET", "HEAD")
        and 200 <= status < 300
        and is_fresh(request_headers, headers)
    )


async def send_streaming_response(
    response: Response,
    send: Send,
    *,
    method: str = "GET",
    request_headers: Mapping[str, str] | None = None,
) -> None:
    """Pipe a stream body to ``send`` without buffering.

    Headers go out first, with no ``content-length`` or ``etag`` added.
    Each chunk is sent with ``more_body=True``, then an empty final
    message closes the body. Pulling stops once the peer has gone, and the
    stream is closed either way. Exceptions raised by the stream propagate;
    the status line is already out, so the server aborts the connection.
    """
    headers = _raw_headers(response)
    body = response.body

    if _is_conditional_hit(response.status, method, request_headers, headers):
        await _close_stream(body)
        await _send_not_modified(response, headers, send)
        return

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": _encode(headers, response),
        }
    )

    if not _body_allowed(response.status) or method == "HEAD":
        await _close_stream(body)
    else:
        try:
            await _pipe(body, send)
        finally:
            await _close_stream(body)
        if _peer_gone(send):
            return

    await send({"type": "http.response.body", "body": b"", "more_body": False})


def _peer_gone(send: Send) -> bool:
    return getattr(send, "closed", False)


async def _pipe(body: Any, send: Send) -> None:
    """Send each chunk of *body*; stop pulling once the peer has gone."""
    if isinstance(body, AsyncIterable):
        async for chunk in body:
            if chunk:
                await send(_chunk_message(chunk))
                if _peer_gone(send):
                    return
    else:
        for chunk in body:
            if chunk:
                await send(_chunk_message(chunk))
                if _peer_gone(send):
                    return


def _chunk_message(chunk: str | bytes) -> Message:
    data = chunk.encode("utf-8") if isinstance(chunk, str) else bytes(chunk)
    return {"type": "http.response.body", "body": data, "more_body": True}
