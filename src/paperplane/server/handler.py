"""Per-connection request pipeline.

The only component that touches raw ASGI directly. Builds the Request,
calls the handler, routes failures through the error normalizer, and
writes exactly one response.
"""

import logging

from paperplane._internal.asgi import Receive, Scope, Send
from paperplane._internal.invoke import invoke
from paperplane._internal.types import Handler
from paperplane.config import AppConfig
from paperplane.http.headers import Headers
from paperplane.http.request import build_request
from paperplane.http.response import Response
from paperplane.server.errors import error_response, normalize_error
from paperplane.server.sender import ResponseSink, send_response

logger = logging.getLogger("paperplane.server")


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    handler: Handler,
    config: AppConfig,
) -> None:
    """Process a single HTTP connection through the full pipeline.

    build request → handler → (normalize on failure) → write response.
    A failure while building the request skips the handler entirely.
    Failures while writing are not normalized again; they propagate and
    the server tears down the connection.
    """
    if scope["type"] != "http":
        return

    method = scope["method"].upper()
    path = scope.get("path", "/")
    headers = Headers.from_asgi(scope.get("headers", ()))
    sink = ResponseSink(send)

    try:
        request = await build_request(
            scope,
            receive,
            max_body_size=config.max_content_length,
            default_charset=config.default_charset,
            headers=headers,
        )
        response = await invoke(handler, request)
        if not isinstance(response, Response):
            msg = f"Handler returned {type(response).__name__}, expected a Response"
            raise TypeError(msg)
    except Exception as exc:
        error = normalize_error(exc)
        if error.status >= 500:
            logger.exception("%d %s %s", error.status, method, path)
        else:
            logger.debug("%d %s %s: %s", error.status, method, path, error.body["message"])
        response = error_response(error)

    await send_response(response, sink, method=method, request_headers=headers)
