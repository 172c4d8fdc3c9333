"""Request body buffering, decoding, and content-negotiated parsing.

The body is read once, in full, before the handler runs. Everything that
can go wrong here maps to a 4xx failure:

- too many bytes → ``PayloadTooLarge`` (413)
- unknown charset → ``UnsupportedMediaType`` (415)
- undecodable bytes, bad JSON, size mismatch, aborted upload →
  ``MalformedInput`` (400)
"""

import codecs
import json
from typing import Any

from paperplane._internal.asgi import Receive
from paperplane.errors import MalformedInput, PayloadTooLarge, UnsupportedMediaType
from paperplane.http.query import parse_query

FORM_TYPE = "application/x-www-form-urlencoded"


def parse_media_type(content_type: str | None) -> tuple[str, dict[str, str]]:
    """Split a ``Content-Type`` value into its media type and parameters.

    ``"application/json; charset=UTF-8"`` →
    ``("application/json", {"charset": "UTF-8"})``. The media type and
    parameter names are lower-cased; quoted values are unquoted.
    """
    if not content_type:
        return "", {}
    media_type, *raw_params = content_type.split(";")
    params: dict[str, str] = {}
    for raw in raw_params:
        name, sep, value = raw.partition("=")
        if not sep:
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] == '"':
            value = value[1:-1]
        params[name.strip().lower()] = value
    return media_type.strip().lower(), params


def is_json(media_type: str) -> bool:
    """True for ``application/json`` and structured ``+json`` suffix types."""
    return media_type == "application/json" or (
        "/" in media_type and media_type.endswith("+json")
    )


async def read_body(receive: Receive, *, limit: int, length: int | None = None) -> bytes:
    """Drain the ASGI receive channel into a single ``bytes`` value.

    *length* is the declared ``Content-Length`` (if any). A declared length
    over *limit* fails before a single chunk is read.
    """
    if length is not None and length > limit:
        raise PayloadTooLarge(limit, length)

    chunks: list[bytes] = []
    received = 0
    while True:
        message = await receive()
        if message["type"] == "http.disconnect":
            raise MalformedInput("request aborted")
        chunk = message.get("body", b"")
        received += len(chunk)
        if received > limit:
            raise PayloadTooLarge(limit)
        if chunk:
            chunks.append(chunk)
        if not message.get("more_body", False):
            break

    if length is not None and received != length:
        raise MalformedInput("request size did not match content length")
    return b"".join(chunks)


def decode_body(raw: bytes, charset: str) -> str:
    """Decode *raw* with *charset*, mapping failures to 4xx errors."""
    try:
        codec = codecs.lookup(charset)
    except LookupError as exc:
        raise UnsupportedMediaType(f'unsupported charset "{charset.upper()}"') from exc
    try:
        return raw.decode(codec.name)
    except UnicodeDecodeError as exc:
        raise MalformedInput(f"invalid {charset} in request body") from exc


def parse_body(text: str, media_type: str) -> Any:
    """Turn decoded body text into a structured value when the type says so.

    JSON types go through ``json.loads``; form-encoded bodies use the same
    nested notation as query strings. Anything else stays text.
    """
    if not text:
        return text
    if is_json(media_type):
        try:
            return json.loads(text)
        except ValueError as exc:
            raise MalformedInput(f"invalid JSON body: {exc}") from exc
    if media_type == FORM_TYPE:
        return parse_query(text)
    return text


async def receive_body(
    receive: Receive,
    content_type: str | None,
    content_length: str | None,
    *,
    limit: int,
    default_charset: str = "utf-8",
) -> Any:
    """Read, decode, and parse a request body in one step."""
    length: int | None = None
    if content_length is not None:
        try:
            length = int(content_length)
        except ValueError as exc:
            raise MalformedInput("invalid content-length header") from exc
        if length < 0:
            raise MalformedInput("invalid content-length header")

    raw = await read_body(receive, limit=limit, length=length)
    if not raw:
        return ""

    media_type, params = parse_media_type(content_type)
    text = decode_body(raw, params.get("charset") or default_charset)
    return parse_body(text, media_type)
