"""Static file handler.

``serve(directory)`` returns a handler that streams files from
*directory*. Mount it under a splat route so the captured tail names the
file::

    app = routes([
        ("GET", "/static/*", serve("./static")),
        ("HEAD", "/static/*", serve("./static")),
    ])

Used on its own, the whole request path is the file path.

Each file carries a weak stat-based ``etag`` and a ``last-modified``
header, so conditional GETs are answered with 304 by the response writer
without opening the file.
"""

import mimetypes
from collections.abc import AsyncIterator
from email.utils import formatdate
from pathlib import Path
from urllib.parse import unquote

import anyio

from paperplane._internal.types import Handler
from paperplane.errors import HTTPError, MalformedInput, NotFound
from paperplane.http.conditional import stat_etag
from paperplane.http.request import Request
from paperplane.http.response import Response

CHUNK_SIZE = 64 * 1024


async def _file_chunks(path: Path, chunk_size: int) -> AsyncIterator[bytes]:
    async with await anyio.open_file(path, "rb") as file:
        while chunk := await file.read(chunk_size):
            yield chunk


def _relative_path(request: Request) -> str:
    if "*" in request.params:
        return request.params["*"]
    try:
        return unquote(request.pathname, errors="strict")
    except UnicodeDecodeError as exc:
        raise MalformedInput(f"failed to decode path {request.pathname!r}") from exc


def serve(
    directory: str | Path,
    *,
    index: str = "index.html",
    cache_control: str = "public, max-age=3600",
    chunk_size: int = CHUNK_SIZE,
) -> Handler:
    """Build a handler serving files under *directory*.

    - Only ``GET`` and ``HEAD`` are served; other methods are 404.
    - A path escaping *directory* (``..`` or a symlink pointing outside)
      is 403.
    - Missing files and dotfiles are 404.
    - A directory is served through its *index* file; a directory request
      without a trailing slash is redirected (301) to one.
    """
    root = Path(directory).resolve()

    async def handler(request: Request) -> Response:
        if request.method not in ("GET", "HEAD"):
            raise NotFound()

        relative = _relative_path(request).lstrip("/")
        if "\x00" in relative:
            raise MalformedInput("path contains a NUL byte")
        if any(part.startswith(".") and part not in (".", "..") for part in relative.split("/")):
            raise NotFound()

        file_path = (root / relative).resolve() if relative else root
        if not file_path.is_relative_to(root):
            raise HTTPError(403, "Forbidden", name="ForbiddenError")

        if file_path.is_dir():
            index_path = file_path / index
            if not index_path.is_file():
                raise NotFound()
            if relative and not request.pathname.endswith("/"):
                return Response(body="", status=301).with_header(
                    "location", request.pathname + "/"
                )
            file_path = index_path

        if not file_path.is_file():
            raise NotFound()

        stat = await anyio.Path(file_path).stat()
        content_type, _ = mimetypes.guess_type(file_path.name)
        headers = {
            "content-type": content_type or "application/octet-stream",
            "content-length": str(stat.st_size),
            "etag": stat_etag(stat.st_size, stat.st_mtime),
            "last-modified": formatdate(stat.st_mtime, usegmt=True),
            "cache-control": cache_control,
        }
        return Response(body=_file_chunks(file_path, chunk_size), headers=headers)

    return handler
