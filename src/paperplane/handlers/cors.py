"""CORS wrapper.

Answers preflight requests and adds CORS headers to the responses of the
handler it wraps::

    app = cors(routes(table), CORSConfig(
        allow_origins=("https://example.com",),
        allow_methods=("GET", "POST", "PUT"),
        allow_headers=("Content-Type", "Authorization"),
    ))

Failures raised by the wrapped handler pass through untouched; their
error responses carry no CORS headers.
"""

from dataclasses import dataclass

from paperplane._internal.invoke import invoke
from paperplane._internal.types import Handler
from paperplane.http.request import Request
from paperplane.http.response import Response


@dataclass(frozen=True, slots=True)
class CORSConfig:
    """CORS configuration.

    All fields have secure defaults (nothing is allowed).
    """

    allow_origins: tuple[str, ...] = ()
    allow_methods: tuple[str, ...] = ("GET", "HEAD", "OPTIONS")
    allow_headers: tuple[str, ...] = ()
    expose_headers: tuple[str, ...] = ()
    allow_credentials: bool = False
    max_age: int = 600  # 10 minutes


def _is_allowed_origin(config: CORSConfig, origin: str) -> bool:
    return "*" in config.allow_origins or origin in config.allow_origins


def _with_cors_headers(response: Response, config: CORSConfig, origin: str) -> Response:
    if "*" in config.allow_origins and not config.allow_credentials:
        response = response.with_header("access-control-allow-origin", "*")
    else:
        response = response.with_header("access-control-allow-origin", origin)
        response = response.with_header("vary", "Origin")

    if config.allow_credentials:
        response = response.with_header("access-control-allow-credentials", "true")
    if config.expose_headers:
        response = response.with_header(
            "access-control-expose-headers", ", ".join(config.expose_headers)
        )
    return response


def _preflight(config: CORSConfig, origin: str, request_method: str | None) -> Response:
    response = _with_cors_headers(Response(body="", status=204), config, origin)
    if request_method:
        response = response.with_header(
            "access-control-allow-methods", ", ".join(config.allow_methods)
        )
    if config.allow_headers:
        response = response.with_header(
            "access-control-allow-headers", ", ".join(config.allow_headers)
        )
    return response.with_header("access-control-max-age", str(config.max_age))


def cors(handler: Handler, config: CORSConfig | None = None) -> Handler:
    """Wrap *handler* with CORS handling.

    - No ``Origin`` header, or an origin not allowed: the request passes
      through unchanged.
    - Preflight ``OPTIONS``: answered with 204 without calling *handler*.
    - Anything else: *handler* runs and CORS headers are added to its
      response.
    """
    cfg = config or CORSConfig()

    async def wrapped(request: Request) -> Response:
        origin = request.headers.get("origin")
        if origin is None or not _is_allowed_origin(cfg, origin):
            return await invoke(handler, request)

        if request.method == "OPTIONS":
            return _preflight(cfg, origin, request.headers.get("access-control-request-method"))

        response = await invoke(handler, request)
        return _with_cors_headers(response, cfg, origin)

    return wrapped
