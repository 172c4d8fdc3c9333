"""Ordered, first-match-wins router.

Bindings are scanned in the order they were given. There is no
specificity ranking: ``("GET", "/a/:id")`` listed before
``("GET", "/a/static")`` captures ``/a/static`` as ``id="static"``.
A path that matches under a different method is simply not a match,
so the result is 404, never 405.
"""

import re
from collections.abc import Iterable
from typing import TypeAlias
from urllib.parse import unquote

from paperplane._internal.types import Handler
from paperplane.errors import ConfigurationError, MalformedInput
from paperplane.routing.route import PathSegment, Route, RouteMatch

_PARAM_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

Binding: TypeAlias = tuple[str, str, Handler]


def parse_path(pattern: str) -> list[PathSegment]:
    """Parse a route pattern into segments.

    Examples::

        "/users"          -> [PathSegment("users")]
        "/users/:id"      -> [PathSegment("users"), PathSegment(":id", is_param=True, ...)]
        "/files/*"        -> [PathSegment("files"), PathSegment("*", is_splat=True, ...)]
        "/files/:path*"   -> [PathSegment("files"), PathSegment(":path*", is_splat=True, ...)]

    Raises ``ConfigurationError`` for a splat that is not the last segment,
    a second splat, or an invalid parameter name.
    """
    if not pattern.startswith("/"):
        msg = f"Route pattern {pattern!r} must start with '/'."
        raise ConfigurationError(msg)

    segments: list[PathSegment] = []
    parts = [p for p in pattern.strip("/").split("/") if p]
    for index, part in enumerate(parts):
        is_last = index == len(parts) - 1
        if part == "*" or (part.startswith(":") and part.endswith("*")):
            if not is_last:
                msg = f"Route pattern {pattern!r}: a splat is only allowed as the last segment."
                raise ConfigurationError(msg)
            name = "*" if part == "*" else part[1:-1]
            if name != "*" and not _PARAM_NAME.match(name):
                msg = f"Route pattern {pattern!r}: invalid parameter name {name!r}."
                raise ConfigurationError(msg)
            segments.append(PathSegment(value=part, is_param=True, param_name=name, is_splat=True))
        elif part.startswith(":"):
            name = part[1:]
            if not _PARAM_NAME.match(name):
                msg = f"Route pattern {pattern!r}: invalid parameter name {name!r}."
                raise ConfigurationError(msg)
            segments.append(PathSegment(value=part, is_param=True, param_name=name))
        elif "*" in part:
            msg = f"Route pattern {pattern!r}: a splat is only allowed as the last segment."
            raise ConfigurationError(msg)
        else:
            segments.append(PathSegment(value=part))

    names = [s.param_name for s in segments if s.is_param]
    if len(names) != len(set(names)):
        msg = f"Route pattern {pattern!r} repeats a parameter name."
        raise ConfigurationError(msg)
    return segments


def compile_pattern(pattern: str) -> tuple[re.Pattern[str], tuple[str, ...]]:
    """Compile a route pattern to an anchored regex and its parameter names.

    Named segments match one non-empty path segment; a splat matches the
    rest of the path (possibly empty). A single trailing slash on the
    request path is tolerated. Static segments are case-sensitive.
    """
    segments = parse_path(pattern)
    regex = ""
    names: list[str] = []
    for segment in segments:
        if segment.is_splat:
            regex += r"(?:/(.*))?"
            names.append(segment.param_name or "*")
        elif segment.is_param:
            regex += r"/([^/]+?)"
            names.append(segment.param_name or "")
        else:
            regex += "/" + re.escape(segment.value)
    if not segments or not segments[-1].is_splat:
        regex += "/?"
    return re.compile(f"^{regex}$"), tuple(names)


def _decode_param(value: str) -> str:
    try:
        return unquote(value, errors="strict")
    except UnicodeDecodeError as exc:
        msg = f"failed to decode param {value!r}"
        raise MalformedInput(msg) from exc


class Router:
    """Immutable, ordered route table.

    Usage::

        router = Router([
            ("GET", "/users", list_users),
            ("GET", "/users/:id", get_user),
        ])
        match = router.match("GET", "/users/42")  # RouteMatch | None
    """

    __slots__ = ("_routes",)

    def __init__(self, bindings: Iterable[Binding]) -> None:
        routes: list[Route] = []
        for method, pattern, handler in bindings:
            if not callable(handler):
                msg = f"Handler for {method} {pattern!r} is not callable."
                raise ConfigurationError(msg)
            regex, names = compile_pattern(pattern)
            routes.append(
                Route(
                    method=method.upper(),
                    pattern=pattern,
                    handler=handler,
                    regex=regex,
                    param_names=names,
                )
            )
        object.__setattr__(self, "_routes", tuple(routes))

    def __setattr__(self, name: str, value: object) -> None:
        msg = "Router is immutable"
        raise AttributeError(msg)

    def __len__(self) -> int:
        return len(self._routes)

    @property
    def routes(self) -> tuple[Route, ...]:
        """All routes, in match order."""
        return self._routes

    def match(self, method: str, path: str) -> RouteMatch | None:
        """Return the first route matching *method* and *path*, or ``None``.

        Captured values are percent-decoded; an empty splat tail is ``""``.
        Raises ``MalformedInput`` if a captured value is not valid UTF-8
        once decoded.
        """
        method = method.upper()
        for route in self._routes:
            if route.method != method:
                continue
            found = route.regex.match(path)
            if found is None:
                continue
            params = {
                name: _decode_param(value or "")
                for name, value in zip(route.param_names, found.groups(), strict=True)
            }
            return RouteMatch(route=route, params=params)
        return None
