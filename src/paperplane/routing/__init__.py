"""Routing — turn a binding table into a single handler.

``routes()`` is an ordinary higher-order function: it takes an ordered
list of ``(method, pattern, handler)`` triples and returns a handler with
the same signature as any other, so it composes like one::

    app = routes([
        ("GET", "/users", list_users),
        ("GET", "/users/:id", get_user),
        ("POST", "/users", create_user),
    ])
"""

from collections.abc import Iterable, Mapping
from dataclasses import replace

from paperplane._internal.invoke import invoke
from paperplane._internal.types import Handler
from paperplane.errors import NotFound
from paperplane.http.request import Request
from paperplane.http.response import Response
from paperplane.routing.router import Binding, Router

__all__ = ["Router", "methods", "routes"]


def routes(bindings: Iterable[Binding] | Router) -> Handler:
    """Compose *bindings* into one handler.

    The first binding whose method and pattern both match wins. Its
    handler receives a new Request with ``params`` filled in; the original
    request is untouched. When nothing matches, ``NotFound`` is raised and
    no handler runs.
    """
    router = bindings if isinstance(bindings, Router) else Router(bindings)

    async def dispatch(request: Request) -> Response:
        match = router.match(request.method, request.pathname)
        if match is None:
            raise NotFound()
        effective = replace(request, params={**request.params, **match.params})
        return await invoke(match.route.handler, effective)

    return dispatch


def methods(handlers: Mapping[str, Handler]) -> Handler:
    """Dispatch on ``request.method``.

    Methods missing from *handlers* raise ``NotFound`` (not 405), the same
    policy ``routes()`` applies::

        item = methods({"GET": show_item, "DELETE": delete_item})
    """
    table = {method.upper(): handler for method, handler in handlers.items()}

    async def dispatch(request: Request) -> Response:
        handler = table.get(request.method)
        if handler is None:
            raise NotFound()
        return await invoke(handler, request)

    return dispatch
