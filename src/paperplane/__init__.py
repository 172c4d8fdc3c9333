"""Paperplane — serve pure handlers over ASGI.

A handler is a function from an immutable ``Request`` to a ``Response``
value (or an awaitable of one). Everything else is composition.

Basic usage::

    from paperplane import json, mount, routes

    def hello(request):
        return json({"hello": request.params["name"]})

    app = mount(routes([
        ("GET", "/hello/:name", hello),
    ]))

    app.run()  # pip install paperplane[server]

Raise an ``HTTPError`` (or any exception carrying a ``status_code``) to
answer with that status; anything else becomes a JSON 500.
"""

__version__ = "0.1.0"
__all__ = [
    "AppConfig",
    "ConfigurationError",
    "HTTPError",
    "Mount",
    "NotFound",
    "PaperplaneError",
    "Request",
    "Response",
    "ValidationFailure",
    "compose",
    "html",
    "json",
    "methods",
    "mount",
    "redirect",
    "routes",
    "send",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import paperplane`` fast while providing a clean top-level API.
    """
    if name in ("Mount", "mount"):
        from paperplane import app as _app

        return getattr(_app, name)

    if name == "AppConfig":
        from paperplane.config import AppConfig

        return AppConfig

    if name == "Request":
        from paperplane.http.request import Request

        return Request

    if name in ("Response", "html", "json", "redirect", "send"):
        from paperplane.http import response as _resp

        return getattr(_resp, name)

    if name in ("routes", "methods"):
        from paperplane import routing as _routing

        return getattr(_routing, name)

    if name == "compose":
        from paperplane.composition import compose

        return compose

    if name in (
        "ConfigurationError",
        "HTTPError",
        "NotFound",
        "PaperplaneError",
        "ValidationFailure",
    ):
        from paperplane import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
