"""Function composition, the one composition primitive.

Wrappers are ordinary functions from handler to handler, so stacking them
is plain composition::

    app = compose(with_cors, with_static)(routes(table))

is ``with_cors(with_static(routes(table)))``.
"""

import inspect
from collections.abc import Callable
from typing import Any

from paperplane._internal.invoke import invoke


def compose(*fns: Callable[..., Any]) -> Callable[..., Any]:
    """Compose unary functions right to left.

    ``compose(f, g, h)(x) == f(g(h(x)))``. When any function is async the
    composed function is a coroutine function and each result is awaited
    before it is passed on. ``compose()`` is the identity.
    """
    if not fns:
        return lambda value: value

    if not any(_is_async(fn) for fn in fns):

        def call(value: Any) -> Any:
            for fn in reversed(fns):
                value = fn(value)
            return value

        return call

    async def acall(value: Any) -> Any:
        for fn in reversed(fns):
            value = await invoke(fn, value)
        return value

    return acall


def _is_async(fn: Callable[..., Any]) -> bool:
    return inspect.iscoroutinefunction(fn) or inspect.iscoroutinefunction(
        getattr(fn, "__call__", None)
    )
