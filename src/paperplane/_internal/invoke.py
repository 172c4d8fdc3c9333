"""Invoke helper — call sync or async handlers uniformly.

Handlers can be ``def`` or ``async def``. Anything that calls a
user-provided function goes through ``invoke`` so the sync/async check
lives in exactly one place.

Usage::

    from paperplane._internal.invoke import invoke

    response = await invoke(handler, request)
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await the result if it is awaitable.

    Works with both sync and async handlers::

        def hello(request):
            return send("hi")

        async def user(request):
            row = await db.fetch(request.params["id"])
            return json(row)
    """
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
