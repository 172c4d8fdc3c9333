"""Shared type aliases used across paperplane modules."""

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, TypeAlias

if TYPE_CHECKING:
    from paperplane.http.request import Request
    from paperplane.http.response import Response

# A handler takes a Request and returns a Response, or an awaitable of one
Handler: TypeAlias = Callable[["Request"], "Response | Awaitable[Response]"]
