"""Route and RouteMatch frozen dataclasses."""

import re
from dataclasses import dataclass

from paperplane._internal.types import Handler


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route pattern.

    Static:  ``users``   (is_param=False)
    Param:   ``:id``     (is_param=True, param_name="id")
    Splat:   ``*``       (is_param=True, param_name="*", is_splat=True)
    Named splat: ``:rest*`` (is_param=True, param_name="rest", is_splat=True)
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    is_splat: bool = False


@dataclass(frozen=True, slots=True)
class Route:
    """One compiled ``(method, pattern, handler)`` binding."""

    method: str
    pattern: str
    handler: Handler
    regex: re.Pattern[str]
    param_names: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    params: dict[str, str]
