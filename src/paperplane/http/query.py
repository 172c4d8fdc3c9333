"""Query string parsing with nested-object and array notation.

Used for both ``request.query`` and form-encoded bodies::

    parse_query("a[b]=1&c[]=x&c[]=y&d=1&d=2")
    # {"a": {"b": "1"}, "c": ["x", "y"], "d": ["1", "2"]}

Never raises: anything that cannot be parsed yields ``{}``.
"""

import re
from typing import Any
from urllib.parse import unquote_plus

MAX_DEPTH = 5
ARRAY_LIMIT = 20
PARAMETER_LIMIT = 1000

_CHILD = re.compile(r"\[([^\[\]]*)\]")


def _decode(value: str) -> str:
    try:
        return unquote_plus(value, errors="strict")
    except UnicodeDecodeError:
        return value


def _split_key(key: str, depth: int) -> list[str]:
    """Split ``a[b][c]`` into ``["a", "b", "c"]``.

    Segments past *depth* are kept together as one literal key, brackets
    included, so deep nesting cannot blow up the result.
    """
    bracket = key.find("[")
    if bracket <= 0:
        return [key]
    segments = [key[:bracket]]
    rest = key[bracket:]
    while rest and len(segments) <= depth:
        match = _CHILD.match(rest)
        if match is None:
            break
        segments.append(match.group(1))
        rest = rest[match.end() :]
    if rest:
        segments.append(rest)
    return segments


def _build(segments: list[str], value: str) -> Any:
    """Build the nested structure for one ``key=value`` pair, inside out."""
    leaf: Any = value
    for segment in reversed(segments[1:]):
        if segment == "":
            leaf = [leaf]
        elif segment.isdigit() and int(segment) <= ARRAY_LIMIT:
            # int keys mark array slots; _compact turns them into lists
            leaf = {int(segment): leaf}
        else:
            leaf = {segment: leaf}
    return leaf


def _next_index(target: dict[Any, Any]) -> int:
    ints = [k for k in target if isinstance(k, int)]
    return max(ints) + 1 if ints else len(target)


def _merge(target: Any, source: Any) -> Any:
    if isinstance(target, dict):
        if isinstance(source, dict):
            for key, value in source.items():
                target[key] = _merge(target[key], value) if key in target else value
            return target
        items = source if isinstance(source, list) else [source]
        for item in items:
            target[_next_index(target)] = item
        return target
    if isinstance(target, list):
        if isinstance(source, list):
            return [*target, *source]
        if isinstance(source, dict):
            return _merge(dict(enumerate(target)), source)
        return [*target, source]
    if isinstance(source, list):
        return [target, *source]
    return [target, source]


def _compact(value: Any) -> Any:
    """Turn dicts keyed purely by ints into ordered lists, recursively."""
    if isinstance(value, list):
        return [_compact(v) for v in value]
    if isinstance(value, dict):
        if value and all(isinstance(k, int) for k in value):
            return [_compact(value[k]) for k in sorted(value)]
        return {str(k): _compact(v) for k, v in value.items()}
    return value


def parse_query(
    query_string: str | bytes,
    *,
    depth: int = MAX_DEPTH,
    parameter_limit: int = PARAMETER_LIMIT,
) -> dict[str, Any]:
    """Parse a query string (or form-encoded body) into nested dicts and lists.

    - ``a=1`` → ``{"a": "1"}``; ``a`` alone → ``{"a": ""}``
    - ``a=1&a=2`` → ``{"a": ["1", "2"]}``
    - ``a[]=1&a[]=2`` → ``{"a": ["1", "2"]}``
    - ``a[0]=x&a[1]=y`` → ``{"a": ["x", "y"]}`` (indices up to 20)
    - ``a[b][c]=1`` → ``{"a": {"b": {"c": "1"}}}``

    A leading ``?`` is ignored. At most *parameter_limit* pairs are read.
    """
    try:
        if isinstance(query_string, bytes):
            try:
                query_string = query_string.decode("utf-8")
            except UnicodeDecodeError:
                query_string = query_string.decode("latin-1")
        query_string = query_string.removeprefix("?")
        if not query_string:
            return {}

        result: dict[Any, Any] = {}
        pairs = [p for p in query_string.split("&") if p][:parameter_limit]
        for pair in pairs:
            raw_key, _, raw_value = pair.partition("=")
            key = _decode(raw_key)
            if not key:
                continue
            segments = _split_key(key, depth)
            root = segments[0]
            value = _build(segments, _decode(raw_value))
            result[root] = _merge(result[root], value) if root in result else value
        return _compact(result)
    except (ValueError, TypeError, RecursionError):
        return {}
