"""Immutable, case-insensitive HTTP request headers.

ASGI delivers headers as raw byte pairs, possibly repeated. ``Headers``
coalesces them once, at construction, into a plain ``name -> value``
mapping using the same rules Node's HTTP parser applies, so handlers
never deal with multi-valued headers.
"""

from collections.abc import Iterable, Iterator, Mapping

# Headers where a duplicate is discarded and the first value kept.
SINGLE_VALUED: frozenset[str] = frozenset(
    {
        "age",
        "authorization",
        "content-length",
        "content-type",
        "etag",
        "expires",
        "from",
        "host",
        "if-modified-since",
        "if-unmodified-since",
        "last-modified",
        "location",
        "max-forwards",
        "proxy-authorization",
        "referer",
        "retry-after",
        "server",
        "user-agent",
    }
)


def coalesce(raw: Iterable[tuple[bytes, bytes]]) -> dict[str, str]:
    """Collapse raw header pairs into a lower-cased ``name -> value`` dict.

    - single-valued headers keep their first value
    - ``cookie`` values are joined with ``"; "``
    - everything else (``set-cookie`` included) is joined with ``", "``

    Arrival order is preserved; values are never reordered.
    """
    result: dict[str, str] = {}
    for raw_name, raw_value in raw:
        name = raw_name.decode("latin-1").lower()
        value = raw_value.decode("latin-1")
        if name not in result:
            result[name] = value
        elif name in SINGLE_VALUED:
            continue
        elif name == "cookie":
            result[name] = f"{result[name]}; {value}"
        else:
            result[name] = f"{result[name]}, {value}"
    return result


class Headers(Mapping[str, str]):
    """Immutable, case-insensitive HTTP headers.

    Keys are stored lower-cased; lookups lower-case the requested key.
    """

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[str, str] | None = None) -> None:
        normalized = {k.lower(): v for k, v in (data or {}).items()}
        object.__setattr__(self, "_data", normalized)

    @classmethod
    def from_asgi(cls, raw: Iterable[tuple[bytes, bytes]]) -> "Headers":
        """Build headers from the ASGI scope's raw byte pairs."""
        return cls(coalesce(raw))

    def __setattr__(self, name: str, value: object) -> None:
        msg = "Headers are immutable"
        raise AttributeError(msg)

    def __getitem__(self, key: str) -> str:
        return self._data[key.lower()]

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        return key.lower() in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Headers):
            return self._data == other._data
        if isinstance(other, Mapping):
            return self._data == {str(k).lower(): v for k, v in other.items()}
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Headers({self._data!r})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the value for *key*, or *default* if missing."""
        return self._data.get(key.lower(), default)
