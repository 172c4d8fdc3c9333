"""Entity tags and conditional-GET freshness checks."""

import base64
import hashlib
from collections.abc import Mapping
from email.utils import parsedate_to_datetime

EMPTY_ETAG = '"0-2jmj7l5rSw0yVb/vlWAYkK/YBwk"'


def compute_etag(body: bytes) -> str:
    """Strong etag for a buffered body: ``"<length-hex>-<sha1-base64[:27]>"``.

    Identical bodies always produce identical tags.
    """
    if not body:
        return EMPTY_ETAG
    digest = base64.b64encode(hashlib.sha1(body).digest()).decode("ascii")[:27]  # noqa: S324
    return f'"{len(body):x}-{digest}"'


def stat_etag(size: int, mtime: float) -> str:
    """Weak etag derived from file size and modification time."""
    return f'W/"{size:x}-{int(mtime * 1000):x}"'


def _opaque(tag: str) -> str:
    tag = tag.strip()
    return tag[2:] if tag.startswith("W/") else tag


def etag_matches(if_none_match: str, etag: str) -> bool:
    """Weak comparison of an ``If-None-Match`` list against *etag*."""
    if if_none_match.strip() == "*":
        return True
    target = _opaque(etag)
    return any(_opaque(candidate) == target for candidate in if_none_match.split(","))


def _not_modified_since(if_modified_since: str, last_modified: str) -> bool:
    try:
        since = parsedate_to_datetime(if_modified_since)
        modified = parsedate_to_datetime(last_modified)
        return modified <= since
    except (TypeError, ValueError):
        return False


def is_fresh(request_headers: Mapping[str, str], response_headers: Mapping[str, str]) -> bool:
    """Whether the client's cached copy is still valid.

    ``If-None-Match`` takes precedence over ``If-Modified-Since``; a
    ``Cache-Control: no-cache`` request always revalidates.
    *response_headers* keys must be lower-case.
    """
    if_none_match = request_headers.get("if-none-match")
    if_modified_since = request_headers.get("if-modified-since")
    if not if_none_match and not if_modified_since:
        return False

    cache_control = request_headers.get("cache-control") or ""
    if "no-cache" in cache_control:
        return False

    if if_none_match:
        etag = response_headers.get("etag")
        return bool(etag) and etag_matches(if_none_match, etag)

    last_modified = response_headers.get("last-modified")
    return bool(last_modified) and _not_modified_since(if_modified_since, last_modified)
