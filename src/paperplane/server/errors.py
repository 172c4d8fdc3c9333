"""Error normalization — any failure in, ``(status, JSON body)`` out.

Two stages:

1. ``adapt_error`` converts a raised value into the paperplane taxonomy
   (``ValidationFailure``, ``HTTPError``, or ``None`` for a generic
   failure). All structural sniffing of foreign exception shapes lives
   here: pydantic-style ``errors()``, ``details`` lists, ``status_code`` /
   ``status`` tags, and ``output``/``payload`` wrappers.
2. ``normalize_error`` renders the result as a ``NormalizedError``.

Error bodies are always JSON::

    {"message": "...", "name": "...", "details": [...]}
"""

import json
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any

from paperplane.errors import HTTPError, ValidationDetail, ValidationFailure
from paperplane.http.response import Response

logger = logging.getLogger("paperplane.server")

GENERIC_MESSAGE = "Internal Server Error"


@dataclass(frozen=True, slots=True)
class NormalizedError:
    """The canonical wire form of a failure."""

    status: int
    body: dict[str, Any]
    headers: tuple[tuple[str, str], ...] = field(default=())


# -- Adapters --------------------------------------------------------------


def _get(obj: object, key: str) -> Any:
    """Read *key* from a mapping or an attribute, whichever *obj* offers."""
    if isinstance(obj, Mapping):
        return obj.get(key)
    return getattr(obj, key, None)


def _http_status(value: object) -> int | None:
    if isinstance(value, int) and not isinstance(value, bool) and 400 <= value <= 599:
        return value
    return None


def _reason(status: int) -> str:
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return "Error"


def _name_of(exc: BaseException) -> str:
    name = getattr(exc, "name", None)
    if isinstance(name, str) and name:
        return name
    return type(exc).__name__


def _message_of(exc: BaseException) -> str:
    for attr in ("message", "detail"):
        value = getattr(exc, attr, None)
        if isinstance(value, str) and value:
            return value
    return str(exc)


def _detail_from_entry(entry: object) -> ValidationDetail:
    """Convert one ``details`` entry (dict or object) into a ValidationDetail."""
    path = _get(entry, "path")
    if isinstance(path, (list, tuple)):
        path = ".".join(str(p) for p in path)
    context = _get(entry, "context") or {}
    return ValidationDetail(
        message=str(_get(entry, "message")),
        path=str(path if path is not None else ""),
        type=str(_get(entry, "type") or "any.invalid"),
        context=dict(context) if isinstance(context, Mapping) else {"value": context},
    )


def _detail_from_pydantic(entry: Mapping[str, Any]) -> ValidationDetail:
    loc = entry.get("loc") or ()
    context = dict(entry.get("ctx") or {})
    if "input" in entry:
        context.setdefault("value", entry["input"])
    return ValidationDetail(
        message=str(entry.get("msg", "")),
        path=".".join(str(part) for part in loc),
        type=str(entry.get("type", "value_error")),
        context=context,
    )


def _validation_details(exc: BaseException) -> tuple[tuple[ValidationDetail, ...], str] | None:
    """Extract field-level details and a summary message, if *exc* has any."""
    details = getattr(exc, "details", None)
    if (
        isinstance(details, Sequence)
        and not isinstance(details, (str, bytes))
        and details
        and all(_get(entry, "message") is not None for entry in details)
    ):
        return tuple(_detail_from_entry(entry) for entry in details), _message_of(exc)

    errors = getattr(exc, "errors", None)
    if callable(errors):
        try:
            entries = errors()
        except TypeError:
            return None
        if (
            isinstance(entries, Sequence)
            and entries
            and all(isinstance(e, Mapping) and "loc" in e and "msg" in e for e in entries)
        ):
            # pydantic's str() is a multi-line report; summarize from the entries
            return tuple(_detail_from_pydantic(entry) for entry in entries), ""
    return None


def _adapt_wrapped(exc: BaseException) -> HTTPError | None:
    """Failures that wrap their real payload in ``output.payload``."""
    output = getattr(exc, "output", None)
    if output is None:
        return None
    status = _http_status(_get(output, "status_code")) or _http_status(_get(output, "statusCode"))
    if status is None:
        return None
    payload = _get(output, "payload") or {}
    message = str(exc) or str(_get(payload, "message") or "") or _reason(status)
    return HTTPError(status=status, message=message, name=_name_of(exc))


def adapt_error(failure: object) -> ValidationFailure | HTTPError | None:
    """Convert any failure into the paperplane taxonomy.

    Returns ``None`` for a generic failure that carries no recognizable
    tag; the normalizer renders those as 500s.
    """
    if isinstance(failure, (ValidationFailure, HTTPError)):
        return failure
    if not isinstance(failure, BaseException):
        return None

    validation = _validation_details(failure)
    if validation is not None:
        details, message = validation
        return ValidationFailure(details, message=message, name=_name_of(failure))

    wrapped = _adapt_wrapped(failure)
    if wrapped is not None:
        return wrapped

    status = (
        _http_status(getattr(failure, "status_code", None))
        or _http_status(getattr(failure, "statusCode", None))
        or _http_status(getattr(failure, "status", None))
    )
    if status is not None:
        message = _message_of(failure) or _reason(status)
        return HTTPError(status=status, message=message, name=_name_of(failure))
    return None


# -- Normalizer ------------------------------------------------------------


def _generic() -> NormalizedError:
    return NormalizedError(status=500, body={"message": GENERIC_MESSAGE, "name": "Error"})


def normalize_error(failure: object) -> NormalizedError:
    """Turn *failure* into a ``NormalizedError``. Never raises."""
    try:
        adapted = adapt_error(failure)
    except Exception:
        logger.exception("error adapter failed for %r", type(failure).__name__)
        adapted = None

    if isinstance(adapted, ValidationFailure):
        return NormalizedError(
            status=400,
            body={
                "message": adapted.message,
                "name": adapted.name,
                "details": [d.to_dict() for d in adapted.details],
            },
        )
    if isinstance(adapted, HTTPError):
        return NormalizedError(
            status=adapted.status,
            body={"message": adapted.message or _reason(adapted.status), "name": adapted.name},
            headers=adapted.headers,
        )

    if not isinstance(failure, BaseException):
        return _generic()
    try:
        message = str(failure)
    except Exception:
        return _generic()
    if not message:
        return _generic()
    return NormalizedError(status=500, body={"message": message, "name": _name_of(failure)})


def error_response(error: NormalizedError) -> Response:
    """Build the JSON Response for a normalized failure."""
    body = json.dumps(error.body, separators=(",", ":"), default=str)
    response = Response(
        body=body,
        status=error.status,
        headers={"content-type": "application/json; charset=utf-8"},
    )
    for name, value in error.headers:
        response = response.with_header(name, value)
    return response
