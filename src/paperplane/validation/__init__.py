"""Request data validation — composable rules, clean results.

Usage::

    from paperplane.validation import validate, required, max_length, email

    async def create_user(request: Request) -> Response:
        user = validate(request.body, {
            "name": [required, max_length(200)],
            "email": [required, email],
        }).raise_for_errors()
        return json(await save(user), status=201)

A failed ``raise_for_errors()`` becomes a 400 response whose ``details``
list names each failing field.
"""

from collections.abc import Mapping
from typing import Any

from paperplane.errors import ValidationDetail
from paperplane.validation.result import ValidationResult
from paperplane.validation.rules import (
    Validator,
    boolean,
    email,
    integer,
    is_missing,
    matches,
    max_length,
    min_length,
    number,
    one_of,
    required,
    string,
    url,
)

__all__ = [
    "ValidationResult",
    "Validator",
    "boolean",
    "email",
    "integer",
    "matches",
    "max_length",
    "min_length",
    "number",
    "one_of",
    "required",
    "string",
    "url",
    "validate",
]


def _detail(field_name: str, value: Any, validator: Validator, message: str) -> ValidationDetail:
    context = {"key": field_name, "label": field_name, "value": value}
    context.update(getattr(validator, "context", {}))
    return ValidationDetail(
        message=f"{field_name}: {message}",
        path=field_name,
        type=getattr(validator, "error_type", "any.custom"),
        context=context,
    )


def validate(data: Any, rules: Mapping[str, list[Validator]]) -> ValidationResult:
    """Validate *data* against a set of rules.

    Args:
        data: A mapping of field names to values, usually
            ``request.body`` or ``request.query``. Anything that is not a
            mapping fails as a whole with an ``object.base`` detail.
        rules: Field names mapped to lists of validators. Each validator
            returns an error message string on failure, or ``None``.

    Optional fields (no ``required`` rule) that are missing are skipped.
    After ``required`` fails, the remaining rules for that field are not
    run.
    """
    if not isinstance(data, Mapping):
        detail = ValidationDetail(
            message='"value" must be of type object',
            path="",
            type="object.base",
            context={"label": "value", "value": data},
        )
        return ValidationResult(data={}, errors={"": [detail.message]}, details=(detail,))

    errors: dict[str, list[str]] = {}
    details: list[ValidationDetail] = []
    cleaned: dict[str, Any] = {}

    for field_name, validators in rules.items():
        value = data.get(field_name)

        if is_missing(value) and required not in validators:
            continue

        field_errors: list[str] = []
        for validator in validators:
            error = validator(value)
            if error is None:
                continue
            field_errors.append(error)
            details.append(_detail(field_name, value, validator, error))
            # no point running max_length on a missing value
            if validator is required:
                break

        if field_errors:
            errors[field_name] = field_errors
        else:
            cleaned[field_name] = value

    return ValidationResult(data=cleaned, errors=errors, details=tuple(details))
