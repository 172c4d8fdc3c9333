"""Validation result — immutable container for validated data or errors."""

from dataclasses import dataclass, field
from typing import Any

from paperplane.errors import ValidationDetail, ValidationFailure


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """The outcome of validating request data against a set of rules.

    The result is falsy when invalid::

        result = validate(request.body, rules)
        if not result:
            ...

    ``data`` contains the values of fields that passed. ``errors`` maps
    field names to lists of messages; ``details`` holds the same failures
    in the shape of a validation error response.
    """

    data: dict[str, Any]
    errors: dict[str, list[str]]
    details: tuple[ValidationDetail, ...] = field(default=())

    @property
    def is_valid(self) -> bool:
        """True if validation passed with no errors."""
        return not self.errors

    def __bool__(self) -> bool:
        return self.is_valid

    def raise_for_errors(self) -> dict[str, Any]:
        """Return ``data`` when valid, else raise ``ValidationFailure``.

        The failure is answered with a 400 carrying every detail::

            todo = validate(request.body, rules).raise_for_errors()
        """
        if self.errors:
            raise ValidationFailure(self.details)
        return self.data
