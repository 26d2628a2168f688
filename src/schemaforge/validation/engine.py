"""Schema validation engine.

Checks an attribute mapping against a resolved schema:
- required: the key must hold a defined value
- type: the stored value must match the declared type exactly
- min/max: ordered values must fall inside the declared bounds

Keys are checked in declaration order and the first failure ends the pass.
"""

from collections.abc import Mapping
from typing import Any

from schemaforge.schema.types import MISSING, FieldDescriptor, Schema, is_defined
from schemaforge.validation.matcher import match_type
from schemaforge.validation.types import Violation, ViolationKind


def _below(value: Any, bound: Any) -> bool:
    try:
        return value < bound
    except TypeError:
        return False


def _above(value: Any, bound: Any) -> bool:
    try:
        return value > bound
    except TypeError:
        return False


def check_field(field: FieldDescriptor, value: Any) -> Violation | None:
    """Check one stored value against its descriptor.

    ``value`` is MISSING when the key has never been set.
    """
    key = field.key

    if field.required and not is_defined(value):
        return Violation(ViolationKind.REQUIRED, key, f'"{key}" is required.')

    # Optional and never set: nothing else to check
    if value is MISSING:
        return None

    if field.type is not None:
        result = match_type(field.type, value)
        if not result.success:
            return Violation(
                ViolationKind.TYPE,
                key,
                f'"{key}" must be of type {result.type_name}.',
            )

    if field.min is not None and _below(value, field.min):
        return Violation(
            ViolationKind.MIN,
            key,
            f'"{value}" is lower than {field.min} for field "{key}".',
        )

    if field.max is not None and _above(value, field.max):
        return Violation(
            ViolationKind.MAX,
            key,
            f'"{value}" is higher than {field.max} for field "{key}".',
        )

    return None


def check_attributes(
    schema: Schema, attributes: Mapping[str, Any]
) -> Violation | None:
    """Return the first violation in ``attributes``, or None if valid.

    Values are read from the mapping as stored; getters and defaults are
    not applied.
    """
    for key, field in schema.items():
        violation = check_field(field, attributes.get(key, MISSING))
        if violation is not None:
            return violation
    return None


def validate_attributes(
    schema: Schema, attributes: Mapping[str, Any]
) -> str | None:
    """Message-only form of check_attributes: None accepts, a string rejects."""
    violation = check_attributes(schema, attributes)
    return violation.message if violation else None
