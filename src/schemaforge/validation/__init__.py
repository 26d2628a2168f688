"""schemaforge validation: type matching and the first-violation engine."""

from schemaforge.validation.engine import (
    check_attributes,
    check_field,
    validate_attributes,
)
from schemaforge.validation.matcher import TypeMatch, match_type
from schemaforge.validation.types import Violation, ViolationKind

__all__ = [
    "TypeMatch",
    "Violation",
    "ViolationKind",
    "check_attributes",
    "check_field",
    "match_type",
    "validate_attributes",
]
