"""Type matching for field values.

Matching is by exact runtime type: a ``bool`` is not a Number and a
``str`` subclass is not a String.
"""

from dataclasses import dataclass
from typing import Any

from schemaforge.schema.types import FieldType, TypeSpec


@dataclass(frozen=True)
class TypeMatch:
    success: bool
    type_name: str

    def __bool__(self) -> bool:
        return self.success


def is_sequence(value: Any) -> bool:
    return type(value) in FieldType.ARRAY.runtime_types


def match_type(spec: TypeSpec, value: Any) -> TypeMatch:
    """Check ``value`` against a declared type.

    Args:
        spec: The field's resolved type
        value: A stored attribute value

    Returns:
        TypeMatch with the outcome and the type name for error messages
    """
    if spec.kind is FieldType.ARRAY:
        if not is_sequence(value):
            return TypeMatch(False, spec.name)
        if spec.element is not None:
            allowed = spec.element.runtime_types
            for item in value:
                # None elements are permitted in element-typed arrays
                if item is not None and type(item) not in allowed:
                    return TypeMatch(False, spec.name)
        return TypeMatch(True, spec.name)

    return TypeMatch(type(value) in spec.kind.runtime_types, spec.name)
