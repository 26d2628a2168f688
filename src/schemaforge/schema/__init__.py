"""Schema declarations: field types, descriptors and named accessors."""

from schemaforge.schema.accessors import AccessorRegistry, getter, setter
from schemaforge.schema.types import (
    MISSING,
    FieldDescriptor,
    FieldType,
    Schema,
    TypeSpec,
    is_defined,
)

__all__ = [
    "AccessorRegistry",
    "FieldDescriptor",
    "FieldType",
    "MISSING",
    "Schema",
    "TypeSpec",
    "getter",
    "is_defined",
    "setter",
]
