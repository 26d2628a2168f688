"""schemaforge: schema-driven validation for keyed attribute models.

Usage:
    from schemaforge import Model

    class Contact(Model):
        schema = {
            "firstName": str,
            "lastName": {"type": str, "required": True},
            "tags": [str],
        }

    contact = Contact({"firstName": "Ada"})
    contact.is_valid()          # False
    contact.validation_error    # '"lastName" is required.'
"""

from schemaforge.config import ModelConfig
from schemaforge.exceptions import (
    ModelValidationError,
    SchemaDefinitionError,
    SchemaforgeError,
)
from schemaforge.model import Model, make_model
from schemaforge.schema import (
    MISSING,
    AccessorRegistry,
    FieldDescriptor,
    FieldType,
    Schema,
    TypeSpec,
    getter,
    is_defined,
    setter,
)
from schemaforge.schema.resolver import resolve_field, resolve_schema
from schemaforge.store import AttributeStore, InMemoryAttributeStore
from schemaforge.validation import (
    TypeMatch,
    Violation,
    ViolationKind,
    check_attributes,
    match_type,
    validate_attributes,
)

__all__ = [
    # Models
    "Model",
    "ModelConfig",
    "make_model",
    # Schema
    "AccessorRegistry",
    "FieldDescriptor",
    "FieldType",
    "MISSING",
    "Schema",
    "TypeSpec",
    "getter",
    "is_defined",
    "resolve_field",
    "resolve_schema",
    "setter",
    # Stores
    "AttributeStore",
    "InMemoryAttributeStore",
    # Validation
    "TypeMatch",
    "Violation",
    "ViolationKind",
    "check_attributes",
    "match_type",
    "validate_attributes",
    # Errors
    "ModelValidationError",
    "SchemaDefinitionError",
    "SchemaforgeError",
]
