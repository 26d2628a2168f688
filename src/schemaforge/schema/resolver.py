"""Resolve schema declarations into canonical field descriptors.

A field may be declared as:
- a bare type: ``FieldType.STRING``, ``str``, ``"String"``
- an array literal: ``[]`` (any array) or ``[str]`` (array of strings)
- an options mapping: ``{"type": int, "required": True, "min": 0}``

Every form resolves to the same FieldDescriptor. Declarations outside
this grammar raise SchemaDefinitionError.
"""

import dataclasses
import datetime
import logging
from collections.abc import Mapping
from typing import Any

from schemaforge.config import ModelConfig
from schemaforge.exceptions import SchemaDefinitionError
from schemaforge.schema.accessors import AccessorRegistry
from schemaforge.schema.types import (
    MISSING,
    FieldDescriptor,
    FieldType,
    Schema,
    TypeSpec,
    is_defined,
)
from schemaforge.validation.matcher import match_type

logger = logging.getLogger(__name__)

OPTION_KEYS = frozenset({"type", "required", "default", "min", "max", "get", "set"})

_PYTHON_TYPES: dict[type, FieldType] = {
    str: FieldType.STRING,
    int: FieldType.NUMBER,
    float: FieldType.NUMBER,
    bool: FieldType.BOOLEAN,
    datetime.date: FieldType.DATE,
    datetime.datetime: FieldType.DATE,
    list: FieldType.ARRAY,
    tuple: FieldType.ARRAY,
}

_TYPE_NAMES: dict[str, FieldType] = {t.value.lower(): t for t in FieldType}


def _is_type_marker(declaration: Any) -> bool:
    return (
        isinstance(declaration, (FieldType, TypeSpec, str, list))
        or (isinstance(declaration, type) and declaration in _PYTHON_TYPES)
    )


def _resolve_scalar(declaration: Any, key: str) -> FieldType:
    """Resolve a single (non-literal) type reference to its tag."""
    if isinstance(declaration, FieldType):
        return declaration

    if isinstance(declaration, type):
        if declaration in _PYTHON_TYPES:
            return _PYTHON_TYPES[declaration]
        raise SchemaDefinitionError(
            f"unsupported type '{declaration.__name__}'", key
        )

    if isinstance(declaration, str):
        name = declaration.strip().lower()
        if name in _TYPE_NAMES:
            return _TYPE_NAMES[name]
        raise SchemaDefinitionError(
            f"unknown type name '{declaration}'. "
            f"Expected one of: {', '.join(t.value for t in FieldType)}",
            key,
        )

    raise SchemaDefinitionError(f"unsupported type reference {declaration!r}", key)


def _resolve_array_literal(
    elements: list, key: str, config: ModelConfig
) -> TypeSpec:
    if not elements:
        return TypeSpec(FieldType.ARRAY)

    if len(elements) > 1:
        if config.legacy_array_markers:
            logger.warning(
                "Field '%s' declares %d array element types; treating it as an "
                "unconstrained Array",
                key,
                len(elements),
            )
            return TypeSpec(FieldType.ARRAY)
        raise SchemaDefinitionError(
            "array type markers may declare at most one element type", key
        )

    element = elements[0]
    if isinstance(element, (list, TypeSpec)) or (
        isinstance(element, str) and element.strip().startswith("[")
    ):
        raise SchemaDefinitionError("nested element-typed arrays are not supported", key)
    return TypeSpec(FieldType.ARRAY, _resolve_scalar(element, key))


def resolve_type(
    declaration: Any, key: str = "", config: ModelConfig | None = None
) -> TypeSpec:
    """Resolve a type reference or array literal to a TypeSpec."""
    config = config or ModelConfig()

    if isinstance(declaration, TypeSpec):
        return declaration

    if isinstance(declaration, list):
        return _resolve_array_literal(declaration, key, config)

    # "[String]" / "[]" is the string spelling of an array literal
    if isinstance(declaration, str):
        text = declaration.strip()
        if text.startswith("[") and text.endswith("]"):
            inner = text[1:-1].strip()
            elements = [part.strip() for part in inner.split(",")] if inner else []
            return _resolve_array_literal(elements, key, config)

    return TypeSpec(_resolve_scalar(declaration, key))


def _resolve_accessor(value: Any, kind: str, key: str) -> Any:
    if value is None:
        return None
    if callable(value):
        return value
    if isinstance(value, str):
        try:
            if kind == "get":
                return AccessorRegistry.get_getter(value)
            return AccessorRegistry.get_setter(value)
        except ValueError as e:
            raise SchemaDefinitionError(str(e), key) from e
    raise SchemaDefinitionError(
        f"'{kind}' must be a callable or a registered accessor name", key
    )


def _resolve_options(
    options: Mapping[str, Any], key: str, config: ModelConfig
) -> FieldDescriptor:
    unknown = set(options) - OPTION_KEYS
    if unknown:
        raise SchemaDefinitionError(
            f"unknown option(s): {', '.join(sorted(map(str, unknown)))}", key
        )

    type_decl = options.get("type")
    spec = resolve_type(type_decl, key, config) if type_decl is not None else None

    required = options.get("required", False)
    if not isinstance(required, bool):
        raise SchemaDefinitionError("'required' must be a boolean", key)

    default = options.get("default", MISSING)
    if spec is not None and is_defined(default) and not match_type(spec, default):
        raise SchemaDefinitionError(
            f"default {default!r} is not of type {spec.name}", key
        )

    min_value = options.get("min")
    max_value = options.get("max")
    if min_value is not None and max_value is not None:
        try:
            inverted = min_value > max_value
        except TypeError as e:
            raise SchemaDefinitionError("'min' and 'max' are not comparable", key) from e
        if inverted:
            raise SchemaDefinitionError(
                f"'min' ({min_value}) is greater than 'max' ({max_value})", key
            )

    return FieldDescriptor(
        key=key,
        type=spec,
        required=required,
        default=default,
        min=min_value,
        max=max_value,
        getter=_resolve_accessor(options.get("get"), "get", key),
        setter=_resolve_accessor(options.get("set"), "set", key),
    )


def resolve_field(
    key: str, declaration: Any, config: ModelConfig | None = None
) -> FieldDescriptor:
    """Resolve one schema declaration to a FieldDescriptor.

    Args:
        key: The attribute key being declared
        declaration: Bare type, array literal, or options mapping
        config: Resolution switches (defaults to ModelConfig())

    Returns:
        The canonical descriptor. The declaration is not modified.

    Raises:
        SchemaDefinitionError: If the declaration is not supported
    """
    config = config or ModelConfig()

    if declaration is None:
        return FieldDescriptor(key=key)

    if isinstance(declaration, FieldDescriptor):
        if declaration.key == key:
            return declaration
        return dataclasses.replace(declaration, key=key)

    if isinstance(declaration, Mapping):
        return _resolve_options(declaration, key, config)

    if _is_type_marker(declaration):
        return FieldDescriptor(key=key, type=resolve_type(declaration, key, config))

    raise SchemaDefinitionError(f"unsupported declaration {declaration!r}", key)


def resolve_schema(
    declaration: Mapping[str, Any] | None, config: ModelConfig | None = None
) -> Schema:
    """Resolve a whole schema declaration, preserving key order."""
    config = config or ModelConfig()
    if not declaration:
        return Schema()

    if isinstance(declaration, Schema):
        return declaration

    if not isinstance(declaration, Mapping):
        raise SchemaDefinitionError(
            f"schema must be a mapping of key to field, got {type(declaration).__name__}"
        )

    fields: dict[str, FieldDescriptor] = {}
    for key, field_declaration in declaration.items():
        if not isinstance(key, str):
            raise SchemaDefinitionError(f"field keys must be strings, got {key!r}")
        fields[key] = resolve_field(key, field_declaration, config)

    logger.debug("Resolved schema with fields: %s", ", ".join(fields))
    return Schema(fields)
