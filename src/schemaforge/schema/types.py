"""Core types for schemaforge schemas.

A schema maps attribute keys to resolved field descriptors:
- FieldType: the closed set of supported value types
- TypeSpec: a field's type, optionally an array constrained to one element type
- FieldDescriptor: the canonical form of one schema entry
- Schema: read-only, declaration-ordered mapping of key to descriptor
"""

import datetime
import math
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any


class _Missing:
    """Marker for a key that has never been set (as opposed to set to None)."""

    _instance: "_Missing | None" = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> "_Missing":
        return self

    def __deepcopy__(self, memo: dict) -> "_Missing":
        return self


MISSING: Any = _Missing()


def is_defined(value: Any) -> bool:
    """A value is defined unless it is MISSING, None or NaN."""
    if value is MISSING or value is None:
        return False
    if isinstance(value, float) and math.isnan(value):
        return False
    return True


class FieldType(Enum):
    """Supported field value types."""

    STRING = "String"
    NUMBER = "Number"
    DATE = "Date"
    BOOLEAN = "Boolean"
    ARRAY = "Array"

    @property
    def runtime_types(self) -> tuple[type, ...]:
        """Python types whose instances match this tag exactly."""
        return _RUNTIME_TYPES[self]


_RUNTIME_TYPES: dict[FieldType, tuple[type, ...]] = {
    FieldType.STRING: (str,),
    FieldType.NUMBER: (int, float),
    FieldType.DATE: (datetime.date, datetime.datetime),
    FieldType.BOOLEAN: (bool,),
    FieldType.ARRAY: (list, tuple),
}


@dataclass(frozen=True)
class TypeSpec:
    """A field's declared type.

    Attributes:
        kind: The value type
        element: For ARRAY only, the single permitted element type
    """

    kind: FieldType
    element: FieldType | None = None

    def __post_init__(self) -> None:
        if self.element is not None and self.kind is not FieldType.ARRAY:
            raise ValueError("Only Array types may declare an element type")

    @property
    def name(self) -> str:
        """Type name used in validation messages, e.g. ``[String]``."""
        if self.element is not None:
            return f"[{self.element.value}]"
        return self.kind.value

    def __str__(self) -> str:
        return self.name


# Getter signature: (model, key, stored_value) -> value
Getter = Callable[[Any, str, Any], Any]
# Setter signature: (model, key, input_value) -> value_to_store
Setter = Callable[[Any, str, Any], Any]


@dataclass(frozen=True)
class FieldDescriptor:
    """Resolved schema entry for one attribute key.

    Absent options stay absent: ``type``, ``min``, ``max``, ``getter`` and
    ``setter`` are None and ``default`` is MISSING when not declared.
    """

    key: str
    type: TypeSpec | None = None
    required: bool = False
    default: Any = MISSING
    min: Any = None
    max: Any = None
    getter: Getter | None = None
    setter: Setter | None = None

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "type": self.type.name if self.type else None,
            "required": self.required,
        }
        if self.has_default:
            result["default"] = self.default
        if self.min is not None:
            result["min"] = self.min
        if self.max is not None:
            result["max"] = self.max
        if self.getter is not None:
            result["get"] = getattr(self.getter, "__name__", repr(self.getter))
        if self.setter is not None:
            result["set"] = getattr(self.setter, "__name__", repr(self.setter))
        return result


class Schema(Mapping[str, FieldDescriptor]):
    """Read-only mapping of attribute key to FieldDescriptor.

    Iteration follows declaration order.
    """

    __slots__ = ("_fields",)

    def __init__(self, fields: Mapping[str, FieldDescriptor] | None = None):
        self._fields = MappingProxyType(dict(fields or {}))

    def __getitem__(self, key: str) -> FieldDescriptor:
        return self._fields[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"Schema({list(self._fields)!r})"

    def to_dict(self) -> dict[str, dict[str, Any]]:
        return {key: field.to_dict() for key, field in self._fields.items()}
