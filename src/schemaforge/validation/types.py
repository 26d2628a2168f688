"""Validation result types."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ViolationKind(Enum):
    """The rule a field violated."""

    REQUIRED = "required"
    TYPE = "type"
    MIN = "min"
    MAX = "max"


_CODES = {
    ViolationKind.REQUIRED: "REQUIRED",
    ViolationKind.TYPE: "INVALID_TYPE",
    ViolationKind.MIN: "BELOW_MIN",
    ViolationKind.MAX: "ABOVE_MAX",
}


@dataclass(frozen=True)
class Violation:
    """The first failing field of a validation pass.

    Attributes:
        kind: Which rule failed
        field: The attribute key that failed
        message: Human-readable message, the value surfaced to hosts
    """

    kind: ViolationKind
    field: str
    message: str

    @property
    def code(self) -> str:
        """Machine-readable code, e.g. "INVALID_TYPE"."""
        return _CODES[self.kind]

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "code": self.code,
            "field": self.field,
        }

    def __str__(self) -> str:
        return self.message
