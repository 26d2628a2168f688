"""Exceptions raised by schemaforge."""


class SchemaforgeError(Exception):
    """Base exception for schemaforge errors."""
    pass


class SchemaDefinitionError(SchemaforgeError, ValueError):
    """A schema declaration falls outside the supported shorthand.

    Raised when a model class is defined (or a YAML declaration is loaded),
    never while reading or writing attributes.
    """

    def __init__(self, message: str, key: str | None = None):
        self.key = key
        if key is not None:
            message = f'Field "{key}": {message}'
        super().__init__(message)


class ModelValidationError(SchemaforgeError):
    """A validated write was rejected and the caller asked for an exception."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)
