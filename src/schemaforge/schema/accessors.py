"""Accessor registry for schemaforge.

Provides registration and lookup of named field getters and setters, so
declarations that cannot hold callables (YAML files) can reference them
by name:

    fields:
      fullName: {get: fullName, set: splitFullName}
"""

from collections.abc import Callable

from schemaforge.schema.types import Getter, Setter


class AccessorRegistry:
    """Registry for getter and setter implementations.

    Accessors must be registered before a declaration that names them is
    resolved. Registration is typically done at import time via the
    @getter / @setter decorators.

    Example:
        @getter("fullName")
        def full_name(model, key, value):
            return f"{model.get('firstName')} {model.get('lastName')}"
    """

    _getters: dict[str, Getter] = {}
    _setters: dict[str, Setter] = {}

    @classmethod
    def register_getter(cls, name: str, fn: Getter) -> None:
        """Register a getter by name.

        Idempotent: re-registering an existing name is a no-op.
        """
        if name in cls._getters:
            return
        cls._getters[name] = fn

    @classmethod
    def register_setter(cls, name: str, fn: Setter) -> None:
        """Register a setter by name.

        Idempotent: re-registering an existing name is a no-op.
        """
        if name in cls._setters:
            return
        cls._setters[name] = fn

    @classmethod
    def get_getter(cls, name: str) -> Getter:
        """Get a registered getter.

        Raises:
            ValueError: If no getter is registered under ``name``
        """
        if name not in cls._getters:
            raise ValueError(
                f"Getter '{name}' is not registered. "
                "Accessors must be registered before the schema is resolved."
            )
        return cls._getters[name]

    @classmethod
    def get_setter(cls, name: str) -> Setter:
        """Get a registered setter.

        Raises:
            ValueError: If no setter is registered under ``name``
        """
        if name not in cls._setters:
            raise ValueError(
                f"Setter '{name}' is not registered. "
                "Accessors must be registered before the schema is resolved."
            )
        return cls._setters[name]

    @classmethod
    def list_registered(cls) -> dict[str, list[str]]:
        return {
            "getters": sorted(cls._getters),
            "setters": sorted(cls._setters),
        }

    @classmethod
    def clear(cls) -> None:
        """Clear all registrations. Primarily for testing."""
        cls._getters.clear()
        cls._setters.clear()


def getter(name: str) -> Callable[[Getter], Getter]:
    """Decorator to register a getter.

    Usage:
        @getter("fullName")
        def full_name(model, key, value):
            ...
    """

    def decorator(fn: Getter) -> Getter:
        AccessorRegistry.register_getter(name, fn)
        return fn

    return decorator


def setter(name: str) -> Callable[[Setter], Setter]:
    """Decorator to register a setter.

    Usage:
        @setter("splitFullName")
        def split_full_name(model, key, value):
            ...
    """

    def decorator(fn: Setter) -> Setter:
        AccessorRegistry.register_setter(name, fn)
        return fn

    return decorator
