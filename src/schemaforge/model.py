"""Schema-aware models.

A Model wraps an AttributeStore and applies its class schema on every
read, write, validation and serialization:

    class Contact(Model):
        schema = {
            "firstName": str,
            "lastName": {"type": str, "required": True},
            "age": {"type": int, "min": 0},
            "tags": [str],
            "status": {"type": str, "default": "active"},
        }

    contact = Contact({"lastName": "Doe"})
    contact.get("status")     # "active"
    contact.is_valid()        # True

The declaration is resolved once, when the class is defined, and the
resolved Schema replaces it on the class.
"""

from __future__ import annotations

import copy
import itertools
import logging
from collections.abc import Mapping
from typing import Any, ClassVar

from schemaforge.config import SERIALIZE_MODES, ModelConfig
from schemaforge.schema.resolver import resolve_schema
from schemaforge.schema.types import MISSING, Schema, is_defined
from schemaforge.store.adapter import AttributeStore
from schemaforge.store.memory import InMemoryAttributeStore
from schemaforge.validation.engine import check_attributes, validate_attributes
from schemaforge.validation.types import Violation

logger = logging.getLogger(__name__)

_cid_counter = itertools.count(1)


class Model:
    """Base class for schema-governed models.

    Class attributes:
        schema: Field declarations; replaced by the resolved Schema
        config: Optional ModelConfig; ModelConfig.from_env() when unset
    """

    schema: ClassVar[Schema] = Schema()
    config: ClassVar[ModelConfig | None] = None
    _config: ClassVar[ModelConfig] = ModelConfig()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls._config = cls.config or ModelConfig.from_env()
        declaration = cls.__dict__.get("schema", MISSING)
        if declaration is not MISSING:
            cls.schema = resolve_schema(declaration, cls._config)
            logger.debug("Model %s declares %d field(s)", cls.__name__, len(cls.schema))

    def __init__(
        self,
        attributes: Mapping[str, Any] | None = None,
        *,
        store: AttributeStore | None = None,
        **options: Any,
    ):
        self.cid = f"c{next(_cid_counter)}"
        self.validation_error: str | None = None
        self._writes = 0

        if store is None:
            store = InMemoryAttributeStore(validator=self._validation_hook)
        elif not isinstance(store, AttributeStore):
            raise TypeError(
                f"store must implement AttributeStore, got {type(store).__name__}"
            )
        elif getattr(store, "validator", MISSING) is None:
            # Hosts with an unclaimed validator slot validate through this model
            store.validator = self._validation_hook
        self._store = store

        if attributes:
            self.set(attributes, **options)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.cid}>"

    @property
    def store(self) -> AttributeStore:
        return self._store

    @property
    def attributes(self) -> dict[str, Any]:
        """Plain copy of the raw stored values."""
        return self._store.snapshot_raw()

    # -------------------------------------------------------------------------
    # Read / write
    # -------------------------------------------------------------------------

    def get(self, key: str) -> Any:
        """Read an attribute through its getter and default.

        Order: a defined getter result, then a defined stored value, then
        the declared default, then None. Getters may read other keys;
        a getter that ends up reading its own key recurses without bound.
        """
        raw = self._store.read_raw(key)
        field = self.schema.get(key)

        if field is not None and field.getter is not None:
            value = field.getter(self, key, None if raw is MISSING else raw)
            if is_defined(value):
                return value

        if is_defined(raw):
            return raw

        if field is not None and field.has_default:
            return copy.deepcopy(field.default)

        return None

    def set(self, key: Any, value: Any = MISSING, /, **options: Any) -> Model:
        """Write one attribute or a mapping of attributes.

        Call shapes:
            model.set("name", "Ada", silent=True)
            model.set({"name": "Ada", "age": 36}, validate=True)

        Each key with a setter is passed through it. A non-None result is
        stored in place of the input. A None result stores the input unless
        the setter wrote other attributes itself, in which case the key is
        dropped. The whole batch reaches the store in one write.
        """
        if key is None:
            attributes: Mapping[str, Any] = {}
        elif isinstance(key, Mapping):
            if value is not MISSING:
                raise TypeError("set() takes options as keyword arguments when given a mapping")
            attributes = key
        else:
            if value is MISSING:
                raise TypeError(f"set() missing value for attribute '{key}'")
            attributes = {key: value}

        values: dict[str, Any] = {}
        for attribute, input_value in attributes.items():
            field = self.schema.get(attribute)
            if field is None or field.setter is None:
                values[attribute] = input_value
                continue

            writes_before = self._writes
            result = field.setter(self, attribute, input_value)
            if result is not None:
                values[attribute] = result
            elif self._writes == writes_before:
                values[attribute] = input_value

        self._writes += 1
        self._store.write_raw(values, options)
        return self

    def unset(self, key: str, **options: Any) -> Model:
        """Remove an attribute from the store. Setters are not applied."""
        self._writes += 1
        self._store.write_raw({key: None}, {**options, "unset": True})
        return self

    def has(self, key: str) -> bool:
        """True if reading ``key`` yields a value (stored, computed or default)."""
        return self.get(key) is not None

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_json(
        self, *, serialize_mode: str | None = None, include_cid: bool | None = None
    ) -> dict[str, Any]:
        """Plain snapshot with every schema key read through get().

        Keyword arguments override the class ModelConfig for this call.
        """
        mode = serialize_mode or self._config.serialize_mode
        if mode not in SERIALIZE_MODES:
            raise ValueError(
                f"serialize_mode must be one of {', '.join(SERIALIZE_MODES)}, got {mode!r}"
            )
        if include_cid is None:
            include_cid = self._config.include_cid

        if mode == "schema":
            data: dict[str, Any] = {}
        else:
            data = self._store.snapshot_raw()

        if include_cid:
            data["cid"] = self.cid

        for key in self.schema:
            data[key] = self.get(key)
        return data

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def check(self, attrs: Mapping[str, Any] | None = None) -> Violation | None:
        """First schema violation in ``attrs`` (default: the stored values)."""
        if attrs is None:
            attrs = self._store.snapshot_raw()
        return check_attributes(self.schema, attrs)

    def validate_schema(self, attrs: Mapping[str, Any] | None = None) -> str | None:
        """Schema validation message for ``attrs``, or None when valid."""
        if attrs is None:
            attrs = self._store.snapshot_raw()
        return validate_attributes(self.schema, attrs)

    def validate(self, attrs: Mapping[str, Any]) -> str | None:
        """Validation hook called by the store with candidate attributes.

        Override to add model-level rules; call super() to keep schema rules.
        """
        return self.validate_schema(attrs)

    def is_valid(self) -> bool:
        """Validate the stored values and record the outcome."""
        return self._validation_hook(self._store.snapshot_raw()) is None

    def _validation_hook(self, attrs: Mapping[str, Any]) -> str | None:
        self.validation_error = self.validate(attrs)
        return self.validation_error


def make_model(
    name: str,
    declaration: Mapping[str, Any],
    *,
    config: ModelConfig | None = None,
    base: type[Model] = Model,
) -> type[Model]:
    """Create a Model subclass from a declaration at runtime."""
    namespace: dict[str, Any] = {"schema": declaration, "__module__": __name__}
    if config is not None:
        namespace["config"] = config
    return type(name, (base,), namespace)
