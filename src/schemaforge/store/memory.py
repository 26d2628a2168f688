"""In-memory attribute store.

The reference host for Model: a dict of raw values with change events,
changed-attribute tracking and optional validation of incoming writes.

Write options:
    silent: Suppress change and invalid events
    unset: Remove the batch's keys instead of writing them
    validate: Run the validator on the candidate attributes first
    strict: With validate, raise ModelValidationError on rejection
"""

import logging
import math
from collections import defaultdict
from collections.abc import Callable, Mapping
from typing import Any

from schemaforge.exceptions import ModelValidationError
from schemaforge.schema.types import MISSING

logger = logging.getLogger(__name__)

# Validator signature: (candidate_attributes) -> error message | None
ValidatorFn = Callable[[dict[str, Any]], str | None]
# Listener signature: (store, key | None, value) -> None
ListenerFn = Callable[[Any, str | None, Any], None]


def _same(a: Any, b: Any) -> bool:
    if a is b:
        return True
    if isinstance(a, float) and isinstance(b, float) and math.isnan(a) and math.isnan(b):
        return True
    return type(a) is type(b) and bool(a == b)


class InMemoryAttributeStore:
    """Dict-backed AttributeStore.

    Events:
        change:<key>  fired per changed key with the new value
        change        fired once per write that changed anything
        invalid       fired when a validated write is rejected
    """

    def __init__(
        self,
        attributes: Mapping[str, Any] | None = None,
        *,
        validator: ValidatorFn | None = None,
    ):
        self._attributes: dict[str, Any] = dict(attributes or {})
        self._previous: dict[str, Any] = dict(self._attributes)
        self._changed: dict[str, Any] = {}
        self._listeners: dict[str, list[ListenerFn]] = defaultdict(list)
        self.validator = validator
        self.validation_error: str | None = None

    # -- AttributeStore -----------------------------------------------------

    def read_raw(self, key: str) -> Any:
        return self._attributes.get(key, MISSING)

    def write_raw(
        self, batch: Mapping[str, Any], options: Mapping[str, Any] | None = None
    ) -> bool:
        options = options or {}
        unset = bool(options.get("unset"))

        if options.get("validate") and not self._validate(batch, options):
            return False

        self._previous = dict(self._attributes)
        self._changed = {}
        changes: list[str] = []

        for key, value in batch.items():
            if unset:
                if key in self._attributes:
                    del self._attributes[key]
                    self._changed[key] = MISSING
                    changes.append(key)
                continue
            current = self._attributes.get(key, MISSING)
            self._attributes[key] = value
            if not _same(current, value):
                self._changed[key] = value
                changes.append(key)

        if changes and not options.get("silent"):
            for key in changes:
                self._emit(f"change:{key}", key, self._attributes.get(key, MISSING))
            self._emit("change", None, None)

        return True

    def snapshot_raw(self) -> dict[str, Any]:
        return dict(self._attributes)

    # -- Host features ------------------------------------------------------

    def has(self, key: str) -> bool:
        return key in self._attributes

    def changed_attributes(self) -> dict[str, Any]:
        """Keys changed by the last write, with their new values.

        Removed keys map to MISSING.
        """
        return dict(self._changed)

    def previous(self, key: str) -> Any:
        """Value of ``key`` before the last write, or MISSING."""
        return self._previous.get(key, MISSING)

    def on(self, event: str, listener: ListenerFn) -> None:
        self._listeners[event].append(listener)

    def off(self, event: str, listener: ListenerFn | None = None) -> None:
        if listener is None:
            self._listeners.pop(event, None)
        elif listener in self._listeners.get(event, []):
            self._listeners[event].remove(listener)

    def _emit(self, event: str, key: str | None, value: Any) -> None:
        for listener in list(self._listeners.get(event, [])):
            listener(self, key, value)

    def _validate(self, batch: Mapping[str, Any], options: Mapping[str, Any]) -> bool:
        if self.validator is None:
            return True

        candidate = dict(self._attributes)
        if options.get("unset"):
            for key in batch:
                candidate.pop(key, None)
        else:
            candidate.update(batch)

        error = self.validator(candidate)
        self.validation_error = error
        if error is None:
            return True

        logger.debug("Rejected write of %s: %s", ", ".join(batch), error)
        if options.get("strict"):
            raise ModelValidationError(error)
        if not options.get("silent"):
            self._emit("invalid", None, error)
        return False
