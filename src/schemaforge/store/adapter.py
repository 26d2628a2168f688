"""AttributeStore Protocol: the host contract a Model wraps."""

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class AttributeStore(Protocol):
    """Interface a keyed attribute store must implement.

    The store owns raw values, change notification and the decision of what
    to do with a rejected write. Models only read, batch-write and snapshot
    through it.
    """

    def read_raw(self, key: str) -> Any:
        """Return the stored value, or MISSING if the key was never set."""
        ...

    def write_raw(
        self, batch: Mapping[str, Any], options: Mapping[str, Any] | None = None
    ) -> bool:
        """Write a batch of values. Returns False if the host rejected it."""
        ...

    def snapshot_raw(self) -> dict[str, Any]:
        """Return a plain copy of all stored values."""
        ...
