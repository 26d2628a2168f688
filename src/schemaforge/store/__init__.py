"""Attribute stores - the host contract and the in-memory reference host."""

from schemaforge.store.adapter import AttributeStore
from schemaforge.store.memory import InMemoryAttributeStore

__all__ = ["AttributeStore", "InMemoryAttributeStore"]
