"""
Thread-safe attribute type registry.

Owns every AttributeType in a catalog. Names are matched case-insensitively
but keep the spelling they were first registered with.
"""

from __future__ import annotations

import logging
import threading
from typing import Iterator

from ..errors import AttributeNotFoundError, InvalidArgumentError
from .types import AttributeType

logger = logging.getLogger(__name__)


class AttributeTypeRegistry:
    """
    Thread-safe registry for attribute types.

    Attribute types are created on first upsert and never removed.
    Iteration follows registration order.
    """

    def __init__(self):
        self._types: dict[str, AttributeType] = {}  # casefolded name -> type
        self._lock = threading.RLock()

    @staticmethod
    def _key(name: str) -> str:
        return name.casefold()

    def upsert(self, name: str, data_type: str) -> AttributeType:
        """
        Register an attribute type, or change its data type if it exists.

        Args:
            name: The attribute name
            data_type: The data type tag, e.g. "string"

        Returns:
            The created or updated attribute type

        Raises:
            InvalidArgumentError: If name or data_type is empty
        """
        if not name:
            raise InvalidArgumentError("Attribute name must not be empty")
        if not data_type:
            raise InvalidArgumentError(f"Attribute '{name}' needs a data type")

        with self._lock:
            existing = self._types.get(self._key(name))
            if existing is not None:
                existing.set_data_type(data_type)
                logger.debug(f"Updated attribute type: {existing.name} -> {data_type} (v{existing.version})")
                return existing

            attribute_type = AttributeType(name=name, data_type=data_type)
            self._types[self._key(name)] = attribute_type
            logger.debug(f"Registered attribute type: {name} ({data_type})")
            return attribute_type

    def restore(self, attribute_type: AttributeType) -> None:
        """Insert a fully built attribute type, e.g. when decoding a catalog."""
        with self._lock:
            self._types[self._key(attribute_type.name)] = attribute_type

    def get(self, name: str) -> AttributeType | None:
        """
        Get an attribute type by name.

        Args:
            name: The attribute name (any case)

        Returns:
            The attribute type if found, None otherwise
        """
        with self._lock:
            return self._types.get(self._key(name))

    def get_or_raise(self, name: str) -> AttributeType:
        """
        Get an attribute type by name, raising if not found.

        Raises:
            AttributeNotFoundError: If the attribute is not registered
        """
        with self._lock:
            attribute_type = self._types.get(self._key(name))
            if attribute_type is None:
                raise AttributeNotFoundError(f"Attribute '{name}' not found")
            return attribute_type

    def data_type_of(self, name: str) -> str | None:
        """
        Get the current data type of an attribute.

        Returns:
            The data type tag, or None if the attribute is not registered
        """
        with self._lock:
            attribute_type = self._types.get(self._key(name))
            return attribute_type.data_type if attribute_type else None

    def data_type_at(self, name: str, version: int) -> str:
        """
        Get the data type an attribute had at a past version.

        Raises:
            AttributeNotFoundError: If the attribute is not registered
            InvalidVersionError: If version is out of range
        """
        with self._lock:
            return self.get_or_raise(name).data_type_at(version)

    def exists(self, name: str) -> bool:
        """Check if an attribute type exists."""
        with self._lock:
            return self._key(name) in self._types

    def list(self) -> list[AttributeType]:
        """Get all attribute types in registration order."""
        with self._lock:
            return list(self._types.values())

    def all_attribute_types(self) -> list[AttributeType]:
        return self.list()

    def count(self) -> int:
        """Get the number of registered attribute types."""
        with self._lock:
            return len(self._types)

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, name: str) -> bool:
        return self.exists(name)

    def __iter__(self) -> Iterator[AttributeType]:
        return iter(self.list())
