"""Exception hierarchy for the schema registry."""

from __future__ import annotations


class SchemaRegistryError(Exception):
    """Base class for all registry errors."""
    pass


class NotFoundError(SchemaRegistryError, KeyError):
    """Raised when a lookup by name yields no match."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else ""


class AttributeNotFoundError(NotFoundError):
    """Raised when an attribute type or asset member is not registered."""
    pass


class AssetNotFoundError(NotFoundError):
    """Raised when an asset schema is not registered."""
    pass


class InvalidArgumentError(SchemaRegistryError, ValueError):
    """Raised when a required argument is missing or empty."""
    pass


class InvalidVersionError(SchemaRegistryError, ValueError):
    """Raised when a requested version is outside [1, current_version]."""

    def __init__(self, message: str, version: int | None = None, current_version: int | None = None):
        super().__init__(message)
        self.version = version
        self.current_version = current_version


class DuplicateAssetError(SchemaRegistryError, ValueError):
    """Raised when registering an existing asset in strict mode."""
    pass


class CatalogFormatError(SchemaRegistryError, ValueError):
    """Raised when a serialized catalog cannot be decoded."""
    pass
