"""Schema catalog - attribute types, asset schemas and units of one domain."""

from __future__ import annotations

import logging
import threading
from typing import Iterable

from ..assets.registry import AssetSchemaRegistry
from ..assets.types import AssetSchema
from ..attributes.registry import AttributeTypeRegistry
from ..attributes.types import AttributeRef, AttributeType
from ..errors import AttributeNotFoundError, InvalidArgumentError

logger = logging.getLogger(__name__)


class SchemaCatalog:
    """
    Top-level registry a host loads, mutates and stores as one unit.

    Delegates to an AttributeTypeRegistry and an AssetSchemaRegistry and
    keeps the list of declared unit labels. Asset members are resolved
    from attribute names at call time and stored as version snapshots.
    """

    def __init__(self, strict_registration: bool = False):
        self.attribute_types = AttributeTypeRegistry()
        self.asset_schemas = AssetSchemaRegistry(strict=strict_registration)
        self._units: list[str] = []
        self._lock = threading.RLock()

    # =========================================================================
    # Attribute types
    # =========================================================================

    def attribute_type_list(self) -> list[AttributeType]:
        """Get all attribute types in registration order."""
        return self.attribute_types.list()

    def data_type_of(self, name: str) -> str | None:
        """Get the current data type of an attribute, or None if unknown."""
        return self.attribute_types.data_type_of(name)

    def data_type_at(self, name: str, version: int) -> str:
        """Get the data type an attribute had at a past version."""
        return self.attribute_types.data_type_at(name, version)

    def attribute_exists(self, name: str) -> bool:
        return self.attribute_types.exists(name)

    def upsert_attribute(self, name: str, data_type: str) -> AttributeType:
        """Register an attribute type or change its data type."""
        with self._lock:
            return self.attribute_types.upsert(name, data_type)

    # =========================================================================
    # Asset schemas
    # =========================================================================

    def asset_list(self) -> list[AssetSchema]:
        """Get all asset schemas in registration order."""
        return self.asset_schemas.list()

    def asset_exists(self, name: str) -> bool:
        return self.asset_schemas.exists(name)

    def asset_version(self, name: str) -> int:
        """
        Get the current version of an asset.

        Raises:
            AssetNotFoundError: If the asset is not registered
        """
        return self.asset_schemas.get_or_raise(name).version

    def register_asset(self, name: str, attribute_names: Iterable[str] = ()) -> bool:
        """
        Register an asset composed of existing attribute types.

        Every name is resolved before anything is registered, so an unknown
        attribute leaves the catalog unchanged.

        Args:
            name: The asset name
            attribute_names: Names of registered attribute types

        Returns:
            True if the asset was created, False if it already existed

        Raises:
            InvalidArgumentError: If attribute_names is a single string
            AttributeNotFoundError: If an attribute name is not registered
            DuplicateAssetError: If the asset exists and registration is strict
        """
        if isinstance(attribute_names, str):
            raise InvalidArgumentError(
                f"Attribute names for asset '{name}' must be a list, not the string {attribute_names!r}"
            )

        with self._lock:
            refs = [self.attribute_types.get_or_raise(attr).ref() for attr in attribute_names]
            return self.asset_schemas.register(name, refs)

    def delete_asset(self, name: str) -> bool:
        """Delete an asset and its history. Returns whether it existed."""
        with self._lock:
            return self.asset_schemas.delete(name)

    def attributes_of(self, asset_name: str) -> list[AttributeRef]:
        """Get the current members of an asset."""
        return self.asset_schemas.attributes_of(asset_name)

    def attributes_at_version(self, asset_name: str, version: int) -> list[AttributeRef]:
        """Get the members of an asset at a past version."""
        return self.asset_schemas.attributes_at_version(asset_name, version)

    def add_attribute_to_asset(self, asset_name: str, attribute_name: str) -> bool:
        """
        Add the current version of an attribute type to an asset.

        Returns:
            True if the membership changed, False for a duplicate

        Raises:
            AssetNotFoundError: If the asset is not registered
            AttributeNotFoundError: If the attribute type is not registered
        """
        with self._lock:
            self.asset_schemas.get_or_raise(asset_name)
            ref = self.attribute_types.get_or_raise(attribute_name).ref()
            return self.asset_schemas.add_attribute(asset_name, ref)

    def remove_attribute_from_asset(
        self,
        asset_name: str,
        attribute_name: str,
        version: int | None = None,
    ) -> None:
        """
        Remove an attribute from an asset.

        Without a version, the asset's member of that name with the highest
        version is removed.

        Raises:
            AssetNotFoundError: If the asset is not registered
            AttributeNotFoundError: If no matching member exists
        """
        if not attribute_name:
            raise InvalidArgumentError(f"Cannot remove a missing attribute from asset '{asset_name}'")

        with self._lock:
            asset = self.asset_schemas.get_or_raise(asset_name)
            members = asset.members_named(attribute_name)
            if version is not None:
                members = [m for m in members if m.version == version]
            if not members:
                suffix = f" v{version}" if version is not None else ""
                raise AttributeNotFoundError(
                    f"Attribute '{attribute_name}'{suffix} is not a member of asset '{asset.name}'"
                )
            self.asset_schemas.remove_attribute(asset_name, members[-1])

    def asset_has_attribute(self, asset_name: str, attribute_name: str) -> bool:
        """
        Check if an asset currently contains an attribute.

        Raises:
            AssetNotFoundError: If the asset is not registered
        """
        return self.asset_schemas.get_or_raise(asset_name).has_attribute(attribute_name)

    # =========================================================================
    # Units
    # =========================================================================

    def add_unit(self, label: str) -> None:
        """Declare a unit label. Duplicates are kept."""
        if not label:
            raise InvalidArgumentError("Unit label must not be empty")
        with self._lock:
            self._units.append(label)

    def list_units(self) -> list[str]:
        """Get the declared unit labels in declaration order."""
        with self._lock:
            return list(self._units)

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_dict(self) -> dict:
        """Encode the catalog with the explicit, versioned field layout."""
        from .serializer import CatalogSerializer
        with self._lock:
            return CatalogSerializer().serialize_catalog(self)

    @classmethod
    def from_dict(cls, data: dict, strict_registration: bool = False) -> SchemaCatalog:
        """Decode a catalog produced by to_dict()."""
        from .loader import CatalogLoader
        return CatalogLoader(strict_registration=strict_registration).load_dict(data)
