"""
Thread-safe asset schema registry.

Provides centralized storage of asset schemas and serializes membership
changes so that version, membership and change history move together.
"""

from __future__ import annotations

import logging
import threading
from typing import Iterable, Iterator

from ..attributes.types import AttributeRef
from ..errors import AssetNotFoundError, DuplicateAssetError, InvalidArgumentError
from .types import AssetSchema

logger = logging.getLogger(__name__)


class AssetSchemaRegistry:
    """
    Thread-safe registry for asset schemas.

    Asset names are matched case-insensitively. Registering an existing
    name is a silent no-op unless the registry is strict.
    """

    def __init__(self, strict: bool = False):
        self._assets: dict[str, AssetSchema] = {}  # casefolded name -> asset
        self._lock = threading.RLock()
        self.strict = strict

    @staticmethod
    def _key(name: str) -> str:
        return name.casefold()

    def register(self, name: str, initial_attributes: Iterable[AttributeRef] = ()) -> bool:
        """
        Register an asset schema at version 1.

        Args:
            name: The asset name
            initial_attributes: Members of the first version

        Returns:
            True if the asset was created, False if it already existed

        Raises:
            InvalidArgumentError: If name is empty or an initial attribute is None
            DuplicateAssetError: If the asset exists and the registry is strict
        """
        if not name:
            raise InvalidArgumentError("Asset name must not be empty")

        members: list[AttributeRef] = []
        for ref in initial_attributes:
            if ref is None:
                raise InvalidArgumentError(f"Asset '{name}' has a missing initial attribute")
            if not any(m.matches(ref) for m in members):
                members.append(ref)

        with self._lock:
            if self._key(name) in self._assets:
                if self.strict:
                    raise DuplicateAssetError(f"Asset '{name}' already registered")
                logger.warning(f"Asset '{name}' already registered, ignoring")
                return False
            self._assets[self._key(name)] = AssetSchema(name=name, attributes=members)
            logger.debug(f"Registered asset: {name} ({len(members)} attributes)")
            return True

    def restore(self, asset: AssetSchema) -> None:
        """Insert a fully built asset schema, e.g. when decoding a catalog."""
        with self._lock:
            self._assets[self._key(asset.name)] = asset

    def get(self, name: str) -> AssetSchema | None:
        """
        Get an asset schema by name.

        Returns:
            The asset if found, None otherwise
        """
        with self._lock:
            return self._assets.get(self._key(name))

    def get_or_raise(self, name: str) -> AssetSchema:
        """
        Get an asset schema by name, raising if not found.

        Raises:
            AssetNotFoundError: If the asset is not registered
        """
        with self._lock:
            asset = self._assets.get(self._key(name))
            if asset is None:
                raise AssetNotFoundError(f"Asset '{name}' not found")
            return asset

    def exists(self, name: str) -> bool:
        """Check if an asset schema exists."""
        with self._lock:
            return self._key(name) in self._assets

    def delete(self, name: str) -> bool:
        """
        Delete an asset schema and its history.

        Returns:
            True if the asset was deleted, False if it didn't exist
        """
        with self._lock:
            if self._assets.pop(self._key(name), None) is None:
                return False
            logger.debug(f"Deleted asset: {name}")
            return True

    def attributes_of(self, name: str) -> list[AttributeRef]:
        """
        Get the current members of an asset.

        Raises:
            AssetNotFoundError: If the asset is not registered
        """
        with self._lock:
            return list(self.get_or_raise(name).attributes)

    def attributes_at_version(self, name: str, version: int) -> list[AttributeRef]:
        """
        Get the members of an asset at a past version.

        Raises:
            AssetNotFoundError: If the asset is not registered
            InvalidVersionError: If version is out of range
        """
        with self._lock:
            return self.get_or_raise(name).attributes_at_version(version)

    def add_attribute(self, name: str, ref: AttributeRef | None) -> bool:
        """
        Add an attribute to an asset.

        Returns:
            True if the membership changed, False for a duplicate

        Raises:
            AssetNotFoundError: If the asset is not registered
            InvalidArgumentError: If ref is None
        """
        with self._lock:
            asset = self.get_or_raise(name)
            changed = asset.add_attribute(ref)
            if changed:
                logger.debug(f"Added {ref.name} v{ref.version} to {asset.name} (v{asset.version})")
            return changed

    def remove_attribute(self, name: str, ref: AttributeRef | None) -> None:
        """
        Remove an attribute from an asset.

        Raises:
            AssetNotFoundError: If the asset is not registered
            InvalidArgumentError: If ref is None
            AttributeNotFoundError: If the attribute is not a member
        """
        with self._lock:
            asset = self.get_or_raise(name)
            asset.remove_attribute(ref)
            logger.debug(f"Removed {ref.name} v{ref.version} from {asset.name} (v{asset.version})")

    def list(self) -> list[AssetSchema]:
        """Get all asset schemas in registration order."""
        with self._lock:
            return list(self._assets.values())

    def all_assets(self) -> list[AssetSchema]:
        return self.list()

    def count(self) -> int:
        """Get the number of registered asset schemas."""
        with self._lock:
            return len(self._assets)

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, name: str) -> bool:
        return self.exists(name)

    def __iter__(self) -> Iterator[AssetSchema]:
        return iter(self.list())
